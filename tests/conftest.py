"""Shared test fixtures and helpers for rtf-paste-images tests."""

from __future__ import annotations

from rtf_paste_images.markers import BLIP_TAG, BLIP_UID

PNG_HEX = "89504E470D0A1A0A"
"""PNG signature bytes, enough to stand in for a picture payload."""

JPEG_HEX = "FFD8FFE000104A46"
"""JPEG SOI + APP0 header bytes."""

WMF_HEX = "010009000003"
"""Start of a Windows metafile header."""

_PICPROP = r"{\*\picprop\shplid1025{\sp{\sn shapeType}{\sv 75}}{\sp{\sn fLayoutInCell}{\sv 1}}}"


def make_pict(
    payload: str = PNG_HEX,
    blip: str = r"\pngblip",
    uid: str | None = None,
    tag: int | str | None = None,
    extra: str = "",
) -> str:
    r"""Build a ``{\pict ...}`` group the way Word writes it.

    Args:
        payload: Hex data (may contain line breaks).
        blip: Format control word, e.g. ``\pngblip`` or ``\wmetafile8``.
        uid: ``\blipuid`` value, emitted in a ``{\*\blipuid ...}`` subgroup.
        tag: ``\bliptag`` value.
        extra: Additional control words inserted after the format word.

    Returns:
        The picture group text.
    """
    parts = [r"{\pict", _PICPROP, r"\picscalex100\picscaley100\picw2117\pich2117", blip]
    if tag is not None:
        parts.append(BLIP_TAG.format(tag))
    parts.append(extra)
    if uid is not None:
        parts.append(r"{\*" + BLIP_UID.format(uid))
    return "".join(parts) + "\n" + payload + "}"


def make_shppict(pict: str) -> str:
    r"""Wrap a picture in a Word ``{\*\shppict ...}`` group."""
    return r"{\*\shppict" + pict + "}"


def make_nonshppict(pict: str) -> str:
    r"""Wrap a picture in a ``{\nonshppict ...}`` group (non-Word rendition)."""
    return r"{\nonshppict" + pict + "}"


def make_rtf(*parts: str) -> str:
    """Build a minimal RTF document around *parts*."""
    body = "\n".join(parts)
    return r"{\rtf1\ansi\ansicpg1252\deff0{\fonttbl{\f0 Calibri;}}" + "\n" + body + "\n" + r"\par}"


def make_img(src: str, attrs: str = 'width="100" height="100"') -> str:
    """Build an ``<img>`` tag as pasted from Word."""
    return f'<img {attrs} src="{src}" alt="">'


def file_src(n: int) -> str:
    """Word-style local clip image path for image *n*."""
    return f"file:///C:/Users/me/AppData/Local/Temp/msohtmlclip1/01/clip_image{n:03d}.png"
