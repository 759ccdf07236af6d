"""Image extraction from pasted RTF content.

Word processors put ``file://`` paths into the HTML half of the clipboard
and the image bytes only into the RTF half.  This module recovers those
bytes:

1. **Locate** ``\\pict`` groups after removing headers, footers, non-Word
   renditions and drawn-object results.
2. **Extract** one :class:`ImageRecord` per picture, deduplicating
   repeated pictures and dropping alternate renditions and WordArt shapes.
3. **Encode** supported records (PNG, JPEG) as base64 data URLs.

The resulting record list is positionally aligned with the ``<img>`` tags
of the HTML half by :mod:`rtf_paste_images.filter`.
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass

from rtf_paste_images.markers import (
    BLIP_TAG,
    BLIP_UID,
    DEF_SHP,
    EMF_BLIP,
    EXCLUDED_GROUPS,
    JPEG_BLIP,
    PICT,
    PNG_BLIP,
    WMETAFILE,
)
from rtf_paste_images.rtf import extract_group_content, get_groups, remove_groups

_log = logging.getLogger("images")

UNKNOWN_IMAGE_TYPE = "unknown"
"""Type assigned to pictures without a recognizable format marker."""

_WHITESPACE_RE = re.compile(r"\s")


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecognizableImageType:
    """Format marker and the MIME type it identifies."""

    marker: re.Pattern[str]
    """Regex searched for in the picture group."""
    type: str
    """MIME type, e.g. ``image/png``."""


RECOGNIZABLE_IMAGE_TYPES: tuple[RecognizableImageType, ...] = (
    RecognizableImageType(PNG_BLIP.re, "image/png"),
    RecognizableImageType(JPEG_BLIP.re, "image/jpeg"),
    RecognizableImageType(EMF_BLIP.re, "image/emf"),
    RecognizableImageType(WMETAFILE.re_value, "image/wmf"),
)
"""Recognizable picture formats, tested in order (first match wins)."""

SUPPORTED_IMAGE_TYPES: frozenset[str] = frozenset({"image/png", "image/jpeg"})
"""Types whose bytes are extracted and embedded.  Others are only counted."""


@dataclass
class ImageRecord:
    """A picture extracted from RTF content.

    The same instance may appear several times in an extraction result when
    the document repeats a picture.
    """

    type: str
    """MIME type, or ``"unknown"``."""
    id: str | None = None
    """``\\blipuid`` or ``\\bliptag`` value; ``None`` never matches another record."""
    hex: str | None = None
    """Whitespace-free hex payload; ``None`` for unsupported types."""


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def is_supported_type(image_type: str | None) -> bool:
    """Whether *image_type* is embedded as a data URL."""
    return image_type in SUPPORTED_IMAGE_TYPES


def get_image_type(image_content: str) -> str:
    """Return the MIME type of a picture group, or ``"unknown"``."""
    for test in RECOGNIZABLE_IMAGE_TYPES:
        if test.marker.search(image_content):
            return test.type
    return UNKNOWN_IMAGE_TYPE


def get_image_id(image_content: str) -> str | None:
    """Return the picture id: ``\\blipuid`` first, then ``\\bliptag``."""
    m = BLIP_UID.re_value.search(image_content)
    if m:
        return m.group(1)
    m = BLIP_TAG.re_value.search(image_content)
    if m:
        return m.group(1)
    return None


def get_image_content(image_content: str) -> str:
    """Return the hex payload of a picture group without any whitespace.

    RTF writers wrap the hex digits at arbitrary columns.
    """
    return _WHITESPACE_RE.sub("", extract_group_content(image_content))


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def locate_image_groups(rtf_content: str) -> list[str]:
    """Return the text of every relevant ``\\pict`` group, in document order.

    Headers, footers, ``\\nonshppict`` renditions and ``\\shprslt`` results
    are removed first: their pictures are never the ones referenced by the
    pasted HTML.
    """
    rtf_content = remove_groups(rtf_content, EXCLUDED_GROUPS)
    return [g.content for g in get_groups(rtf_content, PICT.word)]


class _RecordList:
    """Ordered records plus an id -> position index of first occurrences."""

    def __init__(self) -> None:
        self.records: list[ImageRecord] = []
        self._index: dict[str, int] = {}

    def find(self, image_id: str | None) -> int | None:
        # Pictures without an id (e.g. from LibreOffice) are always unique.
        if image_id is None:
            return None
        return self._index.get(image_id)

    def append(self, record: ImageRecord) -> None:
        if record.id is not None and record.id not in self._index:
            self._index[record.id] = len(self.records)
        self.records.append(record)

    def replace(self, idx: int, record: ImageRecord) -> None:
        self.records[idx] = record

    @property
    def last_index(self) -> int:
        return len(self.records) - 1


def extract_from_rtf(rtf_content: str) -> list[ImageRecord]:
    """Parse RTF content and return its pictures as :class:`ImageRecord` list.

    For each located picture group, in order:

    - **Duplicate** (same id and type as an extracted record): the existing
      record is appended again (the same object, not a copy).
    - **Alternate format** (same id, different type, and the existing record
      is the last one extracted): skipped, it is another rendition of the
      previous picture.
    - **WordArt shape** (``\\defshp``): skipped.
    - Otherwise a new record is built; it replaces the record holding the
      same id in place, or is appended.

    Returns:
        Records in document order.  May be shorter than the number of
        picture groups and may repeat the same record.
    """
    result = _RecordList()

    for current_image in locate_image_groups(rtf_content):
        image_id = get_image_id(current_image)
        image_type = get_image_type(current_image)
        idx = result.find(image_id)
        existing = result.records[idx] if idx is not None else None

        is_already_extracted = existing is not None and existing.hex is not None
        is_duplicated = is_already_extracted and existing.type == image_type
        is_alternate_format = (
            is_already_extracted
            and existing.type != image_type
            and idx == result.last_index
        )
        is_word_art_shape = DEF_SHP.literal in current_image

        if is_duplicated:
            _log.debug("  picture %s: duplicate of #%d", image_id, idx)
            result.append(existing)
            continue

        if is_alternate_format:
            _log.debug(
                "  picture %s: %s rendition of #%d skipped", image_id, image_type, idx,
            )
            continue

        if is_word_art_shape:
            _log.debug("  picture %s: WordArt shape skipped", image_id)
            continue

        record = ImageRecord(
            type=image_type,
            id=image_id,
            hex=get_image_content(current_image) if is_supported_type(image_type) else None,
        )

        if idx is not None:
            _log.debug("  picture %s: replaces #%d (%s)", image_id, idx, image_type)
            result.replace(idx, record)
        else:
            result.append(record)

    return result.records


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def hex_to_bytes(hex_string: str) -> bytes:
    """Decode a hex string.  Raises ``ValueError`` on malformed input."""
    return bytes.fromhex(hex_string)


def bytes_to_base64(data: bytes) -> str:
    """Encode *data* as an ASCII base64 string."""
    return base64.b64encode(data).decode("ascii")


def create_src_with_base64(img: ImageRecord) -> str | None:
    """Build a ``data:<type>;base64,...`` URL for *img*.

    Returns ``None`` for unsupported types and for payloads that are not
    valid hex.
    """
    if not img.type or not is_supported_type(img.type):
        return None

    try:
        data = hex_to_bytes(img.hex or "")
    except ValueError as exc:
        _log.warning("  Invalid %s payload for picture %s: %s", img.type, img.id, exc)
        return None

    return f"data:{img.type};base64,{bytes_to_base64(data)}"
