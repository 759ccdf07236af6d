"""Paste filter embedding RTF pictures into the pasted HTML.

When a word processor puts content on the clipboard, the HTML half refers
to images by local ``file://`` paths the browser cannot load, while the
RTF half carries the image bytes.  The filter pairs the ``<img>`` tags of
the HTML with the pictures of the RTF **by position** and replaces each
``file://`` source with a ``data:`` URL.

Positional pairing is the only link between the two halves, so it is all
or nothing: if the counts differ, nothing is replaced.

Usage::

    from rtf_paste_images.filter import apply_image_filter

    html = apply_image_filter(html, rtf=rtf)
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from rtf_paste_images.events import EventKind, Reporter, log_event
from rtf_paste_images.images import create_src_with_base64, extract_from_rtf
from rtf_paste_images.markers import (
    FILE_URL_PREFIX,
    IMAGE_SELECTOR,
    IMG_SRC_END_RE,
    IMG_SRC_PREFIX_RE,
)
from rtf_paste_images.tags import extract_tags_from_html

_log = logging.getLogger("filter")

ContentCheck = Callable[[str], bool]
"""Editor capability check: ``can_contain("img[src]") -> bool``."""


def _img_src_re(src: str) -> re.Pattern[str]:
    """Regex matching an ``<img`` tag whose ``src`` is exactly *src*.

    Group 1 is everything up to the ``src`` value.  The path is escaped,
    Windows backslashes included.
    """
    return re.compile(IMG_SRC_PREFIX_RE + re.escape(src) + IMG_SRC_END_RE)


def handle_rtf_images(
    html: str,
    rtf: str,
    img_tags: list[str],
    report: Reporter = log_event,
) -> str:
    """Replace ``file://`` image sources in *html* with RTF picture data.

    Args:
        html: Pasted HTML.
        rtf: Pasted RTF from the same clipboard.
        img_tags: ``src`` values of the ``<img>`` tags in *html*, in order.
        report: Event sink for count mismatches and unsupported pictures.

    Returns:
        The updated HTML, or *html* unchanged when the RTF has no pictures
        or the picture count differs from the tag count.
    """
    hex_images = extract_from_rtf(rtf)
    if not hex_images:
        return html

    new_src_values = [create_src_with_base64(img) for img in hex_images]

    if len(img_tags) != len(new_src_values):
        report(
            EventKind.FAILED_IMAGE_EXTRACTION,
            {"rtf": len(hex_images), "html": len(img_tags)},
        )
        return html

    replaced = 0
    for i, src in enumerate(img_tags):
        # Only local files are replaced; already resolved URLs and
        # shapes stay as they are.
        if not src.startswith(FILE_URL_PREFIX):
            continue

        new_src = new_src_values[i]
        if not new_src:
            report(
                EventKind.UNSUPPORTED_IMAGE,
                {"type": hex_images[i].type, "index": i},
            )
            continue

        html, count = _img_src_re(src).subn(
            lambda m, new_src=new_src: m.group(1) + new_src, html, count=1,
        )
        replaced += count

    _log.debug("  Embedded %d of %d image(s)", replaced, len(img_tags))
    return html


def handle_blob_images(html: str, img_tags: list[str]) -> str:
    """Handle images pasted without RTF data.

    Images whose bytes are only reachable through browser object URLs
    cannot be resolved here; *html* is returned unchanged.
    """
    _log.debug("  No RTF data, leaving %d image(s) as is", len(img_tags))
    return html


def apply_image_filter(
    html: str,
    can_contain: ContentCheck | None = None,
    rtf: str | None = None,
    report: Reporter = log_event,
) -> str:
    """Embed pasted images into *html*.

    Args:
        html: Pasted HTML.
        can_contain: Editor capability check called with ``"img[src]"``.
            When it returns false, images are not embedded.  ``None``
            means images are allowed.
        rtf: Pasted RTF, if the clipboard had any.
        report: Event sink (see :mod:`rtf_paste_images.events`).

    Returns:
        The updated HTML; *html* itself whenever nothing applies.
    """
    if can_contain is not None and not can_contain(IMAGE_SELECTOR):
        _log.debug("  Images not allowed, skipping")
        return html

    img_tags = extract_tags_from_html(html)
    if not img_tags:
        return html

    if rtf:
        return handle_rtf_images(html, rtf, img_tags, report=report)

    return handle_blob_images(html, img_tags)


class PasteImageFilter:
    """Image paste filter bound to an editor capability check and reporter.

    Usage::

        image_filter = PasteImageFilter(can_contain=editor_allows)
        html = image_filter.apply(html, rtf)
    """

    def __init__(
        self,
        can_contain: ContentCheck | None = None,
        report: Reporter = log_event,
    ) -> None:
        self._can_contain = can_contain
        self._report = report

    def apply(self, html: str, rtf: str | None = None) -> str:
        """Run :func:`apply_image_filter` with the bound settings."""
        return apply_image_filter(
            html, can_contain=self._can_contain, rtf=rtf, report=self._report,
        )
