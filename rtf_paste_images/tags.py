"""Scanning of pasted HTML for image sources."""

from __future__ import annotations

from rtf_paste_images.markers import IMG_SRC_RE


def extract_tags_from_html(html: str) -> list[str]:
    """Return the ``src`` of every ``<img>`` tag in *html*, in document order.

    >>> extract_tags_from_html('<p><img src="a.png"></p><img src="b.png">')
    ['a.png', 'b.png']
    """
    if not html:
        return []
    return [m.group(1) for m in IMG_SRC_RE.finditer(html)]
