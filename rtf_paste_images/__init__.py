"""Embed images from pasted RTF into the pasted HTML.

Word processors put images on the clipboard twice: the HTML half refers to
them by local ``file://`` paths a browser cannot load, and the RTF half
carries the actual bytes in ``\\pict`` groups.  This package pairs the two
by position and rewrites the HTML with ``data:`` URLs.

Key features:
- Balanced-brace RTF group scanning (headers, footers and non-Word
  renditions are ignored)
- Picture deduplication by ``\\blipuid`` / ``\\bliptag``, alternate-format
  and WordArt filtering
- PNG and JPEG embedding as base64 data URLs
- All-or-nothing positional pairing with reported (never raised) mismatches
- Step-based pipeline and CLI for clipboard dumps on disk
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("rtf-paste-images")
except PackageNotFoundError:
    __version__ = "0.0.0"  # fallback for uninstalled dev usage

from rtf_paste_images.events import EventKind, FilterEvent, FilterReport, log_event
from rtf_paste_images.filter import (
    PasteImageFilter,
    apply_image_filter,
    handle_blob_images,
    handle_rtf_images,
)
from rtf_paste_images.images import (
    RECOGNIZABLE_IMAGE_TYPES,
    SUPPORTED_IMAGE_TYPES,
    ImageRecord,
    create_src_with_base64,
    extract_from_rtf,
    get_image_type,
    locate_image_groups,
)
from rtf_paste_images.pipeline import PasteContext, PastePipeline
from rtf_paste_images.tags import extract_tags_from_html

__all__ = [
    "__version__",
    "apply_image_filter",
    "create_src_with_base64",
    "EventKind",
    "extract_from_rtf",
    "extract_tags_from_html",
    "FilterEvent",
    "FilterReport",
    "get_image_type",
    "handle_blob_images",
    "handle_rtf_images",
    "ImageRecord",
    "locate_image_groups",
    "log_event",
    "PasteContext",
    "PasteImageFilter",
    "PastePipeline",
    "RECOGNIZABLE_IMAGE_TYPES",
    "SUPPORTED_IMAGE_TYPES",
]
