"""Non-fatal events reported while embedding pasted images.

The image filter never raises for bad input.  Conditions a caller may want
to know about (the RTF and HTML halves disagree, a picture format cannot be
embedded) are passed to a *reporter* callable instead.  The default
reporter logs them; :class:`FilterReport` collects them for later
inspection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

_log = logging.getLogger("events")


class EventKind(Enum):
    """Kinds of events reported by the image filter."""

    FAILED_IMAGE_EXTRACTION = "pastetools-failed-image-extraction"
    """RTF pictures and HTML ``<img>`` tags differ in number.

    Payload: ``{"rtf": <record count>, "html": <tag count>}``.  No image is
    embedded.
    """

    UNSUPPORTED_IMAGE = "pastetools-unsupported-image"
    """A ``file://`` image maps to a picture that cannot be embedded.

    Payload: ``{"type": <MIME type>, "index": <tag index>}``.  Only that tag
    is left untouched.
    """


Reporter = Callable[[EventKind, dict[str, Any]], None]
"""Event sink signature: ``report(kind, payload)``."""


def log_event(kind: EventKind, payload: dict[str, Any]) -> None:
    """Default reporter: log the event at ERROR level."""
    _log.error("%s: %s", kind.value, payload)


@dataclass
class FilterEvent:
    """A single reported event."""

    kind: EventKind
    payload: dict[str, Any]

    def __str__(self) -> str:
        details = ", ".join(f"{k}={v}" for k, v in self.payload.items())
        return f"{self.kind.value} ({details})"


@dataclass
class FilterReport:
    """Collects events reported during one or more filter runs.

    Instances are reporters themselves::

        report = FilterReport()
        html = apply_image_filter(html, rtf=rtf, report=report)
        if not report.ok:
            report.log_all()
    """

    events: list[FilterEvent] = field(default_factory=list)

    def __call__(self, kind: EventKind, payload: dict[str, Any]) -> None:
        self.events.append(FilterEvent(kind, dict(payload)))

    @property
    def ok(self) -> bool:
        """True if nothing was reported."""
        return not self.events

    def of_kind(self, kind: EventKind) -> list[FilterEvent]:
        """Return the collected events of *kind*, in report order."""
        return [e for e in self.events if e.kind is kind]

    def log_all(self) -> None:
        """Log every collected event."""
        for e in self.events:
            if e.kind is EventKind.FAILED_IMAGE_EXTRACTION:
                _log.error("  ✗ %s", e)
            else:
                _log.warning("  ⚠ %s", e)
