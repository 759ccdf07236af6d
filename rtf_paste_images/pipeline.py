"""Paste processing pipeline.

Runs an ordered chain of processing steps over one pasted document (an
HTML fragment plus the optional RTF from the same clipboard).  Each step
receives a shared :class:`PasteContext` and may modify the HTML and/or
report events into the context's :class:`~rtf_paste_images.events.FilterReport`.

Built-in steps (always in this order):

- :class:`EmbedImagesStep`: replaces ``file://`` images with RTF picture data.
- :class:`ReportStep`: logs the collected events.

File helpers (:func:`resolve_output`, :func:`resolve_rtf`, :func:`read_rtf`)
map clipboard dumps on disk to pipeline inputs for the CLI.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from rtf_paste_images.events import FilterReport
from rtf_paste_images.filter import apply_image_filter
from rtf_paste_images.markers import IMAGE_SELECTOR

_log = logging.getLogger("pipeline")

OUTPUT_SUFFIX = ".embedded.html"
"""Suffix replacing ``.html`` in output file names."""

RTF_SUFFIX = ".rtf"
"""Suffix of the RTF dump auto-discovered next to an HTML file."""

RTF_ENCODING = "cp1252"
"""Encoding used to read RTF dumps (RTF escapes anything non-ASCII)."""


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def resolve_output(html_path: Path, output_dir: Path | None) -> Path:
    """Resolve the output file path for a given HTML file.

    Default: placed next to the source HTML.  With *output_dir*: all
    output goes to the specified directory.
    """
    base = output_dir if output_dir else html_path.parent
    return base / f"{html_path.stem}{OUTPUT_SUFFIX}"


def resolve_rtf(html_path: Path, explicit_rtf: Path | None = None) -> Path | None:
    """Resolve the RTF dump belonging to *html_path*.

    Checks the explicit path first, then auto-discovers ``<stem>.rtf``
    next to the HTML file.

    Returns:
        The RTF path, or ``None`` if there is none.
    """
    if explicit_rtf is not None:
        return explicit_rtf
    auto_path = html_path.with_suffix(RTF_SUFFIX)
    if auto_path.is_file():
        return auto_path
    return None


def read_rtf(path: Path) -> str:
    """Read an RTF dump, decoding bytes as cp1252 with replacement."""
    return path.read_bytes().decode(RTF_ENCODING, errors="replace")


# ---------------------------------------------------------------------------
# Processing context and step protocol
# ---------------------------------------------------------------------------


@dataclass
class PasteContext:
    """Shared mutable state passed through all processing steps."""

    html: str
    """Current HTML content (steps may replace it)."""

    rtf: str | None = None
    """RTF from the same clipboard (``None`` when unavailable)."""

    source: Path | None = None
    """Path of the HTML dump, for log messages only."""

    report: FilterReport = field(default_factory=FilterReport)
    """Events reported by the steps."""


@runtime_checkable
class ProcessingStep(Protocol):
    """Protocol for a single processing step in the pipeline.

    Any class with a :attr:`name`, :attr:`key` property and a :meth:`run`
    method that accepts a :class:`PasteContext` qualifies.
    """

    @property
    def name(self) -> str:
        """Human-readable step name for logging."""
        ...

    @property
    def key(self) -> str:
        """Stable identifier for the step."""
        ...

    def run(self, ctx: PasteContext) -> None:
        """Execute this processing step."""
        ...


# ---------------------------------------------------------------------------
# Built-in steps
# ---------------------------------------------------------------------------


@dataclass
class EmbedImagesStep:
    """Embed RTF pictures into the HTML.

    Wraps :func:`~rtf_paste_images.filter.apply_image_filter`.  With
    ``allow_images=False`` it behaves like an editor whose content filter
    rejects ``img[src]``.
    """

    allow_images: bool = True

    @property
    def name(self) -> str:
        return "embed images"

    @property
    def key(self) -> str:
        return "images"

    def _can_contain(self, rule: str) -> bool:
        return self.allow_images or rule != IMAGE_SELECTOR

    def run(self, ctx: PasteContext) -> None:
        ctx.html = apply_image_filter(
            ctx.html,
            can_contain=self._can_contain,
            rtf=ctx.rtf,
            report=ctx.report,
        )


@dataclass
class ReportStep:
    """Log the events collected in ``ctx.report``."""

    @property
    def name(self) -> str:
        return "report"

    @property
    def key(self) -> str:
        return "report"

    def run(self, ctx: PasteContext) -> None:
        ctx.report.log_all()
        if not ctx.report.ok:
            _log.warning("  ⚠ %d event(s) reported", len(ctx.report.events))


def build_steps(allow_images: bool = True) -> list[ProcessingStep]:
    """Return the default step chain."""
    return [EmbedImagesStep(allow_images=allow_images), ReportStep()]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class PastePipeline:
    """Run processing steps in order over a :class:`PasteContext`.

    Usage::

        pipeline = PastePipeline(build_steps())
        ctx = pipeline.run(PasteContext(html=html, rtf=rtf))
        print(ctx.html)
    """

    def __init__(self, steps: list[ProcessingStep] | None = None) -> None:
        self._steps = list(steps) if steps is not None else build_steps()

    @property
    def steps(self) -> list[ProcessingStep]:
        """The configured steps, in execution order."""
        return list(self._steps)

    def run(self, ctx: PasteContext) -> PasteContext:
        """Execute all steps and return *ctx*."""
        for step in self._steps:
            t0 = time.monotonic()
            step.run(ctx)
            _log.debug("  %s: %.3fs", step.name, time.monotonic() - t0)
        return ctx

    def process_file(
        self,
        html_path: Path,
        output_file: Path,
        rtf_path: Path | None = None,
    ) -> PasteContext:
        """Read an HTML dump (and its RTF), run the steps, write the result.

        Args:
            html_path: HTML dump to process.
            output_file: Where to write the updated HTML.
            rtf_path: RTF dump from the same clipboard, if any.

        Returns:
            The final context (HTML and report).
        """
        html = html_path.read_text(encoding="utf-8")
        rtf = read_rtf(rtf_path) if rtf_path is not None else None
        if rtf is None:
            _log.info("  No RTF for %s", html_path.name)

        ctx = self.run(PasteContext(html=html, rtf=rtf, source=html_path))

        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(ctx.html, encoding="utf-8")
        _log.info("  Written %s", output_file)
        return ctx
