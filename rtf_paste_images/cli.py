"""CLI entry point for rtf-paste-images.

Embed images from clipboard RTF dumps into the sibling HTML dumps.

Usage::

    rtf-paste-images embed paste.html
    rtf-paste-images embed paste.html --rtf clipboard.rtf -o output/
    rtf-paste-images embed *.html --strict
    rtf-paste-images inspect clipboard.rtf --html paste.html
"""

import argparse
import logging
import sys
from pathlib import Path

import colorlog

from rtf_paste_images import __version__
from rtf_paste_images.images import create_src_with_base64, extract_from_rtf
from rtf_paste_images.markers import FILE_URL_PREFIX
from rtf_paste_images.pipeline import (
    PastePipeline,
    build_steps,
    read_rtf,
    resolve_output,
    resolve_rtf,
)
from rtf_paste_images.tags import extract_tags_from_html


_log = logging.getLogger("paste")

_SUMMARY_SEP = "=" * 78
"""Separator line for the summary block."""


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def setup_colorized_logging():
    """Configure colorized logging output."""
    handler = colorlog.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)-9s%(reset)s: "
            "%(message)s",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)


def _setup_logging(verbose: bool) -> None:
    """Initialize colorized logging and optionally enable debug level."""
    setup_colorized_logging()
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser with subcommands."""
    verbose_parent = argparse.ArgumentParser(add_help=False)
    verbose_parent.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser = argparse.ArgumentParser(
        prog="rtf-paste-images",
        description="Embed images from pasted RTF into the pasted HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  embed         Replace file:// images in HTML dumps with RTF picture data
  inspect       List the pictures found in an RTF dump

Examples:
  %(prog)s embed paste.html                  Uses paste.rtf if present
  %(prog)s embed paste.html --rtf clip.rtf   Explicit RTF dump
  %(prog)s embed *.html -o output/           Write results to output dir
  %(prog)s inspect clip.rtf --html paste.html

Run '%(prog)s COMMAND --help' for command-specific options.
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # -- embed -----------------------------------------------------------------
    p_embed = subparsers.add_parser(
        "embed",
        parents=[verbose_parent],
        formatter_class=argparse.RawDescriptionHelpFormatter,
        help="Embed RTF pictures into HTML dumps",
        description="Replace file:// image sources in HTML dumps with data "
                    "URLs built from the RTF dump of the same clipboard. "
                    "Each result is written as <stem>.embedded.html.",
        epilog="""
Examples:
  %(prog)s paste.html                       Auto-discovers paste.rtf
  %(prog)s paste.html --rtf clip.rtf        Explicit RTF dump
  %(prog)s *.html -o output/                Custom output directory
  %(prog)s paste.html --strict              Fail if anything was reported
        """,
    )
    p_embed.add_argument(
        "html",
        nargs="+",
        type=Path,
        help="HTML dump(s) to process (supports shell globs)",
    )
    p_embed.add_argument(
        "--rtf",
        type=Path,
        default=None,
        metavar="FILE",
        help="RTF dump from the same clipboard (single HTML file only). "
             "Default: <stem>.rtf next to each HTML file, if present.",
    )
    p_embed.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Output directory (default: same directory as each HTML file)",
    )
    p_embed.add_argument(
        "--no-images",
        action="store_true",
        help="Act as an editor that does not allow img[src]: output is "
             "left unchanged.",
    )
    p_embed.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any image could not be embedded.",
    )

    # -- inspect ---------------------------------------------------------------
    p_inspect = subparsers.add_parser(
        "inspect",
        parents=[verbose_parent],
        formatter_class=argparse.RawDescriptionHelpFormatter,
        help="List the pictures found in an RTF dump",
        description="Print one line per picture extracted from an RTF dump "
                    "(index, id, type, payload size).  With --html, also "
                    "check that the HTML has a matching number of images.",
    )
    p_inspect.add_argument(
        "rtf",
        type=Path,
        help="RTF dump to inspect",
    )
    p_inspect.add_argument(
        "--html",
        type=Path,
        default=None,
        metavar="FILE",
        help="HTML dump from the same clipboard",
    )

    return parser


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _resolve_file_paths(
    raw_paths: list[Path],
    kind: str,
    expected_suffixes: tuple[str, ...] | None = None,
) -> list[Path] | None:
    """Resolve and validate a list of file paths.

    Args:
        raw_paths: Paths from argparse.
        kind: Human-readable label for error messages (e.g. ``"HTML"``).
        expected_suffixes: If set, reject files with another suffix.
            The check is case-insensitive.

    Returns resolved paths on success, or ``None`` on first error
    (after logging the error).
    """
    resolved: list[Path] = []
    for p in raw_paths:
        rp = p.resolve()
        if not rp.exists():
            _log.error("%s not found: %s", kind, p)
            return None
        if not rp.is_file():
            _log.error("Not a file: %s", p)
            return None
        if (
            expected_suffixes
            and rp.suffix.lower() not in expected_suffixes
        ):
            _log.error(
                "Expected a %s file, got %s: %s",
                "/".join(expected_suffixes), rp.suffix or "(no extension)", p,
            )
            return None
        resolved.append(rp)
    resolved.sort(key=lambda p: p.name)
    return resolved


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_embed(args: argparse.Namespace) -> int:
    """Handle the ``embed`` command."""
    if args.rtf and len(args.html) > 1:
        print(
            "error: --rtf can only be used with a single HTML file",
            file=sys.stderr,
        )
        return 1

    _setup_logging(args.verbose)

    html_paths = _resolve_file_paths(args.html, "HTML", (".html", ".htm"))
    if html_paths is None:
        return 1

    explicit_rtf: Path | None = None
    if args.rtf:
        rtf_paths = _resolve_file_paths([args.rtf], "RTF", (".rtf",))
        if rtf_paths is None:
            return 1
        explicit_rtf = rtf_paths[0]

    output_dir = args.output_dir.resolve() if args.output_dir else None

    try:
        _log.info("rtf-paste-images %s", __version__)
        _log.info("Found %d HTML file(s) to process", len(html_paths))
        if args.no_images:
            _log.info("Images: NOT ALLOWED (output left unchanged)")
        if output_dir:
            _log.info("Output directory: %s", output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

        pipeline = PastePipeline(build_steps(allow_images=not args.no_images))
        processed = 0
        total_events = 0

        for html_path in html_paths:
            _log.info("Processing %s...", html_path.name)
            ctx = pipeline.process_file(
                html_path,
                resolve_output(html_path, output_dir),
                rtf_path=resolve_rtf(html_path, explicit_rtf),
            )
            processed += 1
            total_events += len(ctx.report.events)

        _log.info(_SUMMARY_SEP)
        _log.info(
            "Results: %d processed, %d event(s) reported",
            processed, total_events,
        )
        _log.info(_SUMMARY_SEP)
        return 1 if (args.strict and total_events > 0) else 0

    except Exception as e:
        _log.error("Fatal error: %s", e)
        return 1


def _cmd_inspect(args: argparse.Namespace) -> int:
    """Handle the ``inspect`` command."""
    _setup_logging(args.verbose)

    rtf_paths = _resolve_file_paths([args.rtf], "RTF", (".rtf",))
    if rtf_paths is None:
        return 1

    html_tags: list[str] | None = None
    if args.html:
        html_paths = _resolve_file_paths([args.html], "HTML", (".html", ".htm"))
        if html_paths is None:
            return 1
        html_tags = extract_tags_from_html(
            html_paths[0].read_text(encoding="utf-8"),
        )

    records = extract_from_rtf(read_rtf(rtf_paths[0]))
    for i, rec in enumerate(records):
        size = len(rec.hex) // 2 if rec.hex is not None else 0
        embeddable = "yes" if create_src_with_base64(rec) else "no"
        print(
            f"{i:3d}  id={rec.id or '-':<24} type={rec.type:<12} "
            f"bytes={size:<8d} embeddable={embeddable}"
        )
    print(f"{len(records)} picture(s)")

    if html_tags is not None:
        local = sum(1 for src in html_tags if src.startswith(FILE_URL_PREFIX))
        print(f"{len(html_tags)} <img> tag(s), {local} local file(s)")
        if records and len(html_tags) != len(records):
            print("MISMATCH: images cannot be paired by position")
            return 1
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> int:
    """Main entry point."""
    parser = _build_parser()

    # Show help if no arguments provided.
    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        "embed": _cmd_embed,
        "inspect": _cmd_inspect,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
