"""RTF group scanning primitives.

RTF is a tree of ``{...}`` groups, each usually introduced by a control
word (``{\\pict ...}``, ``{\\*\\shppict ...}``).  The helpers here locate,
collect and delete such groups by balanced-brace scanning, and strip a
group down to its payload.

A backslash escapes the following character, so ``\\{``, ``\\}`` and
``\\\\`` never open or close a group.  A group that is never closed runs
to the end of the text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache

_log = logging.getLogger("rtf")

_GROUP_NAME_RE = re.compile(r"^\{\\(?:\*\\)?(\w+)")
"""Captures the control word that opens a group."""

_LEADING_CONTROL_WORDS_RE = re.compile(r"^(?:\\[\w-]+\s*)+")
"""Run of control words (with parameters and delimiters) at the start."""


@dataclass
class RtfGroup:
    """A balanced ``{...}`` group found in RTF text."""

    start: int
    """Offset of the opening brace."""
    end: int
    """Offset just past the closing brace."""
    content: str
    """Full group text, braces included."""


@lru_cache(maxsize=None)
def _group_start_re(name: str) -> re.Pattern[str]:
    r"""Compile the opening pattern for groups named by *name*.

    *name* is a regex fragment (e.g. ``"pict"`` or
    ``"(?:header|footer)[lrf]?"``).  Matches ``{\name`` and ``{\*\name``
    followed by a non-letter, so ``pict`` does not match ``\pictscaled``.
    """
    return re.compile(rf"\{{\\(?:\*\\)?(?:{name})[^a-z]", re.IGNORECASE)


def _find_group_end(rtf: str, start: int) -> int:
    """Return the offset just past the brace closing the group at *start*."""
    depth = 0
    i = start
    n = len(rtf)
    while i < n:
        ch = rtf[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    _log.debug("Unterminated group at offset %d, running to end of text", start)
    return n


def get_group(rtf: str, name: str, start: int = 0) -> RtfGroup | None:
    """Find the first group named *name* at or after offset *start*.

    Returns ``None`` when there is no such group.
    """
    m = _group_start_re(name).search(rtf, start)
    if m is None:
        return None
    end = _find_group_end(rtf, m.start())
    return RtfGroup(start=m.start(), end=end, content=rtf[m.start():end])


def get_groups(rtf: str, name: str) -> list[RtfGroup]:
    """Return every group named *name*, in document order.

    The search resumes after each found group, so a group nested inside
    another group of the same name is part of its parent.
    """
    groups: list[RtfGroup] = []
    group = get_group(rtf, name)
    while group is not None:
        groups.append(group)
        group = get_group(rtf, name, start=group.end)
    return groups


def remove_groups(rtf: str, name: str) -> str:
    """Return *rtf* with every group named *name* deleted."""
    groups = get_groups(rtf, name)
    if not groups:
        return rtf

    parts: list[str] = []
    pos = 0
    for g in groups:
        parts.append(rtf[pos:g.start])
        pos = g.end
    parts.append(rtf[pos:])
    _log.debug("Removed %d group(s) matching %s", len(groups), name)
    return "".join(parts)


def get_group_name(group: str) -> str | None:
    """Return the control word opening *group*, or ``None``."""
    m = _GROUP_NAME_RE.match(group)
    return m.group(1) if m else None


def _strip_subgroups(text: str) -> str:
    """Replace every ``{...}`` subgroup (and its nested groups) with a space.

    The space keeps a control word before the subgroup delimited from data
    after it.
    """
    out: list[str] = []
    depth = 0
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            if depth == 0:
                out.append(text[i:i + 2])
            i += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 1:
                out.append(" ")
            # Stray close braces are dropped.
            depth = max(depth - 1, 0)
        elif depth == 0:
            out.append(ch)
        i += 1
    return "".join(out)


def extract_group_content(group: str) -> str:
    """Strip a group down to its payload.

    Removes the enclosing braces and the run of control words that opens
    the group, and replaces every nested subgroup (such as
    ``{\\*\\blipuid ...}`` or ``{\\*\\picprop ...}``) with a space.  For a
    picture group the remainder is the hex-encoded image data, possibly
    wrapped across lines.
    """
    inner = group
    if inner.startswith("{"):
        inner = inner[1:]
        if inner.endswith("}"):
            inner = inner[:-1]
    inner = _strip_subgroups(inner)
    return _LEADING_CONTROL_WORDS_RE.sub("", inner, count=1)
