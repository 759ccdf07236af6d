"""Centralized marker definitions for RTF/HTML paste processing.

Single source of truth for the RTF control words and HTML patterns used to
find, classify and rewrite pasted images.  Provides literal strings and
compiled regexes so that no module needs to hard-code them.

Every RTF control word, valueless or parameterized, is a
:class:`ControlWord` instance.  The class auto-generates the literal form
and the compiled regexes from the word and an optional value pattern.

Usage::

    from rtf_paste_images.markers import BLIP_TAG, PNG_BLIP, WMETAFILE

    # Valueless control word
    PNG_BLIP.literal                 # '\\pngblip'
    PNG_BLIP.re.search(group)        # match anywhere in a group

    # Parameterized control word
    BLIP_TAG.format(-12345)          # '\\bliptag-12345'
    BLIP_TAG.re_value.search(group)  # captures ('-12345',)
    WMETAFILE.re_value.search(group) # captures the mapping mode digit
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cached_property


@dataclass(frozen=True)
class ControlWord:
    """RTF control word definition.

    Parameters
    ----------
    word:
        Control word without the leading backslash, e.g. ``"pngblip"``.
    _value_re:
        Regex pattern for what follows the word (with capture groups).
        Empty string means the word is matched on its own.
    _value_fmt:
        Python ``.format()`` template for generating the parameter.
    """

    word: str
    _value_re: str = ""
    _value_fmt: str = ""

    @property
    def literal(self) -> str:
        """Literal control word as it appears in RTF.

        >>> DEF_SHP.literal
        '\\\\defshp'
        """
        return f"\\{self.word}"

    @cached_property
    def re(self) -> re.Pattern[str]:
        """Regex matching the bare control word (no capture groups)."""
        return re.compile(re.escape(self.literal))

    @property
    def has_value(self) -> bool:
        """Whether this control word carries a parameter."""
        return bool(self._value_re)

    def format(self, *args: object) -> str:
        """Generate the control word with a formatted parameter.

        >>> BLIP_TAG.format(42)
        '\\\\bliptag42'
        """
        if not self._value_fmt:
            raise TypeError(
                f"Control word {self.word!r} takes no parameter; "
                f"use .literal instead of .format()"
            )
        try:
            value = self._value_fmt.format(*args)
        except IndexError as exc:
            raise TypeError(
                f"Control word {self.word!r} format {self._value_fmt!r} "
                f"called with args={args}"
            ) from exc
        return f"{self.literal}{value}"

    @cached_property
    def re_value(self) -> re.Pattern[str]:
        """Regex matching the parameterized form; captures value group(s).

        Raises ``TypeError`` if the control word has no value pattern.
        """
        if not self._value_re:
            raise TypeError(
                f"Control word {self.word!r} takes no parameter; use .re instead"
            )
        return re.compile(re.escape(self.literal) + self._value_re)


# ---------------------------------------------------------------------------
# Picture groups
# ---------------------------------------------------------------------------

PICT = ControlWord("pict")
"""Destination control word introducing a picture group."""

EXCLUDED_GROUPS = r"(?:(?:header|footer)[lrf]?|nonshppict|shprslt)"
"""Group names whose content never holds a pasted image.

Headers and footers live in ``\\header*`` / ``\\footer*`` groups, non-Word
renditions of pictures in ``\\nonshppict`` and drawn-object results (e.g.
image alignment helpers) in ``\\shprslt``.
"""

# -- Blip (picture data) formats -------------------------------------------

PNG_BLIP = ControlWord("pngblip")
"""PNG picture data."""

JPEG_BLIP = ControlWord("jpegblip")
"""JPEG picture data."""

EMF_BLIP = ControlWord("emfblip")
"""Enhanced metafile picture data."""

WMETAFILE = ControlWord("wmetafile", _value_re=r"(\d)", _value_fmt="{0}")
"""Windows metafile picture data; the parameter is the mapping mode."""

# -- Picture identity --------------------------------------------------------

BLIP_UID = ControlWord("blipuid", _value_re=r" (\w+)\}", _value_fmt=" {0}}}")
"""Unique picture id, emitted inside a ``{\\*\\blipuid ...}`` subgroup."""

BLIP_TAG = ControlWord("bliptag", _value_re=r"(-?\d+)", _value_fmt="{0}")
"""Numeric picture tag, used when no ``\\blipuid`` is present."""

# -- Shapes ------------------------------------------------------------------

DEF_SHP = ControlWord("defshp")
"""Marks a drawn shape (WordArt) rendered as a picture."""

# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------

IMG_SRC_RE = re.compile(r'<img[^>]+src="([^"]+)[^>]+')
"""Regex matching an ``<img>`` tag with a double-quoted ``src``.

Captures ``(src,)``.
"""

IMG_SRC_PREFIX_RE = r"""(<img [^>]*src=["']?)"""
"""Pattern fragment matching an ``<img`` tag up to its ``src`` value.

Captures the prefix so that only the value after it is replaced.  The
mandatory space after ``<img`` keeps VML ``<v:imagedata>`` and friends out.
"""

IMG_SRC_END_RE = r"""(?=["'\s>])"""
"""Lookahead closing a ``src`` value, so a path never matches a longer one."""

FILE_URL_PREFIX = "file://"
"""Scheme prefix of local-file image sources that need embedding."""

IMAGE_SELECTOR = "img[src]"
"""Content rule an editor must allow for images to be embedded."""
