"""Unit tests for RTF group scanning primitives in rtf.py."""

from __future__ import annotations

from rtf_paste_images.markers import EXCLUDED_GROUPS
from rtf_paste_images.rtf import (
    _group_start_re,
    extract_group_content,
    get_group,
    get_group_name,
    get_groups,
    remove_groups,
)
from tests.conftest import make_nonshppict, make_pict, make_rtf, make_shppict


# ---------------------------------------------------------------------------
# get_group
# ---------------------------------------------------------------------------


class TestGetGroup:
    """Tests for locating a single group."""

    def test_finds_group(self):
        rtf = r"{\rtf1 text {\pict\pngblip 0A0B} more}"
        g = get_group(rtf, "pict")
        assert g is not None
        assert g.content == r"{\pict\pngblip 0A0B}"
        assert rtf[g.start:g.end] == g.content

    def test_no_match_returns_none(self):
        assert get_group(r"{\rtf1 plain text}", "pict") is None

    def test_starred_destination(self):
        rtf = r"{\rtf1 {\*\shppict{\pict 00}}}"
        g = get_group(rtf, "shppict")
        assert g is not None
        assert g.content == r"{\*\shppict{\pict 00}}"

    def test_name_must_end_at_non_letter(self):
        """``pict`` does not match a longer control word."""
        rtf = r"{\rtf1 {\pictscaled 00}}"
        assert get_group(rtf, "pict") is None

    def test_pict_not_matched_inside_shppict(self):
        rtf = r"{\rtf1 {\*\shppict{\pict 00}}}"
        g = get_group(rtf, "pict")
        assert g is not None
        assert g.content == r"{\pict 00}"

    def test_start_offset(self):
        rtf = r"{\pict 01}{\pict 02}"
        first = get_group(rtf, "pict")
        assert first is not None
        second = get_group(rtf, "pict", start=first.end)
        assert second is not None
        assert second.content == r"{\pict 02}"

    def test_escaped_braces_do_not_count(self):
        rtf = r"{\pict a\{b\}c} tail"
        g = get_group(rtf, "pict")
        assert g is not None
        assert g.content == r"{\pict a\{b\}c}"

    def test_escaped_backslash_before_brace(self):
        r"""``\\`` is an escaped backslash, so the following ``}`` closes."""
        rtf = r"{\pict a\\}b}"
        g = get_group(rtf, "pict")
        assert g is not None
        assert g.content == r"{\pict a\\}"

    def test_unterminated_group_runs_to_end(self):
        rtf = r"{\rtf1 {\pict 0A0B"
        g = get_group(rtf, "pict")
        assert g is not None
        assert g.end == len(rtf)
        assert g.content == r"{\pict 0A0B"


# ---------------------------------------------------------------------------
# get_groups
# ---------------------------------------------------------------------------


class TestGetGroups:
    """Tests for collecting all groups of a name."""

    def test_document_order(self):
        rtf = make_rtf(make_pict("01"), "text", make_pict("02"), make_pict("03"))
        groups = get_groups(rtf, "pict")
        assert len(groups) == 3
        assert [g.content.rstrip("}")[-2:] for g in groups] == ["01", "02", "03"]
        assert groups[0].start < groups[1].start < groups[2].start

    def test_nested_same_name_belongs_to_parent(self):
        rtf = r"{\pict outer {\pict inner} end}"
        groups = get_groups(rtf, "pict")
        assert len(groups) == 1
        assert groups[0].content == rtf

    def test_empty_input(self):
        assert get_groups("", "pict") == []

    def test_same_as_chained_get_group(self):
        rtf = make_rtf(make_pict("01"), make_shppict(make_pict("02")), make_pict("03"))
        chained = []
        g = get_group(rtf, "pict")
        while g is not None:
            chained.append(g)
            g = get_group(rtf, "pict", start=g.end)
        assert get_groups(rtf, "pict") == chained

    def test_unterminated_last_group(self):
        rtf = r"{\pict 01}{\pict 02"
        groups = get_groups(rtf, "pict")
        assert [g.content for g in groups] == [r"{\pict 01}", r"{\pict 02"]

    def test_start_pattern_compiled_once(self):
        assert _group_start_re("pict") is _group_start_re("pict")

    def test_pattern_name(self):
        rtf = r"{\header h}{\footerl f}{\pard body}"
        groups = get_groups(rtf, "(?:header|footer)[lrf]?")
        assert [g.content for g in groups] == [r"{\header h}", r"{\footerl f}"]


# ---------------------------------------------------------------------------
# remove_groups
# ---------------------------------------------------------------------------


class TestRemoveGroups:
    """Tests for deleting groups."""

    def test_removes_all_matches(self):
        rtf = r"a{\header h}b{\footer f}c"
        assert remove_groups(rtf, "(?:header|footer)") == "abc"

    def test_no_match_unchanged(self):
        rtf = r"{\rtf1 text}"
        assert remove_groups(rtf, "pict") == rtf

    def test_excluded_groups(self):
        kept = make_shppict(make_pict("01"))
        rtf = make_rtf(
            r"{\headerr " + make_pict("02") + "}",
            kept,
            make_nonshppict(make_pict("03", blip=r"\wmetafile8")),
            r"{\*\shprslt " + make_pict("04") + "}",
            r"{\footerf " + make_pict("05") + "}",
        )
        cleaned = remove_groups(rtf, EXCLUDED_GROUPS)
        assert kept in cleaned
        assert len(get_groups(cleaned, "pict")) == 1

    def test_removes_nested_pictures_with_parent(self):
        rtf = r"{\header {\pict 01}}{\pict 02}"
        cleaned = remove_groups(rtf, "header")
        assert cleaned == r"{\pict 02}"


# ---------------------------------------------------------------------------
# extract_group_content / get_group_name
# ---------------------------------------------------------------------------


class TestExtractGroupContent:
    """Tests for stripping a group down to its payload."""

    def test_strips_control_words_and_braces(self):
        assert extract_group_content(r"{\pict\picw10\pich10\pngblip 0A0B}") == "0A0B"

    def test_strips_subgroups(self):
        group = make_pict("0A0B", uid="abc123", tag=-42)
        assert extract_group_content(group) == "0A0B"

    def test_payload_directly_after_subgroup(self):
        """Word writes the hex right after the ``\\blipuid`` subgroup."""
        group = r"{\pict\pngblip\bliptag7{\*\blipuid 0a1b}89504E47}"
        assert extract_group_content(group).strip() == "89504E47"

    def test_keeps_line_breaks_in_payload(self):
        group = make_pict("0A0B\n0C0D")
        assert extract_group_content(group) == "0A0B\n0C0D"

    def test_negative_parameter(self):
        assert extract_group_content(r"{\pict\bliptag-12345 FF}") == "FF"

    def test_group_without_payload(self):
        assert extract_group_content(r"{\pict\pngblip}") == ""


class TestGetGroupName:
    """Tests for reading the control word that opens a group."""

    def test_plain(self):
        assert get_group_name(r"{\pict 00}") == "pict"

    def test_starred(self):
        assert get_group_name(r"{\*\shppict{\pict 00}}") == "shppict"

    def test_not_a_group(self):
        assert get_group_name("plain text") is None
