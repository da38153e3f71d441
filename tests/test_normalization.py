"""Unit tests for normalization layer.

Tests the TextNormalizer service and data models for:
- Input validation (empty text, control characters)
- Template markup passes (notes, wildcards, variables, optional blocks)
- Canonical text passes (case, comments, punctuation, bullets, spelling)
- Index map invariants and original-offset recovery
- Determinism and idempotence
"""

import pytest

from license_scanner.normalization import (
    InvalidInputError,
    NormalizationRecord,
    NormalizerContext,
    TextNormalizer,
    find_html_tags,
    normalize_text,
)
from license_scanner.normalization.service import adjust_variable_regex
from license_scanner.utils.offsets import SENTINEL

MIT_TEXT = (
    "The MIT License\n\n"
    "Copyright (c) 2020 Jane Doe\n\n"
    "Permission is hereby granted, free of charge..."
)


@pytest.fixture
def normalizer():
    """Create a TextNormalizer with the bundled varietal table."""
    return TextNormalizer()


def assert_index_map_valid(record: NormalizationRecord) -> None:
    assert len(record.index_map) == len(record.normalized_text)
    for offset in record.index_map:
        assert offset == SENTINEL or 0 <= offset < len(record.original_text)


class TestInputValidation:
    """Tests for rejected input."""

    def test_empty_text(self, normalizer):
        """Test that empty text is rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            normalizer.normalize("")

        assert exc_info.value.reason == "empty"

    @pytest.mark.parametrize("text", ["\x00abc", "MIT\x07License", "escape \x1b[0m"])
    def test_control_characters(self, normalizer, text):
        """Test that binary-looking text is rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            normalizer.normalize(text)

        assert exc_info.value.reason == "control_characters"

    def test_tabs_and_newlines_allowed(self, normalizer):
        """Test that ordinary whitespace control characters pass validation."""
        record = normalizer.normalize("MIT\tLicense\r\n")

        assert record.normalized_text == "mit license"


class TestCanonicalPasses:
    """Tests for the text-level normalization passes."""

    def test_lowercase_keeps_identity_map(self, normalizer):
        """Test that lowercasing leaves the index map untouched."""
        record = normalizer.normalize("MIT License")

        assert record.normalized_text == "mit license"
        assert record.index_map == list(range(11))

    def test_whitespace_collapsed_and_trimmed(self, normalizer):
        """Test whitespace runs collapse to one space and ends are trimmed."""
        record = normalizer.normalize("  The MIT\tLicense\n\n")

        assert record.normalized_text == "the mit license"
        assert record.index_map[0] == 2

    def test_quotes_unified(self, normalizer):
        """Test that curly and straight quotes become an apostrophe."""
        record = normalizer.normalize("the “Software”")

        assert record.normalized_text == "the 'software'"

    def test_dashes_unified(self, normalizer):
        """Test that en dashes become hyphens."""
        record = normalizer.normalize("2019–2020")

        assert record.normalized_text == "2019-2020"

    def test_https_becomes_http(self, normalizer):
        """Test protocol standardization."""
        record = normalizer.normalize("HTTPS://Example.org")

        assert record.normalized_text == "http://example.org"

    def test_copyright_symbol(self, normalizer):
        """Test that the copyright sign is spelled out."""
        record = normalizer.normalize("Copyright © 2020")

        assert record.normalized_text == "copyright copyright 2020"

    def test_parenthesized_c_inside_line(self, normalizer):
        """Test that (c) in the middle of a line becomes copyright."""
        record = normalizer.normalize(MIT_TEXT)

        assert "copyright copyright 2020 jane doe" in record.normalized_text

    def test_numbered_list(self, normalizer):
        """Test that numbering at line starts is removed."""
        record = normalizer.normalize("1. First item\n2. Second item")

        assert record.normalized_text == "first item second item"

    def test_bulleted_list(self, normalizer):
        """Test that bullets at line starts are removed."""
        record = normalizer.normalize("- apples\n- pears")

        assert record.normalized_text == "apples pears"

    def test_line_comments(self, normalizer):
        """Test that // comment leaders are stripped."""
        record = normalizer.normalize("// Copyright 2020 Acme\n// All rights reserved.")

        assert record.normalized_text == "copyright 2020 acme all rights reserved."

    def test_block_comment(self, normalizer):
        """Test that C-style block comment markers are stripped."""
        record = normalizer.normalize("/*\n * Licensed under MIT\n */")

        assert record.normalized_text == "licensed under mit"

    def test_hash_comment(self, normalizer):
        """Test that shell-style comment markers are stripped."""
        record = normalizer.normalize("# Licensed under MIT")

        assert record.normalized_text == "licensed under mit"

    def test_inline_html_comment_removed(self, normalizer):
        """Test that a single-line HTML comment is removed with its content."""
        record = normalizer.normalize("Permission <!-- generated --> granted")

        assert record.normalized_text == "permission granted"

    def test_multiline_html_comment_keeps_content(self, normalizer):
        """Test that only the delimiters of a multi-line HTML comment go."""
        record = normalizer.normalize("<!--\nMIT License\n-->")

        assert record.normalized_text == "mit license"

    def test_varietal_spellings(self, normalizer):
        """Test British spellings map to the canonical word."""
        record = normalizer.normalize("This Licence is licenced to the organisation")

        assert record.normalized_text == "this license is licensed to the organization"

    def test_sublicence(self, normalizer):
        """Test that sub-licence maps to sublicense, not sub-license."""
        record = normalizer.normalize("sub-licence")

        assert record.normalized_text == "sublicense"

    def test_split_words_reconnected(self, normalizer):
        """Test that words hyphenated across lines are joined."""
        record = normalizer.normalize("redis-\ntribution")

        assert record.normalized_text == "redistribution"

    def test_horizontal_rule_removed(self, normalizer):
        """Test that separator lines are dropped."""
        record = normalizer.normalize("MIT License\n=====\nPermission")

        assert record.normalized_text == "mit license permission"

    def test_html_tags_removed_links_kept(self, normalizer):
        """Test that tags are removed but <http...> links survive."""
        record = normalizer.normalize("<b>MIT</b> License <http://x.org>")

        assert record.normalized_text == "mit license <http://x.org>"

    def test_replacement_character_removed(self, normalizer):
        """Test that encoding artifacts become whitespace."""
        record = normalizer.normalize("MIT�License")

        assert record.normalized_text == "mit license"


class TestTemplateMarkup:
    """Tests for the template markup passes."""

    def test_note_removed(self, normalizer):
        """Test that note markup disappears."""
        record = normalizer.normalize("MIT <<note: see x>> License")

        assert record.normalized_text == "mit license"

    def test_wildcard_bounded(self, normalizer):
        """Test that <<match=.+>> is capped at 144 characters."""
        record = normalizer.normalize("<<match=.+>>")

        assert record.normalized_text == "<<.{1,144}>>"
        assert record.capture_groups == []

    def test_optional_wildcard_bounded(self, normalizer):
        """Test that <<match=.*>> is capped at 144 characters."""
        record = normalizer.normalize("<<match=.*>>")

        assert record.normalized_text == "<<.{0,144}>>"

    def test_variable_captured(self, normalizer):
        """Test that var markup becomes a capture group and a regex marker."""
        record = normalizer.normalize(
            'Copyright <<var;name="copyright";original="Copyright (c) <year>";match=".+">> Acme'
        )

        assert record.normalized_text == "copyright <<.+?>> acme"
        assert len(record.capture_groups) == 1

        group = record.capture_groups[0]
        assert group.group_number == 1
        assert group.name == '"copyright"'
        assert group.original == '"Copyright (c) <year>"'
        assert group.matches == ".+?"

    def test_long_form_variable_tightened(self, normalizer):
        """Test that .{0,5000} variables are limited to 1000 characters."""
        record = normalizer.normalize("<<var;name=x;original=y;match=.{0,5000}>>")

        assert record.normalized_text == "<<.{0,1000}?>>"
        assert record.capture_groups[0].matches == ".{0,1000}?"

    def test_capture_groups_numbered_in_order(self, normalizer):
        """Test that capture groups are numbered from 1."""
        record = normalizer.normalize(
            "<<var;name=a;original=x;match=\\d+>> and <<var;name=b;original=y;match=\\w+>>"
        )

        assert [g.group_number for g in record.capture_groups] == [1, 2]
        assert [g.name for g in record.capture_groups] == ["a", "b"]

    def test_optional_markup_standardized(self, normalizer):
        """Test that beginOptional/endOptional become omitable markers."""
        record = normalizer.normalize("<<beginOptional>>Copyright<<endOptional>> MIT")

        assert record.normalized_text == "<<omitable>> copyright<</omitable>> mit"

    def test_named_optional_markup(self, normalizer):
        """Test that a name on beginOptional is discarded."""
        record = normalizer.normalize("MIT <<beginOptional;name=x>>License<<endOptional>>")

        assert record.normalized_text == "mit <<omitable>>license<</omitable>>"


class TestAdjustVariableRegex:
    """Tests for adjust_variable_regex."""

    @pytest.mark.parametrize(
        "regex,expected",
        [
            ('".+"', ".+?"),
            ("\\d+", "\\d+?"),
            ("[a-z]*", "[a-z]*?"),
            (".{1,10}", ".{1,10}?"),
            ("abc", "abc"),
            ('"?quoted', '"?quoted'),
            (".{0,5000}", ".{0,1000}?"),
        ],
    )
    def test_adjustments(self, regex, expected):
        """Test quote stripping, laziness and long-form bound."""
        assert adjust_variable_regex(regex) == expected


class TestFindHtmlTags:
    """Tests for find_html_tags."""

    def test_tags_found(self):
        """Test plain tags are found."""
        assert find_html_tags("<b>bold</b>") == [(0, 3), (7, 11)]

    def test_links_and_markers_skipped(self):
        """Test <http...> links and <<...>> markers are not tags."""
        assert find_html_tags("<http://x.org> <<omitable>> <</omitable>>") == []

    def test_unterminated_tag(self):
        """Test an unclosed bracket is not a tag."""
        assert find_html_tags("a < b") == []


class TestIndexMap:
    """Tests for index map invariants."""

    @pytest.mark.parametrize(
        "text",
        [
            MIT_TEXT,
            "/*\n * Licensed under MIT\n */",
            "1. First item\n2. Second item",
            "Permission <!-- generated --> granted",
            "<b>MIT</b> License <http://x.org>",
            "Copyright © 2020 <<var;name=x;original=y;match=.+>>",
        ],
    )
    def test_map_aligned_and_in_range(self, normalizer, text):
        """Test map length equals text length and offsets are in range."""
        assert_index_map_valid(normalizer.normalize(text))

    def test_copy_through_characters_map_back(self, normalizer):
        """Test that unchanged characters map to their original position."""
        text = "Permission <!-- generated --> granted"
        record = normalizer.normalize(text)

        pos = record.normalized_text.index("granted")
        assert record.index_map[pos] == text.index("granted")
        assert record.original_offset(pos) == 30

    def test_removed_region_between_neighbours(self, normalizer):
        """Test that a removed comment lies between its neighbours' offsets."""
        text = "Permission <!-- generated --> granted"
        record = normalizer.normalize(text)

        before = record.index_map[len("permission") - 1]
        after = record.index_map[record.normalized_text.index("granted")]
        comment_start = text.index("<!--")
        comment_end = text.index("-->") + 3

        assert before + 1 <= comment_start
        assert comment_end <= after

    def test_original_offset_out_of_range(self, normalizer):
        """Test original_offset returns the sentinel outside the text."""
        record = normalizer.normalize("MIT")

        assert record.original_offset(10) == SENTINEL
        assert record.original_offset(-1) == SENTINEL


class TestDeterminism:
    """Tests for repeatable output."""

    def test_same_input_same_record(self, normalizer):
        """Test that two normalizations of one text are identical."""
        first = normalizer.normalize(MIT_TEXT)
        second = normalizer.normalize(MIT_TEXT)

        assert first.normalized_text == second.normalized_text
        assert first.index_map == second.index_map
        assert first.digest == second.digest

    def test_idempotent(self, normalizer):
        """Test that normalizing normalized text changes nothing."""
        once = normalizer.normalize(MIT_TEXT).normalized_text
        twice = normalizer.normalize(once).normalized_text

        assert once == twice

    def test_digest_populated(self, normalizer):
        """Test that digests are hex strings of the right length."""
        digest = normalizer.normalize(MIT_TEXT).digest

        assert len(digest.md5) == 32
        assert len(digest.sha256) == 64
        assert len(digest.sha512) == 128

    def test_equivalent_texts_share_digest(self, normalizer):
        """Test that texts differing only in case and spacing hash alike."""
        first = normalizer.normalize("MIT   License")
        second = normalizer.normalize("mit license\n")

        assert first.digest == second.digest


class TestNormalizerContext:
    """Tests for overriding the varietal table."""

    def test_custom_table(self):
        """Test that a custom table replaces the bundled one."""
        context = NormalizerContext.from_mapping({"color": r"\bcolour\b"})
        record = normalize_text("Colour and Licence", context=context)

        assert record.normalized_text == "color and licence"

    def test_empty_table(self):
        """Test that an empty table disables spelling replacement."""
        record = TextNormalizer(context=NormalizerContext()).normalize("Licence")

        assert record.normalized_text == "licence"
