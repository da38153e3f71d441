"""Unit tests for highlighting utilities."""

from license_scanner.utils.highlighting import extract_snippet, highlight_spans, truncate_text


class TestExtractSnippet:
    """Tests for extract_snippet function."""

    def test_snippet_with_context(self):
        """Test that context is kept on both sides with ellipses."""
        text = "Copyright (c) 2020 Jane Doe. All rights reserved."
        assert extract_snippet(text, 14, 27, 5) == "... (c) 2020 Jane Doe. All..."

    def test_snippet_at_text_start(self):
        """Test that no leading ellipsis is added at the start of the text."""
        text = "MIT License, see below for details"
        snippet = extract_snippet(text, 0, 3, 5)

        assert snippet == "MIT Lice..."

    def test_snippet_whole_text(self):
        """Test that a short text is returned unchanged."""
        assert extract_snippet("MIT", 0, 3) == "MIT"

    def test_snippet_clamps_offsets(self):
        """Test that out-of-range offsets are clamped."""
        assert extract_snippet("abc", -5, 50) == "abc"

    def test_snippet_empty_text(self):
        """Test with empty text."""
        assert extract_snippet("", 0, 0) == ""


class TestHighlightSpans:
    """Tests for highlight_spans function."""

    def test_single_span(self):
        """Test highlighting one span."""
        assert highlight_spans("the mit license", [(4, 7)]) == "the **mit** license"

    def test_overlapping_spans_merged(self):
        """Test that overlapping spans produce a single highlighted region."""
        result = highlight_spans("abcdefgh", [(1, 4), (3, 6)])

        assert result == "a**bcdef**gh"

    def test_custom_markers(self):
        """Test custom start and end markers."""
        assert highlight_spans("2020 jane doe", [(5, 9)], "[", "]") == "2020 [jane] doe"

    def test_multiple_spans_in_order(self):
        """Test spans given out of order are applied in text order."""
        assert highlight_spans("a b c", [(4, 5), (0, 1)]) == "**a** b **c**"

    def test_no_spans(self):
        """Test that text without spans is unchanged."""
        assert highlight_spans("text", []) == "text"


class TestTruncateText:
    """Tests for truncate_text function."""

    def test_truncate_text_short_text(self):
        """Test that short text is not truncated."""
        assert truncate_text("Short text", max_length=100) == "Short text"

    def test_truncate_text_long_text(self):
        """Test that long text is truncated."""
        text = "This is a very long text that needs to be truncated because it exceeds the maximum length"
        result = truncate_text(text, max_length=30)

        assert len(result) <= 30
        assert result.endswith("...")

    def test_truncate_text_word_boundary(self):
        """Test that truncation breaks at a word boundary when possible."""
        result = truncate_text("This is a very long text that needs truncating", max_length=30)

        assert result == "This is a very long text..."

    def test_truncate_text_custom_suffix(self):
        """Test truncation with custom suffix."""
        result = truncate_text("This is a long text", max_length=15, suffix=" [...]")

        assert result.endswith(" [...]")
        assert len(result) <= 15

    def test_truncate_text_empty(self):
        """Test with empty text."""
        assert truncate_text("", max_length=10) == ""
