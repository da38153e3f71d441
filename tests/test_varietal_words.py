"""Tests for the varietal word spelling table."""

import random

import pytest

from license_scanner.normalization import NormalizerContext, TextNormalizer, load_varietal_words

SAMPLE_TEXT = (
    "The licensee may sub-licence the programme, whilst the organisation "
    "shall not be authorised to analyse any non-commercial artefact. "
    "This Licence is licenced per cent of the catalogue centre."
)


@pytest.fixture
def varietal_words():
    """Load the bundled varietal word table."""
    return load_varietal_words()


def normalize_with(mapping, text=SAMPLE_TEXT):
    return TextNormalizer(context=NormalizerContext.from_mapping(mapping)).normalize(text)


class TestLoadVarietalWords:
    """Tests for load_varietal_words."""

    def test_bundled_table(self, varietal_words):
        """Test the bundled table loads as a string mapping."""
        assert varietal_words["license"]
        assert varietal_words["sublicense"]
        assert all(isinstance(v, str) for v in varietal_words.values())

    def test_custom_file(self, tmp_path):
        """Test loading a table from a custom YAML file."""
        path = tmp_path / "words.yaml"
        path.write_text("color: '\\bcolour\\b'\n", encoding="utf-8")

        assert load_varietal_words(path) == {"color": "\\bcolour\\b"}

    def test_empty_file(self, tmp_path):
        """Test that an empty file yields an empty table."""
        path = tmp_path / "words.yaml"
        path.write_text("", encoding="utf-8")

        assert load_varietal_words(path) == {}

    def test_non_mapping_rejected(self, tmp_path):
        """Test that a YAML list is rejected."""
        path = tmp_path / "words.yaml"
        path.write_text("- colour\n- color\n", encoding="utf-8")

        with pytest.raises(ValueError, match="must be a mapping"):
            load_varietal_words(path)

    def test_non_string_entry_rejected(self, tmp_path):
        """Test that non-string patterns are rejected."""
        path = tmp_path / "words.yaml"
        path.write_text("color: 42\n", encoding="utf-8")

        with pytest.raises(ValueError, match="non-string entry"):
            load_varietal_words(path)


class TestNormalizerContext:
    """Tests for building contexts from a table."""

    def test_from_mapping_invalid_regex(self):
        """Test that a bad pattern raises ValueError naming the word."""
        with pytest.raises(ValueError, match="color"):
            NormalizerContext.from_mapping({"color": "(colour"})

    def test_varietal_mapping_round_trip(self, varietal_words):
        """Test that a context exposes the table it was built from."""
        context = NormalizerContext.from_mapping(varietal_words)

        assert context.varietal_mapping() == varietal_words

    def test_from_file(self, tmp_path):
        """Test building a context straight from a file."""
        path = tmp_path / "words.yaml"
        path.write_text("color: '\\bcolour\\b'\n", encoding="utf-8")

        context = NormalizerContext.from_file(path)

        assert [word for word, _ in context.varietal_words] == ["color"]


class TestTableOrderIndependence:
    """Entries must not interfere with each other."""

    def test_sample_normalization(self, varietal_words):
        """Test the canonical forms produced for the sample text."""
        text = normalize_with(varietal_words).normalized_text

        assert "may sublicense the program, while the organization" in text
        assert "authorized to analyze any noncommercial artifact" in text
        assert "this license is licensed percent of the catalog center" in text

    def test_reversed_order(self, varietal_words):
        """Test that applying the table backwards gives the same text."""
        forward = normalize_with(varietal_words).normalized_text
        backward = normalize_with(dict(reversed(list(varietal_words.items())))).normalized_text

        assert forward == backward

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_shuffled_order(self, varietal_words, seed):
        """Test that any order of the table gives the same text."""
        items = list(varietal_words.items())
        random.Random(seed).shuffle(items)

        assert (
            normalize_with(dict(items)).normalized_text
            == normalize_with(varietal_words).normalized_text
        )
