"""Data models for the normalization layer.

A NormalizationRecord is created per input text (a candidate file or a
template source), rewritten in place by the pass pipeline, and treated as
immutable once its digest has been computed.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple, Union

import yaml

from license_scanner.utils.offsets import SENTINEL

VARIETAL_WORDS_FILE = Path(__file__).with_name("varietal_words.yaml")


@dataclass
class CaptureGroup:
    """A free-variable region extracted from template markup.

    Attributes:
        group_number: 1-based position among the record's capture groups
        name: Variable name from ``name=...`` (may be empty)
        original: Verbatim original text from ``original=...`` (may be empty)
        matches: Regex the region must match, after laziness/bound adjustments
    """

    group_number: int
    name: str
    original: str
    matches: str


@dataclass
class Digest:
    """Hex digests of the final normalized text."""

    md5: str = ""
    sha256: str = ""
    sha512: str = ""


@dataclass
class NormalizationRecord:
    """Input text, its canonical form, and the map between the two.

    Attributes:
        original_text: Source text, never modified
        normalized_text: Canonical text, rewritten by each pass
        index_map: ``index_map[i]`` is the offset in original_text that
            produced ``normalized_text[i]``, or SENTINEL (-1) for interior
            characters of a multi-character replacement
        capture_groups: Variable regions found by the capture pass, in order
        digest: Digests of the final normalized text
    """

    original_text: str
    normalized_text: str = ""
    index_map: List[int] = field(default_factory=list)
    capture_groups: List[CaptureGroup] = field(default_factory=list)
    digest: Digest = field(default_factory=Digest)
    _initialized: bool = field(default=False, init=False, repr=False, compare=False)

    def initialize(self) -> None:
        """Seed normalized_text and an identity index map on first use.

        Runs once per record; a pass that later empties the text does not
        cause the original text to be re-seeded.
        """
        if self._initialized:
            return
        if not self.normalized_text:
            self.normalized_text = self.original_text
        if not self.index_map:
            self.index_map = list(range(len(self.normalized_text)))
        self._initialized = True

    def original_offset(self, pos: int) -> int:
        """Original offset for a normalized position (SENTINEL if synthesized)."""
        if 0 <= pos < len(self.index_map):
            return self.index_map[pos]
        return SENTINEL


@dataclass(frozen=True)
class NormalizerContext:
    """Read-only state shared by every normalization.

    Holds the compiled varietal-spelling table. Built once and passed
    explicitly so that tests (and validators) can run with an overridden
    table without touching process-wide state.

    Attributes:
        varietal_words: Ordered (canonical word, compiled pattern) pairs
    """

    varietal_words: Tuple[Tuple[str, "re.Pattern[str]"], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "NormalizerContext":
        """Compile a canonical-word -> regex mapping into a context.

        Raises:
            ValueError: If a pattern does not compile
        """
        compiled = []
        for replacement, pattern in mapping.items():
            try:
                compiled.append((replacement, re.compile(pattern)))
            except re.error as e:
                raise ValueError(
                    f"Invalid varietal word pattern for '{replacement}': {e}"
                ) from e
        return cls(varietal_words=tuple(compiled))

    @classmethod
    def from_file(cls, path: Optional[Union[str, Path]] = None) -> "NormalizerContext":
        """Load the varietal-spelling table from a YAML file."""
        return cls.from_mapping(load_varietal_words(path))

    def varietal_mapping(self) -> Dict[str, str]:
        """Return the table as canonical word -> regex source."""
        return {word: pattern.pattern for word, pattern in self.varietal_words}


def load_varietal_words(path: Optional[Union[str, Path]] = None) -> Dict[str, str]:
    """Read a canonical-word -> regex mapping from YAML.

    Args:
        path: YAML file (defaults to the bundled varietal_words.yaml)

    Returns:
        Mapping of canonical word to regex source

    Raises:
        ValueError: If the file does not hold a string-to-string mapping
    """
    source = Path(path) if path else VARIETAL_WORDS_FILE
    with open(source, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Varietal word table {source} must be a mapping")

    words = {}
    for replacement, pattern in data.items():
        if not isinstance(replacement, str) or not isinstance(pattern, str):
            raise ValueError(
                f"Varietal word table {source} has a non-string entry: {replacement!r}"
            )
        words[replacement] = pattern
    return words
