"""Data models for the matching engine.

This module defines the results produced when a compiled pattern is run
against a normalized candidate text.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class MatchSpan:
    """A capture group of a match, located in both texts.

    Attributes:
        group_name: Variable name, or the group number for unnamed groups
        normalized_start: Start offset in the normalized text
        normalized_end: End offset (exclusive) in the normalized text
        original_start: Start offset in the original text (approximate when
            the normalized boundary was a synthesized character)
        original_end: End offset (exclusive) in the original text
        text: Captured normalized text
    """

    group_name: str
    normalized_start: int
    normalized_end: int
    original_start: int
    original_end: int
    text: str


@dataclass
class MatchResult:
    """One match of a license pattern in a candidate text.

    Attributes:
        license_id: License whose pattern matched
        start: Match start in the normalized text
        end: Match end (exclusive) in the normalized text
        original_start: Match start in the original text
        original_end: Match end (exclusive) in the original text
        spans: Capture spans of the groups that took part in the match
    """

    license_id: str
    start: int
    end: int
    original_start: int
    original_end: int
    spans: List[MatchSpan] = field(default_factory=list)

    def span(self, group_name: str) -> Optional[MatchSpan]:
        """Return the capture span for ``group_name``, if it participated."""
        for span in self.spans:
            if span.group_name == group_name:
                return span
        return None

    def original_text(self, original: str) -> str:
        """Slice the matched region out of the candidate's original text."""
        return original[self.original_start:self.original_end]

    def to_dict(self) -> dict:
        return {
            "license_id": self.license_id,
            "start": self.start,
            "end": self.end,
            "original_start": self.original_start,
            "original_end": self.original_end,
            "spans": [
                {
                    "group": span.group_name,
                    "start": span.normalized_start,
                    "end": span.normalized_end,
                    "original_start": span.original_start,
                    "original_end": span.original_end,
                    "text": span.text,
                }
                for span in self.spans
            ],
        }


@dataclass
class StaticBlocksCheck:
    """Outcome of the static-block pre-check.

    Attributes:
        passed: True when every checked block was found in order
        missing: Text of the first block that could not be found, if any
    """

    passed: bool
    missing: Optional[str] = None

    def __bool__(self) -> bool:
        return self.passed
