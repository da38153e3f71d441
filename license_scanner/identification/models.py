"""Options and result models for license identification."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from license_scanner.matching import MatchResult, StaticBlocksCheck
from license_scanner.normalization import NormalizationRecord


class Enhancements(BaseModel):
    """Optional extras computed alongside the license matches."""

    add_notes: str = Field("", description="Free text copied into every result")
    add_text_blocks: bool = Field(
        False, description="Split the original text into matched and unmatched blocks"
    )
    flag_acceptable: bool = Field(
        False, description="Report matched licenses that are on the acceptable list"
    )
    flag_copyrights: bool = Field(False, description="Report copyright statement lines")
    flag_keywords: bool = Field(False, description="Report license keywords found in the text")
    static_blocks_only: bool = Field(
        False,
        description=(
            "Only run the static-block pre-check and report its outcome per license "
            "instead of full matches"
        ),
    )


class IdentifierOptions(BaseModel):
    """Options for a LicenseIdentifier run."""

    force_result: bool = Field(
        False,
        description=(
            "Run every pattern even when the text has no license keywords; "
            "by default such text is reported with a note and no matches"
        ),
    )
    enhancements: Enhancements = Field(default_factory=Enhancements)


@dataclass
class TextBlock:
    """A region of the original text.

    Attributes:
        text: Original text of the region
        start: Start offset in the original text
        end: End offset (exclusive) in the original text
        matches: License ids matched over this region (empty if unmatched)
    """

    text: str
    start: int
    end: int
    matches: List[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.matches)


@dataclass
class IdentificationResult:
    """Licenses found in one candidate text.

    Attributes:
        file: File name or label of the candidate
        normalized: Normalization record of the candidate (None if it failed)
        matches: License id to its matches; ids without matches are absent
        blocks: Original-text blocks (only with ``add_text_blocks``)
        copyrights: Copyright lines (only with ``flag_copyrights``)
        keywords: License keywords (only with ``flag_keywords``)
        acceptable: Matched ids on the acceptable list (only with ``flag_acceptable``)
        static_checks: License id to its pre-check outcome (only with
            ``static_blocks_only``, which leaves ``matches`` empty)
        notes: Notes from the options plus notes added while identifying
        errors: License id to error message for patterns that failed to run
        error: File-level failure (unreadable or invalid input)
    """

    file: str = ""
    normalized: Optional[NormalizationRecord] = None
    matches: Dict[str, List[MatchResult]] = field(default_factory=dict)
    blocks: List[TextBlock] = field(default_factory=list)
    copyrights: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    acceptable: List[str] = field(default_factory=list)
    static_checks: Dict[str, StaticBlocksCheck] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def license_ids(self) -> List[str]:
        return sorted(self.matches)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Serialize for JSON output."""
        digest = None
        if self.normalized is not None:
            digest = {
                "md5": self.normalized.digest.md5,
                "sha256": self.normalized.digest.sha256,
                "sha512": self.normalized.digest.sha512,
            }
        return {
            "file": self.file,
            "digest": digest,
            "matches": {
                license_id: [m.to_dict() for m in results]
                for license_id, results in sorted(self.matches.items())
            },
            "blocks": [
                {"start": b.start, "end": b.end, "matches": b.matches, "text": b.text}
                for b in self.blocks
            ],
            "copyrights": self.copyrights,
            "keywords": self.keywords,
            "acceptable": self.acceptable,
            "static_checks": {
                license_id: {"passed": check.passed, "missing": check.missing}
                for license_id, check in sorted(self.static_checks.items())
            },
            "notes": self.notes,
            "errors": self.errors,
            "error": self.error,
        }
