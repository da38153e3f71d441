"""Data models for template validation."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from license_scanner.templates import StaticBlock


class ValidationStatus(str, Enum):
    """Outcome of validating one template."""

    ACCEPTED = "accepted"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class ArtifactDirs:
    """Destinations for accepted templates, pre-check files and example texts."""

    template_dest_dir: Path
    precheck_dest_dir: Path
    text_dest_dir: Path


@dataclass
class ValidationOutcome:
    """Result of validating a template against its example text.

    Attributes:
        license_id: License being validated
        status: accepted, failed or skipped
        error: Failure message; also set for known issues reported as skipped
        match_count: Matches of the template in its example (None if not run)
        static_blocks: Static blocks of the compiled template
    """

    license_id: str
    status: ValidationStatus
    error: Optional[str] = None
    match_count: Optional[int] = None
    static_blocks: List[StaticBlock] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status == ValidationStatus.ACCEPTED
