"""Configuration schema models using Pydantic."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from license_scanner.identification.models import Enhancements, IdentifierOptions
from license_scanner.validation.models import ArtifactDirs
from license_scanner.validation.validator import DEFAULT_KNOWN_ISSUE_IDS, DEFAULT_SKIP_IDS


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _clean_ids(values: List[str]) -> List[str]:
    """Strip license ids, drop empty ones and duplicates, keep order."""
    cleaned: List[str] = []
    for value in values:
        stripped = value.strip()
        if stripped and stripped not in cleaned:
            cleaned.append(stripped)
    return cleaned


class ResourcesConfig(BaseModel):
    """Locations of license resources."""

    templates_dir: Optional[Path] = Field(
        None, description="Directory of <id>.template.txt and <id>.txt license files"
    )
    varietal_words_file: Optional[Path] = Field(
        None, description="YAML table of varietal spellings (defaults to the bundled table)"
    )


class MatchingConfig(BaseModel):
    """Identification options and worker settings."""

    max_workers: int = Field(4, ge=1, le=64, description="Worker threads for multi-file scans")
    force_result: bool = Field(
        False,
        description=(
            "Run every pattern even when a file has no license keywords; "
            "by default such files are reported with a note and no matches"
        ),
    )
    add_notes: str = Field("", description="Free text added to every result")
    add_text_blocks: bool = Field(False, description="Report matched/unmatched text blocks")
    flag_acceptable: bool = Field(False, description="Report matches on the acceptable list")
    flag_copyrights: bool = Field(False, description="Report copyright statement lines")
    flag_keywords: bool = Field(False, description="Report license keywords found")
    static_blocks_only: bool = Field(
        False, description="Report only the static-block pre-check outcome per license"
    )
    acceptable_licenses: List[str] = Field(
        default_factory=list, description="License ids considered acceptable"
    )

    @field_validator("acceptable_licenses")
    @classmethod
    def normalize_acceptable(cls, v: List[str]) -> List[str]:
        return _clean_ids(v)

    def to_options(self) -> IdentifierOptions:
        """Build the identifier options described by this section."""
        return IdentifierOptions(
            force_result=self.force_result,
            enhancements=Enhancements(
                add_notes=self.add_notes,
                add_text_blocks=self.add_text_blocks,
                flag_acceptable=self.flag_acceptable,
                flag_copyrights=self.flag_copyrights,
                flag_keywords=self.flag_keywords,
                static_blocks_only=self.static_blocks_only,
            ),
        )


class ValidationConfig(BaseModel):
    """Template validation settings."""

    template_dest_dir: Path = Field(
        Path("resources/templates"), description="Where accepted templates are copied"
    )
    precheck_dest_dir: Path = Field(
        Path("resources/prechecks"), description="Where static-block pre-check files are written"
    )
    text_dest_dir: Path = Field(
        Path("resources/testdata"), description="Where accepted example texts are copied"
    )
    skip_ids: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_SKIP_IDS),
        description="License ids that are never validated",
    )
    known_issue_ids: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_KNOWN_ISSUE_IDS),
        description="License ids whose template/example mismatch is a known issue",
    )
    require_optional_blocks: bool = Field(
        True, description="Require static blocks inside optional regions as well"
    )

    @field_validator("skip_ids", "known_issue_ids")
    @classmethod
    def normalize_ids(cls, v: List[str]) -> List[str]:
        return _clean_ids(v)

    def artifact_dirs(self) -> ArtifactDirs:
        return ArtifactDirs(
            template_dest_dir=self.template_dest_dir,
            precheck_dest_dir=self.precheck_dest_dir,
            text_dest_dir=self.text_dest_dir,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the license scanner."""

    resources: ResourcesConfig = Field(
        default_factory=ResourcesConfig, description="License resource locations"
    )
    matching: MatchingConfig = Field(
        default_factory=MatchingConfig, description="Identification settings"
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig, description="Template validation settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_id_lists(self):
        """Reject ids that are both skipped and listed as known issues."""
        overlap = set(self.validation.skip_ids) & set(self.validation.known_issue_ids)
        if overlap:
            raise ValueError(
                f"License ids cannot be both skipped and known issues: {', '.join(sorted(overlap))}"
            )
        return self
