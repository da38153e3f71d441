"""Validation of license templates against example texts.

This module provides:
- TemplateValidator: Accepts, fails or skips template/example pairs
- ValidationOutcome / ValidationStatus: Per-license result
- write_precheck_file / read_precheck_file: Static-block artifact files
"""

from .artifacts import copy_artifact, read_precheck_file, write_precheck_file
from .exceptions import ArtifactWriteError, ValidationMismatchError
from .models import ArtifactDirs, ValidationOutcome, ValidationStatus
from .validator import DEFAULT_KNOWN_ISSUE_IDS, DEFAULT_SKIP_IDS, TemplateValidator

__all__ = [
    "TemplateValidator",
    "ArtifactDirs",
    "ValidationOutcome",
    "ValidationStatus",
    "ValidationMismatchError",
    "ArtifactWriteError",
    "DEFAULT_KNOWN_ISSUE_IDS",
    "DEFAULT_SKIP_IDS",
    "copy_artifact",
    "read_precheck_file",
    "write_precheck_file",
]
