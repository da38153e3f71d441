"""Identification of licenses in candidate files.

This module provides:
- LicenseIdentifier: Runs a LicenseLibrary against texts and files
- IdentifierOptions / Enhancements: Options controlling optional extras
- IdentificationResult / TextBlock: Per-file results
"""

from .enhancements import (
    LICENSE_KEYWORDS,
    build_text_blocks,
    find_acceptable,
    find_copyright_lines,
    find_keywords,
)
from .models import Enhancements, IdentificationResult, IdentifierOptions, TextBlock
from .service import LicenseIdentifier

__all__ = [
    "LicenseIdentifier",
    "Enhancements",
    "IdentifierOptions",
    "IdentificationResult",
    "TextBlock",
    "LICENSE_KEYWORDS",
    "build_text_blocks",
    "find_acceptable",
    "find_copyright_lines",
    "find_keywords",
]
