"""Library of compiled license patterns.

This module provides:
- License: A license id and its compiled patterns
- LicenseLibrary: Loads templates, records per-license failures
"""

from .loader import LicenseLibrary, split_license_filename
from .models import License

__all__ = ["License", "LicenseLibrary", "split_license_filename"]
