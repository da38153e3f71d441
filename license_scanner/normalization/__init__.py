"""Offset-preserving normalization of license and candidate text.

This module provides:
- NormalizationRecord: Original text, canonical text, index map and digests
- CaptureGroup: A template variable region extracted during normalization
- NormalizerContext: Immutable varietal-spelling table shared by normalizations
- TextNormalizer: Service running the ordered normalization passes
"""

from .exceptions import InvalidInputError, NormalizationError
from .models import (
    CaptureGroup,
    Digest,
    NormalizationRecord,
    NormalizerContext,
    load_varietal_words,
)
from .service import TextNormalizer, default_context, find_html_tags, normalize_text

__all__ = [
    "CaptureGroup",
    "Digest",
    "NormalizationRecord",
    "NormalizerContext",
    "TextNormalizer",
    "default_context",
    "find_html_tags",
    "load_varietal_words",
    "normalize_text",
    "NormalizationError",
    "InvalidInputError",
]
