"""Utility functions for hashing, offset bookkeeping and text highlighting."""

from .hashing import compute_digests
from .highlighting import extract_snippet, highlight_spans, truncate_text
from .offsets import SENTINEL, apply_replacements, original_span, resolve_original_offset

__all__ = [
    # Hashing
    "compute_digests",
    # Offsets
    "SENTINEL",
    "apply_replacements",
    "original_span",
    "resolve_original_offset",
    # Highlighting
    "extract_snippet",
    "highlight_spans",
    "truncate_text",
]
