"""Matching of compiled license patterns against normalized text.

This module provides:
- PatternMatcher: Pre-check, full regex match and offset mapping
- MatchResult / MatchSpan: Matches located in normalized and original text
- check_static_blocks: Ordered static-block pre-check, usable standalone
"""

from .engine import PatternMatcher, check_static_blocks, find_matches, passed_static_blocks_checks
from .exceptions import MatchError
from .models import MatchResult, MatchSpan, StaticBlocksCheck

__all__ = [
    "PatternMatcher",
    "check_static_blocks",
    "find_matches",
    "passed_static_blocks_checks",
    "MatchResult",
    "MatchSpan",
    "StaticBlocksCheck",
    "MatchError",
]
