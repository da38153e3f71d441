"""Matching engine for running compiled license patterns.

This module implements the matching logic that:
1. Rejects a candidate cheaply when a mandatory static block is missing
2. Runs the full pattern regex over the normalized candidate
3. Maps every match and capture span back to original-text offsets
"""

import logging
import re
from typing import Iterable, List, Optional

from license_scanner.logging import get_logger
from license_scanner.normalization import NormalizationRecord
from license_scanner.templates import CompiledPattern, StaticBlock
from license_scanner.utils.offsets import original_span

from .exceptions import MatchError
from .models import MatchResult, MatchSpan, StaticBlocksCheck

logger = get_logger(__name__, component="matching")


def check_static_blocks(
    blocks: Iterable[StaticBlock],
    normalized_text: str,
    include_optional: bool = False,
) -> StaticBlocksCheck:
    """Check that static blocks occur in ``normalized_text`` in template order.

    Each block is searched for after the end of the previous block's first
    in-order occurrence. Optional blocks are skipped unless
    ``include_optional`` is set. A full pattern match always passes this
    check because the pattern contains every mandatory block verbatim, in
    order and without overlap.

    Args:
        blocks: Static blocks in template order
        normalized_text: Normalized candidate text
        include_optional: Also require blocks inside optional regions

    Returns:
        StaticBlocksCheck naming the first missing block on failure
    """
    pos = 0
    for block in blocks:
        if block.optional and not include_optional:
            continue
        index = normalized_text.find(block.text, pos)
        if index == -1:
            return StaticBlocksCheck(passed=False, missing=block.text)
        pos = index + len(block.text)
    return StaticBlocksCheck(passed=True)


def passed_static_blocks_checks(
    blocks: Iterable[StaticBlock],
    normalized_text: str,
    include_optional: bool = False,
) -> bool:
    """Boolean form of :func:`check_static_blocks`."""
    return check_static_blocks(blocks, normalized_text, include_optional).passed


class PatternMatcher:
    """Runs compiled patterns against normalized candidate texts.

    Holds no per-call state, so one instance can serve many threads.
    """

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        """Initialize PatternMatcher.

        Args:
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.logger = logger_instance or logger

    def find_matches(
        self, pattern: CompiledPattern, record: NormalizationRecord
    ) -> List[MatchResult]:
        """Find every match of ``pattern`` in a normalized candidate.

        Algorithm:
        1. Run the static-block pre-check over the mandatory blocks
        2. Run the full regex over the normalized text
        3. Translate match and capture offsets to the original text

        Args:
            pattern: Compiled license pattern
            record: Normalized candidate

        Returns:
            List of MatchResult, empty when the pre-check rejects the
            candidate or the pattern does not match

        Raises:
            MatchError: If the regex engine fails while matching
        """
        text = record.normalized_text

        check = check_static_blocks(pattern.static_blocks, text)
        if not check.passed:
            self.logger.debug(
                f"Pre-check rejected {pattern.license_id}",
                extra={
                    "event": "matching.precheck.rejected",
                    "license_id": pattern.license_id,
                    "missing_block": check.missing,
                },
            )
            return []

        try:
            raw_matches = list(pattern.regex.finditer(text))
        except (re.error, RecursionError, MemoryError) as e:
            self.logger.error(
                f"Matching {pattern.license_id} failed: {e}",
                extra={"event": "matching.pattern.failed", "license_id": pattern.license_id},
            )
            raise MatchError(f"regex execution failed: {e}", pattern.license_id) from e

        results = [self._to_result(pattern, record, match) for match in raw_matches]

        if results:
            self.logger.debug(
                f"Pattern {pattern.license_id} matched {len(results)} time(s)",
                extra={
                    "event": "matching.pattern.matched",
                    "license_id": pattern.license_id,
                    "matches": len(results),
                },
            )
        return results

    @staticmethod
    def _to_result(
        pattern: CompiledPattern, record: NormalizationRecord, match: "re.Match[str]"
    ) -> MatchResult:
        original_start, original_end = original_span(
            record.index_map, match.start(), match.end()
        )

        spans: List[MatchSpan] = []
        for group in pattern.capture_groups:
            start, end = match.span(group.regex_group)
            if start == -1:
                # Group sits in an optional region that did not match
                continue
            span_start, span_end = original_span(record.index_map, start, end)
            spans.append(
                MatchSpan(
                    group_name=group.label,
                    normalized_start=start,
                    normalized_end=end,
                    original_start=span_start,
                    original_end=span_end,
                    text=match.group(group.regex_group),
                )
            )

        return MatchResult(
            license_id=pattern.license_id,
            start=match.start(),
            end=match.end(),
            original_start=original_start,
            original_end=original_end,
            spans=spans,
        )


def find_matches(pattern: CompiledPattern, record: NormalizationRecord) -> List[MatchResult]:
    """Run ``pattern`` against ``record`` with a default PatternMatcher."""
    return PatternMatcher().find_matches(pattern, record)
