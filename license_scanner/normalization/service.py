"""Offset-preserving text normalization.

The normalizer applies a fixed, ordered sequence of passes that implement the
SPDX License List Matching Guidelines. Each pass finds spans in the current
normalized text, picks a replacement per span, and rewrites the text and its
index map together via apply_replacements(). Later passes rely on the
canonical forms produced by earlier ones, so the order is significant.
"""

import logging
import re
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from license_scanner.logging import get_logger
from license_scanner.utils.hashing import compute_digests
from license_scanner.utils.offsets import apply_replacements

from . import patterns
from .exceptions import InvalidInputError
from .models import CaptureGroup, Digest, NormalizationRecord, NormalizerContext

logger = get_logger(__name__, component="normalization")

Span = Tuple[int, int]


@lru_cache(maxsize=1)
def default_context() -> NormalizerContext:
    """Context built from the bundled varietal-spelling table (loaded once)."""
    return NormalizerContext.from_file()


class TextNormalizer:
    """Turns raw license or candidate text into its canonical form.

    The normalizer itself is stateless apart from its read-only context, so
    one instance can be shared across threads.
    """

    def __init__(
        self,
        context: Optional[NormalizerContext] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize TextNormalizer.

        Args:
            context: Varietal-spelling table (defaults to the bundled table)
            logger_instance: Logger instance (defaults to module logger)
        """
        self.context = context or default_context()
        self.logger = logger_instance or logger

    def normalize(self, original_text: str) -> NormalizationRecord:
        """Normalize a text.

        Args:
            original_text: Raw text of a template or candidate document

        Returns:
            NormalizationRecord with canonical text, index map, capture
            groups and digests

        Raises:
            InvalidInputError: If the text is empty or contains control
                characters
        """
        if not original_text:
            self.logger.error(
                "Invalid text: empty input",
                extra={"event": "normalization.text.invalid", "reason": "empty"},
            )
            raise InvalidInputError(
                "failed to normalize data: invalid input text with length 0",
                reason="empty",
            )

        if patterns.CONTROL_CHARACTERS_RE.search(original_text):
            self.logger.error(
                "Invalid text: control characters found",
                extra={"event": "normalization.text.invalid", "reason": "control_characters"},
            )
            raise InvalidInputError(
                "failed to normalize data: invalid input text with control characters",
                reason="control_characters",
            )

        record = NormalizationRecord(original_text=original_text)

        # Template markup
        self.remove_note_tags(record)
        self.limit_wildcard_matching(record)
        self.limit_optional_wildcard_matching(record)
        self.capture_replaceable_text_sections(record)
        self.standardize_omitable_tags(record)

        # Canonical text
        self.lowercase(record)
        self.remove_odd_characters(record)
        self.remove_code_comment_indicators(record)
        self.replace_dash_like_characters(record)
        self.replace_quote_like_characters(record)
        self.standardize_to_http(record)
        self.remove_bullets_and_numbering(record)
        self.reconnect_split_words(record)
        self.remove_horizontal_rules(record)
        self.replace_varietal_word_spellings(record)
        self.replace_copyright_symbols(record)
        self.remove_html_tags(record)
        self.replace_whitespace(record)

        self.compute_digest(record)

        self.logger.debug(
            "Normalized text",
            extra={
                "event": "normalization.text.normalized",
                "original_length": len(record.original_text),
                "normalized_length": len(record.normalized_text),
                "capture_groups": len(record.capture_groups),
            },
        )
        return record

    # -- Template markup passes ---------------------------------------------

    def remove_note_tags(self, record: NormalizationRecord) -> None:
        """Replace ``<<note:...>>`` markup with a space."""
        self._replace_pattern(record, patterns.NOTE_TAG_RE, " ")

    def limit_wildcard_matching(self, record: NormalizationRecord) -> None:
        """Bound ``<<match=.+>>`` to 1-144 characters."""
        self._replace_pattern(record, patterns.WILDCARD_RE, patterns.WILDCARD_MARKER)

    def limit_optional_wildcard_matching(self, record: NormalizationRecord) -> None:
        """Bound ``<<match=.*>>`` to 0-144 characters."""
        self._replace_pattern(
            record, patterns.OPTIONAL_WILDCARD_RE, patterns.OPTIONAL_WILDCARD_MARKER
        )

    def capture_replaceable_text_sections(self, record: NormalizationRecord) -> None:
        """Extract ``<<var;name=..;original=..;match=..>>`` regions (guideline 2.1.3).

        Each region is recorded as a CaptureGroup and replaced in the text by
        a ``<<REGEX>>`` marker holding its adjusted regex.
        """
        record.initialize()
        spans: List[Span] = []
        replacements: List[str] = []

        for match in patterns.REPLACEABLE_TEXT_RE.finditer(record.normalized_text):
            name = match.group(1) or ""
            original = match.group(2) or ""
            regex = adjust_variable_regex(match.group(3))

            spans.append(match.span())
            replacements.append(patterns.MARKER_OPEN + regex + patterns.MARKER_CLOSE)
            record.capture_groups.append(
                CaptureGroup(
                    group_number=len(record.capture_groups) + 1,
                    name=name,
                    original=original,
                    matches=regex,
                )
            )

        self._rewrite(record, spans, replacements)

    def standardize_omitable_tags(self, record: NormalizationRecord) -> None:
        """Rewrite optional-block markup to ``<<omitable>>``/``<</omitable>>`` (guideline 2.1.4).

        A line-leading begin marker is followed by a newline so that
        line-anchored passes still see the start of the optional text.
        """
        self._replace_pattern(record, patterns.BEGIN_OPTIONAL_LINE_RE, patterns.OMITABLE_LINE)
        self._replace_pattern(record, patterns.BEGIN_OPTIONAL_RE, patterns.OMITABLE)
        self._replace_pattern(record, patterns.END_OPTIONAL_RE, patterns.OMITABLE_END)

    # -- Canonical text passes ----------------------------------------------

    def lowercase(self, record: NormalizationRecord) -> None:
        """Lowercase the whole text (guideline 4.1.1).

        Characters whose lowercase form is longer than one character are
        rewritten through the index map first, so the map stays aligned.
        """
        record.initialize()
        text = record.normalized_text
        spans = [(i, i + 1) for i, char in enumerate(text) if len(char.lower()) != 1]
        if spans:
            self._rewrite(record, spans, [text[start].lower() for start, _ in spans])
        record.normalized_text = record.normalized_text.lower()

    def remove_odd_characters(self, record: NormalizationRecord) -> None:
        """Replace encoding artifacts and control pictures with a space."""
        self._replace_pattern(record, patterns.ODD_CHARACTERS_RE, " ")

    def remove_code_comment_indicators(self, record: NormalizationRecord) -> None:
        """Strip comment markers (guideline 6.1.1).

        HTML comments go before line comments, otherwise ``--`` and ``>``
        leaders would eat parts of ``<!--`` and ``-->``.
        """
        self._replace_pattern(record, patterns.COMMENT_BLOCK_OUTSIDE_RE, " ")
        self._replace_pattern(record, patterns.COMMENT_BLOCK_INSIDE_RE, " ")
        self._replace_pattern(record, patterns.HTML_INLINE_COMMENT_RE, " ")
        self._replace_pattern(record, patterns.HTML_STYLE_COMMENT_RE, " ")
        self._replace_pattern(record, patterns.COMMENT_LINE_RE, " ")

    def replace_dash_like_characters(self, record: NormalizationRecord) -> None:
        """Hyphens, dashes and minus signs are equivalent (guideline 5.1.2)."""
        self._replace_pattern(record, patterns.DASH_LIKE_RE, "-")

    def replace_quote_like_characters(self, record: NormalizationRecord) -> None:
        """All quote styles are equivalent (guideline 5.1.3)."""
        self._replace_pattern(record, patterns.QUOTE_LIKE_RE, "'")

    def standardize_to_http(self, record: NormalizationRecord) -> None:
        """http and https are equivalent (guideline 13.1.1)."""
        self._replace_pattern(record, patterns.HTTP_RE, "http")

    def remove_bullets_and_numbering(self, record: NormalizationRecord) -> None:
        """Drop list markers at line starts, keeping the first word character (guideline 7.1.1)."""
        record.initialize()
        spans: List[Span] = []
        replacements: List[str] = []
        for match in patterns.BULLETS_AND_NUMBERING_RE.finditer(record.normalized_text):
            spans.append(match.span())
            replacements.append(match.group(1) or "")
        self._rewrite(record, spans, replacements)

    def reconnect_split_words(self, record: NormalizationRecord) -> None:
        """Join words hyphenated across a line break."""
        self._replace_pattern(record, patterns.SPLIT_WORDS_RE, "")

    def remove_horizontal_rules(self, record: NormalizationRecord) -> None:
        """Replace runs of ``*``, ``=`` or ``-`` at a line start with a space."""
        self._replace_pattern(record, patterns.HORIZONTAL_RULE_RE, " ")

    def replace_varietal_word_spellings(self, record: NormalizationRecord) -> None:
        """Map alternate spellings to a canonical word (guideline 8.1.1)."""
        for replacement, pattern in self.context.varietal_words:
            self._replace_pattern(record, pattern, replacement)

    def replace_copyright_symbols(self, record: NormalizationRecord) -> None:
        """``©`` and ``(c)`` become ``copyright`` (guideline 9.1.1)."""
        self._replace_pattern(record, patterns.COPYRIGHT_RE, "copyright")

    def remove_html_tags(self, record: NormalizationRecord) -> None:
        """Remove ``<...>`` tags, keeping ``<http...>`` links and ``<<...>>`` markers."""
        record.initialize()
        spans = find_html_tags(record.normalized_text)
        self._rewrite(record, spans, [""] * len(spans))

    def replace_whitespace(self, record: NormalizationRecord) -> None:
        """Collapse whitespace runs to one space and trim the ends (guideline 3.1.1)."""
        self._replace_pattern(record, patterns.MIDDLE_WHITESPACE_RE, " ")
        self._replace_pattern(record, patterns.LEADING_WHITESPACE_RE, "")
        self._replace_pattern(record, patterns.TRAILING_WHITESPACE_RE, "")

    def compute_digest(self, record: NormalizationRecord) -> None:
        """Populate MD5/SHA-256/SHA-512 digests of the normalized text."""
        record.initialize()
        record.digest = Digest(**compute_digests(record.normalized_text))

    # -- Helpers -------------------------------------------------------------

    def _replace_pattern(
        self, record: NormalizationRecord, pattern: "re.Pattern[str]", replacement: str
    ) -> None:
        record.initialize()
        spans = [match.span() for match in pattern.finditer(record.normalized_text)]
        self._rewrite(record, spans, [replacement] * len(spans))

    @staticmethod
    def _rewrite(
        record: NormalizationRecord, spans: Sequence[Span], replacements: Sequence[str]
    ) -> None:
        if not spans:
            return
        record.normalized_text, record.index_map = apply_replacements(
            record.normalized_text, record.index_map, spans, replacements
        )


def adjust_variable_regex(regex: str) -> str:
    """Prepare a template variable's regex for matching.

    - Surrounding double quotes are stripped only when both are present;
      legacy templates sometimes start with an optional quote (``"?...``).
    - A trailing greedy quantifier (``+``, ``*`` or ``{m,n}``) is made lazy.
    - A trailing ``{0,5000}`` bound is tightened to ``{0,1000}`` to limit
      backtracking on long candidate texts.

    Example:
        >>> adjust_variable_regex('".{0,5000}"')
        '.{0,1000}?'
    """
    if len(regex) >= 2 and regex.startswith('"') and regex.endswith('"'):
        regex = regex[1:-1]

    if regex.endswith(("+", "*", "}")):
        regex += "?"

    if regex.endswith(patterns.LONG_FORM_SUFFIX):
        regex = regex[: -len(patterns.LONG_FORM_SUFFIX)] + patterns.LONG_FORM_REPLACEMENT

    return regex


def find_html_tags(text: str) -> List[Span]:
    """Find HTML tag spans without a lookahead regex.

    Equivalent to ``<(?!http)[^<>]+>(?!>)``: a tag may not start with
    ``http`` (so ``<http://...>`` links survive) and may not end with ``>>``
    (so ``<<...>>`` markers survive).

    Example:
        >>> find_html_tags("<b>bold</b> <http://x.org> <<omitable>>")
        [(0, 3), (7, 11)]
    """
    spans: List[Span] = []
    text_len = len(text)
    i = text.find("<")

    while i > -1:
        next_pos = i + 1

        if text_len > next_pos + 4 and text[next_pos:next_pos + 4] == "http":
            i = text.find("<", next_pos)
            continue

        j = i
        if text_len > j + 1:
            j += 1
            while j < text_len and text[j] != "<" and text[j] != ">":
                j += 1

        if j < text_len and text[j] == ">" and (j + 1 >= text_len or text[j + 1] != ">"):
            next_pos = j + 1
            spans.append((i, next_pos))

        i = text.find("<", next_pos)

    return spans


def normalize_text(text: str, context: Optional[NormalizerContext] = None) -> NormalizationRecord:
    """Normalize ``text`` with a default TextNormalizer."""
    return TextNormalizer(context=context).normalize(text)
