"""Template-to-pattern compiler.

A license template is normalized like any other text. The normalizer leaves
three kinds of markers in the canonical template:

- ``<<omitable>>`` / ``<</omitable>>`` around optional text
- ``<<REGEX>>`` for variable regions and bounded wildcards

The compiler splits the normalized text on those markers, escapes the
literal regions, turns each regex marker into a named group and each
optional pair into ``(?:...)?``. Literal regions double as static blocks
for the matcher's pre-check.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from license_scanner.logging import get_logger
from license_scanner.normalization import NormalizationRecord, NormalizerContext, TextNormalizer
from license_scanner.normalization import patterns as markers

from .exceptions import PatternCompileError, TemplateMalformedError
from .models import CompiledPattern, PatternCaptureGroup, PatternKind, StaticBlock

logger = get_logger(__name__, component="templates")

LITERAL = "literal"
BEGIN_OPTIONAL = "begin_optional"
END_OPTIONAL = "end_optional"
REGEX = "regex"

WILDCARD_BODIES = (
    markers.WILDCARD_MARKER[2:-2],
    markers.OPTIONAL_WILDCARD_MARKER[2:-2],
)

# Markup that should have been rewritten by the normalizer; seeing it in a
# marker means the template's markup could not be parsed.
UNPARSED_MARKUP_PREFIXES = ("var;", "match=", "beginoptional", "endoptional", "note:", "note=")

# Optional whitespace between two template tokens
GAP = " ?"


@dataclass
class Token:
    """A piece of a normalized template."""

    kind: str
    text: str = ""
    gap_before: bool = False


def tokenize(normalized_text: str, license_id: str = "") -> List[Token]:
    """Split normalized template text into literal and marker tokens.

    Literal tokens are stripped; ``gap_before`` records whether whitespace
    separated a token from the one before it.

    Raises:
        TemplateMalformedError: For unterminated, empty or unparsed markup
    """
    tokens: List[Token] = []
    gap = False

    for kind, text in _segments(normalized_text, license_id):
        if kind != LITERAL:
            tokens.append(Token(kind, text, gap))
            gap = False
            continue

        if text[:1].isspace():
            gap = True
        stripped = text.strip()
        if stripped:
            tokens.append(Token(LITERAL, stripped, gap))
            gap = text[-1:].isspace()

    return tokens


def _segments(text: str, license_id: str) -> Iterator[tuple]:
    pos = 0
    while pos < len(text):
        start = text.find(markers.MARKER_OPEN, pos)
        if start == -1:
            yield LITERAL, text[pos:]
            return

        if start > pos:
            yield LITERAL, text[pos:start]

        end = text.find(markers.MARKER_CLOSE, start + len(markers.MARKER_OPEN))
        if end == -1:
            raise TemplateMalformedError(
                f"unterminated markup at offset {start}: {text[start:start + 40]!r}",
                license_id,
            )

        marker = text[start:end + len(markers.MARKER_CLOSE)]
        body = text[start + len(markers.MARKER_OPEN):end]

        if marker == markers.OMITABLE:
            yield BEGIN_OPTIONAL, marker
        elif marker == markers.OMITABLE_END:
            yield END_OPTIONAL, marker
        elif not body.strip():
            raise TemplateMalformedError(f"empty markup at offset {start}", license_id)
        elif body.startswith(UNPARSED_MARKUP_PREFIXES):
            raise TemplateMalformedError(
                f"unparseable markup at offset {start}: {marker!r}", license_id
            )
        else:
            yield REGEX, body

        pos = end + len(markers.MARKER_CLOSE)


def get_static_blocks(record: NormalizationRecord, license_id: str = "") -> List[StaticBlock]:
    """Literal regions of a normalized template, in template order.

    Blocks inside an optional region are tagged ``optional=True``.

    Raises:
        TemplateMalformedError: For unbalanced optional markers or bad markup
    """
    blocks: List[StaticBlock] = []
    depth = 0
    for token in tokenize(record.normalized_text, license_id):
        if token.kind == BEGIN_OPTIONAL:
            depth += 1
        elif token.kind == END_OPTIONAL:
            depth -= 1
            if depth < 0:
                raise TemplateMalformedError("end of optional block without a beginning", license_id)
        elif token.kind == LITERAL:
            blocks.append(StaticBlock(text=token.text, optional=depth > 0))

    if depth != 0:
        raise TemplateMalformedError(f"{depth} optional block(s) never closed", license_id)
    return blocks


class TemplateCompiler:
    """Compiles license templates into CompiledPattern objects."""

    def __init__(
        self,
        context: Optional[NormalizerContext] = None,
        normalizer: Optional[TextNormalizer] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize TemplateCompiler.

        Args:
            context: Normalizer context (ignored when ``normalizer`` is given)
            normalizer: Normalizer to run templates through
            logger_instance: Logger instance (defaults to module logger)
        """
        self.normalizer = normalizer or TextNormalizer(context=context)
        self.logger = logger_instance or logger

    def compile(
        self,
        template_source: str,
        license_id: str = "",
        kind: PatternKind = PatternKind.TEMPLATE,
    ) -> CompiledPattern:
        """Compile a template into an executable pattern.

        Args:
            template_source: Raw template text with SPDX markup
            license_id: License identifier, used in errors and logs
            kind: Whether the text is an official template or plain source text

        Returns:
            CompiledPattern

        Raises:
            InvalidInputError: If the template text cannot be normalized
            TemplateMalformedError: For unbalanced optional markers, bad markup or
                a template with no literal text or variables
            PatternCompileError: If the assembled regex does not compile
        """
        record = self.normalizer.normalize(template_source)
        return self.compile_record(record, license_id, kind)

    def compile_record(
        self,
        record: NormalizationRecord,
        license_id: str = "",
        kind: PatternKind = PatternKind.TEMPLATE,
    ) -> CompiledPattern:
        """Compile an already normalized template record."""
        tokens = tokenize(record.normalized_text, license_id)

        parts: List[str] = []
        static_blocks: List[StaticBlock] = []
        capture_groups: List[PatternCaptureGroup] = []
        variables = iter(record.capture_groups)
        depth = 0

        for index, token in enumerate(tokens):
            if index > 0 and token.gap_before:
                parts.append(GAP)

            if token.kind == LITERAL:
                static_blocks.append(StaticBlock(text=token.text, optional=depth > 0))
                parts.append(re.escape(token.text))
            elif token.kind == BEGIN_OPTIONAL:
                depth += 1
                parts.append("(?:")
            elif token.kind == END_OPTIONAL:
                depth -= 1
                if depth < 0:
                    raise TemplateMalformedError(
                        "end of optional block without a beginning", license_id
                    )
                parts.append(")?")
            else:
                group = self._capture_group(len(capture_groups) + 1, token.text, variables)
                capture_groups.append(group)
                parts.append(f"(?P<{group.regex_group}>{token.text})")

        if depth != 0:
            raise TemplateMalformedError(f"{depth} optional block(s) never closed", license_id)
        # Markers and gaps alone would match at every position of any text
        if not static_blocks and not capture_groups:
            raise TemplateMalformedError("template has no content", license_id)

        source_regex = "".join(parts)
        try:
            regex = re.compile(source_regex)
        except re.error as e:
            self.logger.error(
                f"Pattern for {license_id or 'template'} failed to compile: {e}",
                extra={"event": "templates.pattern.failed", "license_id": license_id},
            )
            raise PatternCompileError(str(e), license_id, pattern=source_regex) from e

        self.logger.debug(
            f"Compiled pattern for {license_id or 'template'}",
            extra={
                "event": "templates.pattern.compiled",
                "license_id": license_id,
                "pattern_kind": kind.value,
                "static_blocks": len(static_blocks),
                "capture_groups": len(capture_groups),
            },
        )

        return CompiledPattern(
            license_id=license_id,
            kind=kind,
            source_regex=source_regex,
            static_blocks=tuple(static_blocks),
            capture_groups=tuple(capture_groups),
            normalized_text=record.normalized_text,
            digest=record.digest,
            regex=regex,
        )

    @staticmethod
    def _capture_group(number: int, body: str, variables: Iterator) -> PatternCaptureGroup:
        # Wildcards come from the normalizer's wildcard passes and carry no
        # variable data; every other marker consumes the next capture group.
        if body in WILDCARD_BODIES:
            return PatternCaptureGroup(group_number=number, matches=body)

        variable = next(variables, None)
        if variable is None:
            return PatternCaptureGroup(group_number=number, matches=body)
        return PatternCaptureGroup(
            group_number=number,
            name=variable.name,
            original=variable.original,
            matches=body,
        )


def compile_pattern(
    template_source: str,
    license_id: str = "",
    context: Optional[NormalizerContext] = None,
) -> CompiledPattern:
    """Compile ``template_source`` with a default TemplateCompiler."""
    return TemplateCompiler(context=context).compile(template_source, license_id)
