"""Optional extras reported next to license matches.

Each helper works on a single candidate and is independent of the others,
so the identifier only runs the ones the options ask for.
"""

import re
from typing import Iterable, List, Sequence, Tuple

from license_scanner.matching import MatchResult

from .models import TextBlock

# Statement lines: optional comment leaders, then the copyright word or symbol
COPYRIGHT_LINE_RE = re.compile(
    r"^[ \t#*/;!%-]*(?:copyright\b|\(c\)|\u00a9)[^\n]*$",
    re.IGNORECASE | re.MULTILINE,
)

# Checked against normalized text, so spellings are already canonical
LICENSE_KEYWORDS = (
    "all rights reserved",
    "apache",
    "bsd",
    "copyleft",
    "copyright",
    "creative commons",
    "free software",
    "gnu",
    "gpl",
    "license",
    "licensed",
    "licensor",
    "mit",
    "mozilla",
    "open source",
    "patent",
    "permission is hereby granted",
    "public domain",
    "redistribution",
    "spdx-license-identifier",
    "sublicense",
    "warranty",
)

_KEYWORD_RES = tuple(
    (keyword, re.compile(rf"(?<![\w-]){re.escape(keyword)}(?![\w-])")) for keyword in LICENSE_KEYWORDS
)


def find_copyright_lines(original_text: str) -> List[str]:
    """Return copyright statement lines of the original text, stripped.

    >>> find_copyright_lines("# Copyright 2021 ACME\\nThe above copyright notice")
    ['# Copyright 2021 ACME']
    """
    lines = []
    for match in COPYRIGHT_LINE_RE.finditer(original_text):
        line = match.group(0).strip()
        if line and line not in lines:
            lines.append(line)
    return lines


def find_keywords(normalized_text: str) -> List[str]:
    """Return the license keywords present in normalized text, sorted."""
    return [keyword for keyword, pattern in _KEYWORD_RES if pattern.search(normalized_text)]


def has_license_keywords(normalized_text: str) -> bool:
    return any(pattern.search(normalized_text) for _, pattern in _KEYWORD_RES)


def find_acceptable(matched_ids: Iterable[str], acceptable_licenses: Iterable[str]) -> List[str]:
    """Matched license ids that appear on the acceptable list."""
    return sorted(set(matched_ids) & set(acceptable_licenses))


def build_text_blocks(
    original_text: str, matches: Sequence[MatchResult]
) -> List[TextBlock]:
    """Split the original text into matched and unmatched blocks.

    Overlapping matches are merged into one block listing every license id
    that covers it. Whitespace-only gaps between matches are dropped.

    Args:
        original_text: Candidate's original text
        matches: Matches from every license

    Returns:
        Blocks in text order
    """
    spans: List[Tuple[int, int, List[str]]] = []
    for match in sorted(matches, key=lambda m: (m.original_start, m.original_end)):
        start, end = match.original_start, match.original_end
        if start < 0 or end <= start:
            continue
        if spans and start < spans[-1][1]:
            prev_start, prev_end, ids = spans[-1]
            if match.license_id not in ids:
                ids.append(match.license_id)
            spans[-1] = (prev_start, max(prev_end, end), ids)
        else:
            spans.append((start, end, [match.license_id]))

    blocks: List[TextBlock] = []
    pos = 0
    for start, end, ids in spans:
        if start > pos:
            _append_unmatched(blocks, original_text, pos, start)
        blocks.append(TextBlock(original_text[start:end], start, end, sorted(ids)))
        pos = end
    if pos < len(original_text):
        _append_unmatched(blocks, original_text, pos, len(original_text))
    return blocks


def _append_unmatched(blocks: List[TextBlock], text: str, start: int, end: int) -> None:
    chunk = text[start:end]
    if chunk.strip():
        blocks.append(TextBlock(chunk, start, end))
