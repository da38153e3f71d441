"""Helpers for presenting matched regions of original text.

Used by the CLI report to show where in a file a license (or one of its
variables) was found.
"""

from typing import List, Sequence, Tuple


def extract_snippet(text: str, start: int, end: int, context_chars: int = 40) -> str:
    """Extract ``text[start:end]`` with surrounding context.

    Args:
        text: Original text
        start: Start offset of the region of interest
        end: End offset (exclusive)
        context_chars: Characters of context to keep on each side

    Returns:
        Snippet with "..." markers where it was truncated

    Example:
        >>> extract_snippet("Copyright (c) 2020 Jane Doe. All rights reserved.", 14, 27, 5)
        '... (c) 2020 Jane Doe. All...'
    """
    if not text:
        return ""

    start = max(0, min(start, len(text)))
    end = max(start, min(end, len(text)))
    snippet_start = max(0, start - context_chars)
    snippet_end = min(len(text), end + context_chars)

    snippet = text[snippet_start:snippet_end]
    if snippet_start > 0:
        snippet = "..." + snippet
    if snippet_end < len(text):
        snippet = snippet + "..."
    return snippet


def highlight_spans(
    text: str,
    spans: Sequence[Tuple[int, int]],
    marker_start: str = "**",
    marker_end: str = "**",
) -> str:
    """Wrap each (start, end) span of ``text`` in markers.

    Overlapping spans are merged first so markers never nest.

    Example:
        >>> highlight_spans("the mit license", [(4, 7)])
        'the **mit** license'
    """
    if not text or not spans:
        return text

    merged: List[List[int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])

    parts = []
    prev = 0
    for start, end in merged:
        parts.append(text[prev:start])
        parts.append(f"{marker_start}{text[start:end]}{marker_end}")
        prev = end
    parts.append(text[prev:])
    return "".join(parts)


def truncate_text(text: str, max_length: int = 500, suffix: str = "...") -> str:
    """Truncate text to maximum length, adding suffix if truncated.

    Tries to break at word boundaries for cleaner truncation.

    Example:
        >>> truncate_text("This is a very long text that needs truncating", max_length=30)
        'This is a very long text...'
    """
    if not text or len(text) <= max_length:
        return text

    truncate_at = max_length - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_length]

    truncated = text[:truncate_at]

    last_space = truncated.rfind(" ")
    if last_space > truncate_at * 0.8:
        truncated = truncated[:last_space]

    return truncated.rstrip() + suffix
