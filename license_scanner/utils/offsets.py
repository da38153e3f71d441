"""Coordinated rewrites of text and its index map.

Every normalization pass funnels through :func:`apply_replacements`, which
rewrites the text and the parallel index map in one left-to-right sweep so
the two can never drift apart.
"""

from typing import List, Sequence, Tuple

SENTINEL = -1

Span = Tuple[int, int]


def apply_replacements(
    text: str,
    index_map: Sequence[int],
    spans: Sequence[Span],
    replacements: Sequence[str],
) -> Tuple[str, List[int]]:
    """Replace non-overlapping spans of ``text`` and rebuild its index map.

    Copy-through segments keep their exact slice of the index map. For a
    non-empty replacement, its first character takes the map value of the
    span's first position, its last character the value of the span's last
    position, and interior characters get SENTINEL. An empty replacement
    emits no index entries.

    Args:
        text: Current normalized text
        index_map: Map from positions in ``text`` to original offsets
        spans: Sorted, non-overlapping (start, end) spans in ``text``
        replacements: Replacement string per span

    Returns:
        Tuple of (new_text, new_index_map)

    Raises:
        ValueError: If spans and replacements differ in length
    """
    if len(spans) != len(replacements):
        raise ValueError(
            f"Got {len(spans)} spans but {len(replacements)} replacements"
        )
    if not spans:
        return text, list(index_map)

    parts: List[str] = []
    new_index: List[int] = []
    prev = 0

    for (start, end), replacement in zip(spans, replacements):
        if start > prev:
            parts.append(text[prev:start])
            new_index.extend(index_map[prev:start])

        if replacement:
            # A zero-width match has no positions of its own; borrow the
            # nearest one so the map stays within bounds.
            if start < len(index_map):
                first = index_map[start]
            else:
                first = index_map[-1] if index_map else SENTINEL
            last = index_map[end - 1] if end > start else first
            size = len(replacement)
            for i in range(size):
                if i == 0:
                    new_index.append(first)
                elif i == size - 1:
                    new_index.append(last)
                else:
                    new_index.append(SENTINEL)
            parts.append(replacement)

        prev = end

    if prev < len(text):
        parts.append(text[prev:])
        new_index.extend(index_map[prev:])

    return "".join(parts), new_index


def resolve_original_offset(index_map: Sequence[int], pos: int, direction: int = 1) -> int:
    """Map a normalized position to an original offset.

    Sentinel positions are resolved by searching outward for the nearest
    non-sentinel neighbour, preferring ``direction`` (+1 forward, -1
    backward) at equal distance. This is an approximation: the original
    offset of a character synthesized by a multi-character replacement is
    not known exactly.

    Args:
        index_map: Normalized-to-original index map
        pos: Position in the normalized text (clamped into range)
        direction: Preferred search direction on ties

    Returns:
        Original offset, or SENTINEL when the map holds no offsets at all
    """
    if not index_map:
        return SENTINEL

    pos = min(max(pos, 0), len(index_map) - 1)
    if index_map[pos] != SENTINEL:
        return index_map[pos]

    step = 1 if direction >= 0 else -1
    for distance in range(1, len(index_map)):
        for candidate in (pos + step * distance, pos - step * distance):
            if 0 <= candidate < len(index_map) and index_map[candidate] != SENTINEL:
                return index_map[candidate]

    return SENTINEL


def original_span(index_map: Sequence[int], start: int, end: int) -> Span:
    """Translate a half-open normalized span into a half-open original span.

    The start resolves forward and the inclusive end position resolves
    backward, so the result stays inside the matched region whenever the
    map allows it.
    """
    if end <= start:
        offset = resolve_original_offset(index_map, start, 1)
        return offset, offset

    original_start = resolve_original_offset(index_map, start, 1)
    original_last = resolve_original_offset(index_map, end - 1, -1)
    if original_last < original_start:
        original_last = original_start
    return original_start, original_last + 1
