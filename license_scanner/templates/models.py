"""Data models for compiled license patterns."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from license_scanner.normalization.models import Digest


class PatternKind(str, Enum):
    """Where a pattern's text came from."""

    TEMPLATE = "template"
    SOURCE = "source"


@dataclass(frozen=True)
class StaticBlock:
    """A literal region of a normalized template.

    Attributes:
        text: Literal normalized text (no markers, no surrounding spaces)
        optional: True when the block sits inside an optional region
    """

    text: str
    optional: bool = False

    def to_dict(self) -> dict:
        return {"text": self.text, "optional": self.optional}


@dataclass(frozen=True)
class PatternCaptureGroup:
    """A regex group of a compiled pattern.

    Every ``<<...>>`` regex marker becomes one group, named ``g<number>`` in
    the compiled regex. Wildcards have no name and no original text.
    """

    group_number: int
    name: str = ""
    original: str = ""
    matches: str = ""

    @property
    def regex_group(self) -> str:
        """Name of the group in the compiled regex."""
        return f"g{self.group_number}"

    @property
    def label(self) -> str:
        """Variable name when present, otherwise the group number."""
        return self.name or str(self.group_number)


@dataclass(frozen=True)
class CompiledPattern:
    """Executable pattern for one license text variant.

    Built once when a license is loaded and never mutated afterwards, so a
    single instance can be matched from any number of threads.

    Attributes:
        license_id: License the pattern belongs to
        kind: Template-derived or source-text-derived
        source_regex: Regex source assembled from the normalized template
        static_blocks: Literal regions used for the fast pre-check
        capture_groups: One entry per regex group, in order
        normalized_text: The normalized template text the regex came from
        digest: Digests of normalized_text
        regex: Compiled form of source_regex
    """

    license_id: str
    kind: PatternKind
    source_regex: str
    static_blocks: Tuple[StaticBlock, ...]
    capture_groups: Tuple[PatternCaptureGroup, ...]
    normalized_text: str
    digest: Digest
    regex: "re.Pattern[str]" = field(repr=False, compare=False)

    @property
    def mandatory_blocks(self) -> Tuple[StaticBlock, ...]:
        return tuple(block for block in self.static_blocks if not block.optional)

    def group(self, number: int) -> Optional[PatternCaptureGroup]:
        """Return the capture group with the given number, if any."""
        for group in self.capture_groups:
            if group.group_number == number:
                return group
        return None
