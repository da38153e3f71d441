"""Data models for the license library."""

from dataclasses import dataclass, field
from typing import List

from license_scanner.templates import CompiledPattern, PatternKind


@dataclass
class License:
    """A license and every compiled pattern that identifies it.

    Attributes:
        license_id: License identifier, e.g. ``MIT``
        patterns: Compiled template and source-text patterns
        deprecated: True for ids loaded from ``deprecated_`` files
    """

    license_id: str
    patterns: List[CompiledPattern] = field(default_factory=list)
    deprecated: bool = False

    @property
    def template_patterns(self) -> List[CompiledPattern]:
        return [p for p in self.patterns if p.kind == PatternKind.TEMPLATE]

    @property
    def source_patterns(self) -> List[CompiledPattern]:
        return [p for p in self.patterns if p.kind == PatternKind.SOURCE]
