"""Custom exceptions for pattern matching."""

from typing import Optional


class MatchError(Exception):
    """The regex engine failed while running a pattern against a candidate.

    Scoped to a single (candidate, pattern) pair: callers record it and move
    on to the remaining patterns.
    """

    def __init__(self, message: str, license_id: Optional[str] = None) -> None:
        """Initialize with the license whose pattern failed.

        Args:
            message: Human-readable error message
            license_id: Identifier of the pattern's license, if known
        """
        self.license_id = license_id or ""
        prefix = f"{self.license_id}: " if self.license_id else ""
        super().__init__(f"{prefix}{message}")
