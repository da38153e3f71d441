"""Custom exceptions for template compilation."""

from typing import Optional


class CompileError(Exception):
    """Base exception for template compilation errors.

    Fatal for the license definition that produced it; a library loading many
    templates records the error against the license id and carries on.
    """

    def __init__(self, message: str, license_id: Optional[str] = None) -> None:
        """Initialize with the offending template's license id.

        Args:
            message: Human-readable error message
            license_id: Identifier of the template being compiled, if known
        """
        self.license_id = license_id or ""
        prefix = f"{self.license_id}: " if self.license_id else ""
        super().__init__(f"{prefix}{message}")


class TemplateMalformedError(CompileError):
    """Template markup cannot be interpreted.

    Examples:
    - An ``<<endOptional>>`` with no open optional block
    - An optional block that is never closed
    - Unterminated or empty ``<<...>>`` markup, or variable markup without
      a ``match=`` regex
    """

    pass


class PatternCompileError(CompileError):
    """The assembled regex was rejected by the regex engine."""

    def __init__(self, message: str, license_id: Optional[str] = None, pattern: str = "") -> None:
        super().__init__(message, license_id)
        self.pattern = pattern
