"""Custom exceptions for template validation."""

from typing import Optional


class ValidationMismatchError(Exception):
    """A template does not agree with its example license text.

    Examples:
    - The compiled template matches its example zero or several times
    - A static block of the template is missing from the example
    """

    def __init__(self, message: str, license_id: Optional[str] = None) -> None:
        self.license_id = license_id or ""
        super().__init__(message)


class ArtifactWriteError(Exception):
    """Accepted artifacts could not be written to their destination."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)
