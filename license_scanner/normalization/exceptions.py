"""Normalization layer exceptions."""


class NormalizationError(Exception):
    """Base exception for all normalization errors.

    Scoped to the single input that failed; callers processing a batch of
    files or templates should record it and continue with the rest.
    """

    pass


class InvalidInputError(NormalizationError):
    """Input text cannot be normalized.

    Raised for empty text and for text containing control characters
    (U+0000-U+0007, U+000E-U+001B) that indicate a binary file. Not retried.
    """

    def __init__(self, message: str, reason: str) -> None:
        """Initialize with a machine-readable reason.

        Args:
            message: Human-readable error message
            reason: "empty" or "control_characters"
        """
        super().__init__(message)
        self.reason = reason
