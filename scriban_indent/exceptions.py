"""Package-specific exception types."""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for formatting-related errors.

    Raised inside the pipeline and recovered before reaching the caller.
    """


class ReformatterError(FormatError):
    """Raised when the external markup reformatter cannot be trusted with a document."""


class PlaceholderMismatchError(FormatError):
    """Raised when a placeholder token did not survive the reformatter exactly once.

    Args:
        token: The placeholder token.
        count: Number of occurrences found after reformatting.
    """

    def __init__(self, token: str, count: int):
        self.token = token
        self.count = count
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Placeholder {self.token} found {self.count} times after reformatting (expected 1)"
