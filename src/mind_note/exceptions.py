"""Custom exceptions for mind-note."""


class MindNoteError(Exception):
    """Base exception for mind-note."""

    pass


class InvalidInputError(MindNoteError):
    """Raised when memo text is missing or blank."""

    pass


class AuthenticationError(MindNoteError):
    """Raised when API key is invalid or missing."""

    pass


class RateLimitError(MindNoteError):
    """Raised when API rate limit is exceeded."""

    pass


class ProviderError(MindNoteError):
    """Raised when the generation service call fails."""

    pass


class ResponseFormatError(MindNoteError):
    """Raised when model output is not a valid refinement object."""

    def __init__(self, message: str, *, kind: str = "parse_error"):
        super().__init__(message)
        self.kind = kind


class TaxonomyError(MindNoteError):
    """Raised when taxonomy data cannot be loaded or is inconsistent."""

    pass
