"""
Domain errors raised by the breakdown services.

Services raise these and nothing HTTP-specific; the API layer maps each
class to a status code (see scenebook.main).
"""


class ScenebookError(Exception):
    """Base class for every error the breakdown core raises."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(ScenebookError):
    """A field is missing, malformed or outside its domain."""


class OutOfRangeError(ValidationError):
    """A requested position would leave a gap in a dense ordering."""

    def __init__(self, requested: int, limit: int, message: str):
        self.requested = requested
        self.limit = limit
        super().__init__(message)


class InvalidMappingError(ValidationError):
    """The scene/character payload cannot be reconciled."""


class NotFoundError(ScenebookError):
    """The entity does not exist or is outside the acting user's movie."""


class NoDefaultMovieError(NotFoundError):
    """The user owns no default movie."""


class TransactionFailure(ScenebookError):
    """A statement failed mid-transaction; everything was rolled back."""
