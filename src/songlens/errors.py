"""Custom exceptions for songlens.

Every error carries a ``kind`` tag so the API layer can map it to a response
without inspecting library-specific exception types.
"""

from typing import Optional


class SongLensError(Exception):
    """Base exception for songlens."""

    kind = "error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInputError(SongLensError):
    """Missing or oversized lyrics."""

    kind = "invalid-input"


class ModelResponseMalformedError(SongLensError):
    """Chat model reply could not be parsed, even after repair."""

    kind = "model-response-malformed"

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        raw_response: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.raw_response = raw_response


class TranslationCallFailedError(SongLensError):
    """Network or model error while translating a section."""

    kind = "translation-call-failed"


class NotFoundError(SongLensError):
    """Saved translation does not exist."""

    kind = "not-found"


class UnauthorizedError(SongLensError):
    """Acting user does not own the record."""

    kind = "unauthorized"


class PersistenceValidationError(SongLensError):
    """Record failed field validation before any write."""

    kind = "persistence-validation-failed"

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


class PersistenceError(SongLensError):
    """Storage backend failure."""

    kind = "persistence-failed"
