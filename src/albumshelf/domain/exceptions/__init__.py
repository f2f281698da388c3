"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so handlers can read it without
    # parsing str(exception). Don't raise this directly, always use a subclass.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ValidationException(DomainException):
    """Raised when input fails a domain rule (bad URL shape, empty title, ...)."""

    pass


class ExternalServiceError(DomainException):
    """External service (iTunes, Deezer) returned an error."""

    pass


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Example:
        raise ConfigurationError("No metadata fetcher registered for DEEZER")
    """

    pass


# =============================================================================
# Album import pipeline
# =============================================================================


UNSUPPORTED_URL_HINT = "Unsupported URL. Provide an Apple Music or Deezer album URL."
MISSING_URL_HINT = "Provide { url: string }"


class UnsupportedUrlError(ValidationException):
    """The pasted URL is neither an Apple Music/iTunes nor a Deezer album URL."""

    def __init__(self, message: str = UNSUPPORTED_URL_HINT) -> None:
        super().__init__(message)


class UpstreamFetchError(ExternalServiceError):
    """A provider answered with a non-success HTTP status (or not at all).

    status is None when the request never got a response (DNS, timeout, ...).
    """

    def __init__(self, provider: str, status: int | None, detail: str | None = None) -> None:
        if status is None:
            message = f"{provider} request failed: {detail or 'no response'}"
        else:
            message = f"{provider} lookup failed: {status}"
        super().__init__(message)
        self.provider = provider
        self.status = status


class AlbumNotFoundError(EntityNotFoundException):
    """The provider responded but the payload held no usable album."""

    def __init__(self, provider: str, album_id: str, reason: str | None = None) -> None:
        super().__init__(f"{provider} album", album_id)
        if reason:
            self.message = f"{provider} album {album_id} not found: {reason}"
            self.args = (self.message,)
        self.provider = provider


class ReconcileError(DomainException):
    """Storage failure while merging fetched metadata into albums/songs."""

    pass


class BadRequestError(DomainException):
    """The import request is missing its input."""

    def __init__(self, message: str = MISSING_URL_HINT) -> None:
        super().__init__(message)


class ImportFailedError(DomainException):
    """Any failure of the import pipeline, as reported to the caller."""

    pass


__all__ = [
    "DomainException",
    "EntityNotFoundException",
    "ValidationException",
    "ExternalServiceError",
    "ConfigurationError",
    "UNSUPPORTED_URL_HINT",
    "MISSING_URL_HINT",
    "UnsupportedUrlError",
    "UpstreamFetchError",
    "AlbumNotFoundError",
    "ReconcileError",
    "BadRequestError",
    "ImportFailedError",
]
