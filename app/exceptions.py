from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for errors raised by the service layer.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Service error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(ServiceError):
    """Raised when a referenced dish, ingredient, category or bookmark does not exist."""

    http_status = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    """Raised when a write collides with existing state.

    Slug collisions on create, duplicate bookmarks and deleting an ingredient
    that dishes still reference all end up here.
    """

    http_status = 409
    default_message = "Conflict"


class DependencyUnavailableError(ServiceError):
    """Raised by a cache backend that cannot be reached.

    Services never see this directly: SafeCache logs it and falls through
    to the catalog store.
    """

    http_status = 503
    default_message = "Dependency unavailable"
