"""Error classification for request handling.

ErrorCategory determines the HTTP status a failure is converted to:
- NOT_FOUND: missing artifact or unregistered feed name
- VALIDATION: bad request input (empty/unfetchable URL, unsafe name)
- CONFLICT: duplicate registration
- IO: read or persistence failure, answered with a generic message
- METHOD_NOT_ALLOWED: unsupported HTTP method
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """Classification of service errors for status code mapping."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    IO = "io"
    METHOD_NOT_ALLOWED = "method_not_allowed"


STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.CONFLICT: 409,
    ErrorCategory.IO: 500,
    ErrorCategory.METHOD_NOT_ALLOWED: 405,
}

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class ServiceError(Exception):
    """Base class for all errors converted to an HTTP status at the boundary."""

    category: ErrorCategory = ErrorCategory.IO

    def __init__(self, message: str, category: ErrorCategory | None = None):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category

    @property
    def status_code(self) -> int:
        return STATUS_BY_CATEGORY[self.category]

    @property
    def public_message(self) -> str:
        """Message safe to send to the client.

        I/O failures never leak their detail.
        """
        if self.category == ErrorCategory.IO:
            return INTERNAL_ERROR_MESSAGE
        return self.message

    def __repr__(self) -> str:
        cls_name = self.__class__.__name__
        return f"<{cls_name}(cat={self.category.value}, msg={self.message})>"


class NotFoundError(ServiceError):
    """Requested resource does not exist."""

    category = ErrorCategory.NOT_FOUND


class ValidationError(ServiceError):
    """Request input was rejected."""

    category = ErrorCategory.VALIDATION


class ConflictError(ServiceError):
    """Resource already exists."""

    category = ErrorCategory.CONFLICT


class PersistenceError(ServiceError):
    """Durable state could not be read or written."""

    category = ErrorCategory.IO


class MethodNotSupportedError(ServiceError):
    """HTTP method is not supported by the resource."""

    category = ErrorCategory.METHOD_NOT_ALLOWED

    def __init__(self, method: str):
        super().__init__(f"Method {method} not allowed")
        self.method = method

    @property
    def public_message(self) -> str:
        return "Method Not Allowed"


class FeedNotFoundError(NotFoundError):
    """Feed name is not registered."""

    def __init__(self, name: str):
        super().__init__("Feed not found")
        self.name = name


class FeedConflictError(ConflictError):
    """Feed name is already registered."""

    def __init__(self, name: str):
        super().__init__("Feed already exists")
        self.name = name


class MissingURLError(ValidationError):
    """Registration request carried no URL."""

    def __init__(self) -> None:
        super().__init__("No url supplied")


class InvalidFeedError(ValidationError):
    """URL did not yield a valid RSS/Atom feed."""

    def __init__(self, url: str, reason: str = ""):
        super().__init__(f"Unable to find a valid RSS/Atom feed for: {url}")
        self.url = url
        self.reason = reason
