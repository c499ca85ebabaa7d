"""Core request-handling primitives: errors, cache validators, negotiation."""

from .errors import (
    ConflictError,
    ErrorCategory,
    FeedConflictError,
    FeedNotFoundError,
    InvalidFeedError,
    MethodNotSupportedError,
    MissingURLError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ValidationError,
)

__all__ = [
    "ConflictError",
    "ErrorCategory",
    "FeedConflictError",
    "FeedNotFoundError",
    "InvalidFeedError",
    "MethodNotSupportedError",
    "MissingURLError",
    "NotFoundError",
    "PersistenceError",
    "ServiceError",
    "ValidationError",
]
