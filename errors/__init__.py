"""Custom exception hierarchy for the debate dashboard service."""

from errors.exceptions import (
    ConflictError,
    DashboardError,
    LockedError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamError,
    ValidationFailedError,
)

__all__ = [
    "ConflictError",
    "DashboardError",
    "LockedError",
    "NotFoundError",
    "PermissionDeniedError",
    "UpstreamError",
    "ValidationFailedError",
]
