"""Domain-specific exceptions for the debate dashboard service.

Services raise these instead of ``HTTPException`` so they stay usable
outside a request.  ``main.py`` registers a single handler that turns any
:class:`DashboardError` into a ``{"detail": ...}`` JSON response carrying
the exception's ``status_code``.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for dashboard failures surfaced to API clients."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DashboardError):
    """A referenced entity (class, reflection, backup job, setting...) does not exist."""

    status_code = 404

    def __init__(self, entity_type: str, entity_id: str) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} '{entity_id}' not found")


class PermissionDeniedError(DashboardError):
    """The current user lacks the capability an operation requires."""

    status_code = 403

    def __init__(self, permission: str, message: str = "") -> None:
        self.permission = permission
        super().__init__(message or f"Missing permission: {permission}")


class ValidationFailedError(DashboardError):
    """Input rejected by a dashboard rule (blank note, bad setting value...)."""

    status_code = 422

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message)


class ConflictError(DashboardError):
    """Operation clashes with current state, e.g. a backup that is already running."""

    status_code = 409


class LockedError(DashboardError):
    """Write attempted on a locked session log."""

    status_code = 423

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session log '{session_id}' is locked")


class UpstreamError(DashboardError):
    """The platform backend failed and no fallback applies."""

    status_code = 502
