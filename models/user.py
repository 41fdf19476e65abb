"""Current-user identity and role-derived permissions."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from models.base import CamelModel


class Permission(str, Enum):
    VIEW_AUDIT_LOGS = "view_audit_logs"
    EXPORT_LOGS = "export_logs"
    MANAGE_BACKUPS = "manage_backups"
    RUN_INTEGRITY_CHECKS = "run_integrity_checks"
    SCHEDULE_MAINTENANCE = "schedule_maintenance"
    VIEW_SYSTEM_HEALTH = "view_system_health"
    MODIFY_SYSTEM_SETTINGS = "modify_system_settings"
    MANAGE_FEATURE_FLAGS = "manage_feature_flags"
    VIEW_SENSITIVE_SETTINGS = "view_sensitive_settings"


ROLE_PERMISSIONS: dict[str, frozenset[Permission]] = {
    "teacher": frozenset({
        Permission.VIEW_AUDIT_LOGS,
        Permission.EXPORT_LOGS,
        Permission.RUN_INTEGRITY_CHECKS,
        Permission.VIEW_SYSTEM_HEALTH,
    }),
    "admin": frozenset(Permission),
}


class CurrentUser(CamelModel):
    """The authenticated dashboard user for one request."""

    user_id: str
    role: str = "teacher"
    name: str = ""
    email: str = ""
    token: str = Field(default="", exclude=True)

    @property
    def permissions(self) -> frozenset[Permission]:
        return ROLE_PERMISSIONS.get(self.role, frozenset())

    def has(self, permission: Permission) -> bool:
        return permission in self.permissions
