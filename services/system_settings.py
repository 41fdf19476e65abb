"""System settings panel — staged edits, validation, save/discard/reset, feature flags."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

from errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from models.system_settings import (
    FeatureFlag,
    PlatformHealth,
    SaveSettingsResult,
    SettingChange,
    SettingValidation,
    SystemSetting,
)
from models.user import CurrentUser, Permission
from services import mock_data
from services.audit_log import AuditLogService, get_audit_log_service
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

HEALTH_LABELS = {
    "healthy": "Healthy",
    "warning": "Warning",
    "error": "Error",
    "maintenance": "Maintenance",
}

CHANGE_REASON = "Updated via settings panel"


def health_label(status: str) -> str:
    return HEALTH_LABELS.get(status, "Unknown")


def validate_value(value: Any, rules: SettingValidation, setting_type: str = "string") -> str | None:
    """Return an error message for *value*, or None when it passes every rule."""
    if value is None or value == "":
        return (rules.error_message or "This field is required") if rules.required else None

    if setting_type == "number" or rules.min_value is not None or rules.max_value is not None:
        if isinstance(value, bool):
            return rules.error_message or "Value must be a number"
        try:
            number = float(value)
        except (TypeError, ValueError):
            return rules.error_message or "Value must be a number"
        if rules.min_value is not None and number < rules.min_value:
            return rules.error_message or f"Value must be at least {rules.min_value:g}"
        if rules.max_value is not None and number > rules.max_value:
            return rules.error_message or f"Value must be at most {rules.max_value:g}"

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            return rules.error_message or f"Must be at least {rules.min_length} characters"
        if rules.max_length is not None and len(value) > rules.max_length:
            return rules.error_message or f"Must be at most {rules.max_length} characters"
        if rules.pattern and not re.search(rules.pattern, value):
            return rules.error_message or "Invalid format"

    if rules.allowed_values is not None and value not in rules.allowed_values:
        allowed = ", ".join(str(v) for v in rules.allowed_values)
        return rules.error_message or f"Value must be one of: {allowed}"
    return None


def filter_settings(
    settings: list[SystemSetting], category: str = "all", search: str = ""
) -> list[SystemSetting]:
    needle = search.lower()
    return [
        s for s in settings
        if (category == "all" or s.category == category)
        and (
            not needle
            or needle in s.name.lower()
            or needle in s.description.lower()
            or needle in s.key.lower()
        )
    ]


class SystemSettingsService:
    """Settings catalog plus the set of staged (unsaved) edits.

    ``stage_change`` writes the new value straight into the catalog so the
    panel previews it; ``_original`` remembers what to restore on discard.
    """

    def __init__(
        self,
        notifications: NotificationStore | None = None,
        audit: AuditLogService | None = None,
    ):
        self._notifications = notifications
        self._audit = audit
        self._settings = mock_data.get_settings_catalog()
        self._flags = mock_data.get_feature_flags()
        self._health = mock_data.get_platform_health()
        self._unsaved: dict[str, Any] = {}
        self._original: dict[str, Any] = {}

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    @property
    def audit(self) -> AuditLogService:
        return self._audit or get_audit_log_service()

    @property
    def unsaved_changes(self) -> dict[str, Any]:
        return dict(self._unsaved)

    def list_settings(self, category: str = "all", search: str = "") -> list[SystemSetting]:
        return filter_settings(self._settings, category, search)

    def get_setting(self, setting_id: str) -> SystemSetting:
        for s in self._settings:
            if s.id == setting_id:
                return s
        raise NotFoundError("setting", setting_id)

    async def _require(self, user: CurrentUser, permission: Permission, message: str) -> None:
        if user.has(permission):
            return
        await self.notifications.add(user.user_id, "error", "Access Denied", message)
        raise PermissionDeniedError(permission.value, message)

    # -- staged edits --------------------------------------------------------

    async def stage_change(self, setting_id: str, value: Any, user: CurrentUser) -> SystemSetting:
        await self._require(
            user, Permission.MODIFY_SYSTEM_SETTINGS,
            "You do not have permission to modify system settings.",
        )
        setting = self.get_setting(setting_id)
        error = validate_value(value, setting.validation, setting.type)
        if error:
            raise ValidationFailedError(error, field=setting.key)

        if setting_id not in self._original:
            self._original[setting_id] = setting.value
        self._unsaved[setting_id] = value
        setting.value = value
        return setting

    async def save(self, user: CurrentUser, confirm_restart: bool = False) -> SaveSettingsResult:
        if not self._unsaved:
            await self.notifications.add(
                user.user_id, "info", "No Changes", "No settings have been modified.",
            )
            return SaveSettingsResult(saved=0, message="No settings have been modified.")

        restart = [sid for sid in self._unsaved if self.get_setting(sid).restart_required]
        if restart and not confirm_restart:
            return SaveSettingsResult(
                saved=0,
                restart_required=restart,
                message="Some changes require a system restart. Confirm to continue.",
            )

        now = datetime.now(timezone.utc)
        for setting_id, new_value in self._unsaved.items():
            setting = self.get_setting(setting_id)
            old_value = self._original.get(setting_id)
            setting.change_history.insert(0, SettingChange(
                timestamp=now,
                user_id=user.user_id,
                user_name=user.name or user.user_id,
                old_value=old_value,
                new_value=new_value,
                reason=CHANGE_REASON,
            ))
            setting.last_modified = now
            setting.modified_by = user.user_id
            await self.audit.record(
                user, "update", "settings", f"Changed {setting.key}",
                resource_id=setting_id, severity="medium",
                old_values={setting.key: old_value}, new_values={setting.key: new_value},
            )

        saved = len(self._unsaved)
        self._unsaved.clear()
        self._original.clear()
        message = f"{saved} settings have been updated successfully."
        await self.notifications.add(user.user_id, "success", "Settings Saved", message)
        logger.info("%d settings saved by %s", saved, user.user_id)
        return SaveSettingsResult(saved=saved, restart_required=restart, message=message)

    def discard(self) -> int:
        for setting_id, value in self._original.items():
            self.get_setting(setting_id).value = value
        discarded = len(self._unsaved)
        self._unsaved.clear()
        self._original.clear()
        return discarded

    async def reset_to_defaults(self, user: CurrentUser) -> list[SystemSetting]:
        await self._require(
            user, Permission.MODIFY_SYSTEM_SETTINGS,
            "You do not have permission to modify system settings.",
        )
        for setting in self._settings:
            setting.value = setting.default_value
        self._unsaved.clear()
        self._original.clear()
        await self.notifications.add(
            user.user_id, "info", "Settings Reset",
            "All settings have been reset to their default values.",
        )
        return self._settings

    # -- feature flags -------------------------------------------------------

    def list_flags(self) -> list[FeatureFlag]:
        return list(self._flags)

    def get_flag(self, flag_id: str) -> FeatureFlag:
        for f in self._flags:
            if f.id == flag_id:
                return f
        raise NotFoundError("feature_flag", flag_id)

    async def toggle_feature_flag(self, flag_id: str, enabled: bool, user: CurrentUser) -> FeatureFlag:
        await self._require(
            user, Permission.MANAGE_FEATURE_FLAGS,
            "You do not have permission to manage feature flags.",
        )
        flag = self.get_flag(flag_id)
        flag.enabled = enabled
        flag.updated_at = datetime.now(timezone.utc)
        await self.notifications.add(
            user.user_id, "success", "Feature Flag Updated",
            f"Feature flag has been {'enabled' if enabled else 'disabled'}.",
        )
        await self.audit.record(
            user, "configure", "settings", f"Feature flag {flag.key} {'enabled' if enabled else 'disabled'}",
            resource_id=flag_id, new_values={"enabled": enabled},
        )
        return flag

    async def set_rollout(self, flag_id: str, percentage: int, user: CurrentUser) -> FeatureFlag:
        await self._require(
            user, Permission.MANAGE_FEATURE_FLAGS,
            "You do not have permission to manage feature flags.",
        )
        if not 0 <= percentage <= 100:
            raise ValidationFailedError("Rollout percentage must be between 0 and 100", field="percentage")
        flag = self.get_flag(flag_id)
        flag.rollout_percentage = percentage
        flag.updated_at = datetime.now(timezone.utc)
        return flag

    # -- health --------------------------------------------------------------

    def health(self) -> PlatformHealth:
        self._health.label = health_label(self._health.status)
        return self._health


_service: SystemSettingsService | None = None


def get_system_settings_service() -> SystemSettingsService:
    global _service
    if _service is None:
        _service = SystemSettingsService()
    return _service
