"""
Settings Store

Five independent groups, each persisted under its own key. Updates are
shallow merges; reset_all() restores every group to its defaults.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from budgetwise.audit import AuditLogger
from budgetwise.models.audit import AuditEventType
from budgetwise.models.base import RecordModel, merge_partial
from budgetwise.models.user_settings import (
    SETTINGS_MODELS,
    AppearanceSettings,
    NotificationSettings,
    PreferencesSettings,
    SecuritySettings,
    SettingsGroup,
    UserProfile,
)
from budgetwise.services.storage import WriteQueue
from budgetwise.state.base import PersistentSlice


def default_settings() -> dict[SettingsGroup, RecordModel]:
    """A fresh default record for every group."""
    return {group: model() for group, model in SETTINGS_MODELS.items()}


class SettingsStore(PersistentSlice):
    """User profile, notification, security, appearance and preference settings."""

    def __init__(
        self,
        writer: Optional[WriteQueue] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        super().__init__(writer, audit_logger)
        self._groups = default_settings()

    def get(self, group: Union[SettingsGroup, str]) -> RecordModel:
        return self._groups[SettingsGroup(group)]

    @property
    def profile(self) -> UserProfile:
        return self._groups[SettingsGroup.PROFILE]

    @property
    def notifications(self) -> NotificationSettings:
        return self._groups[SettingsGroup.NOTIFICATIONS]

    @property
    def security(self) -> SecuritySettings:
        return self._groups[SettingsGroup.SECURITY]

    @property
    def appearance(self) -> AppearanceSettings:
        return self._groups[SettingsGroup.APPEARANCE]

    @property
    def preferences(self) -> PreferencesSettings:
        return self._groups[SettingsGroup.PREFERENCES]

    def _save(self, group: SettingsGroup) -> None:
        self._persist(group.value, self._groups[group].to_storage())

    def hydrate(self, group: Union[SettingsGroup, str], raw: Any) -> None:
        """
        Load a stored group over its defaults. Does not persist.

        Fields missing from the stored record keep their default, so
        records written by older versions still load.
        """
        group = SettingsGroup(group)
        if raw is None:
            return
        if not isinstance(raw, dict):
            self._logger.warning("stored_settings_malformed", group=group.value)
            return

        try:
            merged, ignored = merge_partial(SETTINGS_MODELS[group](), raw)
        except ValidationError as e:
            self._logger.warning(
                "stored_settings_invalid",
                group=group.value,
                error_count=e.error_count(),
            )
            return

        if ignored:
            self._logger.info("stored_settings_fields_ignored", group=group.value, fields=ignored)
        self._groups[group] = merged

    def update_group(
        self,
        group: Union[SettingsGroup, str],
        partial: Mapping[str, Any],
    ) -> RecordModel:
        """
        Shallow-merge `partial` into a group.

        Keys may be snake_case or camelCase. Unknown keys are ignored.

        Raises:
            ValueError: If a supplied value fails validation
        """
        group = SettingsGroup(group)
        merged, ignored = merge_partial(self._groups[group], partial)
        if ignored:
            self._logger.warning("settings_fields_ignored", group=group.value, fields=ignored)

        self._groups[group] = merged
        self._save(group)

        self._audit.record(
            AuditEventType.SETTINGS_UPDATED,
            f"Settings updated: {group.value}",
            entity_type="settings",
            entity_id=group.value,
            fields=sorted(k for k in partial if k not in ignored),
        )
        return merged

    def reset_all(self) -> None:
        """Restore every group to its defaults in one step."""
        self._groups = default_settings()
        for group in SettingsGroup:
            self._save(group)

        self._audit.record(
            AuditEventType.SETTINGS_RESET,
            "All settings reset to defaults",
            entity_type="settings",
        )
