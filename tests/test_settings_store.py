"""
Tests for the settings store.
"""

import pytest

from budgetwise.models import FontSize, SettingsGroup, Theme
from budgetwise.state import SettingsStore


@pytest.fixture
def settings_store() -> SettingsStore:
    return SettingsStore()


class TestSettingsUpdates:
    """Tests for update_group()."""

    def test_partial_update_keeps_other_fields(self, settings_store):
        settings_store.update_group("notifications", {"budgetAlerts": False})

        notifications = settings_store.notifications
        assert notifications.budget_alerts is False
        assert notifications.weekly_reports is True
        assert notifications.email_notifications is False

    def test_accepts_snake_case_keys(self, settings_store):
        settings_store.update_group(SettingsGroup.APPEARANCE, {
            "theme": "dark",
            "font_size": "large",
        })
        assert settings_store.appearance.theme == Theme.DARK
        assert settings_store.appearance.font_size == FontSize.LARGE

    def test_unknown_keys_are_ignored(self, settings_store):
        profile = settings_store.update_group("profile", {"name": "Ada", "nickname": "A"})
        assert profile.name == "Ada"
        assert not hasattr(profile, "nickname")

    def test_invalid_value_rejected_and_state_kept(self, settings_store):
        with pytest.raises(ValueError):
            settings_store.update_group("appearance", {"primaryColor": "not-a-color"})
        assert settings_store.appearance.primary_color == "#3B82F6"

    def test_groups_are_independent(self, settings_store):
        settings_store.update_group("security", {"pinCode": "1234"})
        assert settings_store.security.pin_code == "1234"
        assert settings_store.get("profile").name == "John Doe"

    def test_unknown_group_rejected(self, settings_store):
        with pytest.raises(ValueError):
            settings_store.update_group("billing", {})


class TestSettingsReset:

    def test_reset_all_restores_defaults(self, settings_store):
        settings_store.update_group("profile", {"currency": "EUR"})
        settings_store.update_group("preferences", {"defaultCategory": "Food"})

        settings_store.reset_all()
        assert settings_store.profile.currency == "USD"
        assert settings_store.preferences.default_category == "Others"


class TestSettingsHydration:

    def test_missing_fields_keep_defaults(self, settings_store):
        settings_store.hydrate("profile", {"name": "Ada", "currency": "GBP"})
        profile = settings_store.profile
        assert profile.name == "Ada"
        assert profile.currency == "GBP"
        assert profile.timezone == "America/New_York"

    def test_invalid_stored_group_is_ignored(self, settings_store):
        settings_store.hydrate("appearance", {"theme": "neon"})
        assert settings_store.appearance.theme == Theme.SYSTEM

    def test_non_dict_is_ignored(self, settings_store):
        settings_store.hydrate("security", ["not", "a", "record"])
        assert settings_store.security.auto_lock is True


class TestSettingsPersistence:

    @pytest.mark.asyncio
    async def test_each_group_has_its_own_key(self, state, store):
        state.settings.update_group("notifications", {"budgetAlerts": False})
        await state.flush()

        stored = await store.load("notifications")
        assert stored["budgetAlerts"] is False
        assert stored["emailNotifications"] is False
        assert await store.load("profile") is None

    @pytest.mark.asyncio
    async def test_reset_all_writes_every_group(self, state, store):
        state.settings.reset_all()
        await state.flush()

        for group in SettingsGroup:
            assert await store.load(group.value) is not None
