"""
User Settings Models

Five independent groups, each a flat record with compile-time defaults.
Constructing a group with no arguments yields its default record.

NOTE: `SecuritySettings.pin_code` and `data_encryption` are user
preferences only. Values are stored with a reversible encoding, not
encrypted; see budgetwise.services.storage.codec.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from budgetwise.models.base import RecordModel
from budgetwise.models.transaction import TransactionType


class SettingsGroup(str, Enum):
    """Names of the settings groups (also their storage keys)."""
    PROFILE = "profile"
    NOTIFICATIONS = "notifications"
    SECURITY = "security"
    APPEARANCE = "appearance"
    PREFERENCES = "preferences"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class FontSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class UserProfile(RecordModel):
    """Who the user is and how amounts/dates are displayed."""

    name: str = Field(default="John Doe", max_length=100)
    email: str = Field(default="john.doe@example.com", max_length=200)
    avatar: Optional[str] = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    date_format: str = "MM/DD/YYYY"
    timezone: str = "America/New_York"


class NotificationSettings(RecordModel):
    budget_alerts: bool = True
    transaction_reminders: bool = True
    weekly_reports: bool = True
    monthly_reports: bool = True
    push_notifications: bool = True
    email_notifications: bool = False


class SecuritySettings(RecordModel):
    biometric_auth: bool = False
    pin_code: str = Field(default="", max_length=12)
    auto_lock: bool = True
    auto_lock_time: int = Field(
        default=5,
        ge=0,
        description="Minutes of inactivity before locking"
    )
    data_encryption: bool = True


class AppearanceSettings(RecordModel):
    theme: Theme = Theme.SYSTEM
    primary_color: str = Field(
        default="#3B82F6",
        pattern="^#[0-9A-Fa-f]{6}$",
    )
    font_size: FontSize = FontSize.MEDIUM
    language: str = "en"


class PreferencesSettings(RecordModel):
    default_transaction_type: TransactionType = TransactionType.EXPENSE
    default_category: str = "Others"
    show_decimal_places: bool = True
    group_transactions_by_date: bool = True
    show_category_icons: bool = True
    enable_quick_actions: bool = True


SETTINGS_MODELS: dict[SettingsGroup, type[RecordModel]] = {
    SettingsGroup.PROFILE: UserProfile,
    SettingsGroup.NOTIFICATIONS: NotificationSettings,
    SettingsGroup.SECURITY: SecuritySettings,
    SettingsGroup.APPEARANCE: AppearanceSettings,
    SettingsGroup.PREFERENCES: PreferencesSettings,
}
