"""
Data Integrity Checks

Scans the decoded core collections (transactions, budgets, profile) for
records that lack their minimal required fields.

IMPORTANT: The scan NEVER fixes anything and NEVER stops at the first
problem. Every violation is reported; remediation is the caller's call.
"""

from typing import Any, Optional

from budgetwise.models.integrity import IntegrityIssue, IntegrityReport


# Required fields per record type
TRANSACTION_REQUIRED = ("id", "description", "amount")
BUDGET_REQUIRED = ("id", "category", "budgetAmount")
PROFILE_REQUIRED = ("name", "email", "currency")

NUMERIC_FIELDS = {"amount", "budgetAmount"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _missing_fields(record: Any, required: tuple[str, ...]) -> list[str]:
    """Required fields that are absent, empty or of the wrong type."""
    if not isinstance(record, dict):
        return list(required)

    missing = []
    for field in required:
        value = record.get(field)
        if field in NUMERIC_FIELDS:
            if not _is_number(value):
                missing.append(field)
        elif not value:
            missing.append(field)
    return missing


def _check_collection(
    records: Any,
    record_type: str,
    label: str,
    required: tuple[str, ...],
) -> list[IntegrityIssue]:
    if records is None:
        return []

    if not isinstance(records, list):
        return [IntegrityIssue(
            record_type=record_type,
            message=f"{label}: expected a list of records",
        )]

    issues = []
    for index, record in enumerate(records):
        missing = _missing_fields(record, required)
        if missing:
            issues.append(IntegrityIssue(
                record_type=record_type,
                index=index,
                missing_fields=missing,
                message=(
                    f"{label[:-1]} {index}: Missing required fields "
                    f"({', '.join(missing)})"
                ),
            ))
    return issues


def check_core_data(
    transactions: Optional[Any],
    budgets: Optional[Any],
    profile: Optional[Any],
) -> IntegrityReport:
    """
    Check decoded core data for malformed records.

    Args:
        transactions: Decoded `transactions` value (or None if absent)
        budgets: Decoded `budgets` value (or None if absent)
        profile: Decoded `profile` value (or None if absent)

    Returns:
        IntegrityReport listing every issue found
    """
    issues = []
    issues.extend(_check_collection(
        transactions, "transaction", "Transactions", TRANSACTION_REQUIRED,
    ))
    issues.extend(_check_collection(
        budgets, "budget", "Budgets", BUDGET_REQUIRED,
    ))

    if profile is not None:
        missing = _missing_fields(profile, PROFILE_REQUIRED)
        if missing:
            issues.append(IntegrityIssue(
                record_type="profile",
                missing_fields=missing,
                message=f"Profile: Missing required fields ({', '.join(missing)})",
            ))

    return IntegrityReport(issues=issues)
