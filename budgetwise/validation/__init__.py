"""Data validation package."""

from budgetwise.validation.integrity import check_core_data

__all__ = ["check_core_data"]
