"""
Integrity scan results.

A scan never stops at the first problem: every malformed record is
reported so the caller can decide how to remediate.
"""

from typing import Optional

from pydantic import BaseModel, Field


class IntegrityIssue(BaseModel):
    """One malformed record (or container) found during a scan."""

    record_type: str = Field(
        ...,
        description="Kind of record ('transaction', 'budget', 'profile')"
    )
    index: Optional[int] = Field(
        default=None,
        description="Position of the record in its collection"
    )
    missing_fields: list[str] = Field(
        default_factory=list,
        description="Required fields that are absent or of the wrong type"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    def __str__(self) -> str:
        return self.message


class IntegrityReport(BaseModel):
    """Result of a data integrity scan."""

    issues: list[IntegrityIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]
