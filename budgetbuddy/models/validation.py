"""
Validation Models

Results of checking user input before it reaches the budget model.
Validation NEVER silently fixes input; it reports issues for the
presentation layer to show.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Form field the issue belongs to (e.g. 'amount')"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'duplicate', 'non_positive')"
    )
    message: str = Field(
        ...,
        description="Message shown next to the form field"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="error blocks the submission, warning and info do not"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="What the user can change to resolve it"
    )


class ValidationResult(BaseModel):
    """
    Outcome of validating one form submission.

    Errors block the submission; warnings are shown but do not block.
    """

    is_valid: bool = Field(
        ...,
        description="True when there are no error-level issues"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="Every issue, in the order the fields were checked"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Messages of warning-level issues"
    )

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        """Derive validity and warnings from a list of issues."""
        return cls(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            warnings=[issue.message for issue in issues if issue.severity == "warning"],
        )

    @property
    def has_errors(self) -> bool:
        """True if any issue blocks the submission."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Number of blocking issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
