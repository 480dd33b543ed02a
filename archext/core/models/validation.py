"""Validation result models shared by the catalog validator and the CLI."""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One problem found while validating a catalog."""

    severity: Severity
    category: str = Field(description="Machine-readable issue category, e.g. CYCLE")
    location: str = Field(description="Where the issue is, e.g. 'extensions[3]'")
    message: str
    suggestion: str | None = None
    value: str | None = None


class ValidationResult(BaseModel):
    """Aggregated validation outcome."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(
        self,
        category: str,
        location: str,
        message: str,
        suggestion: str | None = None,
        value: str | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                category=category,
                location=location,
                message=message,
                suggestion=suggestion,
                value=value,
            )
        )

    def add_warning(
        self,
        category: str,
        location: str,
        message: str,
        suggestion: str | None = None,
        value: str | None = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=Severity.WARNING,
                category=category,
                location=location,
                message=message,
                suggestion=suggestion,
                value=value,
            )
        )
