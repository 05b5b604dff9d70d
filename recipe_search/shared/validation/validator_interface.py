"""
Validator interface for standardized validation.

This module defines the result types shared by the validation engine
and the validators built on top of it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')


class ValidationSeverity(Enum):
    """Validation severity levels."""
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass
class ValidationIssue:
    """A single validation problem found on a field."""

    severity: ValidationSeverity
    message: str
    field: Optional[str] = None
    value: Any = None


@dataclass
class ValidationResult(Generic[T]):
    """
    Validation result.

    ``is_valid`` turns false as soon as an ERROR issue is added; warnings
    are kept for reporting only.
    """

    is_valid: bool = True
    issues: List[ValidationIssue] = field(default_factory=list)
    data: Optional[T] = None

    def add_issue(
        self,
        severity: ValidationSeverity,
        message: str,
        field: Optional[str] = None,
        value: Any = None
    ) -> None:
        """
        Add validation issue.

        Args:
            severity: Issue severity
            message: Issue message
            field: Optional field name
            value: Optional invalid value
        """
        self.issues.append(
            ValidationIssue(
                severity=severity,
                message=message,
                field=field,
                value=value
            )
        )
        if severity == ValidationSeverity.ERROR:
            self.is_valid = False

    @property
    def errors(self) -> List[ValidationIssue]:
        """Issues with ERROR severity."""
        return [issue for issue in self.issues if issue.severity == ValidationSeverity.ERROR]


class ValidatorInterface(ABC, Generic[T]):
    """Interface for validators of a given input type."""

    @abstractmethod
    def validate(self, data: T) -> ValidationResult[T]:
        """
        Validate data.

        Args:
            data: Data to validate

        Returns:
            ValidationResult[T]: Validation result
        """
