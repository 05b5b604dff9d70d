"""
Validation rules for standardized validation.

Rules are small predicate objects composed by the validation engine.
Missing (``None``) values are skipped by the engine, so optional query
fields only get checked when given.
"""

from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Dict, Optional, Type, Union

from .validator_interface import ValidationSeverity


class ValidationRule(ABC):
    """Base class for validation rules; subclasses implement ``validate``."""

    def __init__(
        self,
        message: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ):
        """
        Initialize validation rule.

        Args:
            message: Error message
            severity: Rule severity
        """
        self.message = message
        self.severity = severity

    @abstractmethod
    def validate(
        self,
        value: Any,
        context: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Validate value.

        Args:
            value: Value to validate
            context: Validation context; ``context["data"]`` holds the whole document

        Returns:
            bool: Whether value is valid
        """


class TypeRule(ValidationRule):
    """Rule that validates value type."""

    def __init__(
        self,
        message: str,
        expected_type: Union[Type, tuple],
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ):
        super().__init__(message, severity)
        self.expected_type = expected_type

    def validate(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        return isinstance(value, self.expected_type)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a meaningful quantity here
    return isinstance(value, Real) and not isinstance(value, bool)


class RangeRule(ValidationRule):
    """Rule that validates a numeric value lies within an inclusive range."""

    def __init__(
        self,
        message: str,
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None,
        integer_only: bool = False,
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ):
        """
        Initialize range rule.

        Args:
            message: Error message
            min_value: Minimum allowed value
            max_value: Maximum allowed value
            integer_only: Whether the value must be integral
            severity: Rule severity
        """
        super().__init__(message, severity)
        self.min_value = min_value
        self.max_value = max_value
        self.integer_only = integer_only

    def validate(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        if not _is_number(value):
            return False

        if self.integer_only and not float(value).is_integer():
            return False

        if self.min_value is not None and value < self.min_value:
            return False

        if self.max_value is not None and value > self.max_value:
            return False

        return True


class StringListRule(ValidationRule):
    """Rule that requires a list (or tuple) made only of strings."""

    def validate(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        if not isinstance(value, (list, tuple)):
            return False
        return all(isinstance(item, str) for item in value)


class OrderedFieldsRule(ValidationRule):
    """
    Cross-field rule requiring ``lower <= upper`` when both are present.

    The rule is attached to the lower field; the upper field is looked up
    by dotted path in ``context["data"]``.
    """

    def __init__(
        self,
        message: str,
        upper_path: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ):
        super().__init__(message, severity)
        self.upper_path = upper_path

    def validate(self, value: Any, context: Optional[Dict[str, Any]] = None) -> bool:
        data = (context or {}).get("data") or {}
        upper = data
        for part in self.upper_path.split("."):
            upper = upper.get(part) if isinstance(upper, dict) else None

        # Type problems are reported by the per-field rules
        if not _is_number(value) or not _is_number(upper):
            return True
        return value <= upper
