"""
Validation engine for orchestrating validation rules.

This module provides a validation engine that manages and executes
validation rules against nested dictionaries addressed by dotted paths.
"""

from typing import Any, Dict, List

from .validator_interface import ValidationResult
from .validation_rules import ValidationRule


class ValidationEngine:
    """
    Engine for orchestrating validation rules.

    Rules are registered per dotted field path and evaluated in
    registration order; every failing rule contributes one issue.
    """

    def __init__(self):
        """Initialize validation engine."""
        self._rules: Dict[str, List[ValidationRule]] = {}

    def add_rule(self, field_path: str, rule: ValidationRule) -> "ValidationEngine":
        """
        Add validation rule for a field.

        Args:
            field_path: Path to field in dot notation
            rule: Validation rule to add

        Returns:
            ValidationEngine: Self for method chaining
        """
        self._rules.setdefault(field_path, []).append(rule)
        return self

    def add_rules(self, field_path: str, rules: List[ValidationRule]) -> "ValidationEngine":
        """
        Add multiple validation rules for a field.

        Args:
            field_path: Path to field in dot notation
            rules: List of validation rules to add

        Returns:
            ValidationEngine: Self for method chaining
        """
        self._rules.setdefault(field_path, []).extend(rules)
        return self

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        """
        Validate data against all rules.

        Args:
            data: Data to validate

        Returns:
            ValidationResult: Validation result
        """
        result = ValidationResult(data=data)
        context = {"data": data}

        for field_path, rules in self._rules.items():
            value = self._get_value(data, field_path)
            for rule in rules:
                if value is None:
                    continue
                if not rule.validate(value, context):
                    result.add_issue(
                        severity=rule.severity,
                        message=rule.message,
                        field=field_path,
                        value=value
                    )

        return result

    @staticmethod
    def _get_value(data: Dict[str, Any], field_path: str) -> Any:
        if not field_path:
            return data

        value: Any = data
        for part in field_path.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                return None

        return value
