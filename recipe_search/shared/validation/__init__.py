from .validator_interface import (
    ValidationSeverity,
    ValidationIssue,
    ValidationResult,
    ValidatorInterface
)
from .validation_rules import (
    ValidationRule,
    TypeRule,
    RangeRule,
    StringListRule,
    OrderedFieldsRule
)
from .validation_engine import ValidationEngine

__all__ = [
    'ValidationSeverity',
    'ValidationIssue',
    'ValidationResult',
    'ValidatorInterface',
    'ValidationRule',
    'TypeRule',
    'RangeRule',
    'StringListRule',
    'OrderedFieldsRule',
    'ValidationEngine'
]
