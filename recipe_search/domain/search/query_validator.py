"""
Validation of search queries before compilation.
"""

from typing import Any, Dict

from ...core.entities import SearchFilters, SearchQuery, SortOption, TimeRange
from ...shared.exceptions import ValidationError
from ...shared.logging import configure_logging
from ...shared.validation import (
    OrderedFieldsRule,
    RangeRule,
    StringListRule,
    TypeRule,
    ValidationEngine,
    ValidationResult,
    ValidationSeverity,
    ValidatorInterface
)

logger = configure_logging(__name__)

SORT_DIRECTIONS = ("asc", "desc")


class QueryValidator(ValidatorInterface[Dict[str, Any]]):
    """
    Validates ``SearchQuery`` objects.

    Every problem is collected before raising, so a single
    ``ValidationError`` lists all issues with the query.
    """

    def __init__(self):
        self._engine = ValidationEngine()
        self._engine.add_rule(
            "text", TypeRule("text must be a string", str)
        ).add_rule(
            "page", RangeRule("page must be a positive integer", min_value=1, integer_only=True)
        ).add_rule(
            "limit", RangeRule("limit must be a positive integer", min_value=1, integer_only=True)
        ).add_rule(
            "sort.field", TypeRule("sort field must be a string", str)
        ).add_rules(
            "filters.time.min", [
                RangeRule("time.min must be a non-negative number", min_value=0),
                OrderedFieldsRule("time.min must not exceed time.max", "filters.time.max")
            ]
        ).add_rule(
            "filters.time.max", RangeRule("time.max must be a non-negative number", min_value=0)
        )

        for name in ("category", "cuisine", "difficulty", "ingredients"):
            self._engine.add_rule(
                f"filters.{name}", StringListRule(f"{name} must be a list of strings")
            )

    def validate(self, data: Dict[str, Any]) -> ValidationResult[Dict[str, Any]]:
        """
        Validate a query in dictionary form.

        Args:
            data: Output of ``SearchQuery.to_dict``

        Returns:
            ValidationResult: Validation result
        """
        result = self._engine.validate(data)

        sort = data.get("sort")
        if isinstance(sort, dict) and sort.get("direction") not in SORT_DIRECTIONS:
            result.add_issue(
                severity=ValidationSeverity.ERROR,
                message="sort direction must be 'asc' or 'desc'",
                field="sort.direction",
                value=sort.get("direction")
            )

        return result

    def check(self, query: SearchQuery) -> SearchQuery:
        """
        Validate a query and raise on any problem.

        Args:
            query: Query to validate

        Returns:
            SearchQuery: The same query, for chaining

        Raises:
            ValidationError: If the query is malformed
        """
        if not isinstance(query, SearchQuery):
            raise ValidationError("query must be a SearchQuery")
        if query.filters is not None and not isinstance(query.filters, SearchFilters):
            raise ValidationError("filters must be a SearchFilters")
        if query.sort is not None and not isinstance(query.sort, SortOption):
            raise ValidationError("sort must be a SortOption")
        if query.filters is not None and query.filters.time is not None \
                and not isinstance(query.filters.time, TimeRange):
            raise ValidationError("time must be a TimeRange")

        result = self.validate(query.to_dict())
        if not result.is_valid:
            issues = [issue.message for issue in result.errors]
            logger.debug("Rejected search query", issues=issues)
            raise ValidationError(f"Invalid search query: {'; '.join(issues)}", issues=issues)

        return query
