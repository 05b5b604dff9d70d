"""
Configuration validator for validating configuration values.

This module provides a validator for ensuring configuration values
meet the required format and constraints.
"""

from typing import Dict, Any, List
import re

BACKENDS = ("aggregation", "fulltext")
SINKS = ("logging", "mongodb")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


class ConfigValidator:
    """
    Validator for configuration values.

    All problems are collected and reported together in one ``ValueError``.
    """

    def __init__(self):
        """Initialize the validator."""
        self.errors: List[str] = []

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration.

        Args:
            config: Configuration to validate

        Raises:
            ValueError: If configuration is invalid
        """
        self.errors = []

        database = config.get("database") or {}
        if "mongodb" in database:
            self._validate_mongodb_config(database["mongodb"] or {})
        if "elasticsearch" in database:
            self._validate_elasticsearch_config(database["elasticsearch"] or {})

        if "search" in config:
            self._validate_search_config(config["search"] or {})

        if "instrumentation" in config:
            self._validate_instrumentation_config(config["instrumentation"] or {})

        if "logging" in config:
            self._validate_logging_config(config["logging"] or {})

        if self.errors:
            raise ValueError("\n".join(self.errors))

    def _validate_mongodb_config(self, config: Dict[str, Any]) -> None:
        uri = config.get("uri")
        if not isinstance(uri, str) or not re.match(r"^mongodb(\+srv)?://", uri):
            self.errors.append("MongoDB URI must start with mongodb:// or mongodb+srv://")

        for field in ("database", "recipes_collection"):
            if field in config and (not isinstance(config[field], str) or not config[field]):
                self.errors.append(f"MongoDB {field} must be a non-empty string")

    def _validate_elasticsearch_config(self, config: Dict[str, Any]) -> None:
        url = config.get("url")
        if not isinstance(url, str) or not url:
            self.errors.append("Elasticsearch URL must be a non-empty string")
        elif not re.match(r"^https?://", url):
            self.errors.append("Elasticsearch URL must start with http:// or https://")

        for field in ("recipes_index", "ingredients_index"):
            if field in config and (not isinstance(config[field], str) or not config[field]):
                self.errors.append(f"Elasticsearch {field} must be a non-empty string")

        if "request_timeout" in config and not _positive_number(config["request_timeout"]):
            self.errors.append("Elasticsearch request timeout must be a positive number")

    def _validate_search_config(self, config: Dict[str, Any]) -> None:
        """
        Validate search configuration.

        Args:
            config: Search configuration
        """
        for field in ("default_limit", "max_limit", "suggestion_limit"):
            if field in config and not _positive_int(config[field]):
                self.errors.append(f"Search {field.replace('_', ' ')} must be a positive integer")

        default_limit = config.get("default_limit")
        max_limit = config.get("max_limit")
        if _positive_int(default_limit) and _positive_int(max_limit) and default_limit > max_limit:
            self.errors.append("Search default limit must not exceed max limit")

        if "default_backend" in config and config["default_backend"] not in BACKENDS:
            self.errors.append(f"Search default backend must be one of: {', '.join(BACKENDS)}")

        if "stable_sort" in config and not isinstance(config["stable_sort"], bool):
            self.errors.append("Search stable sort must be a boolean")

    def _validate_instrumentation_config(self, config: Dict[str, Any]) -> None:
        if "enabled" in config and not isinstance(config["enabled"], bool):
            self.errors.append("Instrumentation enabled must be a boolean")

        if "sink" in config and config["sink"] not in SINKS:
            self.errors.append(f"Instrumentation sink must be one of: {', '.join(SINKS)}")

        if "queue_size" in config and not _positive_int(config["queue_size"]):
            self.errors.append("Instrumentation queue size must be a positive integer")

        if "slow_query_threshold_ms" in config and not _positive_number(config["slow_query_threshold_ms"]):
            self.errors.append("Instrumentation slow query threshold must be a positive number")

    def _validate_logging_config(self, config: Dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Args:
            config: Logging configuration
        """
        if "level" in config:
            level = config["level"]
            if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
                self.errors.append(
                    f"Logging level must be one of: {', '.join(LOG_LEVELS)}"
                )
