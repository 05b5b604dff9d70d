"""
Environment configuration for environment-specific settings.

This module wraps the merged YAML configuration, applies environment
variable overrides and exposes typed getters for every setting the
engine reads.
"""

from typing import Any, Dict, Optional
import os


# Environment variable -> dotted configuration path
ENVIRONMENT_OVERRIDES = {
    "MONGODB_URI": "database.mongodb.uri",
    "MONGODB_DATABASE": "database.mongodb.database",
    "ELASTICSEARCH_URL": "database.elasticsearch.url",
    "ELASTICSEARCH_USERNAME": "database.elasticsearch.username",
    "ELASTICSEARCH_PASSWORD": "database.elasticsearch.password",
    "SEARCH_DEFAULT_BACKEND": "search.default_backend",
    "LOG_LEVEL": "logging.level",
}


class EnvironmentConfig:
    """
    Environment-specific configuration.

    Values come from the merged YAML files; environment variables listed
    in ``ENVIRONMENT_OVERRIDES`` win over files.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the configuration.

        Args:
            config: Merged configuration
        """
        self.config = config
        self._apply_environment_overrides()

    def _apply_environment_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        for variable, path in ENVIRONMENT_OVERRIDES.items():
            if variable in os.environ:
                self.set(path, os.environ[variable])

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a value by dotted path.

        Args:
            path: Dotted path, e.g. ``"search.default_limit"``
            default: Value returned when the path is absent

        Returns:
            Any: Configured value or default
        """
        value: Any = self.config
        for part in path.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set(self, path: str, value: Any) -> None:
        """Set a value by dotted path, creating intermediate sections."""
        *parents, leaf = path.split(".")
        section = self.config
        for part in parents:
            section = section.setdefault(part, {})
        section[leaf] = value

    def section(self, name: str) -> Dict[str, Any]:
        """Get a top-level section, empty when absent."""
        return self.config.get(name) or {}

    def get_mongodb_uri(self) -> str:
        return self.get("database.mongodb.uri", "mongodb://localhost:27017")

    def get_mongodb_database(self) -> str:
        return self.get("database.mongodb.database", "recipes")

    def get_recipes_collection(self) -> str:
        return self.get("database.mongodb.recipes_collection", "recipes")

    def get_elasticsearch_url(self) -> str:
        return self.get("database.elasticsearch.url", "http://localhost:9200")

    def get_elasticsearch_credentials(self) -> Optional[tuple]:
        """
        Get Elasticsearch basic auth credentials.

        Returns:
            Optional[tuple]: ``(username, password)`` or None when unset
        """
        username = self.get("database.elasticsearch.username")
        password = self.get("database.elasticsearch.password")
        if not username:
            return None
        return username, password or ""

    def get_recipes_index(self) -> str:
        return self.get("database.elasticsearch.recipes_index", "recipes")

    def get_ingredients_index(self) -> str:
        return self.get("database.elasticsearch.ingredients_index", "ingredients")

    def get_request_timeout(self) -> float:
        """
        Get the backend client request timeout.

        Returns:
            float: Timeout in seconds
        """
        return float(self.get("database.elasticsearch.request_timeout", 30.0))

    def get_search_default_limit(self) -> int:
        return self.get("search.default_limit", 20)

    def get_search_max_limit(self) -> int:
        return self.get("search.max_limit", 100)

    def get_default_backend(self) -> str:
        return self.get("search.default_backend", "aggregation")

    def get_stable_sort(self) -> bool:
        return bool(self.get("search.stable_sort", True))

    def get_suggestion_limit(self) -> int:
        return self.get("search.suggestion_limit", 5)

    def get_instrumentation_enabled(self) -> bool:
        return bool(self.get("instrumentation.enabled", True))

    def get_instrumentation_sink(self) -> str:
        return self.get("instrumentation.sink", "logging")

    def get_instrumentation_queue_size(self) -> int:
        return self.get("instrumentation.queue_size", 1000)

    def get_slow_query_threshold_ms(self) -> float:
        return self.get("instrumentation.slow_query_threshold_ms", 1000)

    def get_log_level(self) -> str:
        """
        Get logging level.

        Returns:
            str: Logging level
        """
        return str(self.get("logging.level", "INFO")).upper()
