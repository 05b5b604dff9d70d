"""
Layered YAML configuration for the recipe search engine.

``config/base.yaml`` holds the store connections, search limits,
instrumentation and logging settings; ``config/<environment>.yaml``
overrides any of them per deployment.
"""

from typing import Dict, Any, Optional
import os
import yaml
from pathlib import Path

from .config_validator import ConfigValidator
from .environment_config import EnvironmentConfig


class ConfigManager:
    """
    Loads and caches the engine configuration.

    ``base.yaml`` is merged with ``<environment>.yaml``, environment
    variable overrides are applied and the result is validated once.
    """

    def __init__(
        self,
        config_dir: str = "config",
        environment: Optional[str] = None
    ):
        """
        Args:
            config_dir: Directory holding ``base.yaml`` and the overlays
            environment: Overlay name, defaults to ``APP_ENV`` or ``development``
        """
        self.config_dir = Path(config_dir)
        self.environment = environment or os.getenv("APP_ENV", "development")
        self.validator = ConfigValidator()
        self._config: Optional[EnvironmentConfig] = None

    def load_config(self) -> EnvironmentConfig:
        """
        Build the configuration on first call and return the cached one after.

        Raises:
            FileNotFoundError: If ``base.yaml`` is missing
            ValueError: If the merged settings fail validation
        """
        if self._config is not None:
            return self._config

        settings = self._read_settings("base.yaml")

        # Environment files are optional overlays
        overlay = self.config_dir / f"{self.environment}.yaml"
        if overlay.exists():
            settings = self._deep_merge(settings, self._read_settings(overlay.name))

        config = EnvironmentConfig(settings)
        self.validator.validate_config(config.config)

        self._config = config
        return self._config

    def get_config(self) -> EnvironmentConfig:
        return self.load_config()

    def get_database_config(self) -> Dict[str, Any]:
        """MongoDB and Elasticsearch connection settings."""
        return self.get_config().section("database")

    def get_search_config(self) -> Dict[str, Any]:
        """Page size limits, default backend and tie-break settings."""
        return self.get_config().section("search")

    def get_instrumentation_config(self) -> Dict[str, Any]:
        return self.get_config().section("instrumentation")

    def get_logging_config(self) -> Dict[str, Any]:
        return self.get_config().section("logging")

    def _read_settings(self, filename: str) -> Dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            return yaml.safe_load(f) or {}

    def _deep_merge(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Merge ``overlay`` into a copy of ``base``, recursing into sections."""
        merged = base.copy()

        for key, value in overlay.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value

        return merged
