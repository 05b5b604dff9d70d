from .config_manager import ConfigManager
from .config_validator import ConfigValidator
from .environment_config import EnvironmentConfig

__all__ = ['ConfigManager', 'ConfigValidator', 'EnvironmentConfig']
