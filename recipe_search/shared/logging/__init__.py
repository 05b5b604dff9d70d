from .logger_interface import LoggerInterface, LogLevel
from .structured_logger import StructuredLogger, configure_logging, set_default_level

__all__ = [
    'LoggerInterface',
    'LogLevel',
    'StructuredLogger',
    'configure_logging',
    'set_default_level'
]
