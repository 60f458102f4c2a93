"""Configuration module for tidefinder.

This module provides a type-safe configuration system using Pydantic Settings
and a Loguru-based logging setup.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru logger for the application

resilient_operation(operation_name: str)
    Decorator for logging errors at service boundaries

Usage:
------
```python
from src.config import settings
threshold = settings.translation.confidence_threshold

from src.config import get_logger
logger = get_logger(__name__)
logger.info("Starting operation")
```
"""

from .logging import get_logger, resilient_operation, setup_loguru_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "get_logger",
    "resilient_operation",
    "settings",
    "setup_loguru_logger",
]
