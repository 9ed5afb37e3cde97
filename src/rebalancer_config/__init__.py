"""Configuration management for the index rebalancer."""

from .models import (
    AppConfig,
    CommissionConfig,
    ValidationConfig,
    LoggingConfig,
)
from .loader import load_config, get_config, set_config, apply_env_overrides

__all__ = [
    "AppConfig",
    "CommissionConfig",
    "ValidationConfig",
    "LoggingConfig",
    "load_config",
    "get_config",
    "set_config",
    "apply_env_overrides",
]
