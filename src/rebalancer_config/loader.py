"""Configuration loader with validation and singleton access."""

import logging
import os
import yaml
from pathlib import Path
from typing import Mapping, Optional

from .models import AppConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "REBALANCER__"

# Global config singleton
_config: Optional[AppConfig] = None


def apply_env_overrides(raw_config: dict, environ: Optional[Mapping[str, str]] = None) -> dict:
    """
    Layer environment variables over the raw YAML values.

    Variables are named REBALANCER__<SECTION>__<FIELD>, e.g.
    REBALANCER__COMMISSION__FIXED_RATE=0.05. Values stay strings and are
    coerced by the pydantic models.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        parts = key[len(ENV_PREFIX):].lower().split("__")
        if len(parts) != 2 or not all(parts):
            logger.warning(f"Ignoring malformed configuration override: {key}")
            continue

        section, field = parts
        section_values = raw_config.setdefault(section, {})
        if not isinstance(section_values, dict):
            raise ValueError(f"Cannot override {key}: section '{section}' is not a mapping")
        section_values[field] = value
        logger.debug(f"Configuration override from environment: {section}.{field}")

    return raw_config


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: expected a mapping at top level of {config_path}")

    raw_config = apply_env_overrides(raw_config)

    try:
        _config = AppConfig(**raw_config)
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Commission minimum price: {_config.commission.minimum_price}")
    logger.info(f"  Commission fixed rate: {_config.commission.fixed_rate}/share")
    logger.info(f"  Commission percentage rate: {_config.commission.percentage_rate * 100}%")
    logger.info(
        f"  Cash bounds: {_config.validation.minimum_cash_amount} - {_config.validation.maximum_cash_amount}"
    )
    logger.info(
        f"  Price bounds: {_config.validation.minimum_price} - {_config.validation.maximum_price}"
    )
    logger.info(
        f"  Weight bounds: {_config.validation.minimum_weight} - {_config.validation.maximum_weight}"
    )
    logger.info(f"  Log level: {_config.logging.level} ({_config.logging.format})")

    return _config


def set_config(config: AppConfig) -> AppConfig:
    """Install an already-built configuration as the process-wide singleton."""
    global _config
    _config = config
    return _config


def get_config() -> AppConfig:
    """
    Get the current loaded configuration.

    Returns:
        Current AppConfig instance

    Raises:
        RuntimeError: If config hasn't been loaded yet
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not loaded. Call load_config() first."
        )
    return _config
