"""
Configuration loading and management for the portfolio ledger.

This module handles loading application settings from YAML files, API key
management, validation of configuration parameters, and construction of the
quote source the settings select.
"""

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from folio_ledger.models import AppConfig
from folio_ledger.quotes.base import QuoteSource
from folio_ledger.quotes.mock import MockQuoteSource
from folio_ledger.quotes.yahoo import YahooQuoteSource


# Default paths for configuration files
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
DEFAULT_SETTINGS_FILE = PROJECT_ROOT / "config" / "settings.yaml"

API_KEYS_ENV_VAR = "YFAPI_API_KEYS"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


def load_api_keys(
    yaml_keys: list[str] | None = None,
    env_file: str | Path | None = None,
) -> list[str]:
    """
    Resolve the quote service API keys with priority.

    Sources are checked in this order (later sources override earlier):
    1. api_keys from the settings YAML
    2. YFAPI_API_KEYS in the .env file in project root
    3. YFAPI_API_KEYS environment variable

    The .env and environment values are comma-separated lists.

    Args:
        yaml_keys: Keys read from the settings file
        env_file: Path to .env file (defaults to project root .env)

    Returns:
        List of API keys, possibly empty
    """
    api_keys = [str(k) for k in (yaml_keys or []) if k]

    env_path = Path(env_file) if env_file else DEFAULT_ENV_FILE
    if env_path.exists():
        env_values = dotenv_values(env_path)
        if env_values.get(API_KEYS_ENV_VAR):
            api_keys = _split_keys(env_values[API_KEYS_ENV_VAR])

    if os.environ.get(API_KEYS_ENV_VAR):
        api_keys = _split_keys(os.environ[API_KEYS_ENV_VAR])

    return api_keys


def _split_keys(value: str) -> list[str]:
    return [key.strip() for key in value.split(",") if key.strip()]


def load_app_config(
    config_path: str | Path,
    env_file: str | Path | None = None,
) -> AppConfig:
    """
    Load application configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file
        env_file: Optional .env file for API keys

    Returns:
        AppConfig object with validated settings

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigurationError("Configuration file must contain a mapping")

    # Settings may be nested under an AppConfig section
    raw_config = raw_config.get("AppConfig", raw_config)

    return _parse_app_config(raw_config, env_file)


def _parse_app_config(raw: dict[str, Any], env_file: str | Path | None) -> AppConfig:
    """
    Parse and validate raw configuration dictionary into AppConfig.

    Args:
        raw: Dictionary loaded from YAML
        env_file: Optional .env file for API keys

    Returns:
        Validated AppConfig

    Raises:
        ConfigurationError: If a field is invalid
    """
    yaml_keys = raw.get("api_keys", [])
    if isinstance(yaml_keys, str):
        yaml_keys = _split_keys(yaml_keys)
    if not isinstance(yaml_keys, list):
        raise ConfigurationError("api_keys must be a list of strings")

    initial_balance = _parse_decimal(
        raw.get("initial_balance", "1000"),
        "initial_balance",
        min_val=Decimal("0"),
    )

    seed_file = raw.get("seed_file")

    return AppConfig(
        base_url=str(raw.get("base_url", AppConfig.base_url)),
        api_keys=load_api_keys(yaml_keys, env_file),
        in_test=_parse_bool(raw.get("in_test", False), "in_test"),
        in_development=_parse_bool(raw.get("in_development", False), "in_development"),
        initial_balance=initial_balance,
        decision_log=str(raw.get("decision_log", AppConfig.decision_log)),
        seed_file=str(seed_file) if seed_file else None,
    )


def _parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "no", "0"):
        return False
    raise ConfigurationError(f"Invalid boolean value for {field_name}: {value}")


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Decimal | None = None,
    max_val: Decimal | None = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Args:
        value: The value to parse
        field_name: Name of the field for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Parsed Decimal

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def default_app_config() -> AppConfig:
    """
    Fallback settings used when no settings file can be loaded.

    Runs in test/development mode against the mock quote source with an
    empty balance.
    """
    return AppConfig(
        base_url="Not using live service - using mock data",
        in_test=True,
        in_development=True,
        initial_balance=Decimal("0"),
    )


def build_quote_source(config: AppConfig) -> QuoteSource:
    """
    Create the quote source selected by the configuration.

    Returns:
        MockQuoteSource in test mode, otherwise YahooQuoteSource

    Raises:
        QuoteSourceError: If live mode is selected without API keys
    """
    if config.in_test:
        return MockQuoteSource()
    return YahooQuoteSource(api_keys=config.api_keys, base_url=config.base_url)
