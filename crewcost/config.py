"""
Configuration loader for crewcost.

Loads settings from crewcost_config.yaml and provides typed access
to all configuration sections.
"""
import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional
from functools import lru_cache

import yaml


# Default config path relative to project root
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "crewcost_config.yaml"
CONFIG_ENV_VAR = "CREWCOST_CONFIG"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class CrewCostConfig:
    """
    Configuration manager for crewcost.

    Loads YAML configuration and provides typed access to all sections.
    Use get_config() to obtain the singleton instance.
    """

    def __init__(self, config_path: Optional[Path] = None):
        env_path = os.environ.get(CONFIG_ENV_VAR)
        self._config_path = config_path or (Path(env_path) if env_path else DEFAULT_CONFIG_PATH)
        self._config: dict = {}
        self._load()

    def _load(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(self._config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping")

    @property
    def version(self) -> str:
        """Configuration file version."""
        return self._config.get("version", "unknown")

    # =========================================================================
    # Database
    # =========================================================================

    @property
    def database_url(self) -> str:
        """SQLAlchemy database URL."""
        return self._config.get("database", {}).get("url", "sqlite:///./crewcost.db")

    # =========================================================================
    # Auth
    # =========================================================================

    @property
    def auth(self) -> dict:
        """Session authentication configuration."""
        return self._config.get("auth", {})

    @property
    def session_secret(self) -> str:
        """Secret used to sign the session cookie."""
        secret = self.auth.get("session_secret")
        if not secret:
            raise ConfigurationError("auth.session_secret must be set")
        return secret

    @property
    def session_cookie_name(self) -> str:
        return self.auth.get("cookie_name", "crewcost_session")

    @property
    def session_max_age(self) -> int:
        return self.auth.get("max_age_seconds", 14 * 24 * 3600)

    @property
    def min_password_length(self) -> int:
        return self.auth.get("min_password_length", 6)

    # =========================================================================
    # Money
    # =========================================================================

    @property
    def money(self) -> dict:
        """Money formatting configuration."""
        return self._config.get("money", {})

    @property
    def default_currency(self) -> str:
        return self.money.get("default_currency", "USD")

    def get_currency_symbol(self, currency: str) -> Optional[str]:
        """Display symbol for a currency code, or None if not configured."""
        return self.money.get("symbols", {}).get((currency or "").upper())

    # =========================================================================
    # Splits
    # =========================================================================

    @property
    def percentage_tolerance(self) -> Decimal:
        """Allowed deviation of a percentage split's sum from 100."""
        splits = self._config.get("splits", {})
        return Decimal(str(splits.get("percentage_tolerance", "0.01")))

    # =========================================================================
    # Reports
    # =========================================================================

    @property
    def reports(self) -> dict:
        return self._config.get("reports", {})

    @property
    def daily_window(self) -> int:
        """Number of most recent spending days shown in the daily series."""
        return self.reports.get("daily_window", 7)

    @property
    def top_categories(self) -> int:
        return self.reports.get("top_categories", 5)

    # =========================================================================
    # Receipts
    # =========================================================================

    @property
    def receipts(self) -> dict:
        """Receipt upload configuration."""
        return self._config.get("receipts", {})

    @property
    def receipt_directory(self) -> Path:
        return Path(self.receipts.get("directory", "./receipts"))

    @property
    def receipt_public_prefix(self) -> str:
        return self.receipts.get("public_prefix", "/receipts").rstrip("/")

    @property
    def receipt_max_bytes(self) -> int:
        return self.receipts.get("max_bytes", 10 * 1024 * 1024)

    @property
    def receipt_content_types(self) -> list[str]:
        return self.receipts.get("allowed_content_types", [
            "image/jpeg", "image/png", "image/gif", "application/pdf"
        ])

    # =========================================================================
    # Logging
    # =========================================================================

    @property
    def logging(self) -> dict:
        return self._config.get("logging", {})

    # =========================================================================
    # Raw Access
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Get a top-level config value by key."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Dictionary-style access to config."""
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        return key in self._config


@lru_cache(maxsize=1)
def get_config(config_path: Optional[str] = None) -> CrewCostConfig:
    """
    Get the singleton configuration instance.

    Args:
        config_path: Optional path to config file. Only used on first call.

    Returns:
        CrewCostConfig singleton instance
    """
    path = Path(config_path) if config_path else None
    return CrewCostConfig(path)


def reload_config() -> CrewCostConfig:
    """Reload configuration from disk and return new instance."""
    get_config.cache_clear()
    return get_config()


def configure_logging(config: Optional[CrewCostConfig] = None) -> None:
    """Apply the logging section of the configuration to the root logger."""
    config = config or get_config()
    settings = config.logging
    logging.basicConfig(
        level=getattr(logging, str(settings.get("level", "INFO")).upper(), logging.INFO),
        format=settings.get("format", '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )
