"""Configuration manager backed by a JSON file and environment variables."""
import json
import os
import re
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Mapping, Optional

from finance_wizard.utils.exceptions import ConfigError
from finance_wizard.utils.files import write_json_atomic

APP_HOME_ENV = "FINANCE_WIZARD_HOME"

# Environment variable -> (config field, converter)
ENV_OVERRIDES = {
    "YNAB_ACCESS_TOKEN": ("ynab_access_token", str),
    "GEMINI_API_KEY": ("gemini_api_key", str),
    "CACHE_DURATION_HOURS": ("cache_duration_hours", int),
    "DEFAULT_ANALYSIS_MONTHS": ("default_analysis_months", int),
    "FINANCE_WIZARD_LOG_LEVEL": ("log_level", str),
}


@dataclass
class Config:
    """User configuration."""
    ynab_access_token: str
    gemini_api_key: str
    cache_duration_hours: int = 24
    default_analysis_months: int = 3
    data_dir: Optional[str] = None
    log_level: str = "INFO"

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir) if self.data_dir else default_app_dir() / "data"


def default_app_dir() -> Path:
    """Application directory: $FINANCE_WIZARD_HOME or ~/.finance-wizard."""
    home = os.getenv(APP_HOME_ENV)
    return Path(home) if home else Path.home() / ".finance-wizard"


class ConfigManager:
    """Loads, validates and saves the user configuration."""

    def __init__(self, config_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        self.config_dir = Path(config_dir) if config_dir else default_app_dir()
        self.config_file = self.config_dir / "config.json"
        self.environ = os.environ if environ is None else environ

    def load_config(self) -> Optional[Config]:
        """Load configuration from file, overlaid with environment variables.

        Returns None when neither source provides both API keys.
        """
        values = self.current_values()

        if not values.get("ynab_access_token") or not values.get("gemini_api_key"):
            return None

        return Config(**values)

    def current_values(self) -> dict:
        """Known config fields from the file, overlaid with environment variables."""
        values = self._read_file()
        values.update(self._read_environment())
        known = {f.name for f in fields(Config)}
        return {k: v for k, v in values.items() if k in known}

    def missing_keys(self) -> Dict[str, bool]:
        """Report which required API keys are absent from every source."""
        values = self.current_values()
        return {
            "ynab": not values.get("ynab_access_token"),
            "gemini": not values.get("gemini_api_key"),
        }

    def save_config(self, config: Config) -> None:
        """Save configuration to the config file."""
        try:
            write_json_atomic(self.config_file, asdict(config))
        except OSError as e:
            raise ConfigError(f"Failed to save configuration: {e}")

    def validate_config(self, config: Config) -> tuple[bool, str]:
        """Validate configuration values."""
        if not config.ynab_access_token:
            return False, "YNAB access token is required"

        if not config.gemini_api_key:
            return False, "Gemini API key is required"

        if config.cache_duration_hours < 0:
            return False, "Cache duration cannot be negative"

        if config.default_analysis_months < 1:
            return False, "Default analysis months must be at least 1"

        return True, "Configuration is valid"

    @staticmethod
    def token_looks_unusual(token: str) -> bool:
        """YNAB personal access tokens are long alphanumeric strings."""
        return len(token) < 20 or not re.fullmatch(r"[A-Za-z0-9_-]+", token)

    def _read_file(self) -> dict:
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to load configuration: {e}")

    def _read_environment(self) -> dict:
        values = {}
        for env_name, (field_name, convert) in ENV_OVERRIDES.items():
            raw = self.environ.get(env_name)
            if not raw:
                continue
            try:
                values[field_name] = convert(raw)
            except ValueError:
                raise ConfigError(f"Invalid value for {env_name}: {raw!r}")
        return values
