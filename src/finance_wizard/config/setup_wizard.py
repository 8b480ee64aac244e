"""Console setup wizard for first-time configuration."""
import getpass
from typing import Callable, Optional

from .manager import ConfigManager, Config
from finance_wizard.utils.logger import get_logger

logger = get_logger()


class SetupWizard:
    """Prompts for the API keys that are not configured yet."""

    def __init__(
        self,
        config_manager: ConfigManager,
        input_fn: Callable[[str], str] = input,
        secret_fn: Callable[[str], str] = getpass.getpass,
        output_fn: Callable[[str], None] = print
    ):
        self.config_manager = config_manager
        self.input_fn = input_fn
        self.secret_fn = secret_fn
        self.output_fn = output_fn

    def run(self) -> Optional[Config]:
        """Collect missing keys and save the configuration."""
        missing = self.config_manager.missing_keys()
        existing = self.config_manager.current_values()

        self.output_fn("Finance Wizard setup")
        self.output_fn("-" * 40)

        ynab_token = existing.get("ynab_access_token", "")
        gemini_key = existing.get("gemini_api_key", "")

        if missing["ynab"]:
            self.output_fn("Create a personal access token at https://app.ynab.com/settings/developer")
            ynab_token = self._ask_secret("YNAB access token: ")
            if ynab_token and self.config_manager.token_looks_unusual(ynab_token):
                self.output_fn("Warning: YNAB access token format looks unusual")

        if missing["gemini"]:
            self.output_fn("Create a Gemini API key at https://aistudio.google.com/apikey")
            gemini_key = self._ask_secret("Gemini API key: ")

        months = self._ask_int("Months of history to analyze by default [3]: ", default=3)

        existing.update(
            ynab_access_token=ynab_token,
            gemini_api_key=gemini_key,
            default_analysis_months=months
        )
        config = Config(**existing)

        is_valid, message = self.config_manager.validate_config(config)
        if not is_valid:
            self.output_fn(f"Setup incomplete: {message}")
            logger.warning(f"Setup wizard aborted: {message}")
            return None

        self.config_manager.save_config(config)
        self.output_fn(f"Configuration saved to {self.config_manager.config_file}")
        logger.info("Configuration saved by setup wizard")
        return config

    def _ask_secret(self, prompt: str) -> str:
        return self.secret_fn(prompt).strip()

    def _ask_int(self, prompt: str, default: int) -> int:
        raw = self.input_fn(prompt).strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            self.output_fn(f"Not a number, using {default}")
            return default
        return value if value > 0 else default
