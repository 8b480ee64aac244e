"""Tests for configuration manager."""
import json
import unittest
import tempfile
import shutil
from pathlib import Path

from finance_wizard.config import AppSettings, Config, ConfigManager, SetupWizard
from finance_wizard.utils.exceptions import ConfigError

YNAB_TOKEN = "a" * 43


class TestConfigManager(unittest.TestCase):
    """Test ConfigManager functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.config_manager = ConfigManager(self.test_dir, environ={})

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_save_and_load_config(self):
        """Test saving and loading configuration."""
        config = Config(ynab_access_token=YNAB_TOKEN, gemini_api_key="gem", default_analysis_months=6)

        self.config_manager.save_config(config)
        loaded_config = self.config_manager.load_config()

        self.assertEqual(loaded_config, config)

    def test_missing_keys_returns_none(self):
        """Test load_config without both keys."""
        self.assertIsNone(self.config_manager.load_config())
        self.assertEqual(self.config_manager.missing_keys(), {"ynab": True, "gemini": True})

    def test_environment_overrides_file(self):
        """Test environment variables win over the file."""
        self.config_manager.save_config(Config(ynab_access_token=YNAB_TOKEN, gemini_api_key="gem"))
        manager = ConfigManager(self.test_dir, environ={"GEMINI_API_KEY": "env-key", "CACHE_DURATION_HOURS": "6"})

        config = manager.load_config()

        self.assertEqual(config.gemini_api_key, "env-key")
        self.assertEqual(config.cache_duration_hours, 6)
        self.assertEqual(config.ynab_access_token, YNAB_TOKEN)

    def test_environment_only(self):
        """Test configuration entirely from the environment."""
        manager = ConfigManager(self.test_dir, environ={"YNAB_ACCESS_TOKEN": YNAB_TOKEN, "GEMINI_API_KEY": "gem"})

        self.assertIsNotNone(manager.load_config())
        self.assertEqual(manager.missing_keys(), {"ynab": False, "gemini": False})

    def test_invalid_environment_value(self):
        """Test a non-numeric override is a configuration error."""
        manager = ConfigManager(self.test_dir, environ={"DEFAULT_ANALYSIS_MONTHS": "three"})

        with self.assertRaises(ConfigError):
            manager.load_config()

    def test_corrupt_config_file(self):
        """Test a malformed file is a configuration error."""
        (self.test_dir / "config.json").write_text("{", encoding="utf-8")

        with self.assertRaises(ConfigError):
            self.config_manager.load_config()

    def test_validate_config_valid(self):
        """Test validation with valid config."""
        is_valid, message = self.config_manager.validate_config(Config(YNAB_TOKEN, "gem"))
        self.assertTrue(is_valid)

    def test_validate_config_missing_key(self):
        """Test validation with missing API keys."""
        is_valid, message = self.config_manager.validate_config(Config("", "gem"))
        self.assertFalse(is_valid)
        self.assertIn("YNAB access token", message)

        is_valid, message = self.config_manager.validate_config(Config(YNAB_TOKEN, ""))
        self.assertFalse(is_valid)
        self.assertIn("Gemini API key", message)

    def test_validate_config_months(self):
        """Test analysis months must be positive."""
        is_valid, message = self.config_manager.validate_config(Config(YNAB_TOKEN, "gem", default_analysis_months=0))
        self.assertFalse(is_valid)

    def test_token_looks_unusual(self):
        """Test the token format heuristic."""
        self.assertFalse(ConfigManager.token_looks_unusual(YNAB_TOKEN))
        self.assertTrue(ConfigManager.token_looks_unusual("short"))
        self.assertTrue(ConfigManager.token_looks_unusual("x" * 30 + " with spaces"))

    def test_data_path(self):
        """Test an explicit data directory is used."""
        config = Config(YNAB_TOKEN, "gem", data_dir=str(self.test_dir / "data"))
        self.assertEqual(config.data_path, self.test_dir / "data")


class TestSetupWizard(unittest.TestCase):
    """Test the console setup wizard."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.config_manager = ConfigManager(self.test_dir, environ={})
        self.output = []

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def make_wizard(self, secrets, answers):
        secrets, answers = list(secrets), list(answers)
        return SetupWizard(
            self.config_manager,
            input_fn=lambda prompt: answers.pop(0),
            secret_fn=lambda prompt: secrets.pop(0),
            output_fn=self.output.append
        )

    def test_run_saves_config(self):
        """Test a complete run writes the config file."""
        config = self.make_wizard([YNAB_TOKEN, "gem"], ["4"]).run()

        self.assertEqual(config.default_analysis_months, 4)
        with open(self.test_dir / "config.json", "r", encoding="utf-8") as f:
            saved = json.load(f)
        self.assertEqual(saved["ynab_access_token"], YNAB_TOKEN)

    def test_run_with_blank_key(self):
        """Test an empty key aborts without saving."""
        config = self.make_wizard(["", "gem"], [""]).run()

        self.assertIsNone(config)
        self.assertFalse((self.test_dir / "config.json").exists())

    def test_only_missing_keys_prompted(self):
        """Test keys already in the environment are not asked for."""
        self.config_manager = ConfigManager(self.test_dir, environ={"GEMINI_API_KEY": "env-key"})

        config = self.make_wizard([YNAB_TOKEN], ["bad"]).run()

        self.assertEqual(config.gemini_api_key, "env-key")
        self.assertEqual(config.default_analysis_months, 3)


class TestAppSettings(unittest.TestCase):
    """Test bundled application settings."""

    def test_load_defaults(self):
        settings = AppSettings.load()

        self.assertEqual(settings.ynab_base_url, "https://api.ynab.com/v1")
        self.assertEqual(settings.chat_max_history_length, 20)
        self.assertEqual(settings.retry_max_retries, 3)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            AppSettings.load(Path("/nonexistent/config.yaml"))


if __name__ == "__main__":
    unittest.main()
