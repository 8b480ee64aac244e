"""Configuration management module."""
from .manager import ConfigManager, Config, default_app_dir
from .settings import AppSettings
from .setup_wizard import SetupWizard

__all__ = ["ConfigManager", "Config", "default_app_dir", "AppSettings", "SetupWizard"]
