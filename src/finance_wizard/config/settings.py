"""Application settings loader from YAML configuration."""
import yaml
from pathlib import Path
from dataclasses import dataclass

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "config.yaml"


@dataclass
class AppSettings:
    """Application-wide settings loaded from config.yaml."""

    # App info
    app_name: str
    app_version: str

    # Logging
    log_level: str
    log_max_file_size_mb: int
    log_backup_count: int

    # LLM
    llm_model_name: str
    llm_max_output_tokens: int
    llm_insights_max_output_tokens: int
    llm_temperature: float

    # YNAB
    ynab_base_url: str
    ynab_timeout_seconds: int

    # Chat
    chat_max_history_length: int
    chat_recent_transactions: int

    # Retry
    retry_max_retries: int
    retry_initial_delay_seconds: float
    retry_backoff_factor: float

    @classmethod
    def load(cls, config_path: Path = None) -> "AppSettings":
        """Load settings from YAML file."""
        if config_path is None:
            config_path = DEFAULT_SETTINGS_PATH

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)

        return cls(
            app_name=config["app"]["name"],
            app_version=str(config["app"]["version"]),
            log_level=config["logging"]["level"],
            log_max_file_size_mb=config["logging"]["max_file_size_mb"],
            log_backup_count=config["logging"]["backup_count"],
            llm_model_name=config["llm"]["model_name"],
            llm_max_output_tokens=config["llm"]["max_output_tokens"],
            llm_insights_max_output_tokens=config["llm"]["insights_max_output_tokens"],
            llm_temperature=config["llm"]["temperature"],
            ynab_base_url=config["ynab"]["base_url"],
            ynab_timeout_seconds=config["ynab"]["timeout_seconds"],
            chat_max_history_length=config["chat"]["max_history_length"],
            chat_recent_transactions=config["chat"]["recent_transactions"],
            retry_max_retries=config["retry"]["max_retries"],
            retry_initial_delay_seconds=config["retry"]["initial_delay_seconds"],
            retry_backoff_factor=config["retry"]["backoff_factor"]
        )
