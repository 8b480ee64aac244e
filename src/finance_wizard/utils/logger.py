"""Logging infrastructure with budget context."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "finance_wizard"


class BudgetContextFilter(logging.Filter):
    """Add budget context to log records."""

    def __init__(self):
        super().__init__()
        self.budget_id: Optional[str] = None

    def filter(self, record):
        """Add budget_id to record."""
        record.budget_id = self.budget_id or "none"
        return True


class FinanceWizardLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_dir: Path,
        log_level: str = "INFO",
        max_file_size_mb: int = 5,
        backup_count: int = 10,
        console: bool = True
    ):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "finance-wizard.log"
        self.budget_filter = BudgetContextFilter()

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Remove existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [budget:%(budget_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(self.budget_filter)
        self.logger.addHandler(file_handler)

        # The console is shared with the chat UI, so only warnings go there
        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(logging.WARNING)
            console_handler.setFormatter(formatter)
            console_handler.addFilter(self.budget_filter)
            self.logger.addHandler(console_handler)

    def set_budget_context(self, budget_id: Optional[str]):
        """Set current budget context for logging."""
        self.budget_filter.budget_id = budget_id

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


_logger_instance: Optional[FinanceWizardLogger] = None


def configure_logging(
    log_dir: Path,
    log_level: str = "INFO",
    max_file_size_mb: int = 5,
    backup_count: int = 10
) -> logging.Logger:
    """Attach file and console handlers to the package logger."""
    global _logger_instance
    _logger_instance = FinanceWizardLogger(log_dir, log_level, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def get_logger() -> logging.Logger:
    """Get the package logger (unconfigured loggers propagate to root)."""
    return logging.getLogger(LOGGER_NAME)


def set_budget_context(budget_id: Optional[str]):
    """Set budget context for logging."""
    if _logger_instance:
        _logger_instance.set_budget_context(budget_id)
