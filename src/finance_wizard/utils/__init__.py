"""Utility modules."""
from .logger import get_logger, configure_logging, set_budget_context
from .exceptions import (
    FinanceWizardError,
    ConfigError,
    NetworkError,
    YNABError,
    AuthenticationError,
    LLMError,
    ValidationError,
    RetryableError,
    RetryableNetworkError,
    RetryableLLMError
)
from .retry import retry_with_backoff
from .files import write_json_atomic, read_json

__all__ = [
    "get_logger",
    "configure_logging",
    "set_budget_context",
    "FinanceWizardError",
    "ConfigError",
    "NetworkError",
    "YNABError",
    "AuthenticationError",
    "LLMError",
    "ValidationError",
    "RetryableError",
    "RetryableNetworkError",
    "RetryableLLMError",
    "retry_with_backoff",
    "write_json_atomic",
    "read_json"
]
