"""Custom exception classes for Finance Wizard."""


class FinanceWizardError(Exception):
    """Base exception for Finance Wizard."""
    pass


class ConfigError(FinanceWizardError):
    """Configuration-related errors."""
    pass


class NetworkError(FinanceWizardError):
    """Network and API-related errors."""
    pass


class YNABError(NetworkError):
    """YNAB API errors."""
    pass


class AuthenticationError(YNABError):
    """Rejected or missing YNAB access token."""
    pass


class LLMError(FinanceWizardError):
    """LLM chat errors."""
    pass


class ValidationError(FinanceWizardError):
    """Data validation errors."""
    pass


# Retryable errors
class RetryableError(FinanceWizardError):
    """Base class for errors that should trigger retry."""
    pass


class RetryableNetworkError(RetryableError, NetworkError):
    """Network errors that can be retried."""
    pass


class RetryableLLMError(RetryableError, LLMError):
    """LLM errors that can be retried."""
    pass
