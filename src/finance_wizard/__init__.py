"""Finance Wizard - YNAB transaction analysis with AI insights."""

__version__ = "1.0.0"
