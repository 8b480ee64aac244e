"""YNAB data source module."""
from .models import Transaction, TransactionSchema, ClearedStatus, Budget, parse_transactions
from .cache import TransactionCache
from .budget_manager import BudgetManager
from .client import YNABClient

__all__ = [
    "Transaction",
    "TransactionSchema",
    "ClearedStatus",
    "Budget",
    "parse_transactions",
    "TransactionCache",
    "BudgetManager",
    "YNABClient"
]
