"""YNAB REST API client with a local transaction cache."""
import calendar
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from .budget_manager import BudgetManager
from .cache import TransactionCache
from .models import Budget, Transaction, parse_transactions
from finance_wizard.utils.logger import get_logger, set_budget_context
from finance_wizard.utils.retry import retry_with_backoff
from finance_wizard.utils.exceptions import (
    AuthenticationError,
    NetworkError,
    RetryableNetworkError,
    YNABError
)

logger = get_logger()

DEFAULT_BASE_URL = "https://api.ynab.com/v1"


def _field(data: Any, key: str) -> Any:
    """Required key from a YNAB response payload."""
    try:
        return data[key]
    except (KeyError, TypeError):
        raise YNABError(f"YNAB response is missing '{key}'")


def subtract_months(day: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to month end."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class YNABClient:
    """Fetches budgets and transactions from YNAB."""

    def __init__(
        self,
        access_token: str,
        cache: TransactionCache,
        budget_manager: BudgetManager,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        backoff_factor: float = 2.0,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache
        self.budget_manager = budget_manager
        self.budget_id: Optional[str] = None

        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        })

        self._get = retry_with_backoff(
            max_retries=max_retries,
            initial_delay=initial_delay,
            backoff_factor=backoff_factor
        )(self._get_once)

    def get_budgets(self) -> List[Budget]:
        data = self._get("/budgets")
        try:
            return [Budget.from_api(b) for b in _field(data, "budgets")]
        except (KeyError, TypeError, AttributeError) as e:
            raise YNABError(f"Malformed budget list from YNAB: {e}")

    def get_selected_budget(self) -> Dict[str, Any]:
        """Full budget detail for the selected budget."""
        self.ensure_budget_selected()
        return _field(self._get(f"/budgets/{self.budget_id}"), "budget")

    def ensure_budget_selected(self) -> str:
        """Resolve the working budget from the saved selection or a prompt."""
        if self.budget_id:
            return self.budget_id

        budgets = self.get_budgets()
        if not budgets:
            raise YNABError("No budgets found in your YNAB account")

        saved_id = self.budget_manager.get_selected_budget_id()
        if saved_id and self.budget_manager.validate_selected_budget(budgets):
            self.budget_id = saved_id
            logger.info(f"Using selected budget: {self.budget_manager.get_selected_budget_name()}")
        else:
            self.budget_id = self.budget_manager.select_budget(budgets)

        set_budget_context(self.budget_id)
        return self.budget_id

    def change_budget(self) -> str:
        """Prompt for a different budget; clears the old budget's cache if it changed."""
        budgets = self.get_budgets()
        old_budget_id = self.budget_id
        self.budget_id = self.budget_manager.prompt_for_budget_reselection(budgets)
        set_budget_context(self.budget_id)

        if old_budget_id and old_budget_id != self.budget_id:
            self.cache.clear(old_budget_id)
            logger.info(f"Cleared cache for previous budget {old_budget_id}")

        return self.budget_id

    def get_transactions(
        self,
        months: int = 3,
        since_date: Optional[date] = None,
        use_cache: bool = True
    ) -> List[Transaction]:
        """Transactions since ``since_date`` (default: ``months`` ago), cache first."""
        start_date = since_date or subtract_months(date.today(), months)
        self.ensure_budget_selected()
        cache_key = self.cache.make_key(self.budget_id, start_date, months)

        if use_cache:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        logger.info(f"Fetching fresh transaction data from YNAB since {start_date.isoformat()}")
        data = self._get(
            f"/budgets/{self.budget_id}/transactions",
            params={"since_date": start_date.isoformat()}
        )
        transactions = parse_transactions(_field(data, "transactions"))

        self.cache.put(cache_key, transactions)
        logger.info(f"Fetched {len(transactions)} transactions")
        return transactions

    def sync_data(self, months: int = 3) -> Dict[str, Any]:
        """Refresh budget detail and transactions, bypassing the cache."""
        budget = self.get_selected_budget()
        transactions = self.get_transactions(months=months, use_cache=False)
        budget_name = _field(budget, "name")
        logger.info(f"Synced data for budget: {budget_name}")
        return {"budget_name": budget_name, "transaction_count": len(transactions)}

    def get_categories(self) -> List[Dict[str, Any]]:
        self.ensure_budget_selected()
        return _field(self._get(f"/budgets/{self.budget_id}/categories"), "category_groups")

    def get_accounts(self) -> List[Dict[str, Any]]:
        self.ensure_budget_selected()
        return _field(self._get(f"/budgets/{self.budget_id}/accounts"), "accounts")

    def clear_cache(self, budget_specific: bool = False) -> int:
        """Clear cached transactions for the current budget or for all budgets."""
        if budget_specific and self.budget_id:
            return self.cache.clear(self.budget_id)
        return self.cache.clear()

    def _get_once(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise RetryableNetworkError(f"YNAB request failed: {e}")
        except requests.RequestException as e:
            raise NetworkError(f"YNAB request failed: {e}")

        if response.status_code in (401, 403):
            raise AuthenticationError("YNAB rejected the access token (check YNAB_ACCESS_TOKEN)")
        if response.status_code == 429 or response.status_code >= 500:
            raise RetryableNetworkError(f"YNAB returned HTTP {response.status_code} for {path}")
        if response.status_code >= 400:
            raise YNABError(f"YNAB returned HTTP {response.status_code} for {path}: {self._error_detail(response)}")

        try:
            return response.json()["data"]
        except (ValueError, KeyError, TypeError):
            raise YNABError(f"YNAB returned an unreadable response for {path}")

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            return response.json()["error"]["detail"]
        except (ValueError, KeyError, TypeError):
            return response.text[:200]
