"""Local JSON cache for fetched transactions."""
import json
import time
from datetime import date
from pathlib import Path
from typing import List, Optional

from .models import Transaction
from finance_wizard.utils.logger import get_logger
from finance_wizard.utils.files import write_json_atomic, read_json

logger = get_logger()

CACHE_PREFIX = "transactions_"


class TransactionCache:
    """Stores transaction lists as one JSON file per cache key.

    Entries look like ``{"timestamp": <epoch millis>, "transactions": [...]}``
    and expire after ``max_age_hours``. Writes are atomic renames; the cache
    assumes a single process.
    """

    def __init__(self, cache_dir: Path, max_age_hours: float = 24):
        self.cache_dir = Path(cache_dir)
        self.max_age_hours = max_age_hours
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def make_key(budget_id: Optional[str], start_date: date, months: int) -> str:
        """Cache key for a budget, start date and month count."""
        return f"{CACHE_PREFIX}{budget_id or 'unknown'}_{start_date.isoformat()}_{months}"

    def get(self, key: str) -> Optional[List[Transaction]]:
        """Return cached transactions, or None when missing or stale."""
        cache_file = self._path(key)
        if not cache_file.exists():
            return None

        try:
            entry = read_json(cache_file)
            age_ms = self._now_ms() - int(entry["timestamp"])
            if age_ms >= self.max_age_hours * 60 * 60 * 1000:
                logger.debug(f"Cache entry {key} is stale ({age_ms / 3_600_000:.1f}h old)")
                return None
            transactions = [Transaction.from_dict(t) for t in entry["transactions"]]
        except (OSError, ValueError, KeyError, TypeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache entry {cache_file.name}: {e}")
            return None

        logger.info(f"Using cached transaction data ({len(transactions)} transactions)")
        return transactions

    def put(self, key: str, transactions: List[Transaction]) -> None:
        """Write transactions under key."""
        entry = {
            "timestamp": self._now_ms(),
            "transactions": [t.to_dict() for t in transactions],
        }
        write_json_atomic(self._path(key), entry)
        logger.debug(f"Cached {len(transactions)} transactions under {key}")

    def clear(self, budget_id: Optional[str] = None) -> int:
        """Delete entries for one budget, or every entry when budget_id is None."""
        prefix = f"{CACHE_PREFIX}{budget_id}_" if budget_id else ""
        deleted = 0
        for cache_file in self.cache_dir.glob("*.json"):
            if cache_file.name.startswith(prefix):
                cache_file.unlink()
                deleted += 1

        logger.info(f"Cleared {deleted} cache files" + (f" for budget {budget_id}" if budget_id else ""))
        return deleted

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
