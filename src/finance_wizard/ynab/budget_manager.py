"""Persisted budget selection."""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from .models import Budget
from finance_wizard.utils.logger import get_logger
from finance_wizard.utils.files import write_json_atomic, read_json

logger = get_logger()


class BudgetManager:
    """Remembers which YNAB budget the user works with."""

    def __init__(
        self,
        config_file: Path,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print
    ):
        self.config_file = Path(config_file)
        self.input_fn = input_fn
        self.output_fn = output_fn

    def select_budget(self, budgets: List[Budget]) -> str:
        """Pick a budget (automatically when there is only one) and save it."""
        if not budgets:
            raise ValueError("No budgets to select from")

        if len(budgets) == 1:
            self.output_fn(f"Using budget: {budgets[0].name}")
            self._save_budget_config(budgets[0])
            return budgets[0].id

        self.output_fn("\nMultiple budgets found in your YNAB account:")
        for index, budget in enumerate(budgets, start=1):
            modified = (budget.last_modified_on or "")[:10] or "unknown"
            self.output_fn(f"{index}. {budget.name} ({budget.currency_symbol}), last modified {modified}")

        selected = budgets[self._ask_index(len(budgets))]
        self.output_fn(f"Selected budget: {selected.name}")
        self._save_budget_config(selected)
        return selected.id

    def prompt_for_budget_reselection(self, budgets: List[Budget]) -> str:
        """Ask whether to switch budgets; returns the (possibly new) budget id."""
        current_id = self.get_selected_budget_id()
        self.output_fn(f"\nCurrent budget: {self.get_selected_budget_name() or 'Unknown'}")

        if current_id is None or self._confirm("Would you like to switch to a different budget? [y/N] "):
            return self.select_budget(budgets)

        return current_id

    def get_selected_budget_id(self) -> Optional[str]:
        record = self._load()
        return record.get("selected_budget_id") if record else None

    def get_selected_budget_name(self) -> Optional[str]:
        record = self._load()
        return record.get("selected_budget_name") if record else None

    def validate_selected_budget(self, budgets: List[Budget]) -> bool:
        """True if the saved selection still exists in the account."""
        selected_id = self.get_selected_budget_id()
        if not selected_id:
            return False
        return any(budget.id == selected_id for budget in budgets)

    def has_budget_config(self) -> bool:
        return self.config_file.exists()

    def clear_budget_config(self) -> bool:
        if not self.config_file.exists():
            return False
        self.config_file.unlink()
        logger.info("Budget selection cleared")
        return True

    def _save_budget_config(self, budget: Budget) -> None:
        record = {
            "selected_budget_id": budget.id,
            "selected_budget_name": budget.name,
            "last_selected": datetime.now(timezone.utc).isoformat(),
        }
        write_json_atomic(self.config_file, record)
        logger.info(f"Selected budget {budget.name} ({budget.id})")

    def _load(self) -> Optional[dict]:
        if not self.config_file.exists():
            return None
        try:
            return read_json(self.config_file)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading budget config: {e}")
            return None

    def _ask_index(self, count: int) -> int:
        while True:
            raw = self.input_fn(f"Which budget would you like to use? [1-{count}] ").strip()
            if raw.isdigit() and 1 <= int(raw) <= count:
                return int(raw) - 1
            self.output_fn(f"Please enter a number between 1 and {count}")

    def _confirm(self, prompt: str) -> bool:
        return self.input_fn(prompt).strip().lower() in ("y", "yes")
