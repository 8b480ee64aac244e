"""Persistence and prompt rendering for the user context."""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .models import UserContext
from finance_wizard.utils.logger import get_logger
from finance_wizard.utils.files import write_json_atomic, read_json

logger = get_logger()

GROUPS = ("personal", "family", "financial", "goals", "preferences", "notes")


def merge_context(current: UserContext, updates: Dict[str, Dict[str, Any]]) -> UserContext:
    """
    Merge updates into a context, one group at a time.

    Fields present in an update group replace the current values; lists are
    replaced wholesale, never appended to. Fields absent from the update, or
    set to None, keep their current values.
    """
    merged = current.model_dump()
    for group in GROUPS:
        group_updates = updates.get(group) or {}
        merged[group].update({k: v for k, v in group_updates.items() if v is not None})
    return UserContext.model_validate(merged)


def _money(value: float) -> str:
    return f"${value:,.0f}" if float(value).is_integer() else f"${value:,.2f}"


def _joined(values: List[str]) -> str:
    return ", ".join(values)


class ContextManager:
    """Loads, saves and merges the user context JSON file."""

    def __init__(self, context_file: Path):
        self.context_file = Path(context_file)
        self._context: Optional[UserContext] = None

    def load_context(self) -> Optional[UserContext]:
        if not self.context_file.exists():
            return None

        try:
            self._context = UserContext.model_validate(read_json(self.context_file))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error loading user context: {e}")
            return None
        return self._context

    def save_context(self, context: UserContext) -> None:
        write_json_atomic(self.context_file, context.model_dump(mode="json"))
        self._context = context
        logger.info(f"Context saved to {self.context_file}")

    def get_context(self) -> Optional[UserContext]:
        return self._context or self.load_context()

    def update_context(self, updates: Dict[str, Dict[str, Any]]) -> UserContext:
        current = self.get_context() or UserContext()
        merged = merge_context(current, updates)
        self.save_context(merged)
        return merged

    def has_context(self) -> bool:
        return self.context_file.exists()

    def clear_context(self) -> bool:
        self._context = None
        if not self.context_file.exists():
            return False
        self.context_file.unlink()
        logger.info("User context cleared")
        return True

    def generate_context_prompt(self) -> str:
        """Render the context as labelled sections for the system prompt."""
        context = self.get_context()
        if not context:
            return ""

        sections = []
        p, fam, fin, goals, prefs, notes = (
            context.personal, context.family, context.financial,
            context.goals, context.preferences, context.notes
        )

        sections += self._section("PERSONAL INFORMATION:", [
            ("Name", p.name),
            ("Age", p.age),
            ("Location", p.location),
            ("Occupation", p.occupation),
        ])
        sections += self._section("FAMILY INFORMATION:", [
            ("Marital Status", fam.marital_status),
            ("Children", fam.children),
            ("Household Size", fam.household_size),
            ("Dependents", _joined(fam.dependents)),
        ])
        sections += self._section("FINANCIAL INFORMATION:", [
            ("Annual Income", fin.annual_income and _money(fin.annual_income)),
            ("Monthly Income", fin.monthly_income and _money(fin.monthly_income)),
            ("Primary Income Source", fin.primary_income_source),
            ("Secondary Income", fin.secondary_income and _money(fin.secondary_income)),
            ("Total Debt", fin.debt_total and _money(fin.debt_total)),
            ("Emergency Fund Target", fin.emergency_fund_target and _money(fin.emergency_fund_target)),
            ("Current Savings", fin.current_savings and _money(fin.current_savings)),
        ])
        sections += self._section("FINANCIAL GOALS:", [
            ("Short-term (1 year)", _joined(goals.short_term)),
            ("Medium-term (1-5 years)", _joined(goals.medium_term)),
            ("Long-term (5+ years)", _joined(goals.long_term)),
            ("Monthly Budget Target", goals.monthly_budget_target and _money(goals.monthly_budget_target)),
            ("Target Savings Rate", goals.savings_rate and f"{goals.savings_rate:g}%"),
        ])
        sections += self._section("PREFERENCES:", [
            ("Risk Tolerance", prefs.risk_tolerance),
            ("Investment Experience", prefs.investment_experience),
            ("Budgeting Style", prefs.budgeting_style),
            ("Priority Categories", _joined(prefs.priority_categories)),
        ])
        sections += self._section("ADDITIONAL NOTES:", [
            ("Financial Concerns", _joined(notes.financial_concerns)),
            ("Upcoming Expenses", _joined(notes.upcoming_expenses)),
            ("Budget Challenges", _joined(notes.budget_challenges)),
            ("Additional Context", notes.additional_context),
        ])

        return "\n".join(sections).strip()

    @staticmethod
    def _section(title: str, items) -> List[str]:
        lines = [f"- {label}: {value}" for label, value in items if value]
        if not lines:
            return []
        return ["", title] + lines
