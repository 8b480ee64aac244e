"""Interactive prompts for building the user context."""
from typing import Any, Callable, Dict, List, Optional

from finance_wizard.context.manager import ContextManager

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def _ask_text(input_fn: InputFn, prompt: str) -> Optional[str]:
    value = input_fn(f"{prompt}: ").strip()
    return value or None


def _ask_number(input_fn: InputFn, output_fn: OutputFn, prompt: str, integer: bool = False) -> Optional[float]:
    while True:
        raw = input_fn(f"{prompt}: ").strip().replace(",", "").lstrip("$")
        if not raw:
            return None
        try:
            return int(raw) if integer else float(raw)
        except ValueError:
            output_fn("Please enter a number (or leave blank to skip)")


def _ask_list(input_fn: InputFn, prompt: str) -> Optional[List[str]]:
    raw = input_fn(f"{prompt} (comma separated): ").strip()
    if not raw:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


def _ask_choice(input_fn: InputFn, output_fn: OutputFn, prompt: str, choices: List[str]) -> Optional[str]:
    while True:
        raw = input_fn(f"{prompt} [{'/'.join(choices)}]: ").strip().lower()
        if not raw:
            return None
        if raw in choices:
            return raw
        output_fn(f"Please choose one of: {', '.join(choices)}")


def quick_context_setup(context_manager: ContextManager, input_fn: InputFn = input, output_fn: OutputFn = print) -> None:
    """A few essential questions; every answer may be skipped."""
    output_fn("Quick setup - press Enter to skip any question.\n")

    updates: Dict[str, Dict[str, Any]] = {
        "personal": {"name": _ask_text(input_fn, "What's your name")},
        "family": {"household_size": _ask_number(input_fn, output_fn, "Household size", integer=True)},
        "financial": {"monthly_income": _ask_number(input_fn, output_fn, "Monthly take-home income")},
        "goals": {"short_term": _ask_list(input_fn, "Financial goals for the next year")},
        "notes": {"financial_concerns": _ask_list(input_fn, "Biggest financial concerns")},
    }

    context_manager.update_context(updates)
    output_fn("Context saved. Run `finance-wizard context --setup` for the full questionnaire.")


def full_context_setup(context_manager: ContextManager, input_fn: InputFn = input, output_fn: OutputFn = print) -> None:
    """Walk through every context group."""
    output_fn("Personal context setup - press Enter to skip any question.")

    output_fn("\nAbout you")
    personal = {
        "name": _ask_text(input_fn, "Name"),
        "age": _ask_number(input_fn, output_fn, "Age", integer=True),
        "location": _ask_text(input_fn, "Location"),
        "occupation": _ask_text(input_fn, "Occupation"),
    }

    output_fn("\nFamily")
    family = {
        "marital_status": _ask_choice(input_fn, output_fn, "Marital status", ["single", "married", "divorced", "widowed"]),
        "children": _ask_number(input_fn, output_fn, "Number of children", integer=True),
        "household_size": _ask_number(input_fn, output_fn, "Household size", integer=True),
        "dependents": _ask_list(input_fn, "Other dependents"),
    }

    output_fn("\nFinances")
    financial = {
        "annual_income": _ask_number(input_fn, output_fn, "Annual income"),
        "monthly_income": _ask_number(input_fn, output_fn, "Monthly take-home income"),
        "primary_income_source": _ask_text(input_fn, "Primary income source"),
        "secondary_income": _ask_number(input_fn, output_fn, "Secondary monthly income"),
        "debt_total": _ask_number(input_fn, output_fn, "Total debt"),
        "emergency_fund_target": _ask_number(input_fn, output_fn, "Emergency fund target"),
        "current_savings": _ask_number(input_fn, output_fn, "Current savings"),
    }

    output_fn("\nGoals")
    goals = {
        "short_term": _ask_list(input_fn, "Goals within 1 year"),
        "medium_term": _ask_list(input_fn, "Goals within 1-5 years"),
        "long_term": _ask_list(input_fn, "Goals beyond 5 years"),
        "monthly_budget_target": _ask_number(input_fn, output_fn, "Monthly spending target"),
        "savings_rate": _ask_number(input_fn, output_fn, "Target savings rate (%)"),
    }

    output_fn("\nPreferences")
    preferences = {
        "risk_tolerance": _ask_choice(input_fn, output_fn, "Risk tolerance", ["low", "medium", "high"]),
        "investment_experience": _ask_choice(
            input_fn, output_fn, "Investment experience", ["beginner", "intermediate", "advanced"]
        ),
        "budgeting_style": _ask_choice(input_fn, output_fn, "Budgeting style", ["strict", "flexible", "loose"]),
        "priority_categories": _ask_list(input_fn, "Categories you want to focus on"),
    }

    output_fn("\nNotes")
    notes = {
        "financial_concerns": _ask_list(input_fn, "Financial concerns"),
        "upcoming_expenses": _ask_list(input_fn, "Upcoming large expenses"),
        "budget_challenges": _ask_list(input_fn, "Budgeting challenges"),
        "additional_context": _ask_text(input_fn, "Anything else the advisor should know"),
    }

    context_manager.update_context({
        "personal": personal,
        "family": family,
        "financial": financial,
        "goals": goals,
        "preferences": preferences,
        "notes": notes,
    })
    output_fn(f"\nContext saved to {context_manager.context_file}")
