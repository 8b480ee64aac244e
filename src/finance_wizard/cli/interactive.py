"""Interactive chat mode."""
from typing import Callable, List

from google.genai import types

from .context_setup import quick_context_setup
from finance_wizard.analysis.analyzer import FinanceAnalyzer
from finance_wizard.analysis.models import FinancialInsights
from finance_wizard.llm.chat import AdvisorChat
from finance_wizard.tools.executor import ToolExecutor
from finance_wizard.tools.schemas import ToolCall, ToolResult
from finance_wizard.utils.exceptions import FinanceWizardError
from finance_wizard.utils.logger import get_logger
from finance_wizard.ynab.client import YNABClient
from finance_wizard.ynab.models import Transaction

logger = get_logger()

SEPARATOR = "-" * 60
QUIT_WORDS = {"quit", "exit", "bye", "goodbye", "done", "stop", "end", "close"}

HELP_TEXT = """Available Commands
  help            - Show this help message
  summary         - Show financial summary
  savings         - Show savings opportunities
  trends          - Show monthly trends
  recommendations - Get budget recommendations
  context         - View your personal context
  quit/exit       - Exit the application

Or just ask me anything about your finances!"""


def should_quit(message: str) -> bool:
    return message.strip().lower().rstrip("!.") in QUIT_WORDS


def format_summary(insights: FinancialInsights) -> str:
    lines = [
        "Financial Summary",
        f"Total Income:  ${insights.total_income:.2f}",
        f"Total Spent:   ${insights.total_spent:.2f}",
        f"Net Cash Flow: ${insights.net_cash_flow:.2f}",
        "",
        "Top Spending Categories:",
    ]
    for i, cat in enumerate(insights.top_spending_categories[:5], start=1):
        lines.append(f"{i}. {cat.category}: ${cat.total_amount:.2f} ({cat.percentage_of_total:.1f}%)")
    return "\n".join(lines)


def format_savings(insights: FinancialInsights) -> str:
    if not insights.savings_opportunities:
        return "Savings Opportunities\n\nNo major savings opportunities identified."

    lines = ["Savings Opportunities"]
    for i, opp in enumerate(insights.savings_opportunities[:5], start=1):
        lines += [
            "",
            f"{i}. {opp.description}",
            f"   Confidence: {opp.confidence}",
            f"   Potential Savings: ${opp.potential_savings:.2f}",
        ]
        lines += [f"   * {rec}" for rec in opp.recommendations]
    return "\n".join(lines)


def format_trends(insights: FinancialInsights) -> str:
    lines = ["Monthly Trends"]
    for trend in insights.monthly_trends:
        marker = "+" if trend.net_flow >= 0 else "-"
        lines.append(
            f"{trend.month}: Spent ${trend.spent:.2f}, Income ${trend.income:.2f}, "
            f"Net ${trend.net_flow:.2f} [{marker}]"
        )
    return "\n".join(lines)


class ChatSession:
    """State and control flow of one interactive chat."""

    def __init__(
        self,
        ynab_client: YNABClient,
        analyzer: FinanceAnalyzer,
        advisor: AdvisorChat,
        executor: ToolExecutor,
        analysis_months: int = 3,
        max_history_length: int = 20,
        recent_transactions: int = 20,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print
    ):
        self.ynab_client = ynab_client
        self.analyzer = analyzer
        self.advisor = advisor
        self.executor = executor
        self.analysis_months = analysis_months
        self.max_history_length = max_history_length
        self.recent_count = recent_transactions
        self.input_fn = input_fn
        self.output_fn = output_fn

        self.transactions: List[Transaction] = []
        self.insights = FinancialInsights()
        self.history: List[types.Content] = []

    def start(self) -> None:
        """Load data, print initial insights and run the chat loop."""
        self.output_fn("\nWelcome to Finance Wizard!")
        self.output_fn("Loading your financial data...\n")

        context_manager = self.advisor.context_manager
        if not context_manager.has_context():
            self.output_fn("First time setup!")
            answer = self.input_fn("Would you like to set up your personal context for better AI recommendations? [Y/n] ")
            if answer.strip().lower() in ("", "y", "yes"):
                quick_context_setup(context_manager, self.input_fn, self.output_fn)

        self.load_data()
        self.output_fn(f"Analyzed {len(self.transactions)} transactions from the last {self.analysis_months} months\n")

        self.output_fn("Generating AI insights...")
        self.output_fn(self.advisor.generate_insights(self.insights))
        self.output_fn(SEPARATOR)

        self.run_loop()

    def load_data(self) -> None:
        self.transactions = self.ynab_client.get_transactions(months=self.analysis_months)
        self.insights = self.analyzer.analyze_transactions(self.transactions)

    def run_loop(self) -> None:
        self.output_fn("Chat mode activated! Ask me anything about your finances.")
        self.output_fn('Type "help" for commands or "quit" to exit.\n')

        while True:
            try:
                message = self.input_fn("You: ").strip()
            except (EOFError, KeyboardInterrupt):
                self.output_fn("")
                break

            if not message:
                continue

            if should_quit(message):
                self.output_fn("Thanks for using Finance Wizard!")
                break

            if self.handle_command(message.lower()):
                continue

            try:
                self.converse(message)
            except FinanceWizardError as e:
                logger.error(f"Chat turn failed: {e}")
                self.output_fn(f"Error: {e}")
            except Exception as e:
                logger.exception(f"Unexpected error in chat turn: {e}")
                self.output_fn(f"Error: {e}")

            self.output_fn(SEPARATOR)

    def handle_command(self, command: str) -> bool:
        """Built-in commands; returns False for free-form questions."""
        if command == "help":
            self.output_fn(HELP_TEXT)
        elif command == "summary":
            self.output_fn(format_summary(self.insights))
        elif command == "savings":
            self.output_fn(format_savings(self.insights))
        elif command == "trends":
            self.output_fn(format_trends(self.insights))
        elif command == "recommendations":
            self.output_fn("Generating budget recommendations...")
            try:
                self.output_fn(self.advisor.generate_budget_recommendations(self.insights))
            except Exception as e:
                logger.error(f"Recommendations failed: {e}")
                self.output_fn(f"Error generating recommendations: {e}")
        elif command == "context":
            prompt = self.advisor.context_manager.generate_context_prompt()
            if prompt:
                self.output_fn(f"Your Personal Context\n{prompt}\n\nTo update: run `finance-wizard context --setup`")
            else:
                self.output_fn("No personal context set up.")
                self.output_fn("Run `finance-wizard context --setup` to add your information.")
        else:
            return False
        return True

    def converse(self, message: str) -> None:
        """Send a question, run requested tools and one continuation round."""
        self.output_fn("Thinking...")
        result = self.advisor.chat(message, self.insights, self._recent(), self.history)

        self.history.append(self.advisor.user_turn(message))
        if result.response or result.tool_calls:
            self.history.append(self.advisor.model_turn(result))

        if result.response:
            self.output_fn(f"Assistant: {result.response}")

        if result.tool_calls:
            outcomes = self.run_tools(result.tool_calls)
            self.history.append(self.advisor.tool_results_turn(outcomes))

            self.output_fn("Continuing...")
            continuation = self.advisor.chat("", self.insights, self._recent(), self.history)
            if continuation.response:
                self.output_fn(f"Assistant: {continuation.response}")
            if continuation.tool_calls:
                # Executed but not fed back, so the model turn stays out of history
                self.run_tools(continuation.tool_calls)
            elif continuation.response:
                self.history.append(self.advisor.model_turn(continuation))

        self.trim_history()

    def run_tools(self, calls: List[ToolCall]) -> List[tuple[ToolCall, ToolResult]]:
        outcomes = []
        for call in calls:
            self.output_fn(f"Executing: {call.name}")
            outcome = self.executor.execute_tool(call)
            if outcome.success:
                self.output_fn(outcome.message)
                self._apply_tool_data(call, outcome)
            else:
                self.output_fn(f"Error: {outcome.message}")
            outcomes.append((call, outcome))
        return outcomes

    def trim_history(self) -> None:
        """Keep the newest entries, starting on a plain user turn."""
        if len(self.history) <= self.max_history_length:
            return
        trimmed = self.history[-self.max_history_length:]
        while trimmed and not _is_plain_user_turn(trimmed[0]):
            trimmed.pop(0)
        self.history = trimmed

    def _apply_tool_data(self, call: ToolCall, outcome: ToolResult) -> None:
        if call.name == "sync_transactions" and outcome.data:
            months = outcome.data.get("months", self.analysis_months)
            self.transactions = self.ynab_client.get_transactions(months=months)
        elif call.name == "analyze_transactions" and outcome.data:
            self.insights = outcome.data["insights"]
            self.transactions = outcome.data["transactions"]

    def _recent(self) -> List[Transaction]:
        return sorted(self.transactions, key=lambda t: t.date, reverse=True)[:self.recent_count]


def _is_plain_user_turn(content: types.Content) -> bool:
    return content.role == "user" and all(part.function_response is None for part in content.parts or [])

