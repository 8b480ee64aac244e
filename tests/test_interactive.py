"""Tests for the interactive chat session."""
import unittest
import tempfile
import shutil
from datetime import date
from pathlib import Path
from unittest.mock import Mock

import httpx

from finance_wizard.analysis import FinanceAnalyzer, FinancialInsights
from finance_wizard.cli import ChatSession, should_quit, quick_context_setup
from finance_wizard.context import ContextManager
from finance_wizard.llm import AdvisorChat, ChatResult
from finance_wizard.tools import ToolCall, ToolResult
from finance_wizard.utils.exceptions import LLMError
from finance_wizard.utils.logger import LOGGER_NAME
from finance_wizard.ynab.models import Transaction

TRANSACTIONS = [
    Transaction(id="t1", date=date(2025, 5, 2), amount=-42.0, account_id="a", account_name="Checking",
                payee_name="Grocer", category_name="Groceries"),
    Transaction(id="t2", date=date(2025, 5, 9), amount=-8.0, account_id="a", account_name="Checking",
                payee_name="Cafe", category_name="Coffee"),
]


class ScriptedInput:
    """Returns canned answers, then raises EOFError."""

    def __init__(self, *answers):
        self.answers = list(answers)

    def __call__(self, prompt):
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


class TestShouldQuit(unittest.TestCase):

    def test_quit_words(self):
        for word in ("quit", "EXIT", " bye ", "Goodbye!", "done."):
            self.assertTrue(should_quit(word), word)
        self.assertFalse(should_quit("quit smoking budget"))


class TestChatSession(unittest.TestCase):
    """Test ChatSession functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.context_manager = ContextManager(self.test_dir / "user-context.json")
        self.advisor = AdvisorChat(api_key="key", context_manager=self.context_manager, client=Mock())
        self.advisor.chat = Mock(return_value=ChatResult(response="Groceries are your top category."))
        self.advisor.generate_insights = Mock(return_value="You are doing fine.")
        self.ynab_client = Mock()
        self.ynab_client.get_transactions.return_value = list(TRANSACTIONS)
        self.executor = Mock()
        self.output = []

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def make_session(self, *answers, max_history_length=20):
        return ChatSession(
            ynab_client=self.ynab_client,
            analyzer=FinanceAnalyzer(),
            advisor=self.advisor,
            executor=self.executor,
            max_history_length=max_history_length,
            input_fn=ScriptedInput(*answers),
            output_fn=self.output.append
        )

    def test_start_declines_context_setup(self):
        """Test startup loads data, shows insights and exits on EOF."""
        session = self.make_session("n")

        session.start()

        self.assertIn("You are doing fine.", self.output)
        self.assertIn("Analyzed 2 transactions from the last 3 months\n", self.output)
        self.assertAlmostEqual(session.insights.total_spent, 50.0)
        self.assertFalse(self.context_manager.has_context())

    def test_commands_and_question(self):
        """Test built-in commands skip the model, questions do not."""
        session = self.make_session("help", "", "summary", "What is my biggest expense?", "quit")
        session.load_data()

        session.run_loop()

        self.assertEqual(self.advisor.chat.call_count, 1)
        self.assertIn("Assistant: Groceries are your top category.", self.output)
        self.assertTrue(any(line.startswith("Available Commands") for line in self.output))
        self.assertTrue(any(line.startswith("Financial Summary") for line in self.output))
        self.assertEqual(self.output[-1], "Thanks for using Finance Wizard!")
        self.assertEqual([c.role for c in session.history], ["user", "model"])

    def test_tool_call_round(self):
        """Test tool results are fed back for one continuation."""
        self.advisor.chat.side_effect = [
            ChatResult(response="", tool_calls=[ToolCall("clear_cache", {}, "c1")]),
            ChatResult(response="Cache is clear now."),
        ]
        self.executor.execute_tool.return_value = ToolResult(True, "Cache cleared", {"files_removed": 1})
        session = self.make_session()

        session.converse("Please clear my cache")

        self.assertIn("Executing: clear_cache", self.output)
        self.assertIn("Assistant: Cache is clear now.", self.output)
        self.assertEqual([c.role for c in session.history], ["user", "model", "user", "model"])
        self.assertEqual(session.history[2].parts[0].function_response.response, {"output": "Cache cleared"})

        self.assertEqual(self.advisor.chat.call_args_list[1].args[0], "")

    def test_continuation_tool_calls_run_once(self):
        """Test tools requested in the continuation run but are not fed back."""
        self.advisor.chat.side_effect = [
            ChatResult(tool_calls=[ToolCall("clear_cache", {}, "c1")]),
            ChatResult(tool_calls=[ToolCall("sync_transactions", {"months": 3}, "c2")]),
        ]
        self.executor.execute_tool.side_effect = [
            ToolResult(True, "Cache cleared"),
            ToolResult(True, "Synced", {"transaction_count": 2, "months": 3}),
        ]
        session = self.make_session()

        session.converse("Refresh everything")

        self.assertEqual(self.executor.execute_tool.call_count, 2)
        self.assertEqual(self.advisor.chat.call_count, 2)
        self.assertEqual(len(session.history), 3)

    def test_failed_tool_reported(self):
        self.advisor.chat.side_effect = [
            ChatResult(tool_calls=[ToolCall("sync_transactions", {}, "c1")]),
            ChatResult(response="Sorry, YNAB is unavailable."),
        ]
        self.executor.execute_tool.return_value = ToolResult(False, "Error executing sync_transactions: down")
        session = self.make_session()

        session.converse("sync please")

        self.assertIn("Error: Error executing sync_transactions: down", self.output)
        self.assertEqual(session.history[2].parts[0].function_response.response,
                         {"error": "Error executing sync_transactions: down"})

    def test_analyze_tool_replaces_insights(self):
        """Test a successful analysis updates session state."""
        new_insights = FinancialInsights(total_spent=999.0)
        self.advisor.chat.side_effect = [
            ChatResult(tool_calls=[ToolCall("analyze_transactions", {"months": 6}, "c1")]),
            ChatResult(response="Updated."),
        ]
        self.executor.execute_tool.return_value = ToolResult(
            True, "Analysis complete", {"insights": new_insights, "transactions": [], "months": 6}
        )
        session = self.make_session()

        session.converse("Re-run the analysis for six months")

        self.assertIs(session.insights, new_insights)
        self.assertEqual(session.transactions, [])

    def test_empty_reply_not_added_to_history(self):
        self.advisor.chat.return_value = ChatResult()
        session = self.make_session()

        session.converse("Hello?")

        self.assertEqual([c.role for c in session.history], ["user"])

    def test_llm_error_keeps_loop_running(self):
        """Test a failed turn is reported and the loop continues."""
        self.advisor.chat.side_effect = [LLMError("Gemini request failed"), ChatResult(response="Hi again")]
        session = self.make_session("first", "second")

        session.run_loop()

        self.assertIn("Error: Gemini request failed", self.output)
        self.assertIn("Assistant: Hi again", self.output)

    def test_unexpected_error_keeps_loop_running(self):
        """Test a non-application error is reported and the loop continues."""
        self.advisor.chat.side_effect = [httpx.ConnectError("offline"), ChatResult(response="Back online")]
        session = self.make_session("first", "second")

        with self.assertLogs(LOGGER_NAME, level="ERROR"):
            session.run_loop()

        self.assertIn("Error: offline", self.output)
        self.assertIn("Assistant: Back online", self.output)

    def test_recommendations_failure_reported(self):
        self.advisor.generate_budget_recommendations = Mock(side_effect=RuntimeError("quota"))
        session = self.make_session("recommendations")

        with self.assertLogs(LOGGER_NAME, level="ERROR"):
            session.run_loop()

        self.assertIn("Error generating recommendations: quota", self.output)

    def test_trim_history_starts_with_user_message(self):
        """Test trimming drops leading model and tool-result turns."""
        self.advisor.chat.side_effect = [
            ChatResult(tool_calls=[ToolCall("clear_cache", {}, "c1")]),
            ChatResult(response="Cleared."),
            ChatResult(response="Anything else?"),
        ]
        self.executor.execute_tool.return_value = ToolResult(True, "Cache cleared")
        session = self.make_session(max_history_length=5)

        session.converse("clear cache")
        session.converse("thanks")

        self.assertLessEqual(len(session.history), 5)
        first = session.history[0]
        self.assertEqual(first.role, "user")
        self.assertIsNone(first.parts[0].function_response)
        self.assertEqual(first.parts[0].text, "thanks")


class TestQuickContextSetup(unittest.TestCase):
    """Test the quick context questionnaire."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.context_manager = ContextManager(self.test_dir / "user-context.json")

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_answers_saved(self):
        answers = ScriptedInput("Sam", "three", "3", "$5,200", "Vacation, New car", "")
        output = []

        quick_context_setup(self.context_manager, answers, output.append)

        context = self.context_manager.get_context()
        self.assertEqual(context.personal.name, "Sam")
        self.assertEqual(context.family.household_size, 3)
        self.assertEqual(context.financial.monthly_income, 5200.0)
        self.assertEqual(context.goals.short_term, ["Vacation", "New car"])
        self.assertEqual(context.notes.financial_concerns, [])
        self.assertIn("Please enter a number (or leave blank to skip)", output)


if __name__ == "__main__":
    unittest.main()
