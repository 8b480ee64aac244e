"""Tests for the user context manager."""
import unittest
import tempfile
import shutil
from pathlib import Path

from finance_wizard.context import ContextManager, UserContext, merge_context


class TestMergeContext(unittest.TestCase):
    """Test context merging."""

    def test_lists_replaced(self):
        """Test list fields are replaced, not appended."""
        current = UserContext.model_validate({"goals": {"short_term": ["Pay off card"]}})

        merged = merge_context(current, {"goals": {"short_term": ["Build emergency fund"]}})

        self.assertEqual(merged.goals.short_term, ["Build emergency fund"])

    def test_absent_and_none_fields_kept(self):
        """Test fields not given, or given as None, keep their values."""
        current = UserContext.model_validate({"personal": {"name": "Sam", "age": 41}})

        merged = merge_context(current, {"personal": {"age": 42, "name": None}})

        self.assertEqual(merged.personal.name, "Sam")
        self.assertEqual(merged.personal.age, 42)

    def test_invalid_choice_rejected(self):
        """Test enumerated fields are validated."""
        with self.assertRaises(ValueError):
            merge_context(UserContext(), {"preferences": {"risk_tolerance": "extreme"}})


class TestContextManager(unittest.TestCase):
    """Test ContextManager functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.context_file = self.test_dir / "user-context.json"
        self.manager = ContextManager(self.context_file)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_no_context(self):
        """Test behaviour before anything is saved."""
        self.assertFalse(self.manager.has_context())
        self.assertIsNone(self.manager.get_context())
        self.assertEqual(self.manager.generate_context_prompt(), "")
        self.assertFalse(self.manager.clear_context())

    def test_update_persists(self):
        """Test updates are written and readable by a new manager."""
        self.manager.update_context({"personal": {"name": "Sam"}, "financial": {"monthly_income": 5200}})

        reloaded = ContextManager(self.context_file).get_context()

        self.assertEqual(reloaded.personal.name, "Sam")
        self.assertEqual(reloaded.financial.monthly_income, 5200)

    def test_generate_context_prompt(self):
        """Test rendered sections only include populated fields."""
        self.manager.update_context({
            "personal": {"name": "Sam", "occupation": "Nurse"},
            "financial": {"annual_income": 85000, "debt_total": 1234.5},
            "goals": {"short_term": ["Vacation", "New laptop"]},
        })

        prompt = self.manager.generate_context_prompt()

        self.assertTrue(prompt.startswith("PERSONAL INFORMATION:"))
        self.assertIn("- Name: Sam", prompt)
        self.assertIn("- Annual Income: $85,000", prompt)
        self.assertIn("- Total Debt: $1,234.50", prompt)
        self.assertIn("- Short-term (1 year): Vacation, New laptop", prompt)
        self.assertNotIn("PREFERENCES:", prompt)
        self.assertNotIn("Age", prompt)

    def test_corrupt_file(self):
        """Test an unreadable context file is ignored."""
        self.context_file.write_text("[1, 2", encoding="utf-8")

        self.assertIsNone(self.manager.load_context())

    def test_clear_context(self):
        """Test clearing removes the file and cached context."""
        self.manager.update_context({"personal": {"name": "Sam"}})

        self.assertTrue(self.manager.clear_context())
        self.assertFalse(self.context_file.exists())
        self.assertIsNone(self.manager.get_context())


if __name__ == "__main__":
    unittest.main()
