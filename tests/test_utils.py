"""Tests for retry, logging and file helpers."""
import logging
import unittest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import Mock, patch

from finance_wizard.utils import (
    LLMError,
    RetryableNetworkError,
    configure_logging,
    read_json,
    retry_with_backoff,
    set_budget_context,
    write_json_atomic
)
from finance_wizard.utils.logger import LOGGER_NAME


class TestRetryWithBackoff(unittest.TestCase):
    """Test retry decorator."""

    @patch("finance_wizard.utils.retry.time.sleep")
    def test_succeeds_after_retries(self, mock_sleep):
        func = Mock(side_effect=[RetryableNetworkError("a"), RetryableNetworkError("b"), "ok"])
        func.__name__ = "fetch"

        result = retry_with_backoff(max_retries=3, initial_delay=0.5, backoff_factor=3)(func)()

        self.assertEqual(result, "ok")
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [0.5, 1.5])

    @patch("finance_wizard.utils.retry.time.sleep")
    def test_non_retryable_raised_immediately(self, mock_sleep):
        func = Mock(side_effect=LLMError("bad request"))
        func.__name__ = "generate"

        with self.assertRaises(LLMError):
            retry_with_backoff()(func)()
        self.assertEqual(func.call_count, 1)
        mock_sleep.assert_not_called()


class TestFiles(unittest.TestCase):
    """Test JSON helpers."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_write_creates_parents(self):
        path = self.test_dir / "nested" / "data.json"

        write_json_atomic(path, {"name": "Café"})

        self.assertEqual(read_json(path), {"name": "Café"})
        self.assertFalse(path.with_suffix(".json.tmp").exists())


class TestLogging(unittest.TestCase):
    """Test logging setup."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        """Clean up test fixtures."""
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        set_budget_context(None)
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_budget_context_in_log_file(self):
        logger = configure_logging(self.test_dir, log_level="DEBUG")

        set_budget_context("b1")
        logger.debug("fetched transactions")
        for handler in logger.handlers:
            handler.flush()

        content = (self.test_dir / "finance-wizard.log").read_text(encoding="utf-8")
        self.assertIn("[DEBUG] [budget:b1] fetched transactions", content)


if __name__ == "__main__":
    unittest.main()
