"""Command-line interaction module."""
from .interactive import ChatSession, should_quit
from .context_setup import quick_context_setup, full_context_setup

__all__ = ["ChatSession", "should_quit", "quick_context_setup", "full_context_setup"]
