"""User context module."""
from .models import UserContext
from .manager import ContextManager, merge_context

__all__ = ["UserContext", "ContextManager", "merge_context"]
