"""LLM chat module."""
from .chat import AdvisorChat, ChatResult, build_tool_declarations

__all__ = ["AdvisorChat", "ChatResult", "build_tool_declarations"]
