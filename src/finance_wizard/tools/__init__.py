"""Chat tool declarations, dispatch and reports."""
from .schemas import AVAILABLE_TOOLS, TOOL_NAMES, ToolCall, ToolResult, decode_tool_call
from .executor import ToolExecutor
from .reports import render_report

__all__ = [
    "AVAILABLE_TOOLS",
    "TOOL_NAMES",
    "ToolCall",
    "ToolResult",
    "decode_tool_call",
    "ToolExecutor",
    "render_report"
]
