"""Tool declarations and typed parameter models for chat tool calls."""
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ReportType = Literal["summary", "savings", "budget", "trends"]
AnalysisFocus = Literal["savings", "spending", "trends", "budget"]


class ToolParams(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class SyncTransactionsParams(ToolParams):
    tool: Literal["sync_transactions"] = "sync_transactions"
    months: int = Field(default=3, gt=0)


class ClearCacheParams(ToolParams):
    tool: Literal["clear_cache"] = "clear_cache"


class AnalyzeTransactionsParams(ToolParams):
    tool: Literal["analyze_transactions"] = "analyze_transactions"
    months: int = Field(default=3, gt=0)
    focus: Optional[AnalysisFocus] = None


class GenerateReportParams(ToolParams):
    tool: Literal["generate_report"] = "generate_report"
    type: ReportType = "summary"


class ChangeBudgetParams(ToolParams):
    tool: Literal["change_budget"] = "change_budget"


class ListTransactionsParams(ToolParams):
    tool: Literal["list_transactions"] = "list_transactions"
    category: Optional[str] = None
    payee: Optional[str] = None
    limit: int = Field(default=10, gt=0)
    min_amount: Optional[float] = Field(default=None, alias="minAmount")
    max_amount: Optional[float] = Field(default=None, alias="maxAmount")


ToolRequest = Annotated[
    Union[
        SyncTransactionsParams,
        ClearCacheParams,
        AnalyzeTransactionsParams,
        GenerateReportParams,
        ChangeBudgetParams,
        ListTransactionsParams,
    ],
    Field(discriminator="tool"),
]

_request_adapter = TypeAdapter(ToolRequest)


@dataclass
class ToolCall:
    """A tool invocation requested by the model."""
    name: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass
class ToolResult:
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None


def decode_tool_call(call: ToolCall) -> ToolParams:
    """Validate raw model arguments into the parameter model for ``call.name``.

    Raises:
        KeyError: unknown tool name
        pydantic.ValidationError: malformed parameters
    """
    if call.name not in TOOL_NAMES:
        raise KeyError(call.name)

    # Models sometimes send whole numbers as floats
    params = {k: _whole_number(v) for k, v in (call.parameters or {}).items() if v is not None}
    return _request_adapter.validate_python({**params, "tool": call.name})


def _whole_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# JSON-schema style declarations advertised to the chat model
AVAILABLE_TOOLS: List[Dict[str, Any]] = [
    {
        "name": "sync_transactions",
        "description": (
            "Force sync fresh transaction data from YNAB, ignoring cache. "
            "Use this when user mentions updating categories or wants fresh data."
        ),
        "parameters": {
            "months": {"type": "number", "description": "Number of months to sync (default: 3)"},
        },
    },
    {
        "name": "clear_cache",
        "description": (
            "Clear all cached transaction data. "
            "Use when user wants to force fresh data or mentions cache issues."
        ),
        "parameters": {},
    },
    {
        "name": "analyze_transactions",
        "description": (
            "Re-run analysis on current or newly synced transaction data. "
            "Use after syncing or when user asks for updated insights."
        ),
        "parameters": {
            "months": {"type": "number", "description": "Number of months to analyze (default: 3)"},
            "focus": {
                "type": "string",
                "description": "Focus area for analysis",
                "enum": ["savings", "spending", "trends", "budget"],
            },
        },
    },
    {
        "name": "generate_report",
        "description": (
            "Generate a comprehensive financial report. "
            "Use when user asks for a summary or detailed analysis."
        ),
        "parameters": {
            "type": {
                "type": "string",
                "description": "Type of report to generate",
                "enum": ["summary", "savings", "budget", "trends"],
            },
        },
    },
    {
        "name": "change_budget",
        "description": (
            "Change the selected YNAB budget. "
            "Use when user mentions switching budgets or working with a different budget."
        ),
        "parameters": {},
    },
    {
        "name": "list_transactions",
        "description": (
            "List example transactions based on criteria. "
            "Use when user asks for specific transaction examples."
        ),
        "parameters": {
            "category": {
                "type": "string",
                "description": 'Filter by category name (e.g., "Uncategorized", "Groceries")',
            },
            "payee": {"type": "string", "description": "Filter by payee name"},
            "limit": {"type": "number", "description": "Maximum number of transactions to show (default: 10)"},
            "minAmount": {"type": "number", "description": "Minimum transaction amount"},
            "maxAmount": {"type": "number", "description": "Maximum transaction amount"},
        },
    },
]

TOOL_NAMES = frozenset(tool["name"] for tool in AVAILABLE_TOOLS)
