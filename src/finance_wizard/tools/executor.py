"""Executes tool calls requested by the chat model."""
from typing import List

from pydantic import ValidationError

from .reports import render_report
from .schemas import (
    AnalyzeTransactionsParams,
    ChangeBudgetParams,
    ClearCacheParams,
    GenerateReportParams,
    ListTransactionsParams,
    SyncTransactionsParams,
    ToolCall,
    ToolParams,
    ToolResult,
    decode_tool_call
)
from finance_wizard.analysis.analyzer import FinanceAnalyzer, UNCATEGORIZED
from finance_wizard.utils.logger import get_logger
from finance_wizard.ynab.client import YNABClient
from finance_wizard.ynab.models import Transaction

logger = get_logger()

REPORT_MONTHS = 3
LIST_MONTHS = 3


class ToolExecutor:
    """Dispatches decoded tool calls against the YNAB client and analyzer."""

    def __init__(self, ynab_client: YNABClient, analyzer: FinanceAnalyzer):
        self.ynab_client = ynab_client
        self.analyzer = analyzer

    def execute_tool(self, tool_call: ToolCall) -> ToolResult:
        """Run a tool; failures come back as ``success=False`` results."""
        logger.info(f"Executing tool: {tool_call.name} {tool_call.parameters}")

        try:
            params = decode_tool_call(tool_call)
        except KeyError:
            return ToolResult(success=False, message=f"Unknown tool: {tool_call.name}")
        except ValidationError as e:
            return ToolResult(
                success=False,
                message=f"Invalid parameters for {tool_call.name}: {self._describe(e)}"
            )

        try:
            return self._dispatch(params)
        except Exception as e:
            logger.exception(f"Tool {tool_call.name} failed: {e}")
            return ToolResult(success=False, message=f"Error executing {tool_call.name}: {e}")

    def _dispatch(self, params: ToolParams) -> ToolResult:
        if isinstance(params, SyncTransactionsParams):
            return self._sync_transactions(params)
        if isinstance(params, ClearCacheParams):
            return self._clear_cache()
        if isinstance(params, AnalyzeTransactionsParams):
            return self._analyze_transactions(params)
        if isinstance(params, GenerateReportParams):
            return self._generate_report(params)
        if isinstance(params, ChangeBudgetParams):
            return self._change_budget()
        if isinstance(params, ListTransactionsParams):
            return self._list_transactions(params)
        return ToolResult(success=False, message=f"Unsupported tool parameters: {type(params).__name__}")

    def _sync_transactions(self, params: SyncTransactionsParams) -> ToolResult:
        transactions = self.ynab_client.get_transactions(months=params.months, use_cache=False)
        return ToolResult(
            success=True,
            message=f"Successfully synced {len(transactions)} transactions from the last {params.months} months",
            data={"transaction_count": len(transactions), "months": params.months}
        )

    def _clear_cache(self) -> ToolResult:
        deleted = self.ynab_client.clear_cache(budget_specific=True)
        return ToolResult(
            success=True,
            message=f"Cache cleared successfully for current budget ({deleted} files removed)",
            data={"files_removed": deleted}
        )

    def _analyze_transactions(self, params: AnalyzeTransactionsParams) -> ToolResult:
        transactions = self.ynab_client.get_transactions(months=params.months)
        insights = self.analyzer.analyze_transactions(transactions)

        lines = [
            f"Analysis complete for {len(transactions)} transactions",
            f"Total Spent: ${insights.total_spent:.2f}",
            f"Net Cash Flow: ${insights.net_cash_flow:.2f}",
        ]

        if params.focus == "savings":
            lines += ["", "Top Savings Opportunities:"]
            for i, opp in enumerate(insights.savings_opportunities[:3], start=1):
                lines.append(f"{i}. {opp.description} (${opp.potential_savings:.2f})")
        elif params.focus == "spending":
            lines += ["", "Top Spending Categories:"]
            for i, cat in enumerate(insights.top_spending_categories[:3], start=1):
                lines.append(f"{i}. {cat.category}: ${cat.total_amount:.2f} ({cat.percentage_of_total:.1f}%)")
        elif params.focus == "trends":
            lines += ["", "Monthly Trends:"]
            for trend in insights.monthly_trends[-3:]:
                lines.append(f"{trend.month}: Net ${trend.net_flow:.2f}")

        return ToolResult(
            success=True,
            message="\n".join(lines),
            data={"insights": insights, "transactions": transactions, "months": params.months}
        )

    def _generate_report(self, params: GenerateReportParams) -> ToolResult:
        transactions = self.ynab_client.get_transactions(months=REPORT_MONTHS)
        insights = self.analyzer.analyze_transactions(transactions)
        report = render_report(params.type, insights, transactions)

        return ToolResult(
            success=True,
            message=f"{params.type.capitalize()} report generated:\n\n{report}",
            data={"report_type": params.type, "insights": insights}
        )

    def _change_budget(self) -> ToolResult:
        self.ynab_client.change_budget()
        budget_name = self.ynab_client.budget_manager.get_selected_budget_name()
        return ToolResult(success=True, message=f"Budget changed to: {budget_name}")

    def _list_transactions(self, params: ListTransactionsParams) -> ToolResult:
        transactions = self.ynab_client.get_transactions(months=LIST_MONTHS)
        matches = filter_transactions(transactions, params)
        examples = sorted(matches, key=lambda t: t.date, reverse=True)[:params.limit]

        if not examples:
            return ToolResult(success=True, message="No transactions found matching the criteria.")

        lines = [f"Found {len(matches)} matching transactions. Here are the {len(examples)} most recent:", ""]
        for index, txn in enumerate(examples, start=1):
            sign = "-" if txn.amount < 0 else "+"
            memo = f" ({txn.memo})" if txn.memo else ""
            lines.append(f"{index}. {txn.date.isoformat()}: {txn.payee_name or 'Unknown'}")
            lines.append(f"   {sign}${abs(txn.amount):.2f} - {txn.category_name or UNCATEGORIZED}{memo}")
            if txn.account_name:
                lines.append(f"   Account: {txn.account_name}")
            lines.append("")

        return ToolResult(
            success=True,
            message="\n".join(lines).rstrip(),
            data={"transactions": examples, "total_found": len(matches)}
        )

    @staticmethod
    def _describe(error: ValidationError) -> str:
        return "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'parameters'}: {err['msg']}"
            for err in error.errors()
        )


def filter_transactions(transactions: List[Transaction], params: ListTransactionsParams) -> List[Transaction]:
    """Apply the list_transactions predicates (substring matches are case-insensitive)."""
    matches = [t for t in transactions if not t.deleted]

    if params.category:
        needle = params.category.lower()
        matches = [t for t in matches if needle in (t.category_name or UNCATEGORIZED).lower()]

    if params.payee:
        needle = params.payee.lower()
        matches = [t for t in matches if needle in (t.payee_name or "").lower()]

    if params.min_amount is not None:
        matches = [t for t in matches if abs(t.amount) >= params.min_amount]

    if params.max_amount is not None:
        matches = [t for t in matches if abs(t.amount) <= params.max_amount]

    return matches
