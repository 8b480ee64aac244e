"""Plain-text financial reports."""
from typing import Callable, Dict, List

from finance_wizard.analysis.models import FinancialInsights
from finance_wizard.ynab.models import Transaction


def _money(value: float) -> str:
    return f"${value:.2f}"


def summary_report(insights: FinancialInsights, transactions: List[Transaction]) -> str:
    lines = [
        "FINANCIAL SUMMARY REPORT",
        "=" * 32,
        "",
        "Financial Overview:",
        f"- Total Income: {_money(insights.total_income)}",
        f"- Total Spent: {_money(insights.total_spent)}",
        f"- Net Cash Flow: {_money(insights.net_cash_flow)}",
        f"- Transactions Analyzed: {len(transactions)}",
        "",
        "Top Spending Categories:",
    ]
    for i, cat in enumerate(insights.top_spending_categories[:5], start=1):
        lines.append(f"{i}. {cat.category}: {_money(cat.total_amount)} ({cat.percentage_of_total:.1f}%)")

    lines += ["", "Top Savings Opportunities:"]
    for i, opp in enumerate(insights.savings_opportunities[:3], start=1):
        lines.append(f"{i}. {opp.description} - Potential: {_money(opp.potential_savings)}")

    return "\n".join(lines)


def savings_report(insights: FinancialInsights, transactions: List[Transaction]) -> str:
    total_potential = sum(opp.potential_savings for opp in insights.savings_opportunities)
    lines = [
        "SAVINGS OPPORTUNITIES REPORT",
        "=" * 32,
        "",
        f"Total Potential Savings: {_money(total_potential)}",
        "",
        "Detailed Opportunities:",
    ]
    for i, opp in enumerate(insights.savings_opportunities, start=1):
        lines += [
            "",
            f"{i}. {opp.description}",
            f"   - Potential Savings: {_money(opp.potential_savings)}",
            f"   - Confidence: {opp.confidence}",
            f"   - Type: {opp.type}",
            f"   - Recommendations: {'; '.join(opp.recommendations)}",
        ]
    if not insights.savings_opportunities:
        lines.append("No major savings opportunities identified.")

    return "\n".join(lines)


def budget_report(insights: FinancialInsights, transactions: List[Transaction]) -> str:
    savings_rate = (
        (insights.total_income - insights.total_spent) / insights.total_income * 100
        if insights.total_income > 0 else 0.0
    )
    lines = [
        "BUDGET PERFORMANCE REPORT",
        "=" * 32,
        "",
        "Budget Overview:",
        f"- Income: {_money(insights.total_income)}",
        f"- Spending: {_money(insights.total_spent)}",
        f"- Savings Rate: {savings_rate:.1f}%",
        f"- Net Position: {_money(insights.net_cash_flow)}",
        "",
        "Spending Breakdown:",
    ]
    for cat in insights.top_spending_categories:
        lines += [
            "",
            f"- {cat.category}: {_money(cat.total_amount)}",
            f"  {cat.transaction_count} transactions",
            f"  Average: {_money(cat.average_amount)}",
            f"  Trend: {cat.trend}",
        ]

    return "\n".join(lines)


def trends_report(insights: FinancialInsights, transactions: List[Transaction]) -> str:
    lines = ["TRENDS ANALYSIS REPORT", "=" * 32, "", "Monthly Trends:"]
    for trend in insights.monthly_trends:
        lines += [
            "",
            f"- {trend.month}:",
            f"  Spent: {_money(trend.spent)}",
            f"  Income: {_money(trend.income)}",
            f"  Net Flow: {_money(trend.net_flow)}",
        ]

    lines += ["", "Category Trends:"]
    for cat in insights.top_spending_categories[:5]:
        lines += [
            "",
            f"- {cat.category}: {cat.trend} trend",
            f"  Monthly Average: {_money(cat.monthly_average)}",
            f"  Total Transactions: {cat.transaction_count}",
        ]

    return "\n".join(lines)


REPORTS: Dict[str, Callable[[FinancialInsights, List[Transaction]], str]] = {
    "summary": summary_report,
    "savings": savings_report,
    "budget": budget_report,
    "trends": trends_report,
}


def render_report(report_type: str, insights: FinancialInsights, transactions: List[Transaction]) -> str:
    """Render one of the named reports; raises ValueError for unknown types."""
    try:
        renderer = REPORTS[report_type]
    except KeyError:
        raise ValueError(f"Unknown report type: {report_type}")
    return renderer(insights, transactions)
