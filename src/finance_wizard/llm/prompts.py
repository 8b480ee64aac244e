"""Prompt builders for the financial advisor chat."""
from typing import List

from finance_wizard.analysis.models import FinancialInsights
from finance_wizard.tools.schemas import AVAILABLE_TOOLS
from finance_wizard.ynab.models import Transaction


def _overview(insights: FinancialInsights) -> str:
    return (
        f"- Total Spent: ${insights.total_spent:.2f}\n"
        f"- Total Income: ${insights.total_income:.2f}\n"
        f"- Net Cash Flow: ${insights.net_cash_flow:.2f}"
    )


def _context_block(user_context: str) -> str:
    return f"USER CONTEXT:\n{user_context}\n\n" if user_context else ""


def build_insights_prompt(insights: FinancialInsights) -> str:
    categories = "\n".join(
        f"- {cat.category}: ${cat.total_amount:.2f} ({cat.transaction_count} transactions, trend: {cat.trend})"
        for cat in insights.top_spending_categories[:8]
    )
    opportunities = "\n".join(
        f"- {opp.type}: {opp.description} "
        f"(Potential: ${opp.potential_savings:.2f}, Confidence: {opp.confidence})"
        for opp in insights.savings_opportunities[:5]
    )
    trends = "\n".join(
        f"- {t.month}: Spent ${t.spent:.2f}, Income ${t.income:.2f}, Net ${t.net_flow:.2f}"
        for t in insights.monthly_trends
    )

    return f"""Analyze this financial data and provide a comprehensive summary with key insights and actionable recommendations:

FINANCIAL OVERVIEW:
{_overview(insights)}

TOP SPENDING CATEGORIES:
{categories or "- none"}

SAVINGS OPPORTUNITIES:
{opportunities or "- none"}

MONTHLY TRENDS:
{trends or "- none"}

Please provide:
1. A concise financial health summary
2. Key insights and patterns
3. Top 3 immediate action items
4. Potential monthly savings amount
5. Risk areas to monitor

Format your response in a clear, conversational tone as if you're a financial advisor."""


def build_recommendations_prompt(insights: FinancialInsights) -> str:
    categories = "\n".join(
        f"- {cat.category}: ${cat.total_amount:.2f} ({cat.percentage_of_total:.1f}% of total)"
        for cat in insights.top_spending_categories[:5]
    )
    opportunities = "\n".join(
        f"- {opp.description} (Potential: ${opp.potential_savings:.2f})"
        for opp in insights.savings_opportunities[:5]
    )

    return f"""Based on the following financial data, provide specific, actionable budget recommendations:

Financial Overview:
{_overview(insights)}

Top Spending Categories:
{categories or "- none"}

Top Savings Opportunities:
{opportunities or "- none"}

Please provide:
1. Specific budget adjustments
2. Priority areas to focus on
3. Realistic savings goals
4. Action items for next month

Keep recommendations practical and achievable."""


def build_insights_system_prompt(user_context: str) -> str:
    return f"""You are a personal financial advisor AI. Analyze the provided financial data and provide personalized insights.

{_context_block(user_context)}Guidelines:
- Provide personalized advice based on the user's context
- Consider their goals, family situation, and financial circumstances
- Focus on actionable recommendations
- Be supportive and encouraging
- Prioritize savings opportunities that align with their situation
- Consider their risk tolerance and investment experience
- Reference their specific goals and challenges"""


def build_chat_system_prompt(
    insights: FinancialInsights,
    recent_transactions: List[Transaction],
    user_context: str
) -> str:
    categories = "\n".join(
        f"- {cat.category}: ${cat.total_amount:.2f} ({cat.percentage_of_total:.1f}%)"
        for cat in insights.top_spending_categories[:5]
    )
    opportunities = "\n".join(
        f"- {opp.description} (Potential: ${opp.potential_savings:.2f})"
        for opp in insights.savings_opportunities[:3]
    )
    recent = "\n".join(
        f"- {t.date.isoformat()}: {t.payee_name or 'Unknown'} - ${abs(t.amount):.2f} "
        f"({t.category_name or 'Uncategorized'})"
        for t in recent_transactions[:10]
    )
    tools = "\n".join(f"- {tool['name']}: {tool['description']}" for tool in AVAILABLE_TOOLS)

    return f"""You are a helpful financial advisor AI assistant. You have access to the user's YNAB transaction data and financial insights.

{_context_block(user_context)}Current Financial Context:
{_overview(insights)}

Top Spending Categories:
{categories or "- none"}

Top Savings Opportunities:
{opportunities or "- none"}

Recent Transactions (last 10):
{recent or "- none"}

Guidelines:
- Be conversational and helpful
- Provide specific, actionable advice that considers the user's personal context
- Reference the user's actual data and goals when relevant
- Focus on practical savings and budget optimization aligned with their situation
- Ask clarifying questions when needed
- Keep responses concise but thorough
- Use a supportive, encouraging tone

IMPORTANT: You have access to tools that can perform actions. Use them when appropriate:
- If user mentions updating categories in YNAB or wants fresh data, use sync_transactions
- If user wants to clear cached data or mentions cache issues, use clear_cache
- If user asks for updated analysis or insights, use analyze_transactions
- If user requests a report or summary, use generate_report
- You can use MULTIPLE tools in a single response when needed (e.g., clear_cache then sync_transactions)

Available Tools:
{tools}"""
