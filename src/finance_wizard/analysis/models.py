"""Data models for transaction analysis."""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, FrozenSet, List, Literal, Optional

from finance_wizard.ynab.models import Transaction

Trend = Literal["increasing", "decreasing", "stable"]
OpportunityType = Literal["recurring_subscription", "high_frequency_small", "category_overspend", "unusual_spike"]
Confidence = Literal["high", "medium", "low"]


@dataclass
class AnalysisConfig:
    """Optional filters; a field left as None means no filtering on it."""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    included_accounts: Optional[FrozenSet[str]] = None
    excluded_categories: Optional[FrozenSet[str]] = None
    min_transaction_amount: Optional[float] = None


@dataclass
class SpendingPattern:
    category: str
    total_amount: float
    transaction_count: int
    average_amount: float
    monthly_average: float
    trend: Trend
    percentage_of_total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total_amount": self.total_amount,
            "transaction_count": self.transaction_count,
            "average_amount": self.average_amount,
            "monthly_average": self.monthly_average,
            "trend": self.trend,
            "percentage_of_total": self.percentage_of_total,
        }


@dataclass
class SavingsOpportunity:
    type: OpportunityType
    category: str
    description: str
    potential_savings: float
    confidence: Confidence
    recommendations: List[str]
    transactions: List[Transaction]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "category": self.category,
            "description": self.description,
            "potential_savings": self.potential_savings,
            "confidence": self.confidence,
            "recommendations": list(self.recommendations),
            "transactions": [t.to_dict() for t in self.transactions],
        }


@dataclass
class BudgetAnalysis:
    """Budget-vs-actual row; not produced until budget data is wired in."""
    category: str
    budgeted: float
    spent: float
    remaining: float
    percentage_used: float
    status: Literal["under_budget", "on_track", "over_budget"]
    days_remaining: int
    projected_spend: float


@dataclass
class MonthlyTrend:
    month: str
    spent: float
    income: float
    net_flow: float

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "spent": self.spent, "income": self.income, "net_flow": self.net_flow}


@dataclass
class FinancialInsights:
    """Complete result of one analysis pass."""
    total_spent: float = 0.0
    total_income: float = 0.0
    net_cash_flow: float = 0.0
    top_spending_categories: List[SpendingPattern] = field(default_factory=list)
    savings_opportunities: List[SavingsOpportunity] = field(default_factory=list)
    budget_analysis: List[BudgetAnalysis] = field(default_factory=list)
    unusual_transactions: List[Transaction] = field(default_factory=list)
    monthly_trends: List[MonthlyTrend] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_spent": self.total_spent,
            "total_income": self.total_income,
            "net_cash_flow": self.net_cash_flow,
            "top_spending_categories": [p.to_dict() for p in self.top_spending_categories],
            "savings_opportunities": [o.to_dict() for o in self.savings_opportunities],
            "budget_analysis": [vars(b) for b in self.budget_analysis],
            "unusual_transactions": [t.to_dict() for t in self.unusual_transactions],
            "monthly_trends": [m.to_dict() for m in self.monthly_trends],
        }
