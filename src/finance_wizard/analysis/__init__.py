"""Transaction analysis module."""
from .models import (
    AnalysisConfig,
    BudgetAnalysis,
    FinancialInsights,
    MonthlyTrend,
    SavingsOpportunity,
    SpendingPattern
)
from .analyzer import FinanceAnalyzer, category_label, classify_trend

__all__ = [
    "AnalysisConfig",
    "BudgetAnalysis",
    "FinancialInsights",
    "MonthlyTrend",
    "SavingsOpportunity",
    "SpendingPattern",
    "FinanceAnalyzer",
    "category_label",
    "classify_trend"
]
