"""Transaction analysis: totals, category patterns and savings heuristics."""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from .models import (
    AnalysisConfig,
    BudgetAnalysis,
    FinancialInsights,
    MonthlyTrend,
    SavingsOpportunity,
    SpendingPattern,
    Trend
)
from finance_wizard.ynab.models import Transaction
from finance_wizard.utils.logger import get_logger

logger = get_logger()

UNCATEGORIZED = "Uncategorized"
CREDIT_CARD_PAYMENT = "Credit Card Payment"

TREND_THRESHOLD = 0.10
SUBSCRIPTION_VARIANCE_RATIO = 0.10
SMALL_PURCHASE_LIMIT = 20
SMALL_PURCHASE_MIN_COUNT = 10
SMALL_PURCHASE_SAVINGS_RATE = 0.30
SPIKE_MIN_COUNT = 5
SPIKE_MULTIPLIER = 3
OUTLIER_MULTIPLIER = 5


def category_label(txn: Transaction) -> str:
    """Grouping key: category name, with uncategorized transfers labelled as card payments."""
    if txn.payee_name and txn.payee_name.startswith("Transfer") and not txn.category_id:
        return CREDIT_CARD_PAYMENT
    return txn.category_name or UNCATEGORIZED


def _spent(transactions: Iterable[Transaction]) -> float:
    return sum((abs(t.amount) for t in transactions if t.amount < 0), 0.0)


def _income(transactions: Iterable[Transaction]) -> float:
    return sum((t.amount for t in transactions if t.amount > 0), 0.0)


def _group(transactions: Iterable[Transaction], key) -> Dict[str, List[Transaction]]:
    groups: Dict[str, List[Transaction]] = defaultdict(list)
    for txn in transactions:
        groups[key(txn)].append(txn)
    return groups


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class FinanceAnalyzer:
    """Stateless analysis over an in-memory transaction list."""

    def analyze_transactions(
        self,
        transactions: Iterable[Transaction],
        config: Optional[AnalysisConfig] = None
    ) -> FinancialInsights:
        """
        Analyze transactions.

        Args:
            transactions: Transactions in any order
            config: Optional filters applied after deleted records are dropped

        Returns:
            FinancialInsights for the filtered set
        """
        filtered = self.filter_transactions(transactions, config)
        total_spent = _spent(filtered)
        total_income = _income(filtered)

        insights = FinancialInsights(
            total_spent=total_spent,
            total_income=total_income,
            net_cash_flow=total_income - total_spent,
            top_spending_categories=self._analyze_spending_patterns(filtered, total_spent),
            savings_opportunities=self._find_savings_opportunities(filtered),
            budget_analysis=self._analyze_budget_performance(filtered),
            unusual_transactions=self._find_unusual_transactions(filtered),
            monthly_trends=self._analyze_monthly_trends(filtered)
        )

        logger.debug(
            f"Analyzed {len(filtered)} transactions: spent {total_spent:.2f}, "
            f"income {total_income:.2f}, {len(insights.savings_opportunities)} opportunities"
        )
        return insights

    def filter_transactions(
        self,
        transactions: Iterable[Transaction],
        config: Optional[AnalysisConfig] = None
    ) -> List[Transaction]:
        filtered = [t for t in transactions if not t.deleted]
        if config is None:
            return filtered

        if config.start_date is not None:
            filtered = [t for t in filtered if t.date >= config.start_date]

        if config.end_date is not None:
            filtered = [t for t in filtered if t.date <= config.end_date]

        if config.included_accounts:
            filtered = [t for t in filtered if t.account_id in config.included_accounts]

        if config.excluded_categories:
            filtered = [t for t in filtered if (t.category_id or "") not in config.excluded_categories]

        if config.min_transaction_amount is not None:
            filtered = [t for t in filtered if abs(t.amount) >= config.min_transaction_amount]

        return filtered

    def _analyze_spending_patterns(self, transactions: List[Transaction], total_spent: float) -> List[SpendingPattern]:
        outflows = [t for t in transactions if t.amount < 0]
        patterns = []

        for category, items in _group(outflows, category_label).items():
            total = _spent(items)
            months = {t.month for t in items}
            patterns.append(SpendingPattern(
                category=category,
                total_amount=total,
                transaction_count=len(items),
                average_amount=total / len(items),
                monthly_average=total / len(months),
                trend=self._calculate_trend(items),
                percentage_of_total=(total / total_spent) * 100 if total_spent else 0.0
            ))

        patterns.sort(key=lambda p: p.total_amount, reverse=True)
        return patterns

    def _calculate_trend(self, transactions: List[Transaction]) -> Trend:
        monthly = self._analyze_monthly_trends(transactions)
        return classify_trend([m.spent for m in monthly])

    def _find_savings_opportunities(self, transactions: List[Transaction]) -> List[SavingsOpportunity]:
        opportunities: List[SavingsOpportunity] = []
        opportunities.extend(self._find_recurring_subscriptions(transactions))
        opportunities.extend(self._find_high_frequency_small_purchases(transactions))
        opportunities.extend(self._find_category_overspending(transactions))
        opportunities.extend(self._find_unusual_spikes(transactions))

        opportunities.sort(key=lambda o: o.potential_savings, reverse=True)
        return opportunities

    def _find_recurring_subscriptions(self, transactions: List[Transaction]) -> List[SavingsOpportunity]:
        outflows = [t for t in transactions if t.amount < 0 and t.payee_name]
        opportunities = []

        for payee, items in _group(outflows, lambda t: t.payee_name).items():
            if len(items) < 2:
                continue

            amounts = [abs(t.amount) for t in items]
            avg_amount = _mean(amounts)
            variance = _mean([(a - avg_amount) ** 2 for a in amounts])

            # Consistent amounts suggest a subscription
            if variance < avg_amount * SUBSCRIPTION_VARIANCE_RATIO:
                opportunities.append(SavingsOpportunity(
                    type="recurring_subscription",
                    category=category_label(items[0]),
                    description=f"Review subscription to {payee} (${avg_amount:.2f}/month)",
                    potential_savings=avg_amount * 12,
                    confidence="high",
                    recommendations=[
                        "Review if this subscription is still needed",
                        "Check for cheaper alternatives",
                        "Consider annual billing for discounts",
                    ],
                    transactions=items
                ))

        return opportunities

    def _find_high_frequency_small_purchases(self, transactions: List[Transaction]) -> List[SavingsOpportunity]:
        small = [t for t in transactions if t.amount < 0 and abs(t.amount) < SMALL_PURCHASE_LIMIT]
        opportunities = []

        for category, items in _group(small, category_label).items():
            if len(items) < SMALL_PURCHASE_MIN_COUNT:
                continue

            total = _spent(items)
            opportunities.append(SavingsOpportunity(
                type="high_frequency_small",
                category=category,
                description=(
                    f"Frequent small purchases in {category} "
                    f"({len(items)} transactions, avg ${total / len(items):.2f})"
                ),
                potential_savings=total * SMALL_PURCHASE_SAVINGS_RATE,
                confidence="medium",
                recommendations=[
                    "Set a monthly budget for this category",
                    "Consider bulk purchasing",
                    "Track these purchases more carefully",
                ],
                transactions=items
            ))

        return opportunities

    def _find_category_overspending(self, transactions: List[Transaction]) -> List[SavingsOpportunity]:
        # Needs budgeted amounts per category, which the analyzer is not given
        return []

    def _find_unusual_spikes(self, transactions: List[Transaction]) -> List[SavingsOpportunity]:
        outflows = [t for t in transactions if t.amount < 0]
        opportunities = []

        for category, items in _group(outflows, category_label).items():
            if len(items) < SPIKE_MIN_COUNT:
                continue

            amounts = [abs(t.amount) for t in items]
            avg_amount = _mean(amounts)
            max_amount = max(amounts)

            if max_amount > avg_amount * SPIKE_MULTIPLIER:
                spike = items[amounts.index(max_amount)]
                opportunities.append(SavingsOpportunity(
                    type="unusual_spike",
                    category=category,
                    description=(
                        f"Unusual spending spike in {category}: "
                        f"${max_amount:.2f} (avg: ${avg_amount:.2f})"
                    ),
                    potential_savings=max_amount - avg_amount,
                    confidence="low",
                    recommendations=[
                        "Review what caused this large expense",
                        "Consider if this was a one-time purchase",
                        "Plan for similar expenses in the future",
                    ],
                    transactions=[spike]
                ))

        return opportunities

    def _analyze_budget_performance(self, transactions: List[Transaction]) -> List[BudgetAnalysis]:
        return []

    def _find_unusual_transactions(self, transactions: List[Transaction]) -> List[Transaction]:
        amounts = [abs(t.amount) for t in transactions if t.amount < 0]
        if not amounts:
            return []

        threshold = _mean(amounts) * OUTLIER_MULTIPLIER
        return [t for t in transactions if abs(t.amount) > threshold]

    def _analyze_monthly_trends(self, transactions: List[Transaction]) -> List[MonthlyTrend]:
        trends = []
        for month, items in _group(transactions, lambda t: t.month).items():
            spent = _spent(items)
            income = _income(items)
            trends.append(MonthlyTrend(month=month, spent=spent, income=income, net_flow=income - spent))

        trends.sort(key=lambda m: m.month)
        return trends


def classify_trend(monthly_totals: List[float]) -> Trend:
    """Compare the last month against the first.

    A zero first month has no relative change; it counts as increasing when
    the last month has any spending and stable otherwise.
    """
    if len(monthly_totals) < 2:
        return "stable"

    first, last = monthly_totals[0], monthly_totals[-1]
    if first == 0:
        return "increasing" if last > 0 else "stable"

    change = (last - first) / first
    if change > TREND_THRESHOLD:
        return "increasing"
    if change < -TREND_THRESHOLD:
        return "decreasing"
    return "stable"
