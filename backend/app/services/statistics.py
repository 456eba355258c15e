"""
Aggregate statistics over a user's transactions.

Everything here is a pure function over already-loaded rows; the storage
layer decides which rows (all-time, one month) to pass in.
"""
from dataclasses import dataclass, field
from datetime import MAXYEAR, datetime
from decimal import Decimal, ROUND_DOWN
from typing import Dict, Iterable, List, Tuple

from app.services.eco import as_decimal, co2_reduction, eco_rating

TOP_CATEGORY_LIMIT = 6

ECO_RECOMMENDATIONS = [
    "Choose local produce to lower your carbon footprint",
    "Use public transport or ride a bike",
    "Buy products that carry an eco label",
    "Skip meat one or two days a week",
    "Ask for digital receipts instead of paper ones",
]


@dataclass
class MonthTotals:
    income: Decimal = Decimal(0)
    expenses: Decimal = Decimal(0)
    total_co2: Decimal = Decimal(0)
    count: int = 0
    expenses_by_category: Dict[str, Decimal] = field(default_factory=dict)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


def _type_of(transaction) -> str:
    kind = transaction.type
    return getattr(kind, "value", kind)


def total_eco_impact(transactions: Iterable) -> Decimal:
    return sum((as_decimal(t.eco_impact) for t in transactions), Decimal(0))


def month_bounds(month: int, year: int) -> Tuple[datetime, datetime]:
    """Half-open [start, end) range covering one calendar month."""
    start = datetime(year, month, 1)
    if month == 12 and year == MAXYEAR:
        # datetime cannot represent the following January
        end = datetime.max
    elif month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def summarize(transactions: Iterable) -> MonthTotals:
    totals = MonthTotals()
    for t in transactions:
        amount = as_decimal(t.amount)
        totals.count += 1
        totals.total_co2 += as_decimal(t.eco_impact)
        if _type_of(t) == "income":
            totals.income += amount
        elif _type_of(t) == "expense":
            totals.expenses += amount
            totals.expenses_by_category[t.category] = (
                totals.expenses_by_category.get(t.category, Decimal(0)) + amount
            )
    return totals


def top_categories(expenses_by_category: Dict[str, Decimal], total_expenses: Decimal,
                   limit: int = TOP_CATEGORY_LIMIT) -> List[dict]:
    """Largest expense categories with their whole-percent share of total expenses.

    Shares are floored, so they never add up to more than 100.
    """
    if total_expenses <= 0:
        return []
    ranked = sorted(expenses_by_category.items(), key=lambda item: item[1], reverse=True)
    result = []
    for category, amount in ranked[:limit]:
        share = (amount / total_expenses * 100).quantize(Decimal(1), rounding=ROUND_DOWN)
        result.append({"category": category, "amount": float(amount), "percentage": int(share)})
    return result


def user_stats(created_at: datetime, transactions: List, now: datetime) -> dict:
    return {
        "total_transactions": len(transactions),
        "account_age": max(0, (now - created_at).days),
        "eco_rating": eco_rating(total_eco_impact(transactions)),
    }


def dashboard_stats(transactions: Iterable) -> dict:
    totals = summarize(transactions)
    return {
        "total_balance": float(totals.balance),
        "monthly_income": float(totals.income),
        "monthly_expenses": float(totals.expenses),
        "eco_rating": eco_rating(totals.total_co2),
        "co2_reduction": co2_reduction(totals.total_co2),
        "total_transactions": totals.count,
    }


def monthly_report(transactions: Iterable, month: int, year: int) -> dict:
    totals = summarize(transactions)
    return {
        "month": month,
        "year": year,
        "total_income": float(totals.income),
        "total_expenses": float(totals.expenses),
        "top_categories": top_categories(totals.expenses_by_category, totals.expenses),
        "eco_metrics": {
            "total_co2": float(totals.total_co2),
            "rating": eco_rating(totals.total_co2),
            "recommendations": list(ECO_RECOMMENDATIONS),
        },
    }
