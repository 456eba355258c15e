"""Tests for the pure aggregation functions."""

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

from app.models.transaction import EntryType
from app.services import statistics


def tx(type, amount, category="other", eco_impact=None):
    amount = Decimal(str(amount))
    return SimpleNamespace(
        type=type,
        amount=amount,
        category=category,
        eco_impact=Decimal(str(eco_impact)) if eco_impact is not None else Decimal(0),
    )


def test_month_bounds_regular_month():
    start, end = statistics.month_bounds(2, 2024)
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 3, 1)


def test_month_bounds_december_rolls_over():
    start, end = statistics.month_bounds(12, 2023)
    assert start == datetime(2023, 12, 1)
    assert end == datetime(2024, 1, 1)


def test_month_bounds_last_representable_month():
    start, end = statistics.month_bounds(12, 9999)
    assert start == datetime(9999, 12, 1)
    assert end == datetime.max


def test_dashboard_stats_balance():
    stats = statistics.dashboard_stats([
        tx("income", 100, "salary", 5),
        tx("expense", 40, "food", 6),
    ])
    assert stats["total_balance"] == 60
    assert stats["monthly_income"] == 100
    assert stats["monthly_expenses"] == 40
    assert stats["total_transactions"] == 2
    assert stats["eco_rating"] == "A+"
    assert stats["co2_reduction"] == 98


def test_dashboard_stats_accepts_enum_types():
    stats = statistics.dashboard_stats([tx(EntryType.income, 10), tx(EntryType.expense, 3)])
    assert stats["total_balance"] == 7


def test_dashboard_stats_empty():
    stats = statistics.dashboard_stats([])
    assert stats == {
        "total_balance": 0,
        "monthly_income": 0,
        "monthly_expenses": 0,
        "eco_rating": "A+",
        "co2_reduction": 100,
        "total_transactions": 0,
    }


def test_monthly_report_top_categories_sorted_and_capped():
    transactions = [tx("expense", amount, f"cat{amount}") for amount in (5, 80, 10, 30, 20, 50, 40, 70)]
    transactions.append(tx("income", 1000, "salary"))

    report = statistics.monthly_report(transactions, 3, 2024)

    top = report["top_categories"]
    assert len(top) == 6
    amounts = [entry["amount"] for entry in top]
    assert amounts == sorted(amounts, reverse=True)
    assert amounts[0] == 80
    assert sum(entry["percentage"] for entry in top) <= 100
    assert report["total_income"] == 1000
    assert report["total_expenses"] == 305


def test_monthly_report_percentages_never_exceed_100():
    # 50.5% / 49.5% would round to 51 + 50
    report = statistics.monthly_report(
        [tx("expense", "50.5", "a"), tx("expense", "49.5", "b")], 1, 2024
    )
    percentages = [entry["percentage"] for entry in report["top_categories"]]
    assert percentages == [50, 49]


def test_monthly_report_groups_by_category_label():
    report = statistics.monthly_report(
        [tx("expense", 30, "food"), tx("expense", 10, "food"), tx("expense", 60, "transport")], 5, 2024
    )
    assert report["top_categories"] == [
        {"category": "transport", "amount": 60.0, "percentage": 60},
        {"category": "food", "amount": 40.0, "percentage": 40},
    ]


def test_monthly_report_without_expenses_has_no_categories():
    report = statistics.monthly_report([tx("income", 100)], 5, 2024)
    assert report["top_categories"] == []
    assert report["month"] == 5
    assert report["year"] == 2024


def test_monthly_report_eco_metrics():
    report = statistics.monthly_report(
        [tx("expense", 1000, "transport", 200), tx("expense", 400, "utilities", 100)], 5, 2024
    )
    eco = report["eco_metrics"]
    assert eco["total_co2"] == 300
    assert eco["rating"] == "C+"
    assert len(eco["recommendations"]) == 5


def test_user_stats_account_age_and_rating():
    now = datetime(2024, 6, 10, 12, 0)
    stats = statistics.user_stats(
        now - timedelta(days=3, hours=5),
        [tx("expense", 100, "transport", 20), tx("expense", 300, "utilities", 75)],
        now,
    )
    assert stats == {"total_transactions": 2, "account_age": 3, "eco_rating": "A"}
