"""
Eco-impact estimation.

A transaction's impact is its amount scaled by a fixed per-category factor;
cumulative impact maps onto a letter grade.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

ECO_FACTORS = {
    "transport": Decimal("0.20"),
    "food": Decimal("0.15"),
    "shopping": Decimal("0.10"),
    "utilities": Decimal("0.25"),
}
DEFAULT_ECO_FACTOR = Decimal("0.05")

# (upper bound, exclusive) -> grade, checked in order
RATING_THRESHOLDS = [
    (Decimal(50), "A+"),
    (Decimal(100), "A"),
    (Decimal(200), "B+"),
    (Decimal(300), "B"),
    (Decimal(500), "C+"),
]
LOWEST_RATING = "C"

CO2_BASELINE = Decimal(500)


def as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    # str() keeps floats like 0.1 from dragging binary noise along
    return Decimal(str(value))


def eco_factor(category: str) -> Decimal:
    return ECO_FACTORS.get(category, DEFAULT_ECO_FACTOR)


def eco_impact(amount: Number, category: str) -> Decimal:
    """Impact of a single transaction, rounded to cents."""
    impact = as_decimal(amount) * eco_factor(category)
    return impact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def eco_rating(total_co2: Number) -> str:
    total = as_decimal(total_co2)
    for bound, grade in RATING_THRESHOLDS:
        if total < bound:
            return grade
    return LOWEST_RATING


def co2_reduction(total_co2: Number) -> int:
    """Percentage improvement relative to the baseline, never negative."""
    ratio = (CO2_BASELINE - as_decimal(total_co2)) / CO2_BASELINE * 100
    return max(0, int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP)))
