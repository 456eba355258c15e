from typing import List

from app.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    eco_rating: str
    co2_reduction: int
    total_transactions: int


class CategoryShare(CamelModel):
    category: str
    amount: float
    percentage: int


class EcoMetrics(CamelModel):
    total_co2: float
    rating: str
    recommendations: List[str]


class MonthlyReport(CamelModel):
    month: int
    year: int
    total_income: float
    total_expenses: float
    top_categories: List[CategoryShare]
    eco_metrics: EcoMetrics
