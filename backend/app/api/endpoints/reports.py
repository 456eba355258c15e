from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.stats import DashboardStats, MonthlyReport
from app.services.auth import CurrentUser, get_current_user
from app.services.storage import DatabaseStorage, get_storage

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStats)
async def dashboard_stats(
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    """Totals for the current calendar month."""
    return await storage.get_dashboard_stats(current_user.user_id)


@router.get("/reports/monthly", response_model=MonthlyReport)
async def monthly_report(
    month: Optional[int] = Query(None, ge=1, le=12, description="Defaults to the current month"),
    year: Optional[int] = Query(None, ge=1970, le=9999, description="Defaults to the current year"),
    current_user: CurrentUser = Depends(get_current_user),
    storage: DatabaseStorage = Depends(get_storage),
):
    now = datetime.utcnow()
    return await storage.get_monthly_report(
        current_user.user_id,
        month or now.month,
        year or now.year,
    )
