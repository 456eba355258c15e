from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BeforeValidator, Field, field_validator

from app.schemas.common import CamelModel, GoalMoney


def _date_only(value):
    # Clients sometimes send full ISO timestamps for the target date
    if isinstance(value, str) and len(value) > 10 and value[10] == "T":
        return value[:10]
    return value


TargetDate = Annotated[date, BeforeValidator(_date_only)]


def _goal_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Goal name is required")
    return value


class GoalCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    target_amount: GoalMoney
    target_date: Optional[TargetDate] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        return _goal_name(value)


class GoalUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    target_amount: Optional[GoalMoney] = None
    target_date: Optional[TargetDate] = None
    completed: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        return _goal_name(value) if value is not None else None


class Goal(CamelModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    target_amount: float
    current_saved: float
    target_date: Optional[date] = None
    completed: bool
    created_at: datetime
    updated_at: datetime
