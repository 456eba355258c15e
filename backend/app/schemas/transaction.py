from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from app.models.transaction import EntryType
from app.schemas.common import CamelModel, PositiveMoney, Timestamp


class TransactionCreate(CamelModel):
    type: EntryType
    # Numbers and numeric strings are both accepted
    amount: PositiveMoney
    category: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    date: Timestamp
    goal_id: Optional[int] = None

    @field_validator("amount")
    @classmethod
    def positive_after_rounding(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("Amount must be greater than 0")
        return value

    @field_validator("category")
    @classmethod
    def strip_category(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category is required")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, value):
        return "" if value is None else value


class Transaction(CamelModel):
    id: int
    user_id: int
    type: EntryType
    amount: float
    category: str
    description: str
    date: datetime
    eco_impact: float
    created_at: datetime
