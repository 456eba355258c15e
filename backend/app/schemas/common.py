from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")
# Numeric(12, 2) columns
MAX_AMOUNT = Decimal("10000000000")


class CamelModel(BaseModel):
    """Base for every request/response body: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[FieldError]] = None


def to_cents(value: Decimal) -> Decimal:
    # Huge values are rejected before quantize, which would overflow the context
    if abs(value) < MAX_AMOUNT:
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    # Rounding can carry 9999999999.995 up to the limit
    if abs(value) >= MAX_AMOUNT:
        raise ValueError("Amount is too large")
    return value


def parse_timestamp(value: Any) -> Any:
    """Accept bare ``YYYY-MM-DD`` dates and tz-aware ISO strings; store naive UTC."""
    if isinstance(value, str) and len(value) == 10:
        value = f"{value}T00:00:00"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            # Let pydantic report the malformed value
            return value
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]
PositiveMoney = Annotated[Decimal, Field(gt=0), AfterValidator(to_cents)]
GoalMoney = Annotated[Decimal, Field(ge=1), AfterValidator(to_cents)]
