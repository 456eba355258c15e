from pydantic import Field, field_validator

from app.models.transaction import EntryType
from app.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    type: EntryType

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name is required")
        return value


class Category(CamelModel):
    id: int
    user_id: int
    name: str
    type: EntryType
