from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelModel


class UserPublic(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value is not None else None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class PasswordChange(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        # Imported here: app.schemas.auth depends on this module
        from app.schemas.auth import check_password_strength
        return check_password_strength(value)


class UserStats(CamelModel):
    total_transactions: int
    account_age: int
    eco_rating: str
