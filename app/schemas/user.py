# app/schemas/user.py
from pydantic import AfterValidator, EmailStr, Field, field_validator
from typing import Annotated, Optional
from datetime import datetime

from app.schemas.base import CamelModel


def _normalize_currency(value: str) -> str:
    value = value.strip()
    if len(value) != 3 or not value.isalpha():
        raise ValueError("Currency code must be 3 letters")
    return value.upper()


CurrencyCode = Annotated[str, AfterValidator(_normalize_currency)]


class UserRegister(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=50)
    password: str = Field(..., min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be between 2 and 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    currency: Optional[CurrencyCode] = None


class CurrencyUpdate(CamelModel):
    currency: CurrencyCode


class User(CamelModel):
    id: int
    email: str
    name: str
    currency: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserResponse(CamelModel):
    message: Optional[str] = None
    user: User


class AuthResponse(CamelModel):
    message: str
    token: str
    user: User
