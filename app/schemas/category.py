# app/schemas/category.py
from pydantic import Field, field_validator
from typing import Optional
from datetime import datetime
import uuid

from app.db.models.transaction import TransactionType
from app.schemas.base import CamelModel

class CategoryBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    type: TransactionType
    color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: str = Field(..., min_length=1, max_length=50)

    @field_validator("name", "icon")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(CategoryBase):
    # Full replacement of the editable fields, as the settings page sends them
    pass

class CategorySummary(CamelModel):
    id: uuid.UUID
    name: str
    type: TransactionType
    color: str
    icon: str

class Category(CategorySummary):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
