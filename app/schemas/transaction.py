# app/schemas/transaction.py
from pydantic import Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
import uuid

from app.db.models.transaction import TransactionType
from app.schemas.base import CamelModel
from app.schemas.category import CategorySummary

class TransactionBase(CamelModel):
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    description: Optional[str] = Field(None, max_length=255)
    date: date
    type: TransactionType
    category_id: uuid.UUID

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None

class TransactionCreate(TransactionBase):
    pass

class TransactionUpdate(TransactionBase):
    # Updates resend the whole transaction so category/type are re-validated together
    pass

class Transaction(CamelModel):
    id: uuid.UUID
    amount: float
    description: Optional[str] = None
    date: date
    type: TransactionType
    category_id: uuid.UUID
    category: Optional[CategorySummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

class TransactionListResponse(CamelModel):
    transactions: List[Transaction]
    pagination: Pagination
