# app/db/models/transaction.py
import uuid
from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Integer, Uuid, func, Enum as SQLAlchemyEnum
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import enum

class TransactionType(str, enum.Enum): # str mixin so values compare equal to plain strings
    expense = "expense"
    income = "income"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(SQLAlchemyEnum(TransactionType, name="transaction_type_enum", create_constraint=True), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(255), nullable=True)
    # Calendar day of the transaction; bucketing never looks at time of day
    date = Column(Date, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    category = relationship("Category", back_populates="transactions")
    owner = relationship("User", back_populates="transactions")
