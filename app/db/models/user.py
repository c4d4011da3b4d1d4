# app/db/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    # Display label only, no conversion happens anywhere
    currency = Column(String(3), nullable=False, default="USD", server_default="USD")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    categories = relationship("Category", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    transactions = relationship("Transaction", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    budgets = relationship("Budget", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
