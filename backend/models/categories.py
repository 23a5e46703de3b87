from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, UniqueConstraint
from database import Base
from models.audit_mixin import TimestampMixin
import enum


class TransactionType(str, enum.Enum):
    income = "income"
    expense = "expense"


class Category(Base, TimestampMixin):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint('name', 'type', name='_category_name_type_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    # Seed rows; never updated or deleted through the API
    is_default = Column(Boolean, default=False, nullable=False)
