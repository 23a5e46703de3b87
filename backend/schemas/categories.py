from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.categories import TransactionType


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    type: TransactionType


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    # The type is fixed once created; transactions depend on it
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class Category(CategoryBase):
    id: int
    is_default: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CategoryMonthlyTotal(BaseModel):
    category_id: int
    category_name: str
    type: TransactionType
    month: int
    total: Decimal
    transaction_count: int


class CategoryMonthlyConsolidated(BaseModel):
    year: int
    type: Optional[TransactionType] = None
    company_id: Optional[int] = None
    data: List[CategoryMonthlyTotal]
