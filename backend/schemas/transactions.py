from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from models.categories import TransactionType
from schemas.common import Pagination, reject_explicit_nulls


def _document_number_to_str(value):
    # Document numbers arrive as numbers from some clients
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class TransactionBase(BaseModel):
    document_number: str = Field(..., min_length=1, max_length=50)
    document_type_id: int
    transaction_date: date
    description: Optional[str] = None
    amount_net: Decimal = Field(..., ge=0)
    tax_amount: Decimal = Field(Decimal("0"), ge=0)
    tax_rate_id: Optional[int] = None
    amount_total: Decimal = Field(..., gt=0)
    category_id: int
    vendor_id: int
    status_id: int
    company_id: Optional[int] = None
    type: TransactionType

    @field_validator("document_number", mode="before")
    @classmethod
    def normalize_document_number(cls, value):
        return _document_number_to_str(value)


class TransactionCreate(TransactionBase):
    pass


class TransactionUpdate(BaseModel):
    document_number: Optional[str] = Field(None, min_length=1, max_length=50)
    document_type_id: Optional[int] = None
    transaction_date: Optional[date] = None
    description: Optional[str] = None
    amount_net: Optional[Decimal] = Field(None, ge=0)
    tax_amount: Optional[Decimal] = Field(None, ge=0)
    tax_rate_id: Optional[int] = None
    amount_total: Optional[Decimal] = Field(None, gt=0)
    category_id: Optional[int] = None
    vendor_id: Optional[int] = None
    status_id: Optional[int] = None
    company_id: Optional[int] = None
    type: Optional[TransactionType] = None

    @field_validator("document_number", mode="before")
    @classmethod
    def normalize_document_number(cls, value):
        return _document_number_to_str(value)

    @model_validator(mode="after")
    def required_columns_not_null(self):
        return reject_explicit_nulls(self, (
            "document_number", "document_type_id", "transaction_date", "amount_net", "tax_amount",
            "amount_total", "category_id", "vendor_id", "status_id", "type",
        ))


class Transaction(TransactionBase):
    id: str
    user_id: str
    # Joined display fields
    category_name: Optional[str] = None
    vendor_name: Optional[str] = None
    status_name: Optional[str] = None
    document_type_code: Optional[str] = None
    document_type_name: Optional[str] = None
    tax_rate_name: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    company_name: Optional[str] = None
    # Derived on read, never stored
    payments_count: int = Field(0, alias="paymentsCount")
    total_paid: Decimal = Decimal("0.00")
    pending_amount: Optional[Decimal] = Field(None, alias="pendingAmount")
    settlement_status: Optional[str] = None
    status_color: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class TransactionPage(BaseModel):
    data: List[Transaction]
    pagination: Pagination


class TransactionFilters(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    vendor_id: Optional[int] = None
    status_id: Optional[int] = None
    document_type_id: Optional[int] = None
    tax_rate_id: Optional[int] = None
    company_id: Optional[int] = None
    type: Optional[TransactionType] = None
    document_number: Optional[str] = None


class TransactionSummary(BaseModel):
    total_income: Decimal = Field(alias="totalIncome")
    total_expense: Decimal = Field(alias="totalExpense")
    net_balance: Decimal = Field(alias="netBalance")

    class Config:
        populate_by_name = True
