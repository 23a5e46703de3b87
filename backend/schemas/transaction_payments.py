from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from schemas.common import reject_explicit_nulls


class PaymentBase(BaseModel):
    payment_type_id: int
    amount: Decimal = Field(..., gt=0)
    payment_date: date
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class PaymentCreate(PaymentBase):
    pass


class PaymentUpdate(BaseModel):
    payment_type_id: Optional[int] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_date: Optional[date] = None
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def required_columns_not_null(self):
        return reject_explicit_nulls(self, ("payment_type_id", "amount", "payment_date"))


class Payment(PaymentBase):
    id: int
    transaction_id: str
    payment_type_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaymentCreated(BaseModel):
    id: int


class PaymentSummary(BaseModel):
    transaction_total: Decimal
    total_paid: Decimal
    remaining_amount: Decimal
    payment_count: int
    settlement_status: str
    payments: List[Payment]
