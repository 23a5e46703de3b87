from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from schemas.common import reject_explicit_nulls


class TaxRateBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rate: Decimal = Field(..., ge=0)
    description: Optional[str] = None
    is_default: bool = False


class TaxRateCreate(TaxRateBase):
    pass


class TaxRateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    rate: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    is_default: Optional[bool] = None

    @model_validator(mode="after")
    def required_columns_not_null(self):
        return reject_explicit_nulls(self, ("name", "rate", "is_default"))


class TaxRate(TaxRateBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
