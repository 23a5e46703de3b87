from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from crud import tax_rates as crud
from database import get_db
from schemas.common import ApiResponse
from schemas.tax_rates import TaxRate, TaxRateCreate, TaxRateUpdate
from utils.auth_utils import get_caller_id
from utils.exceptions import NotFoundError

router = APIRouter(prefix="/tax-rates", tags=["Tax Rates"])


@router.get("/", response_model=ApiResponse[List[TaxRate]])
def read_tax_rates(db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_tax_rates(db)}


@router.get("/default", response_model=ApiResponse[TaxRate])
def read_default_tax_rate(db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    db_tax_rate = crud.get_default_tax_rate(db)
    if db_tax_rate is None:
        raise NotFoundError("No default tax rate configured")
    return {"success": True, "data": db_tax_rate}


@router.get("/{tax_rate_id}", response_model=ApiResponse[TaxRate])
def read_tax_rate(tax_rate_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_tax_rate_or_404(db, tax_rate_id)}


@router.post("/", response_model=ApiResponse[TaxRate], status_code=status.HTTP_201_CREATED)
def create_tax_rate(tax_rate: TaxRateCreate, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """Creating a rate with ``is_default`` moves the default flag to it."""
    db_tax_rate = crud.create_tax_rate(db, tax_rate, caller_id)
    return {"success": True, "data": db_tax_rate, "message": "Tax rate created successfully"}


@router.put("/{tax_rate_id}", response_model=ApiResponse[TaxRate])
def update_tax_rate(
    tax_rate_id: int,
    tax_rate: TaxRateUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_tax_rate = crud.update_tax_rate(db, tax_rate_id, tax_rate, caller_id)
    return {"success": True, "data": db_tax_rate, "message": "Tax rate updated successfully"}


@router.delete("/{tax_rate_id}", response_model=ApiResponse)
def delete_tax_rate(tax_rate_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    crud.delete_tax_rate(db, tax_rate_id, caller_id)
    return {"success": True, "message": "Tax rate deleted successfully"}
