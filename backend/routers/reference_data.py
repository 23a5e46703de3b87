"""Read-only lookups: regions, communes, payment types and statuses."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from crud import reference_data as crud
from database import get_db
from schemas.common import ApiResponse
from schemas.reference_data import Commune, PaymentType, Region, Status
from utils.auth_utils import get_caller_id
from utils.exceptions import NotFoundError

router = APIRouter(tags=["Reference Data"], dependencies=[Depends(get_caller_id)])


@router.get("/regions", response_model=ApiResponse[List[Region]])
def read_regions(db: Session = Depends(get_db)):
    return {"success": True, "data": crud.get_regions(db)}


@router.get("/communes", response_model=ApiResponse[List[Commune]])
def read_communes(region_id: Optional[int] = None, db: Session = Depends(get_db)):
    return {"success": True, "data": crud.get_communes(db, region_id)}


@router.get("/payment-types", response_model=ApiResponse[List[PaymentType]])
def read_payment_types(db: Session = Depends(get_db)):
    return {"success": True, "data": crud.get_payment_types(db)}


@router.get("/payment-types/{payment_type_id}", response_model=ApiResponse[PaymentType])
def read_payment_type(payment_type_id: int, db: Session = Depends(get_db)):
    db_payment_type = crud.get_payment_type(db, payment_type_id)
    if db_payment_type is None:
        raise NotFoundError("Payment type not found")
    return {"success": True, "data": db_payment_type}


@router.get("/status", response_model=ApiResponse[List[Status]])
def read_statuses(db: Session = Depends(get_db)):
    return {"success": True, "data": crud.get_statuses(db)}


@router.get("/status/{status_id}", response_model=ApiResponse[Status])
def read_status(status_id: int, db: Session = Depends(get_db)):
    db_status = crud.get_status(db, status_id)
    if db_status is None:
        raise NotFoundError("Status not found")
    return {"success": True, "data": db_status}
