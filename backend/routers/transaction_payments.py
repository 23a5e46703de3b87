from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from crud import transaction_payments as crud
from database import get_db
from schemas.common import ApiResponse
from schemas.transaction_payments import Payment, PaymentCreate, PaymentCreated, PaymentSummary, PaymentUpdate
from utils.auth_utils import get_caller_id

router = APIRouter(tags=["Transaction Payments"])


@router.get("/transaction/{transaction_id}/payments", response_model=ApiResponse[List[Payment]])
def read_payments(transaction_id: str, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """Payments of one transaction, latest payment date first."""
    return {"success": True, "data": crud.get_payments(db, transaction_id, caller_id)}


@router.get("/transaction/{transaction_id}/payments/summary", response_model=ApiResponse[PaymentSummary])
def read_payment_summary(transaction_id: str, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_payment_summary(db, transaction_id, caller_id)}


@router.post(
    "/transaction/{transaction_id}/payments",
    response_model=ApiResponse[PaymentCreated],
    status_code=status.HTTP_201_CREATED,
)
def create_payment(
    transaction_id: str,
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Register a payment; the running total may never exceed the transaction total."""
    db_payment = crud.create_payment(db, transaction_id, payment, caller_id)
    return {"success": True, "data": {"id": db_payment.id}, "message": "Payment created successfully"}


@router.get("/payments/{payment_id}", response_model=ApiResponse[Payment])
def read_payment(payment_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    db_payment, _ = crud.get_payment_or_403(db, payment_id, caller_id)
    return {"success": True, "data": db_payment}


@router.put("/payments/{payment_id}", response_model=ApiResponse[Payment])
def update_payment(
    payment_id: int,
    payment: PaymentUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_payment = crud.update_payment(db, payment_id, payment, caller_id)
    return {"success": True, "data": db_payment, "message": "Payment updated successfully"}


@router.delete("/payments/{payment_id}", response_model=ApiResponse)
def delete_payment(payment_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    crud.delete_payment(db, payment_id, caller_id)
    return {"success": True, "message": "Payment deleted successfully"}
