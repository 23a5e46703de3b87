from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from crud import transactions as crud
from database import get_db
from models.categories import TransactionType
from schemas.common import ApiResponse
from schemas.transactions import (
    Transaction,
    TransactionCreate,
    TransactionFilters,
    TransactionPage,
    TransactionSummary,
    TransactionUpdate,
)
from utils.auth_utils import get_caller_id

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post("/", response_model=ApiResponse[Transaction], status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: TransactionCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Register an income or expense document."""
    created = crud.create_transaction(db, transaction, caller_id)
    return {"success": True, "data": created, "message": "Transaction created successfully"}


@router.get("/", response_model=ApiResponse[TransactionPage])
def read_transactions(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    vendor_id: Optional[int] = Query(None, alias="vendorId"),
    status_id: Optional[int] = Query(None, alias="statusId"),
    document_type_id: Optional[int] = Query(None, alias="documentTypeId"),
    tax_rate_id: Optional[int] = Query(None, alias="taxRateId"),
    company_id: Optional[int] = Query(None, alias="companyId"),
    type: Optional[TransactionType] = Query(None),
    document_number: Optional[str] = Query(None, alias="documentNumber"),
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """List the caller's transactions, newest first."""
    filters = TransactionFilters(
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        vendor_id=vendor_id,
        status_id=status_id,
        document_type_id=document_type_id,
        tax_rate_id=tax_rate_id,
        company_id=company_id,
        type=type,
        document_number=document_number,
    )
    return {"success": True, "data": crud.get_transactions(db, caller_id, filters, page, limit)}


@router.get("/summary", response_model=ApiResponse[TransactionSummary])
def read_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    company_id: Optional[int] = Query(None, alias="companyId"),
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Income, expense and net balance for the period."""
    summary = crud.get_summary(db, caller_id, start_date, end_date, company_id)
    return {"success": True, "data": summary}


@router.get("/{transaction_id}", response_model=ApiResponse[Transaction])
def read_transaction(transaction_id: str, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.read_transaction(db, transaction_id, caller_id)}


@router.put("/{transaction_id}", response_model=ApiResponse[Transaction])
def update_transaction(
    transaction_id: str,
    transaction: TransactionUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    updated = crud.update_transaction(db, transaction_id, transaction, caller_id)
    return {"success": True, "data": updated, "message": "Transaction updated successfully"}


@router.delete("/{transaction_id}", response_model=ApiResponse)
def delete_transaction(transaction_id: str, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """Delete a transaction together with its payments."""
    crud.delete_transaction(db, transaction_id, caller_id)
    return {"success": True, "message": "Transaction deleted successfully"}
