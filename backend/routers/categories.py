from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from crud import categories as crud
from database import get_db
from models.categories import TransactionType
from schemas.categories import Category, CategoryCreate, CategoryMonthlyConsolidated, CategoryUpdate
from schemas.common import ApiResponse, Page, Pagination, normalize_page
from utils.auth_utils import get_caller_id

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post("/", response_model=ApiResponse[Category], status_code=status.HTTP_201_CREATED)
def create_category(category: CategoryCreate, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    db_category = crud.create_category(db, category, caller_id)
    return {"success": True, "data": db_category, "message": "Category created successfully"}


@router.get("/", response_model=ApiResponse[Page[Category]])
def read_categories(
    type: Optional[TransactionType] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    page, limit = normalize_page(page, limit)
    rows, total = crud.get_categories(db, type, skip=(page - 1) * limit, limit=limit)
    return {
        "success": True,
        "data": {"data": rows, "pagination": Pagination.build(page, limit, total)},
    }


@router.get("/monthly-consolidated", response_model=ApiResponse[CategoryMonthlyConsolidated])
def read_monthly_consolidated(
    year: int = Query(..., ge=1900, le=9999),
    type: Optional[TransactionType] = None,
    company_id: Optional[int] = Query(None, alias="companyId"),
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    """Monthly totals per category for the caller's transactions in one year."""
    rows = crud.get_monthly_consolidated(db, caller_id, year, type, company_id)
    return {
        "success": True,
        "data": {"year": year, "type": type, "company_id": company_id, "data": rows},
    }


@router.get("/{category_id}", response_model=ApiResponse[Category])
def read_category(category_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_category_or_404(db, category_id)}


@router.put("/{category_id}", response_model=ApiResponse[Category])
def update_category(
    category_id: int,
    category: CategoryUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_category = crud.update_category(db, category_id, category, caller_id)
    return {"success": True, "data": db_category, "message": "Category updated successfully"}


@router.delete("/{category_id}", response_model=ApiResponse)
def delete_category(category_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """Default categories are protected and answer 403."""
    crud.delete_category(db, category_id, caller_id)
    return {"success": True, "message": "Category deleted successfully"}
