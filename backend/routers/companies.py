from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from crud import companies as crud
from database import get_db
from schemas.common import ApiResponse
from schemas.companies import Company, CompanyCreate, CompanyUpdate, CompanyUser, CompanyUserCreate
from utils.auth_utils import get_caller_id

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("/assigned", response_model=ApiResponse[List[Company]])
def read_assigned_companies(db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """Companies the caller is a member of."""
    return {"success": True, "data": crud.get_companies_for_user(db, caller_id)}


@router.get("/", response_model=ApiResponse[List[Company]])
def read_companies(db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_companies_for_user(db, caller_id)}


@router.get("/{company_id}", response_model=ApiResponse[Company])
def read_company(company_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_company_for_member(db, company_id, caller_id)}


@router.post("/", response_model=ApiResponse[Company], status_code=status.HTTP_201_CREATED)
def create_company(company: CompanyCreate, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    """The creator is assigned as the first administrator."""
    db_company = crud.create_company(db, company, caller_id)
    return {"success": True, "data": db_company, "message": "Company created successfully"}


@router.put("/{company_id}", response_model=ApiResponse[Company])
def update_company(
    company_id: int,
    company: CompanyUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_company = crud.update_company(db, company_id, company, caller_id)
    return {"success": True, "data": db_company, "message": "Company updated successfully"}


@router.delete("/{company_id}", response_model=ApiResponse)
def delete_company(company_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    crud.delete_company(db, company_id, caller_id)
    return {"success": True, "message": "Company deleted successfully"}


@router.get("/{company_id}/users", response_model=ApiResponse[List[CompanyUser]])
def read_company_users(company_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_company_users(db, company_id, caller_id)}


@router.post("/{company_id}/users", response_model=ApiResponse[CompanyUser], status_code=status.HTTP_201_CREATED)
def add_company_user(
    company_id: int,
    member: CompanyUserCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_member = crud.add_company_user(db, company_id, member, caller_id)
    return {"success": True, "data": db_member, "message": "User assigned to company"}


@router.delete("/{company_id}/users/{user_id}", response_model=ApiResponse)
def remove_company_user(
    company_id: int,
    user_id: str,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    crud.remove_company_user(db, company_id, user_id, caller_id)
    return {"success": True, "message": "User removed from company"}
