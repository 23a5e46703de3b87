from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from crud import document_types as crud
from database import get_db
from schemas.common import ApiResponse
from schemas.document_types import DocumentType, DocumentTypeCreate, DocumentTypeUpdate
from utils.auth_utils import get_caller_id

router = APIRouter(prefix="/document-types", tags=["Document Types"])


@router.get("/", response_model=ApiResponse[List[DocumentType]])
def read_document_types(db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_document_types(db)}


@router.get("/{document_type_id}", response_model=ApiResponse[DocumentType])
def read_document_type(document_type_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    return {"success": True, "data": crud.get_document_type_or_404(db, document_type_id)}


@router.post("/", response_model=ApiResponse[DocumentType], status_code=status.HTTP_201_CREATED)
def create_document_type(
    document_type: DocumentTypeCreate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_document_type = crud.create_document_type(db, document_type, caller_id)
    return {"success": True, "data": db_document_type, "message": "Document type created successfully"}


@router.put("/{document_type_id}", response_model=ApiResponse[DocumentType])
def update_document_type(
    document_type_id: int,
    document_type: DocumentTypeUpdate,
    db: Session = Depends(get_db),
    caller_id: str = Depends(get_caller_id),
):
    db_document_type = crud.update_document_type(db, document_type_id, document_type, caller_id)
    return {"success": True, "data": db_document_type, "message": "Document type updated successfully"}


@router.delete("/{document_type_id}", response_model=ApiResponse)
def delete_document_type(document_type_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
    crud.delete_document_type(db, document_type_id, caller_id)
    return {"success": True, "message": "Document type deleted successfully"}
