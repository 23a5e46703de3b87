import logging

from sqlalchemy.orm import Session

from database import commit_or_conflict
from models.document_types import DocumentType
from models.transactions import Transaction
from schemas.document_types import DocumentTypeCreate, DocumentTypeUpdate
from utils.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger("document_types")

DUPLICATE_CODE = "A document type with this code already exists"


def get_document_types(db: Session):
    return db.query(DocumentType).order_by(DocumentType.code.asc()).all()


def get_document_type(db: Session, document_type_id: int):
    return db.query(DocumentType).filter(DocumentType.id == document_type_id).first()


def get_document_type_by_code(db: Session, code: str):
    return db.query(DocumentType).filter(DocumentType.code == code).first()


def get_document_type_or_404(db: Session, document_type_id: int):
    db_document_type = get_document_type(db, document_type_id)
    if db_document_type is None:
        raise NotFoundError("Document type not found")
    return db_document_type


def create_document_type(db: Session, document_type: DocumentTypeCreate, caller_id: str):
    if get_document_type_by_code(db, document_type.code):
        raise ConflictError(DUPLICATE_CODE)

    db_document_type = DocumentType(**document_type.model_dump())
    db.add(db_document_type)
    commit_or_conflict(db, DUPLICATE_CODE)
    db.refresh(db_document_type)
    logger.info(f"Document type '{db_document_type.code}' created by user {caller_id}")
    return db_document_type


def update_document_type(db: Session, document_type_id: int, document_type: DocumentTypeUpdate, caller_id: str):
    db_document_type = get_document_type_or_404(db, document_type_id)

    update_data = document_type.model_dump(exclude_unset=True)
    for required in ("code", "name", "is_electronic"):
        if required in update_data and update_data[required] is None:
            raise InvalidInputError(f"{required} cannot be null")
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    new_code = update_data.get("code")
    if new_code is not None and new_code != db_document_type.code:
        if get_document_type_by_code(db, new_code):
            raise ConflictError(DUPLICATE_CODE)

    for key, value in update_data.items():
        setattr(db_document_type, key, value)
    commit_or_conflict(db, DUPLICATE_CODE)
    db.refresh(db_document_type)
    logger.info(f"Document type ID {document_type_id} updated by user {caller_id}")
    return db_document_type


def delete_document_type(db: Session, document_type_id: int, caller_id: str):
    db_document_type = get_document_type_or_404(db, document_type_id)

    in_use = db.query(Transaction.id).filter(Transaction.document_type_id == document_type_id).first()
    if in_use:
        raise ConflictError(f"Document type '{db_document_type.code}' is used by existing transactions and cannot be deleted")

    db.delete(db_document_type)
    db.commit()
    logger.info(f"Document type ID {document_type_id} deleted by user {caller_id}")
    return True
