import logging
from typing import Optional

from sqlalchemy import extract, func
from sqlalchemy.orm import Session

from database import commit_or_conflict
from models.categories import Category, TransactionType
from models.transactions import Transaction
from schemas.categories import CategoryCreate, CategoryUpdate
from utils.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError

logger = logging.getLogger("categories")

DUPLICATE_NAME = "A category with this name already exists for this type"


def get_category(db: Session, category_id: int):
    return db.query(Category).filter(Category.id == category_id).first()


def get_category_or_404(db: Session, category_id: int):
    db_category = get_category(db, category_id)
    if db_category is None:
        raise NotFoundError("Category not found")
    return db_category


def get_category_by_name(db: Session, name: str, type_: TransactionType):
    return db.query(Category).filter(Category.name == name, Category.type == type_).first()


def get_categories(db: Session, type_: Optional[TransactionType] = None, skip: int = 0, limit: int = 50):
    """Returns (rows, total) ordered by type then name."""
    query = db.query(Category)
    if type_:
        query = query.filter(Category.type == type_)
    total = query.count()
    rows = query.order_by(Category.type.asc(), Category.name.asc(), Category.id.asc()).offset(skip).limit(limit).all()
    return rows, total


def create_category(db: Session, category: CategoryCreate, caller_id: str):
    if get_category_by_name(db, category.name, category.type):
        raise ConflictError(DUPLICATE_NAME)

    # Categories created through the API are never defaults
    db_category = Category(**category.model_dump(), is_default=False)
    db.add(db_category)
    commit_or_conflict(db, DUPLICATE_NAME)
    db.refresh(db_category)
    logger.info(f"Category '{db_category.name}' ({db_category.type.value}) created by user {caller_id}")
    return db_category


def update_category(db: Session, category_id: int, category: CategoryUpdate, caller_id: str):
    db_category = get_category_or_404(db, category_id)
    if db_category.is_default:
        raise ForbiddenError("Default categories cannot be modified")

    update_data = category.model_dump(exclude_unset=True)
    if update_data.get("name", "") is None:
        raise InvalidInputError("Name cannot be null")
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    new_name = update_data.get("name")
    if new_name is not None and new_name != db_category.name:
        existing = get_category_by_name(db, new_name, db_category.type)
        if existing and existing.id != category_id:
            raise ConflictError(DUPLICATE_NAME)

    for key, value in update_data.items():
        setattr(db_category, key, value)
    commit_or_conflict(db, DUPLICATE_NAME)
    db.refresh(db_category)
    logger.info(f"Category ID {category_id} updated by user {caller_id}")
    return db_category


def delete_category(db: Session, category_id: int, caller_id: str):
    db_category = get_category_or_404(db, category_id)
    if db_category.is_default:
        logger.warning(f"User {caller_id} attempted to delete default category ID {category_id}")
        raise ForbiddenError("Default categories cannot be deleted")

    in_use = db.query(Transaction.id).filter(Transaction.category_id == category_id).first()
    if in_use:
        raise ConflictError(f"Category '{db_category.name}' is used by existing transactions and cannot be deleted")

    db.delete(db_category)
    db.commit()
    logger.info(f"Category ID {category_id} deleted by user {caller_id}")
    return True


def get_monthly_consolidated(db: Session, caller_id: str, year: int,
                             type_: Optional[TransactionType] = None, company_id: Optional[int] = None):
    """Per category, per month totals of the caller's transactions in ``year``."""
    month = extract("month", Transaction.transaction_date)
    query = (
        db.query(
            Category.id.label("category_id"),
            Category.name.label("category_name"),
            Category.type.label("type"),
            month.label("month"),
            func.coalesce(func.sum(Transaction.amount_total), 0).label("total"),
            func.count(Transaction.id).label("transaction_count"),
        )
        .join(Transaction, Transaction.category_id == Category.id)
        .filter(
            Transaction.user_id == caller_id,
            extract("year", Transaction.transaction_date) == year,
        )
    )
    if type_:
        query = query.filter(Transaction.type == type_)
    if company_id is not None:
        query = query.filter(Transaction.company_id == company_id)

    rows = (
        query.group_by(Category.id, Category.name, Category.type, month)
        .order_by(Category.name.asc(), month.asc())
        .all()
    )
    return [
        {
            "category_id": row.category_id,
            "category_name": row.category_name,
            "type": row.type,
            "month": int(row.month),
            "total": row.total,
            "transaction_count": row.transaction_count,
        }
        for row in rows
    ]
