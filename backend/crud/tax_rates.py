import logging

from sqlalchemy.orm import Session

from database import commit_or_conflict
from models.tax_rates import TaxRate
from models.transactions import Transaction
from schemas.tax_rates import TaxRateCreate, TaxRateUpdate
from utils.exceptions import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger("tax_rates")

DUPLICATE_NAME = "A tax rate with this name already exists"


def get_tax_rates(db: Session):
    return db.query(TaxRate).order_by(TaxRate.name.asc()).all()


def get_tax_rate(db: Session, tax_rate_id: int):
    return db.query(TaxRate).filter(TaxRate.id == tax_rate_id).first()


def get_tax_rate_or_404(db: Session, tax_rate_id: int):
    db_tax_rate = get_tax_rate(db, tax_rate_id)
    if db_tax_rate is None:
        raise NotFoundError("Tax rate not found")
    return db_tax_rate


def get_default_tax_rate(db: Session):
    return db.query(TaxRate).filter(TaxRate.is_default.is_(True)).first()


def _clear_default_flag(db: Session, keep_id=None):
    # Same unit of work as the write that sets the new default
    query = db.query(TaxRate).filter(TaxRate.is_default.is_(True))
    if keep_id is not None:
        query = query.filter(TaxRate.id != keep_id)
    query.update({TaxRate.is_default: False}, synchronize_session="fetch")


def _ensure_unique_name(db: Session, name: str, exclude_id=None):
    query = db.query(TaxRate).filter(TaxRate.name == name)
    if exclude_id is not None:
        query = query.filter(TaxRate.id != exclude_id)
    if query.first():
        raise ConflictError(DUPLICATE_NAME)


def create_tax_rate(db: Session, tax_rate: TaxRateCreate, caller_id: str):
    _ensure_unique_name(db, tax_rate.name)

    if tax_rate.is_default:
        _clear_default_flag(db)

    db_tax_rate = TaxRate(**tax_rate.model_dump())
    db.add(db_tax_rate)
    commit_or_conflict(db, DUPLICATE_NAME)
    db.refresh(db_tax_rate)
    logger.info(f"Tax rate '{db_tax_rate.name}' ({db_tax_rate.rate}%) created by user {caller_id}, default={db_tax_rate.is_default}")
    return db_tax_rate


def update_tax_rate(db: Session, tax_rate_id: int, tax_rate: TaxRateUpdate, caller_id: str):
    db_tax_rate = get_tax_rate_or_404(db, tax_rate_id)

    update_data = tax_rate.model_dump(exclude_unset=True)
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    if "name" in update_data and update_data["name"] != db_tax_rate.name:
        _ensure_unique_name(db, update_data["name"], exclude_id=tax_rate_id)

    if update_data.get("is_default"):
        _clear_default_flag(db, keep_id=tax_rate_id)

    for key, value in update_data.items():
        setattr(db_tax_rate, key, value)
    commit_or_conflict(db, DUPLICATE_NAME)
    db.refresh(db_tax_rate)
    logger.info(f"Tax rate ID {tax_rate_id} updated by user {caller_id}")
    return db_tax_rate


def delete_tax_rate(db: Session, tax_rate_id: int, caller_id: str):
    db_tax_rate = get_tax_rate_or_404(db, tax_rate_id)

    if db_tax_rate.is_default:
        raise InvalidInputError("The default tax rate cannot be deleted")

    in_use = db.query(Transaction.id).filter(Transaction.tax_rate_id == tax_rate_id).first()
    if in_use:
        raise ConflictError(f"Tax rate '{db_tax_rate.name}' is used by existing transactions and cannot be deleted")

    db.delete(db_tax_rate)
    db.commit()
    logger.info(f"Tax rate ID {tax_rate_id} deleted by user {caller_id}")
    return True
