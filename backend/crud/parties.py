"""Clients and vendors share one table shape and one set of rules, so every
function takes the model class as its first argument."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from database import commit_or_conflict
from models.transactions import Transaction
from models.vendors import Vendor
from schemas.parties import Party, PartyCreate, PartyFilters, PartyUpdate
from utils.access import ensure_owner
from utils.exceptions import ConflictError, InvalidInputError, NotFoundError
from utils.rut import validate_and_format_rut

logger = logging.getLogger("parties")


def _label(model) -> str:
    return "Vendor" if model is Vendor else "Client"


def _canonical_tax_id(raw: str) -> str:
    tax_id = validate_and_format_rut(raw)
    if tax_id is None:
        raise InvalidInputError("Invalid RUT")
    return tax_id


def _raise_duplicate(model, existing, caller_id: str):
    # Only the owner gets the existing record back
    data = Party.model_validate(existing).model_dump(mode="json") if existing.user_id == caller_id else None
    raise ConflictError(f"A {_label(model).lower()} with this RUT already exists", data=data)


def get_party_by_tax_id(db: Session, model, tax_id: str):
    return db.query(model).filter(model.tax_id == tax_id).first()


def get_party_or_404(db: Session, model, party_id: int, caller_id: str):
    db_party = db.query(model).filter(model.id == party_id).first()
    if db_party is None:
        raise NotFoundError(f"{_label(model)} not found")
    if db_party.user_id != caller_id:
        logger.warning(f"User {caller_id} denied access to {_label(model).lower()} ID {party_id}")
    return ensure_owner(
        db_party, caller_id, f"You do not have permission to access this {_label(model).lower()}"
    )


def get_parties(db: Session, model, caller_id: str, filters: Optional[PartyFilters] = None):
    query = db.query(model).filter(model.user_id == caller_id)
    if filters:
        if filters.name:
            query = query.filter(model.name.ilike(f"%{filters.name}%"))
        if filters.tax_id:
            query = query.filter(model.tax_id.ilike(f"%{filters.tax_id}%"))
        if filters.region_id is not None:
            query = query.filter(model.region_id == filters.region_id)
        if filters.commune_id is not None:
            query = query.filter(model.commune_id == filters.commune_id)
    return query.order_by(model.name.asc(), model.id.asc()).all()


def create_party(db: Session, model, party: PartyCreate, caller_id: str):
    tax_id = _canonical_tax_id(party.tax_id)

    existing = get_party_by_tax_id(db, model, tax_id)
    if existing:
        _raise_duplicate(model, existing, caller_id)

    data = party.model_dump()
    data["tax_id"] = tax_id
    db_party = model(**data, user_id=caller_id)
    db.add(db_party)
    commit_or_conflict(db, f"A {_label(model).lower()} with this RUT already exists")
    db.refresh(db_party)
    logger.info(f"{_label(model)} '{db_party.name}' ({db_party.tax_id}) created by user {caller_id}")
    return db_party


def update_party(db: Session, model, party_id: int, party: PartyUpdate, caller_id: str):
    db_party = get_party_or_404(db, model, party_id, caller_id)

    update_data = party.model_dump(exclude_unset=True)
    for required in ("name", "tax_id", "region_id", "commune_id"):
        if required in update_data and update_data[required] is None:
            raise InvalidInputError(f"{required} cannot be null")
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    if "tax_id" in update_data:
        tax_id = _canonical_tax_id(update_data["tax_id"])
        if tax_id != db_party.tax_id:
            existing = get_party_by_tax_id(db, model, tax_id)
            if existing and existing.id != db_party.id:
                _raise_duplicate(model, existing, caller_id)
        update_data["tax_id"] = tax_id

    for key, value in update_data.items():
        setattr(db_party, key, value)
    commit_or_conflict(db, f"A {_label(model).lower()} with this RUT already exists")
    db.refresh(db_party)
    logger.info(f"{_label(model)} ID {party_id} updated by user {caller_id}")
    return db_party


def delete_party(db: Session, model, party_id: int, caller_id: str):
    db_party = get_party_or_404(db, model, party_id, caller_id)

    if model is Vendor:
        in_use = db.query(Transaction.id).filter(Transaction.vendor_id == party_id).first()
        if in_use:
            raise ConflictError("Vendor is referenced by existing transactions and cannot be deleted")

    db.delete(db_party)
    db.commit()
    logger.info(f"{_label(model)} ID {party_id} deleted by user {caller_id}")
    return True
