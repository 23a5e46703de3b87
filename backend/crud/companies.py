import logging

from sqlalchemy.orm import Session

from database import commit_or_conflict
from models.companies import Company, CompanyUser
from models.transactions import Transaction
from schemas.companies import CompanyCreate, CompanyUpdate, CompanyUserCreate
from utils.access import ensure_company_admin, ensure_company_member, get_membership
from utils.exceptions import ConflictError, InvalidInputError, NotFoundError
from utils.rut import validate_and_format_rut

logger = logging.getLogger("companies")

DUPLICATE_TAX_ID = "A company with this tax id already exists"


def _is_chile(country) -> bool:
    return (country or "").strip().lower() == "chile"


def _normalize_tax_id(tax_id: str, country) -> str:
    if not _is_chile(country):
        return tax_id.strip()
    formatted = validate_and_format_rut(tax_id)
    if formatted is None:
        raise InvalidInputError("Invalid RUT")
    return formatted


def _ensure_unique_tax_id(db: Session, tax_id: str, exclude_id=None):
    query = db.query(Company).filter(Company.tax_id == tax_id)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    if query.first():
        raise ConflictError(DUPLICATE_TAX_ID)


def get_company(db: Session, company_id: int):
    return db.query(Company).filter(Company.id == company_id).first()


def get_company_or_404(db: Session, company_id: int):
    db_company = get_company(db, company_id)
    if db_company is None:
        raise NotFoundError("Company not found")
    return db_company


def get_companies_for_user(db: Session, caller_id: str):
    """Companies the caller is assigned to."""
    return (
        db.query(Company)
        .join(CompanyUser, CompanyUser.company_id == Company.id)
        .filter(CompanyUser.user_id == caller_id)
        .order_by(Company.name.asc())
        .all()
    )


def get_company_for_member(db: Session, company_id: int, caller_id: str):
    db_company = get_company_or_404(db, company_id)
    ensure_company_member(db, company_id, caller_id)
    return db_company


def create_company(db: Session, company: CompanyCreate, caller_id: str):
    tax_id = _normalize_tax_id(company.tax_id, company.country)
    _ensure_unique_tax_id(db, tax_id)

    data = company.model_dump()
    data["tax_id"] = tax_id
    db_company = Company(**data)
    # The creator administers the company from the start
    db_company.members.append(CompanyUser(user_id=caller_id, is_admin=True))
    db.add(db_company)
    commit_or_conflict(db, DUPLICATE_TAX_ID)
    db.refresh(db_company)
    logger.info(f"Company '{db_company.name}' (ID {db_company.id}) created by user {caller_id}")
    return db_company


def update_company(db: Session, company_id: int, company: CompanyUpdate, caller_id: str):
    db_company = get_company_or_404(db, company_id)
    ensure_company_admin(db, company_id, caller_id)

    update_data = company.model_dump(exclude_unset=True)
    for required in ("name", "tax_id"):
        if required in update_data and update_data[required] is None:
            raise InvalidInputError(f"{required} cannot be null")
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    country = update_data.get("country", db_company.country)
    if "tax_id" in update_data or ("country" in update_data and _is_chile(country)):
        tax_id = _normalize_tax_id(update_data.get("tax_id", db_company.tax_id), country)
        _ensure_unique_tax_id(db, tax_id, exclude_id=company_id)
        update_data["tax_id"] = tax_id

    for key, value in update_data.items():
        setattr(db_company, key, value)
    commit_or_conflict(db, DUPLICATE_TAX_ID)
    db.refresh(db_company)
    logger.info(f"Company ID {company_id} updated by user {caller_id}")
    return db_company


def delete_company(db: Session, company_id: int, caller_id: str):
    db_company = get_company_or_404(db, company_id)
    ensure_company_admin(db, company_id, caller_id)

    in_use = db.query(Transaction.id).filter(Transaction.company_id == company_id).first()
    if in_use:
        raise ConflictError("Company is referenced by existing transactions and cannot be deleted")

    db.delete(db_company)
    db.commit()
    logger.info(f"Company ID {company_id} deleted by user {caller_id}")
    return True


def get_company_users(db: Session, company_id: int, caller_id: str):
    get_company_for_member(db, company_id, caller_id)
    return (
        db.query(CompanyUser)
        .filter(CompanyUser.company_id == company_id)
        .order_by(CompanyUser.is_admin.desc(), CompanyUser.user_id.asc())
        .all()
    )


def add_company_user(db: Session, company_id: int, member: CompanyUserCreate, caller_id: str):
    get_company_or_404(db, company_id)
    ensure_company_admin(db, company_id, caller_id)

    if get_membership(db, company_id, member.user_id):
        raise ConflictError("User is already assigned to this company")

    db_member = CompanyUser(company_id=company_id, user_id=member.user_id, is_admin=member.is_admin)
    db.add(db_member)
    commit_or_conflict(db, "User is already assigned to this company")
    db.refresh(db_member)
    logger.info(f"User {member.user_id} assigned to company ID {company_id} by user {caller_id}")
    return db_member


def remove_company_user(db: Session, company_id: int, user_id: str, caller_id: str):
    get_company_or_404(db, company_id)
    ensure_company_admin(db, company_id, caller_id)

    db_member = get_membership(db, company_id, user_id)
    if db_member is None:
        raise NotFoundError("User is not assigned to this company")

    if db_member.is_admin:
        admins = (
            db.query(CompanyUser)
            .filter(CompanyUser.company_id == company_id, CompanyUser.is_admin.is_(True))
            .count()
        )
        if admins <= 1:
            raise InvalidInputError("A company must keep at least one administrator")

    db.delete(db_member)
    db.commit()
    logger.info(f"User {user_id} removed from company ID {company_id} by user {caller_id}")
    return True
