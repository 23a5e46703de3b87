"""Ownership and company-membership checks applied by every crud operation."""
from sqlalchemy.orm import Session

from models.companies import CompanyUser
from utils.exceptions import ForbiddenError


def ensure_owner(resource, caller_id: str, detail: str = "You do not have permission to access this resource"):
    """Resources with a ``user_id`` column are only reachable by that user."""
    if resource.user_id != caller_id:
        raise ForbiddenError(detail)
    return resource


def get_membership(db: Session, company_id: int, user_id: str):
    return db.query(CompanyUser).filter(
        CompanyUser.company_id == company_id,
        CompanyUser.user_id == user_id,
    ).first()


def is_company_member(db: Session, company_id: int, user_id: str) -> bool:
    return get_membership(db, company_id, user_id) is not None


def is_company_admin(db: Session, company_id: int, user_id: str) -> bool:
    membership = get_membership(db, company_id, user_id)
    return bool(membership and membership.is_admin)


def ensure_company_member(db: Session, company_id: int, caller_id: str,
                          detail: str = "You do not have permission to access this company"):
    if not is_company_member(db, company_id, caller_id):
        raise ForbiddenError(detail)


def ensure_company_admin(db: Session, company_id: int, caller_id: str,
                         detail: str = "Only company administrators can perform this action"):
    if not is_company_admin(db, company_id, caller_id):
        raise ForbiddenError(detail)
