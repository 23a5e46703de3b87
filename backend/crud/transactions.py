"""
Ledger transactions.

Creation and update run a fixed validation chain before anything is written;
the first failing step decides the error the caller sees:

1. duplicate ``document_number``            -> 409
2. category exists                          -> 404
3. document type exists                     -> 404
4. tax rate exists (when given)             -> 404
5. company exists, caller is a member       -> 404 / 403
6. category type equals transaction type    -> 400
7. vendor is the caller's, status exists    -> 404

On update a new ``amount_total`` must still cover the payments already
registered (400); the row is locked for that check.

Reads attach the payment aggregates (count, total paid, pending amount) and
the derived settlement fields.
"""
import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session, selectinload

from crud.transaction_payments import get_total_paid
from database import commit_or_conflict
from models.categories import Category, TransactionType
from models.companies import Company
from models.document_types import DocumentType
from models.status import Status
from models.tax_rates import TaxRate
from models.transaction_payments import TransactionPayment
from models.transactions import Transaction
from models.vendors import Vendor
from schemas import transactions as schemas
from schemas.common import Pagination, normalize_page
from utils.access import is_company_member
from utils.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from utils.formatting import format_amount, settlement_status, status_color, to_money

logger = logging.getLogger("transactions")

DUPLICATE_DOCUMENT = "A transaction with this document number already exists"

_DISPLAY_RELATIONS = (
    selectinload(Transaction.category),
    selectinload(Transaction.vendor),
    selectinload(Transaction.status),
    selectinload(Transaction.document_type),
    selectinload(Transaction.applied_tax_rate),
    selectinload(Transaction.company),
)


def with_settlement(db_transaction: Transaction, payments_count: int, total_paid) -> schemas.Transaction:
    """Serialize a transaction together with its derived payment fields."""
    total = to_money(db_transaction.amount_total)
    paid = to_money(total_paid)
    pending = total - paid
    return schemas.Transaction.model_validate(db_transaction).model_copy(update={
        "payments_count": payments_count or 0,
        "total_paid": paid,
        "pending_amount": pending if pending > 0 else to_money(0),
        "settlement_status": settlement_status(total, paid),
        "status_color": status_color(db_transaction.status_name),
    })


def _ensure_document_number_free(db: Session, document_number: str, caller_id: str, exclude_id=None):
    query = db.query(Transaction).filter(Transaction.document_number == document_number)
    if exclude_id is not None:
        query = query.filter(Transaction.id != exclude_id)
    existing = query.first()
    if existing:
        # Only the owner gets to see the record that holds the number
        data = {"id": existing.id, "document_number": existing.document_number} \
            if existing.user_id == caller_id else None
        raise ConflictError(DUPLICATE_DOCUMENT, data=data)


def _resolve_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_document_type(db: Session, document_type_id: int):
    if db.query(DocumentType.id).filter(DocumentType.id == document_type_id).first() is None:
        raise NotFoundError("Document type not found")


def _ensure_tax_rate(db: Session, tax_rate_id: int):
    if db.query(TaxRate.id).filter(TaxRate.id == tax_rate_id).first() is None:
        raise NotFoundError("Tax rate not found")


def _ensure_company_access(db: Session, company_id: int, caller_id: str):
    if db.query(Company.id).filter(Company.id == company_id).first() is None:
        raise NotFoundError("Company not found")
    if not is_company_member(db, company_id, caller_id):
        logger.warning(f"User {caller_id} tried to use company ID {company_id} without membership")
        raise ForbiddenError("You do not have permission to use this company")


def _ensure_category_matches(category: Category, type_: TransactionType):
    if category.type != type_:
        raise InvalidInputError(
            f"The selected category is not valid for transactions of type {TransactionType(type_).value}"
        )


def _ensure_vendor(db: Session, vendor_id: int, caller_id: str):
    vendor = db.query(Vendor.id).filter(Vendor.id == vendor_id, Vendor.user_id == caller_id).first()
    if vendor is None:
        raise NotFoundError("Vendor not found")


def _ensure_status(db: Session, status_id: int):
    if db.query(Status.id).filter(Status.id == status_id).first() is None:
        raise NotFoundError("Status not found")


def _ensure_total_covers_payments(db: Session, db_transaction: Transaction, amount_total):
    already_paid = get_total_paid(db, db_transaction.id)
    if to_money(amount_total) < already_paid:
        raise InvalidInputError(
            "Total cannot be lower than the amount already paid. "
            f"Total: {format_amount(amount_total)}. Already paid: {format_amount(already_paid)}"
        )


def get_transaction(db: Session, transaction_id: str, caller_id: str, lock: bool = False):
    query = (
        db.query(Transaction)
        .options(*_DISPLAY_RELATIONS)
        .filter(Transaction.id == transaction_id, Transaction.user_id == caller_id)
    )
    if lock:
        query = query.with_for_update()
    return query.first()


def get_transaction_or_404(db: Session, transaction_id: str, caller_id: str, lock: bool = False):
    db_transaction = get_transaction(db, transaction_id, caller_id, lock=lock)
    if db_transaction is None:
        raise NotFoundError("Transaction not found")
    return db_transaction


def read_transaction(db: Session, transaction_id: str, caller_id: str) -> schemas.Transaction:
    db_transaction = get_transaction_or_404(db, transaction_id, caller_id)
    payments = db_transaction.payments
    return with_settlement(db_transaction, len(payments), sum((p.amount for p in payments), to_money(0)))


def create_transaction(db: Session, transaction: schemas.TransactionCreate, caller_id: str):
    _ensure_document_number_free(db, transaction.document_number, caller_id)
    category = _resolve_category(db, transaction.category_id)
    _ensure_document_type(db, transaction.document_type_id)
    if transaction.tax_rate_id is not None:
        _ensure_tax_rate(db, transaction.tax_rate_id)
    if transaction.company_id is not None:
        _ensure_company_access(db, transaction.company_id, caller_id)
    _ensure_category_matches(category, transaction.type)
    _ensure_vendor(db, transaction.vendor_id, caller_id)
    _ensure_status(db, transaction.status_id)

    db_transaction = Transaction(
        id=str(uuid.uuid4()),
        user_id=caller_id,
        **transaction.model_dump(),
    )
    db.add(db_transaction)
    commit_or_conflict(db, DUPLICATE_DOCUMENT)
    logger.info(
        f"Transaction {db_transaction.id} ({transaction.type.value}, document {transaction.document_number}, "
        f"total {transaction.amount_total}) created by user {caller_id}"
    )
    return read_transaction(db, db_transaction.id, caller_id)


def _apply_filters(query, caller_id: str, filters: Optional[schemas.TransactionFilters]):
    query = query.filter(Transaction.user_id == caller_id)
    if not filters:
        return query
    if filters.start_date:
        query = query.filter(Transaction.transaction_date >= filters.start_date)
    if filters.end_date:
        query = query.filter(Transaction.transaction_date <= filters.end_date)
    if filters.category_id is not None:
        query = query.filter(Transaction.category_id == filters.category_id)
    if filters.vendor_id is not None:
        query = query.filter(Transaction.vendor_id == filters.vendor_id)
    if filters.status_id is not None:
        query = query.filter(Transaction.status_id == filters.status_id)
    if filters.document_type_id is not None:
        query = query.filter(Transaction.document_type_id == filters.document_type_id)
    if filters.tax_rate_id is not None:
        query = query.filter(Transaction.tax_rate_id == filters.tax_rate_id)
    if filters.company_id is not None:
        query = query.filter(Transaction.company_id == filters.company_id)
    if filters.type:
        query = query.filter(Transaction.type == filters.type)
    if filters.document_number:
        query = query.filter(Transaction.document_number.ilike(f"%{filters.document_number}%"))
    return query


def get_transactions(db: Session, caller_id: str, filters: Optional[schemas.TransactionFilters] = None,
                     page: Optional[int] = None, limit: Optional[int] = None) -> schemas.TransactionPage:
    """Newest first; ties on the date are broken by id so pages never overlap."""
    page, limit = normalize_page(page, limit)

    payments = (
        db.query(
            TransactionPayment.transaction_id.label("transaction_id"),
            func.count(TransactionPayment.id).label("payments_count"),
            func.coalesce(func.sum(TransactionPayment.amount), 0).label("total_paid"),
        )
        .group_by(TransactionPayment.transaction_id)
        .subquery()
    )

    total = _apply_filters(db.query(func.count(Transaction.id)), caller_id, filters).scalar() or 0

    rows = (
        _apply_filters(
            db.query(Transaction, payments.c.payments_count, payments.c.total_paid)
            .outerjoin(payments, payments.c.transaction_id == Transaction.id)
            .options(*_DISPLAY_RELATIONS),
            caller_id,
            filters,
        )
        .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return schemas.TransactionPage(
        data=[with_settlement(txn, count, paid) for txn, count, paid in rows],
        pagination=Pagination.build(page, limit, total),
    )


def update_transaction(db: Session, transaction_id: str, transaction: schemas.TransactionUpdate, caller_id: str):
    update_data = transaction.model_dump(exclude_unset=True)
    # Payments cannot be registered against the row while its total changes
    db_transaction = get_transaction_or_404(db, transaction_id, caller_id, lock="amount_total" in update_data)

    if not update_data:
        raise InvalidInputError("No fields provided for update")

    if "document_number" in update_data and update_data["document_number"] != db_transaction.document_number:
        _ensure_document_number_free(db, update_data["document_number"], caller_id, exclude_id=transaction_id)

    # Category and type are checked against each other using the stored
    # value for whichever one is not being changed
    category = None
    if "category_id" in update_data or "type" in update_data:
        category = _resolve_category(db, update_data.get("category_id", db_transaction.category_id))
    if "document_type_id" in update_data:
        _ensure_document_type(db, update_data["document_type_id"])
    if update_data.get("tax_rate_id") is not None:
        _ensure_tax_rate(db, update_data["tax_rate_id"])
    if update_data.get("company_id") is not None:
        _ensure_company_access(db, update_data["company_id"], caller_id)
    if category is not None:
        _ensure_category_matches(category, update_data.get("type", db_transaction.type))
    if "vendor_id" in update_data:
        _ensure_vendor(db, update_data["vendor_id"], caller_id)
    if "status_id" in update_data:
        _ensure_status(db, update_data["status_id"])
    if "amount_total" in update_data:
        _ensure_total_covers_payments(db, db_transaction, update_data["amount_total"])

    for key, value in update_data.items():
        setattr(db_transaction, key, value)
    commit_or_conflict(db, DUPLICATE_DOCUMENT)
    logger.info(f"Transaction {transaction_id} updated by user {caller_id}: {sorted(update_data)}")
    return read_transaction(db, transaction_id, caller_id)


def delete_transaction(db: Session, transaction_id: str, caller_id: str):
    db_transaction = get_transaction_or_404(db, transaction_id, caller_id)
    payments_count = len(db_transaction.payments)
    # Payments go with their transaction (relationship cascade)
    db.delete(db_transaction)
    db.commit()
    logger.info(
        f"Transaction {transaction_id} deleted by user {caller_id} along with {payments_count} payment(s)"
    )
    return True


def get_summary(db: Session, caller_id: str, start_date: Optional[date] = None,
                end_date: Optional[date] = None, company_id: Optional[int] = None) -> schemas.TransactionSummary:
    income = func.coalesce(func.sum(case(
        (Transaction.type == TransactionType.income, Transaction.amount_total), else_=0
    )), 0)
    expense = func.coalesce(func.sum(case(
        (Transaction.type == TransactionType.expense, Transaction.amount_total), else_=0
    )), 0)

    filters = schemas.TransactionFilters(start_date=start_date, end_date=end_date, company_id=company_id)
    total_income, total_expense = _apply_filters(db.query(income, expense), caller_id, filters).one()

    total_income = to_money(total_income)
    total_expense = to_money(total_expense)
    return schemas.TransactionSummary(
        total_income=total_income,
        total_expense=total_expense,
        net_balance=total_income - total_expense,
    )
