import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from crud.reference_data import get_payment_type
from models.transaction_payments import TransactionPayment
from models.transactions import Transaction
from schemas.transaction_payments import PaymentCreate, PaymentSummary, PaymentUpdate, Payment
from utils.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from utils.formatting import format_amount, settlement_status, to_money

logger = logging.getLogger("transaction_payments")


def _owned_transaction(db: Session, transaction_id: str, caller_id: str, lock: bool = False):
    """The caller's transaction, optionally locked until the end of the unit of work.

    The lock serialises concurrent payment writes against the same
    transaction so the sum check and the write see the same total.
    """
    query = db.query(Transaction).filter(Transaction.id == transaction_id)
    if lock:
        query = query.with_for_update()
    db_transaction = query.first()
    if db_transaction is None or db_transaction.user_id != caller_id:
        raise NotFoundError("Transaction not found")
    return db_transaction


def get_total_paid(db: Session, transaction_id: str, exclude_payment_id=None):
    query = db.query(func.coalesce(func.sum(TransactionPayment.amount), 0)).filter(
        TransactionPayment.transaction_id == transaction_id
    )
    if exclude_payment_id is not None:
        query = query.filter(TransactionPayment.id != exclude_payment_id)
    return to_money(query.scalar())


def _ensure_within_total(db_transaction: Transaction, already_paid, amount, caller_id: str):
    total = to_money(db_transaction.amount_total)
    if already_paid + to_money(amount) > total:
        remaining = max(total - already_paid, to_money(0))
        logger.warning(
            f"User {caller_id} rejected payment of {format_amount(amount)} on transaction "
            f"{db_transaction.id}: remaining {format_amount(remaining)}"
        )
        raise InvalidInputError(
            f"Total payments cannot exceed {format_amount(total)}. "
            f"Already paid: {format_amount(already_paid)}. "
            f"Remaining: {format_amount(remaining)}"
        )


def _ensure_payment_type(db: Session, payment_type_id: int):
    if get_payment_type(db, payment_type_id) is None:
        raise NotFoundError("Payment type not found")


def get_payment_or_403(db: Session, payment_id: int, caller_id: str, lock: bool = False):
    db_payment = db.query(TransactionPayment).filter(TransactionPayment.id == payment_id).first()
    if db_payment is None:
        raise NotFoundError("Payment not found")

    query = db.query(Transaction).filter(Transaction.id == db_payment.transaction_id)
    if lock:
        query = query.with_for_update()
    db_transaction = query.first()
    if db_transaction is None or db_transaction.user_id != caller_id:
        logger.warning(f"User {caller_id} denied access to payment ID {payment_id}")
        raise ForbiddenError("You do not have permission to access this payment")
    return db_payment, db_transaction


def get_payments(db: Session, transaction_id: str, caller_id: str):
    _owned_transaction(db, transaction_id, caller_id)
    return (
        db.query(TransactionPayment)
        .options(selectinload(TransactionPayment.payment_type))
        .filter(TransactionPayment.transaction_id == transaction_id)
        .order_by(TransactionPayment.payment_date.desc(), TransactionPayment.id.desc())
        .all()
    )


def create_payment(db: Session, transaction_id: str, payment: PaymentCreate, caller_id: str):
    db_transaction = _owned_transaction(db, transaction_id, caller_id, lock=True)
    _ensure_payment_type(db, payment.payment_type_id)
    _ensure_within_total(db_transaction, get_total_paid(db, transaction_id), payment.amount, caller_id)

    db_payment = TransactionPayment(transaction_id=transaction_id, **payment.model_dump())
    db.add(db_payment)
    db.commit()
    db.refresh(db_payment)
    logger.info(
        f"Payment ID {db_payment.id} of {format_amount(payment.amount)} registered on transaction "
        f"{transaction_id} by user {caller_id}"
    )
    return db_payment


def update_payment(db: Session, payment_id: int, payment: PaymentUpdate, caller_id: str):
    db_payment, db_transaction = get_payment_or_403(db, payment_id, caller_id, lock=True)

    update_data = payment.model_dump(exclude_unset=True)
    if not update_data:
        raise InvalidInputError("No fields provided for update")

    if "payment_type_id" in update_data:
        _ensure_payment_type(db, update_data["payment_type_id"])
    if "amount" in update_data:
        # The payment's previous amount no longer counts towards the total
        already_paid = get_total_paid(db, db_transaction.id, exclude_payment_id=payment_id)
        _ensure_within_total(db_transaction, already_paid, update_data["amount"], caller_id)

    for key, value in update_data.items():
        setattr(db_payment, key, value)
    db.commit()
    db.refresh(db_payment)
    logger.info(f"Payment ID {payment_id} updated by user {caller_id}")
    return db_payment


def delete_payment(db: Session, payment_id: int, caller_id: str):
    db_payment, _ = get_payment_or_403(db, payment_id, caller_id)
    db.delete(db_payment)
    db.commit()
    logger.info(f"Payment ID {payment_id} deleted by user {caller_id}")
    return True


def get_payment_summary(db: Session, transaction_id: str, caller_id: str) -> PaymentSummary:
    db_transaction = _owned_transaction(db, transaction_id, caller_id)
    payments = get_payments(db, transaction_id, caller_id)

    total = to_money(db_transaction.amount_total)
    paid = sum((to_money(p.amount) for p in payments), to_money(0))
    remaining = total - paid
    return PaymentSummary(
        transaction_total=total,
        total_paid=paid,
        remaining_amount=remaining if remaining > 0 else to_money(0),
        payment_count=len(payments),
        settlement_status=settlement_status(total, paid),
        payments=[Payment.model_validate(p) for p in payments],
    )
