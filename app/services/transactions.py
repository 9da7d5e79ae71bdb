"""
Persistence for payment transactions.

Status changes go through :func:`transition_transaction`, a conditional
``UPDATE ... WHERE status = 'pending'``. The row count tells the caller whether
it won the transition, so two app instances settling the same transaction
cannot both apply side effects.
"""

import logging
from sqlalchemy.orm import Session, joinedload
from app.models import PaymentTransaction, TransactionStatus, TransactionFlow, TERMINAL_STATUSES
from app.services.errors import IllegalTransition, NotFound

logger = logging.getLogger(__name__)


def create_pending_transaction(
    db: Session,
    *,
    flow: TransactionFlow,
    course_id: int,
    amount: int,
    currency: str,
    receipt: str,
    gateway_order_id: str,
    user_id: int | None = None,
    inquiry_id: int | None = None,
) -> PaymentTransaction:
    transaction = PaymentTransaction(
        flow=flow,
        user_id=user_id,
        inquiry_id=inquiry_id,
        course_id=course_id,
        amount=amount,
        currency=currency,
        receipt=receipt,
        gateway_order_id=gateway_order_id,
        status=TransactionStatus.PENDING,
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return transaction


def get_transaction(db: Session, transaction_id: int) -> PaymentTransaction:
    transaction = db.query(PaymentTransaction).filter(PaymentTransaction.id == transaction_id).first()
    if not transaction:
        raise NotFound("Payment not found")
    return transaction


def find_transaction_by_order_id(db: Session, gateway_order_id: str | None) -> PaymentTransaction | None:
    if not gateway_order_id:
        return None
    return db.query(PaymentTransaction).filter(PaymentTransaction.gateway_order_id == gateway_order_id).first()


def transition_transaction(
    db: Session,
    transaction_id: int,
    new_status: TransactionStatus,
    *,
    gateway_payment_id: str | None = None,
    gateway_signature: str | None = None,
    failure_reason: str | None = None,
) -> bool:
    if new_status not in TERMINAL_STATUSES:
        raise IllegalTransition(f"Cannot move a transaction to {new_status.value}")

    values = {PaymentTransaction.status: new_status}
    if new_status == TransactionStatus.COMPLETED:
        values[PaymentTransaction.gateway_payment_id] = gateway_payment_id
        values[PaymentTransaction.gateway_signature] = gateway_signature
    elif failure_reason:
        values[PaymentTransaction.failure_reason] = failure_reason[:255]

    updated = (
        db.query(PaymentTransaction)
        .filter(
            PaymentTransaction.id == transaction_id,
            PaymentTransaction.status == TransactionStatus.PENDING,
        )
        .update(values, synchronize_session=False)
    )
    db.commit()
    if not updated:
        logger.info("Transaction %s was already settled; skipped %s transition", transaction_id, new_status.value)
    return updated == 1


def list_transaction_history(db: Session, user_id: int) -> list[PaymentTransaction]:
    return (
        db.query(PaymentTransaction)
        .options(joinedload(PaymentTransaction.course))
        .filter(PaymentTransaction.user_id == user_id)
        .order_by(PaymentTransaction.created_at.desc(), PaymentTransaction.id.desc())
        .all()
    )
