import logging
import time
from sqlalchemy.orm import Session
from app.models import User, TransactionFlow, TransactionStatus, InquiryPaymentStatus
from app.services.enrollment import find_course, is_enrolled
from app.services.errors import Conflict, InvalidInput
from app.services.inquiries import attach_order, find_inquiry
from app.services.payment_config import PaymentConfig
from app.services.razorpay import RazorpayApiError
from app.services.transactions import create_pending_transaction, find_transaction_by_order_id

logger = logging.getLogger(__name__)


def build_receipt(kind: str, ref) -> str:
    # Millisecond timestamp keeps receipts unique without a counter.
    return f"receipt_{kind}_{ref}_{int(time.time() * 1000)}"


def _payable_amount(course) -> int:
    amount = int(course.price or 0)
    if amount <= 0:
        raise InvalidInput("This course has no payable amount")
    return amount


def _open_gateway_order(config: PaymentConfig, amount: int, receipt: str) -> dict:
    gateway = config.require_gateway()
    try:
        return gateway.create_order(amount * 100, config.currency, receipt)
    except RazorpayApiError as exc:
        logger.warning("Razorpay order creation failed receipt=%s status=%s: %s", receipt, exc.status_code, exc.message)
        raise exc.to_payment_error() from exc


def create_course_order(db: Session, config: PaymentConfig, *, user: User, course_id: int) -> dict:
    config.require_gateway()
    course = find_course(db, course_id)
    if is_enrolled(db, user.id, course.id):
        raise Conflict("You are already enrolled in this course")

    amount = _payable_amount(course)
    receipt = build_receipt("order", course.id)
    order = _open_gateway_order(config, amount, receipt)

    transaction = create_pending_transaction(
        db,
        flow=TransactionFlow.COURSE,
        user_id=user.id,
        course_id=course.id,
        amount=amount,
        currency=config.currency,
        receipt=receipt,
        gateway_order_id=order["id"],
    )
    logger.info("Created order %s for user %s course %s amount=%s", order["id"], user.id, course.id, amount)
    return {
        "order_id": order["id"],
        "amount": order["amount"],
        "currency": order["currency"],
        "receipt": order["receipt"],
        "transaction_id": transaction.id,
        "key_id": config.key_id,
        "is_test_mode": config.test_mode,
        "prefill": {"name": user.full_name, "email": user.email, "contact": user.phone},
    }


def create_inquiry_order(db: Session, config: PaymentConfig, *, inquiry_id: int) -> dict:
    config.require_gateway()
    inquiry = find_inquiry(db, inquiry_id)
    if inquiry.payment_status != InquiryPaymentStatus.PENDING:
        raise Conflict("Payment for this inquiry is already settled")
    pending = find_transaction_by_order_id(db, inquiry.gateway_order_id)
    if pending is not None and pending.inquiry_id == inquiry.id and pending.status == TransactionStatus.PENDING:
        # Reopening checkout resumes the open order so at most one order per inquiry can be paid.
        logger.info("Reusing order %s for inquiry %s", pending.gateway_order_id, inquiry.id)
        return _inquiry_order_out(config, inquiry, pending)
    course = find_course(db, inquiry.course_id)

    amount = _payable_amount(course)
    receipt = build_receipt("inquiry", inquiry.id)
    order = _open_gateway_order(config, amount, receipt)

    transaction = create_pending_transaction(
        db,
        flow=TransactionFlow.INQUIRY,
        inquiry_id=inquiry.id,
        course_id=course.id,
        amount=amount,
        currency=config.currency,
        receipt=receipt,
        gateway_order_id=order["id"],
    )
    attach_order(db, inquiry.id, order["id"])
    logger.info("Created order %s for inquiry %s course %s amount=%s", order["id"], inquiry.id, course.id, amount)
    return _inquiry_order_out(config, inquiry, transaction)


def _inquiry_order_out(config: PaymentConfig, inquiry, transaction) -> dict:
    return {
        "order_id": transaction.gateway_order_id,
        "amount": transaction.amount * 100,
        "currency": transaction.currency,
        "receipt": transaction.receipt,
        "transaction_id": transaction.id,
        "inquiry_id": inquiry.id,
        "key_id": config.key_id,
        "is_test_mode": config.test_mode,
        "prefill": {"name": inquiry.name, "email": inquiry.email, "contact": inquiry.phone},
    }
