"""
Settlement of payment claims.

A claim is verified first (HMAC signature or a gateway lookup), then the
transaction is moved out of ``pending`` with a conditional update. Only the
request that wins that update applies the linked effect for the first time.
Every later call for the same transaction replays the stored outcome and
re-applies the linked effect idempotently, which also repairs a crash between
the transaction write and the enrollment/inquiry write.
"""

import logging
from sqlalchemy.orm import Session
from app.models import (
    CourseInquiry,
    InquiryPaymentStatus,
    PaymentTransaction,
    TransactionFlow,
    TransactionStatus,
)
from app.services.enrollment import add_enrollment
from app.services.errors import Conflict, InvalidInput, NotFound, VerificationFailed
from app.services.inquiries import find_inquiry, mark_inquiry_paid, mark_inquiry_payment_failed
from app.services.payment_config import PaymentConfig
from app.services.razorpay import AUTHENTIC_PAYMENT_STATUSES, RazorpayApiError, verify_payment_signature
from app.services.transactions import find_transaction_by_order_id, get_transaction, transition_transaction

logger = logging.getLogger(__name__)

# Canonical claim field -> accepted spellings (checkout SDK callbacks use camelCase,
# hosted-page redirects use snake_case).
CLAIM_FIELD_ALIASES = {
    "transaction_id": ("transactionId", "transaction_id"),
    "inquiry_id": ("inquiryId", "inquiry_id"),
    "order_id": ("razorpayOrderId", "razorpay_order_id", "orderId", "order_id"),
    "payment_id": ("razorpayPaymentId", "razorpay_payment_id", "paymentId", "payment_id"),
    "signature": ("razorpaySignature", "razorpay_signature", "signature"),
    "organization": ("organization",),
}

# Course checkout callbacks send our own transaction id as `paymentId`; only the
# razorpay-prefixed keys carry the gateway payment id there.
COURSE_CLAIM_FIELD_ALIASES = {
    **CLAIM_FIELD_ALIASES,
    "transaction_id": ("transactionId", "transaction_id", "paymentId"),
    "payment_id": ("razorpayPaymentId", "razorpay_payment_id", "payment_id"),
}

SUCCESS_MESSAGE = "Payment verified successfully"
FAILURE_MESSAGE = "Payment verification failed"


def normalize_claim_fields(payload: dict | None, aliases_by_field: dict = CLAIM_FIELD_ALIASES) -> dict:
    payload = payload if isinstance(payload, dict) else {}
    normalized = {}
    for field, aliases in aliases_by_field.items():
        value = None
        for alias in aliases:
            candidate = payload.get(alias)
            if candidate not in (None, ""):
                value = candidate
                break
        normalized[field] = value.strip() if isinstance(value, str) else value
    return normalized


def _record_id(value, label: str) -> int:
    try:
        record_id = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{label} is required")
    if record_id <= 0:
        raise InvalidInput(f"{label} is required")
    return record_id


def _text(value) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class SettlementClaim:
    def __init__(
        self,
        *,
        record_id: int,
        payment_id: str | None = None,
        order_id: str | None = None,
        signature: str | None = None,
        organization: str | None = None,
        lookup: bool = False,
    ):
        self.record_id = record_id
        self.payment_id = payment_id
        self.order_id = order_id
        self.signature = signature
        self.organization = organization
        self.lookup = lookup

    @classmethod
    def from_payload(cls, payload: dict | None, *, record_field: str, lookup: bool = False) -> "SettlementClaim":
        aliases = COURSE_CLAIM_FIELD_ALIASES if record_field == "transaction_id" else CLAIM_FIELD_ALIASES
        fields = normalize_claim_fields(payload, aliases)
        label = "Inquiry ID" if record_field == "inquiry_id" else "Transaction ID"
        record_id = _record_id(fields.get(record_field), label)
        payment_id = _text(fields.get("payment_id"))
        if lookup and not payment_id:
            raise InvalidInput("Payment ID and record ID are required")
        return cls(
            record_id=record_id,
            payment_id=payment_id,
            order_id=_text(fields.get("order_id")),
            signature=_text(fields.get("signature")),
            organization=_text(fields.get("organization")),
            lookup=lookup,
        )


class SettlementResult:
    def __init__(self, *, success: bool, message: str, transaction: PaymentTransaction, inquiry: CourseInquiry | None = None):
        self.success = success
        self.message = message
        self.transaction = transaction
        self.inquiry = inquiry

    def to_dict(self) -> dict:
        body = {
            "success": self.success,
            "message": self.message,
            "status": self.transaction.status.value,
            "transaction_id": self.transaction.id,
        }
        if not self.success:
            body["code"] = VerificationFailed.code
        if self.inquiry is not None and self.success:
            body["inquiry"] = {
                "id": self.inquiry.id,
                "name": self.inquiry.name,
                "email": self.inquiry.email,
                "phone": self.inquiry.phone,
                "organization": self.inquiry.organization,
                "course_name": self.inquiry.course_name,
                "status": self.inquiry.status.value,
            }
        return body


def _check_authenticity(config: PaymentConfig, transaction: PaymentTransaction, claim: SettlementClaim) -> tuple[bool, str | None]:
    if claim.lookup:
        if config.test_mode:
            logger.warning("Test mode: skipping gateway lookup for payment %s", claim.payment_id)
            return True, None
        try:
            payment = config.gateway.fetch_payment(claim.payment_id)
        except RazorpayApiError as exc:
            logger.warning("Payment lookup for %s failed: %s", claim.payment_id, exc.message)
            return False, "Could not verify with Razorpay"
        status = str((payment or {}).get("status") or "").lower()
        if status not in AUTHENTIC_PAYMENT_STATUSES:
            return False, f"Gateway reported payment status '{status or 'unknown'}'"
        reported_order = (payment or {}).get("order_id")
        if reported_order and reported_order != transaction.gateway_order_id:
            return False, "Payment belongs to a different order"
        return True, None

    if config.test_mode:
        logger.warning("Test mode: skipping signature check for transaction %s", transaction.id)
    elif claim.order_id and claim.order_id != transaction.gateway_order_id:
        # The stored order id is what we sign against; a claim for another order never verifies.
        return False, "Order id does not match this payment"
    authentic = verify_payment_signature(
        transaction.gateway_order_id,
        claim.payment_id,
        claim.signature,
        config.key_secret,
        test_mode=config.test_mode,
    )
    return authentic, None if authentic else "Signature mismatch"


def _apply_linked_effect(db: Session, transaction: PaymentTransaction, claim: SettlementClaim) -> None:
    if transaction.status == TransactionStatus.COMPLETED:
        if transaction.flow == TransactionFlow.COURSE:
            if add_enrollment(db, transaction.user_id, transaction.course_id, transaction_id=transaction.id):
                logger.info("Enrolled user %s in course %s", transaction.user_id, transaction.course_id)
        else:
            mark_inquiry_paid(
                db,
                transaction.inquiry_id,
                gateway_order_id=transaction.gateway_order_id,
                gateway_payment_id=transaction.gateway_payment_id,
                gateway_signature=transaction.gateway_signature,
                organization=claim.organization,
            )
    elif transaction.flow == TransactionFlow.INQUIRY:
        mark_inquiry_payment_failed(db, transaction.inquiry_id)


def _reject_contradicting_claim(transaction: PaymentTransaction, claim: SettlementClaim) -> None:
    if (
        transaction.status == TransactionStatus.COMPLETED
        and claim.payment_id
        and transaction.gateway_payment_id
        and claim.payment_id != transaction.gateway_payment_id
    ):
        raise Conflict("This order was already settled with a different payment")


def _settle(db: Session, config: PaymentConfig, transaction: PaymentTransaction, claim: SettlementClaim) -> PaymentTransaction:
    if transaction.is_terminal:
        _reject_contradicting_claim(transaction, claim)
        _apply_linked_effect(db, transaction, claim)
        return transaction

    authentic, reason = _check_authenticity(config, transaction, claim)
    if authentic:
        won = transition_transaction(
            db,
            transaction.id,
            TransactionStatus.COMPLETED,
            gateway_payment_id=claim.payment_id,
            gateway_signature=claim.signature,
        )
    else:
        won = transition_transaction(db, transaction.id, TransactionStatus.FAILED, failure_reason=reason)

    db.refresh(transaction)
    if won:
        logger.info("Transaction %s settled as %s", transaction.id, transaction.status.value)
    else:
        _reject_contradicting_claim(transaction, claim)
    _apply_linked_effect(db, transaction, claim)
    return transaction


def settle_course_payment(db: Session, config: PaymentConfig, claim: SettlementClaim, *, user_id: int | None = None) -> SettlementResult:
    config.require_gateway()
    transaction = get_transaction(db, claim.record_id)
    if transaction.flow != TransactionFlow.COURSE or (user_id is not None and transaction.user_id != user_id):
        raise NotFound("Payment not found")

    transaction = _settle(db, config, transaction, claim)
    success = transaction.status == TransactionStatus.COMPLETED
    return SettlementResult(
        success=success,
        message=SUCCESS_MESSAGE if success else FAILURE_MESSAGE,
        transaction=transaction,
    )


def settle_inquiry_payment(db: Session, config: PaymentConfig, claim: SettlementClaim) -> SettlementResult:
    config.require_gateway()
    inquiry = find_inquiry(db, claim.record_id)
    # A lead may have opened checkout more than once; the claim names the order it paid.
    transaction = find_transaction_by_order_id(db, claim.order_id or inquiry.gateway_order_id)
    if transaction is None or transaction.inquiry_id != inquiry.id:
        raise NotFound("No payment order found for this inquiry")

    transaction = _settle(db, config, transaction, claim)
    db.refresh(inquiry)
    success = (
        transaction.status == TransactionStatus.COMPLETED
        and inquiry.payment_status == InquiryPaymentStatus.COMPLETED
    )
    return SettlementResult(
        success=success,
        message=SUCCESS_MESSAGE if success else FAILURE_MESSAGE,
        transaction=transaction,
        inquiry=inquiry,
    )
