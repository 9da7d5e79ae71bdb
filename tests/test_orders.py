import pytest

from app.models import InquiryPaymentStatus, PaymentTransaction, TransactionFlow, TransactionStatus
from app.services.enrollment import add_enrollment
from app.services.errors import Conflict, GatewayTimeout, GatewayUnavailable, NotFound
from app.services.orders import build_receipt, create_course_order, create_inquiry_order
from app.services.payment_config import PaymentConfig
from app.services.razorpay import RazorpayApiError


def test_course_order_persists_pending_transaction(db, gateway, payment_config, make_user, make_course):
    user = make_user()
    course = make_course(price=999)

    out = create_course_order(db, payment_config, user=user, course_id=course.id)

    assert out["order_id"] == "order_test_1"
    assert out["amount"] == 99900
    assert out["currency"] == "INR"
    assert out["key_id"] == "rzp_test_key"
    assert out["is_test_mode"] is False
    assert out["receipt"].startswith(f"receipt_order_{course.id}_")
    assert len(gateway.orders) == 1

    tx = db.query(PaymentTransaction).one()
    assert tx.id == out["transaction_id"]
    assert tx.flow == TransactionFlow.COURSE
    assert tx.status == TransactionStatus.PENDING
    assert tx.amount == 999
    assert tx.user_id == user.id
    assert tx.gateway_order_id == "order_test_1"
    assert tx.gateway_payment_id is None


def test_amount_is_fixed_at_order_time(db, payment_config, make_user, make_course):
    user = make_user()
    course = make_course(price=999)
    create_course_order(db, payment_config, user=user, course_id=course.id)

    course.price = 1499
    db.commit()

    assert db.query(PaymentTransaction).one().amount == 999


def test_already_enrolled_is_conflict_and_persists_nothing(db, gateway, payment_config, make_user, make_course):
    user = make_user()
    course = make_course()
    add_enrollment(db, user.id, course.id)

    with pytest.raises(Conflict):
        create_course_order(db, payment_config, user=user, course_id=course.id)

    assert db.query(PaymentTransaction).count() == 0
    assert gateway.orders == []


def test_missing_course_is_not_found(db, payment_config, make_user):
    with pytest.raises(NotFound):
        create_course_order(db, payment_config, user=make_user(), course_id=404)


def test_gateway_failure_persists_nothing(db, gateway, payment_config, make_user, make_course):
    gateway.create_error = RazorpayApiError("Unable to reach Razorpay.")
    with pytest.raises(GatewayUnavailable):
        create_course_order(db, payment_config, user=make_user(), course_id=make_course().id)
    assert db.query(PaymentTransaction).count() == 0


def test_gateway_timeout_is_surfaced(db, gateway, payment_config, make_user, make_course):
    gateway.create_error = RazorpayApiError("Razorpay request timed out.", timed_out=True)
    with pytest.raises(GatewayTimeout):
        create_course_order(db, payment_config, user=make_user(), course_id=make_course().id)
    assert db.query(PaymentTransaction).count() == 0


def test_unconfigured_gateway_is_distinct_error(db, make_user, make_course):
    config = PaymentConfig(key_id=None, key_secret=None, currency="INR", test_mode=True)
    with pytest.raises(GatewayUnavailable) as excinfo:
        create_course_order(db, config, user=make_user(), course_id=make_course().id)
    assert excinfo.value.code == "gateway_not_configured"


def test_inquiry_order_attaches_order_and_prefill(db, payment_config, make_course, make_inquiry):
    course = make_course(price=500)
    inquiry = make_inquiry(course)

    out = create_inquiry_order(db, payment_config, inquiry_id=inquiry.id)

    assert out["amount"] == 50000
    assert out["inquiry_id"] == inquiry.id
    assert out["prefill"] == {"name": "Lead Person", "email": "lead@example.com", "contact": "9123456780"}
    assert out["receipt"].startswith(f"receipt_inquiry_{inquiry.id}_")

    db.refresh(inquiry)
    assert inquiry.gateway_order_id == out["order_id"]
    tx = db.query(PaymentTransaction).one()
    assert tx.flow == TransactionFlow.INQUIRY
    assert tx.inquiry_id == inquiry.id
    assert tx.user_id is None


def test_reopening_inquiry_checkout_resumes_pending_order(db, gateway, payment_config, make_course, make_inquiry):
    inquiry = make_inquiry(make_course(price=500))

    first = create_inquiry_order(db, payment_config, inquiry_id=inquiry.id)
    again = create_inquiry_order(db, payment_config, inquiry_id=inquiry.id)

    assert again == first
    assert len(gateway.orders) == 1
    assert db.query(PaymentTransaction).count() == 1


def test_inquiry_order_rejected_after_settlement(db, payment_config, make_course, make_inquiry):
    inquiry = make_inquiry(make_course())
    inquiry.payment_status = InquiryPaymentStatus.FAILED
    db.commit()

    with pytest.raises(Conflict):
        create_inquiry_order(db, payment_config, inquiry_id=inquiry.id)


def test_receipts_embed_kind_and_reference():
    receipt = build_receipt("inquiry", 42)
    kind, ref, stamp = receipt.split("_")[1:]
    assert (kind, ref) == ("inquiry", "42")
    assert stamp.isdigit()
