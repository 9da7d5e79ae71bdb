import hashlib
import hmac
import os

import pytest


TEST_KEY_ID = "rzp_test_key"
TEST_KEY_SECRET = "rzp_test_secret"


def _set_test_env() -> None:
    defaults = {
        "APP_NAME": "Course Payments Test",
        "ENVIRONMENT": "test",
        "SECRET_KEY": "test-secret",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
        "AUTO_CREATE_TABLES": "false",
        "DATABASE_URL": "sqlite:///:memory:",
        "RAZORPAY_KEY_ID": TEST_KEY_ID,
        "RAZORPAY_KEY_SECRET": TEST_KEY_SECRET,
        "RAZORPAY_BASE_URL": "https://api.razorpay.com/v1",
        "PAYMENT_TEST_MODE": "false",
        "PAYMENT_CURRENCY": "INR",
        "CORS_ORIGINS": "http://localhost:5173,http://localhost:3000",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


_set_test_env()

from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.models import Course, CourseLevel, CourseInquiry, User, UserRole  # noqa: E402
from app.services.payment_config import PaymentConfig  # noqa: E402
from app.services.razorpay import RazorpayApiError  # noqa: E402


def sign(order_id: str, payment_id: str, secret: str = TEST_KEY_SECRET) -> str:
    return hmac.new(secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256).hexdigest()


class FakeGateway:
    def __init__(self):
        self.orders: list[dict] = []
        self.payments: dict[str, dict] = {}
        self.create_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.fetch_calls: list[str] = []

    def create_order(self, amount_minor: int, currency: str, receipt: str) -> dict:
        if self.create_error:
            raise self.create_error
        order = {
            "id": f"order_test_{len(self.orders) + 1}",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
        }
        self.orders.append(order)
        return order

    def fetch_payment(self, payment_id: str) -> dict:
        self.fetch_calls.append(payment_id)
        if self.fetch_error:
            raise self.fetch_error
        if payment_id not in self.payments:
            raise RazorpayApiError("The id provided does not exist", status_code=400)
        return self.payments[payment_id]


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def payment_config(gateway):
    return PaymentConfig(
        key_id=TEST_KEY_ID,
        key_secret=TEST_KEY_SECRET,
        currency="INR",
        test_mode=False,
        gateway=gateway,
    )


@pytest.fixture
def test_mode_config(gateway):
    return PaymentConfig(
        key_id=TEST_KEY_ID,
        key_secret=TEST_KEY_SECRET,
        currency="INR",
        test_mode=True,
        gateway=gateway,
    )


@pytest.fixture
def make_user(db):
    def _make(email: str = "student@example.com", role: UserRole = UserRole.USER) -> User:
        user = User(email=email, full_name="Student One", phone="9876543210", role=role, is_active=True)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_course(db):
    def _make(price: int = 999, title: str = "Full Stack Web Development") -> Course:
        course = Course(
            title=title,
            description="Build and ship web applications end to end.",
            price=price,
            image="https://cdn.example.com/courses/fullstack.jpg",
            instructor="A. Instructor",
            duration="12 weeks",
            level=CourseLevel.BEGINNER,
            topics=["HTML", "APIs"],
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def make_inquiry(db):
    def _make(course: Course, organization: str = "City College") -> CourseInquiry:
        inquiry = CourseInquiry(
            name="Lead Person",
            email="lead@example.com",
            phone="9123456780",
            course_id=course.id,
            course_name=course.title,
            organization=organization,
            degree="B.Tech",
            department="CSE",
            year="3",
        )
        db.add(inquiry)
        db.commit()
        db.refresh(inquiry)
        return inquiry

    return _make
