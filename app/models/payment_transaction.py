import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, value_enum


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({TransactionStatus.COMPLETED, TransactionStatus.FAILED})


class TransactionFlow(str, enum.Enum):
    COURSE = "course"
    INQUIRY = "inquiry"


class PaymentTransaction(Base, TimestampMixin):
    """
    One gateway payment attempt. Rows are never deleted; they are the audit
    trail for both the course purchase and the inquiry flow.
    """

    __tablename__ = "payment_transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payment_transactions_amount_positive"),
        CheckConstraint(
            "(user_id IS NOT NULL) OR (inquiry_id IS NOT NULL)",
            name="ck_payment_transactions_subject",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    flow = Column(value_enum(TransactionFlow), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    inquiry_id = Column(Integer, ForeignKey("course_inquiries.id"), nullable=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)

    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="INR")
    receipt = Column(String(64), nullable=False)
    status = Column(value_enum(TransactionStatus), nullable=False, default=TransactionStatus.PENDING)

    gateway_order_id = Column(String(64), unique=True, nullable=False, index=True)
    gateway_payment_id = Column(String(64), nullable=True)
    gateway_signature = Column(String(128), nullable=True)
    failure_reason = Column(String(255), nullable=True)

    user = relationship("User", back_populates="transactions")
    inquiry = relationship("CourseInquiry", back_populates="transactions")
    course = relationship("Course")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


Index("ix_payment_transactions_user_created", PaymentTransaction.user_id, PaymentTransaction.created_at)
Index("ix_payment_transactions_flow_status", PaymentTransaction.flow, PaymentTransaction.status)
