import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.base import TimestampMixin, value_enum


class InquiryStatus(str, enum.Enum):
    PENDING = "pending"
    CONTACTED = "contacted"
    ENROLLED = "enrolled"
    CANCELED = "canceled"


class InquiryPaymentStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CourseInquiry(Base, TimestampMixin):
    __tablename__ = "course_inquiries"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(32), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)
    course_name = Column(String(255), nullable=False)
    organization = Column(String(255), nullable=False)
    degree = Column(String(128), nullable=True)
    department = Column(String(128), nullable=True)
    year = Column(String(32), nullable=True)

    # Administrative status; payment completion only ever moves it to ENROLLED.
    status = Column(value_enum(InquiryStatus), nullable=False, default=InquiryStatus.PENDING)
    payment_status = Column(value_enum(InquiryPaymentStatus), nullable=False, default=InquiryPaymentStatus.PENDING)
    gateway_order_id = Column(String(64), nullable=True)
    gateway_payment_id = Column(String(64), nullable=True)
    gateway_signature = Column(String(128), nullable=True)

    course = relationship("Course")
    transactions = relationship("PaymentTransaction", back_populates="inquiry")


Index("ix_course_inquiries_status_created", CourseInquiry.status, CourseInquiry.created_at)
