from app.models.user import User, UserRole
from app.models.course import Course, CourseLevel
from app.models.enrollment import Enrollment
from app.models.course_inquiry import CourseInquiry, InquiryStatus, InquiryPaymentStatus
from app.models.payment_transaction import (
    PaymentTransaction,
    TransactionStatus,
    TransactionFlow,
    TERMINAL_STATUSES,
)

__all__ = [
    "User",
    "UserRole",
    "Course",
    "CourseLevel",
    "Enrollment",
    "CourseInquiry",
    "InquiryStatus",
    "InquiryPaymentStatus",
    "PaymentTransaction",
    "TransactionStatus",
    "TransactionFlow",
    "TERMINAL_STATUSES",
]
