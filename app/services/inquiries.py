from sqlalchemy.orm import Session
from app.models import CourseInquiry, InquiryStatus, InquiryPaymentStatus
from app.services.enrollment import find_course
from app.services.errors import NotFound


def create_inquiry(
    db: Session,
    *,
    name: str,
    email: str,
    phone: str,
    course_id: int,
    organization: str,
    degree: str | None = None,
    department: str | None = None,
    year: str | None = None,
) -> CourseInquiry:
    course = find_course(db, course_id)
    inquiry = CourseInquiry(
        name=name.strip(),
        email=email.strip().lower(),
        phone=phone.strip(),
        course_id=course.id,
        course_name=course.title,
        organization=organization.strip(),
        degree=degree,
        department=department,
        year=year,
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)
    return inquiry


def find_inquiry(db: Session, inquiry_id: int) -> CourseInquiry:
    inquiry = db.query(CourseInquiry).filter(CourseInquiry.id == inquiry_id).first()
    if not inquiry:
        raise NotFound("Inquiry not found")
    return inquiry


def list_inquiries(db: Session) -> list[CourseInquiry]:
    return db.query(CourseInquiry).order_by(CourseInquiry.created_at.desc(), CourseInquiry.id.desc()).all()


def attach_order(db: Session, inquiry_id: int, gateway_order_id: str) -> None:
    db.query(CourseInquiry).filter(CourseInquiry.id == inquiry_id).update(
        {CourseInquiry.gateway_order_id: gateway_order_id},
        synchronize_session=False,
    )
    db.commit()


def mark_inquiry_paid(
    db: Session,
    inquiry_id: int,
    *,
    gateway_order_id: str | None,
    gateway_payment_id: str | None,
    gateway_signature: str | None = None,
    organization: str | None = None,
) -> bool:
    # Only the payment-owned fields are written; name, phone, degree etc. stay untouched.
    values = {
        CourseInquiry.payment_status: InquiryPaymentStatus.COMPLETED,
        CourseInquiry.status: InquiryStatus.ENROLLED,
        CourseInquiry.gateway_order_id: gateway_order_id,
        CourseInquiry.gateway_payment_id: gateway_payment_id,
    }
    if gateway_signature:
        values[CourseInquiry.gateway_signature] = gateway_signature
    if organization:
        values[CourseInquiry.organization] = organization
    updated = (
        db.query(CourseInquiry)
        .filter(
            CourseInquiry.id == inquiry_id,
            CourseInquiry.payment_status != InquiryPaymentStatus.COMPLETED,
        )
        .update(values, synchronize_session=False)
    )
    db.commit()
    return updated == 1


def mark_inquiry_payment_failed(db: Session, inquiry_id: int) -> bool:
    updated = (
        db.query(CourseInquiry)
        .filter(
            CourseInquiry.id == inquiry_id,
            CourseInquiry.payment_status == InquiryPaymentStatus.PENDING,
        )
        .update({CourseInquiry.payment_status: InquiryPaymentStatus.FAILED}, synchronize_session=False)
    )
    db.commit()
    return updated == 1
