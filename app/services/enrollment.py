import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models import Course, Enrollment
from app.services.errors import NotFound

logger = logging.getLogger(__name__)


def find_course(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFound("Course not found")
    return course


def is_enrolled(db: Session, user_id: int, course_id: int) -> bool:
    return (
        db.query(Enrollment.id)
        .filter(Enrollment.user_id == user_id, Enrollment.course_id == course_id)
        .first()
        is not None
    )


def add_enrollment(db: Session, user_id: int, course_id: int, transaction_id: int | None = None) -> bool:
    """Returns True when a new enrollment row was written."""
    if is_enrolled(db, user_id, course_id):
        return False
    db.add(Enrollment(user_id=user_id, course_id=course_id, transaction_id=transaction_id))
    try:
        db.commit()
    except IntegrityError:
        # Another request inserted the same (user, course) pair first.
        db.rollback()
        logger.info("Enrollment for user %s course %s already exists", user_id, course_id)
        return False
    return True


def list_enrolled_courses(db: Session, user_id: int) -> list[Course]:
    return (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.user_id == user_id)
        .order_by(Enrollment.id.desc())
        .all()
    )
