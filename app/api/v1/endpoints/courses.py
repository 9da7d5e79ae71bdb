from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies import get_current_user
from app.models import Course, User
from app.schemas.course import CourseOut, EnrollmentStatusOut
from app.services.enrollment import find_course, is_enrolled, list_enrolled_courses

router = APIRouter()


@router.get("", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)):
    return db.query(Course).order_by(Course.featured.desc(), Course.id.asc()).all()


# Declared before /{course_id} so "enrolled" is not parsed as an id.
@router.get("/enrolled", response_model=list[CourseOut])
def enrolled_courses(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_enrolled_courses(db, user.id)


@router.get("/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return find_course(db, course_id)


@router.get("/{course_id}/enrolled", response_model=EnrollmentStatusOut)
def enrollment_status(course_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    course = find_course(db, course_id)
    return {"course_id": course.id, "is_enrolled": is_enrolled(db, user.id, course.id)}
