from fastapi import APIRouter
from app.api.v1.endpoints import courses, payments, course_inquiries

router = APIRouter()

router.include_router(courses.router, prefix="/courses", tags=["courses"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(course_inquiries.router, prefix="/course-inquiries", tags=["course-inquiries"])
