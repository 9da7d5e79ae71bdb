from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict
from app.models.course import CourseLevel


class CourseOut(BaseModel):
    id: int
    title: str
    description: str
    price: int
    image: str
    instructor: str
    duration: str
    level: CourseLevel | str
    topics: Optional[list[str]] = None
    rating: Decimal
    featured: bool

    model_config = ConfigDict(from_attributes=True)


class EnrollmentStatusOut(BaseModel):
    course_id: int
    is_enrolled: bool
