import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, JSON, Index
from app.core.database import Base
from app.models.base import TimestampMixin, value_enum


class CourseLevel(str, enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Course(Base, TimestampMixin):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # Whole currency units; the gateway is billed in minor units (x100).
    price = Column(Integer, nullable=False)
    image = Column(String(512), nullable=False)
    instructor = Column(String(255), nullable=False)
    duration = Column(String(64), nullable=False)
    level = Column(value_enum(CourseLevel), nullable=False, default=CourseLevel.BEGINNER)
    topics = Column(JSON, nullable=True)
    rating = Column(Numeric(2, 1), nullable=False, default=0)
    featured = Column(Boolean, nullable=False, default=False)


Index("ix_courses_featured", Course.featured)
