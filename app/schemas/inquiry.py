from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from app.models.course_inquiry import InquiryStatus, InquiryPaymentStatus


class InquiryCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=32)
    course_id: int = Field(..., alias="courseId", gt=0)
    organization: str = Field(..., min_length=1, max_length=255)
    degree: Optional[str] = Field(default=None, max_length=128)
    department: Optional[str] = Field(default=None, max_length=128)
    year: Optional[str] = Field(default=None, max_length=32)

    model_config = ConfigDict(populate_by_name=True)


class InquiryOut(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    name: str
    email: str
    phone: str
    course_id: int
    course_name: str
    organization: str
    degree: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    status: InquiryStatus | str
    payment_status: InquiryPaymentStatus | str
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
