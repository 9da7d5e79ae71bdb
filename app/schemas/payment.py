from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from app.models.payment_transaction import TransactionStatus, TransactionFlow


class CreateOrderRequest(BaseModel):
    course_id: int = Field(..., alias="courseId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class Prefill(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    contact: Optional[str] = None


class OrderOut(BaseModel):
    order_id: str
    amount: int
    currency: str
    receipt: str
    transaction_id: int
    key_id: str
    is_test_mode: bool
    inquiry_id: Optional[int] = None
    prefill: Optional[Prefill] = None


class SettlementOut(BaseModel):
    success: bool
    message: str
    status: TransactionStatus | str
    transaction_id: int
    code: Optional[str] = None
    inquiry: Optional[dict[str, Any]] = None


class CourseSummary(BaseModel):
    id: int
    title: str
    image: str
    instructor: str

    model_config = ConfigDict(from_attributes=True)


class PaymentHistoryItem(BaseModel):
    id: int
    created_at: Optional[datetime] = None
    flow: TransactionFlow | str
    amount: int
    currency: str
    status: TransactionStatus | str
    gateway_order_id: str
    gateway_payment_id: Optional[str] = None
    course: Optional[CourseSummary] = None

    model_config = ConfigDict(from_attributes=True)
