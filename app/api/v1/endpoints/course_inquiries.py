from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies import get_payment_config, require_admin
from app.middlewares.rate_limit import limiter
from app.models import User
from app.schemas.inquiry import InquiryCreateRequest, InquiryOut
from app.schemas.payment import OrderOut, SettlementOut
from app.services.inquiries import create_inquiry, list_inquiries
from app.services.orders import create_inquiry_order
from app.services.payment_config import PaymentConfig
from app.services.reconciler import SettlementClaim, settle_inquiry_payment

router = APIRouter()


@router.post("", response_model=InquiryOut, status_code=201)
@limiter.limit("10/minute")
def submit_inquiry(request: Request, payload: InquiryCreateRequest, db: Session = Depends(get_db)):
    return create_inquiry(
        db,
        name=payload.name,
        email=str(payload.email),
        phone=payload.phone,
        course_id=payload.course_id,
        organization=payload.organization,
        degree=payload.degree,
        department=payload.department,
        year=payload.year,
    )


@router.get("", response_model=list[InquiryOut])
def get_inquiries(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return list_inquiries(db)


@router.post("/verify-payment", response_model=SettlementOut)
@limiter.limit("20/minute")
def verify_inquiry_payment(
    request: Request,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    claim = SettlementClaim.from_payload(payload, record_field="inquiry_id")
    return settle_inquiry_payment(db, config, claim).to_dict()


@router.post("/verify-payment-simple", response_model=SettlementOut)
@limiter.limit("20/minute")
def verify_inquiry_payment_simple(
    request: Request,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    claim = SettlementClaim.from_payload(payload, record_field="inquiry_id", lookup=True)
    return settle_inquiry_payment(db, config, claim).to_dict()


@router.post("/{inquiry_id}/create-order", response_model=OrderOut)
@limiter.limit("10/minute")
def create_order_for_inquiry(
    request: Request,
    inquiry_id: int,
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    return create_inquiry_order(db, config, inquiry_id=inquiry_id)
