from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies import get_current_user, get_payment_config
from app.middlewares.rate_limit import limiter
from app.models import User
from app.schemas.payment import CreateOrderRequest, OrderOut, PaymentHistoryItem, SettlementOut
from app.services.orders import create_course_order
from app.services.payment_config import PaymentConfig
from app.services.reconciler import SettlementClaim, settle_course_payment
from app.services.transactions import list_transaction_history

router = APIRouter()


@router.post("/create-order", response_model=OrderOut)
@limiter.limit("10/minute")
def create_order(
    request: Request,
    payload: CreateOrderRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    return create_course_order(db, config, user=user, course_id=payload.course_id)


@router.post("/verify", response_model=SettlementOut)
@limiter.limit("20/minute")
def verify_payment(
    request: Request,
    payload: dict = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    claim = SettlementClaim.from_payload(payload, record_field="transaction_id")
    result = settle_course_payment(db, config, claim, user_id=user.id)
    return result.to_dict()


@router.post("/verify-simple", response_model=SettlementOut)
@limiter.limit("20/minute")
def verify_payment_simple(
    request: Request,
    payload: dict = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    config: PaymentConfig = Depends(get_payment_config),
):
    claim = SettlementClaim.from_payload(payload, record_field="transaction_id", lookup=True)
    result = settle_course_payment(db, config, claim, user_id=user.id)
    return result.to_dict()


@router.get("/history", response_model=list[PaymentHistoryItem])
def payment_history(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return list_transaction_history(db, user.id)
