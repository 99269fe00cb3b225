"""Роуты оплаты пакетов."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from assetdesk.core.errors import AssetDeskError
from assetdesk.core.permissions import Operation
from assetdesk.modules.billing.dependencies import get_payment_gateway
from assetdesk.modules.billing.models import Payment
from assetdesk.modules.billing.schemas import (
    CheckoutOut,
    CheckoutRequest,
    PaymentConfirm,
    PaymentOut,
    PaymentResult,
)
from assetdesk.modules.billing.services.payments import confirm_payment, start_checkout
from assetdesk.modules.billing.services.stripe_gateway import StripeGateway
from assetdesk.modules.hr.dependencies import get_db, require_operation
from assetdesk.modules.hr.models.user import User

router = APIRouter(tags=["payments"])


@router.post("/payment-checkout-session", response_model=CheckoutOut)
async def create_checkout_session(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_BILLING)),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> dict:
    """Начать оплату пакета. Возвращает ссылку на страницу оплаты."""
    try:
        return await start_checkout(db, gateway, hr, payload.package_name)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/payment-success", response_model=PaymentResult)
async def payment_success(
    payload: PaymentConfirm,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_BILLING)),
    gateway: StripeGateway = Depends(get_payment_gateway),
) -> dict:
    """Подтвердить оплату. Повторный вызов с той же сессией не меняет лимит."""
    try:
        return await confirm_payment(db, gateway, hr, payload.session_id)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/payments", response_model=List[PaymentOut])
def list_payments(
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_BILLING)),
) -> List[Payment]:
    """История оплат текущего HR"""
    return (
        db.query(Payment)
        .filter(Payment.hr_email == hr.email)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
