"""
Схемы биллинга: пакеты, оформление оплаты, платежи
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PackageOut(BaseModel):
    id: int
    name: str
    employee_limit: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class CheckoutRequest(BaseModel):
    package_name: str = Field(..., min_length=1)


class CheckoutOut(BaseModel):
    url: str
    session_id: str
    transaction_id: str


class PaymentConfirm(BaseModel):
    session_id: str = Field(..., min_length=1)


class PaymentOut(BaseModel):
    id: int
    transaction_id: str
    session_id: str
    hr_email: str
    package_name: str
    employee_limit: int
    amount: Decimal
    currency: str
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentResult(BaseModel):
    """Результат подтверждения: платёж и новый лимит HR"""

    payment: PaymentOut
    package_limit: int
    current_employees: int
    subscription: Optional[str] = None
    already_applied: bool = False
