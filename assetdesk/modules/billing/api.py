"""
API роуты биллинга.
Подроуты: /packages, /payment-checkout-session, /payment-success, /payments.
"""
from fastapi import APIRouter

from assetdesk.core.config import settings

from .routes import packages, payments

router = APIRouter(prefix=settings.api_v1_prefix)

router.include_router(packages.router)
router.include_router(payments.router)
