"""
API роуты модуля активов.
Подроуты: /assets, /addasset, /reqasset, /requests, /request/updatestatus,
/assign, /assignable, /assigned.
"""
from fastapi import APIRouter

from assetdesk.core.config import settings

from .routes import assets, assignments, requests

router = APIRouter(prefix=settings.api_v1_prefix)

router.include_router(assets.router)
router.include_router(requests.router)
router.include_router(assignments.router)
