"""
API роуты для HR модуля.
Подроуты: /register, /users, /emlist, /emdelete, /myteam, /hr/stats.
"""
from fastapi import APIRouter

from assetdesk.core.config import settings

from .routes import employees, stats, users

router = APIRouter(prefix=settings.api_v1_prefix)

router.include_router(users.router)
router.include_router(employees.router)
router.include_router(stats.router)
