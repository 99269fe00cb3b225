"""Роуты /hr/stats: сводка для главной страницы HR."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from assetdesk.core.permissions import Operation
from assetdesk.modules.hr.dependencies import get_db, require_operation
from assetdesk.modules.hr.models.user import User
from assetdesk.modules.hr.schemas.employee import HRStatsOut
from assetdesk.modules.hr.services.stats import get_hr_stats

router = APIRouter(prefix="/hr", tags=["stats"])


@router.get("/stats", response_model=HRStatsOut)
def hr_stats(
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.VIEW_STATS)),
) -> dict:
    """Заявки по статусам и типам, самые запрашиваемые и заканчивающиеся активы"""
    return get_hr_stats(db, hr)
