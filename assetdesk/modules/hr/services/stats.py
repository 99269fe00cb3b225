"""Сводная статистика HR по заявкам и складу."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from assetdesk.modules.assets.models import Asset, AssetRequest
from assetdesk.modules.hr.models.user import User

# Порог "заканчивается на складе"
LIMITED_STOCK_THRESHOLD = 10
TOP_REQUESTED_LIMIT = 4


def get_hr_stats(db: Session, hr: User) -> dict:
    """Агрегаты по компании HR.

    Args:
        db: SQLAlchemy сессия
        hr: текущий HR

    Returns:
        Словарь для HRStatsOut
    """
    company = hr.company_name

    by_status = (
        db.query(AssetRequest.status, func.count(AssetRequest.id))
        .filter(AssetRequest.company_name == company)
        .group_by(AssetRequest.status)
        .all()
    )
    by_type = (
        db.query(AssetRequest.product_type, func.count(AssetRequest.id))
        .filter(AssetRequest.company_name == company)
        .group_by(AssetRequest.product_type)
        .all()
    )

    request_count = func.count(AssetRequest.id).label("request_count")
    top = (
        db.query(AssetRequest.asset_id, AssetRequest.product_name, request_count)
        .filter(AssetRequest.company_name == company)
        .group_by(AssetRequest.asset_id, AssetRequest.product_name)
        .order_by(request_count.desc(), AssetRequest.asset_id)
        .limit(TOP_REQUESTED_LIMIT)
        .all()
    )

    limited = (
        db.query(Asset)
        .filter(
            Asset.company_name == company,
            Asset.available_quantity < LIMITED_STOCK_THRESHOLD,
        )
        .order_by(Asset.available_quantity, Asset.product_name)
        .all()
    )

    return {
        "requests_by_status": [{"key": k, "count": c} for k, c in by_status],
        "requests_by_type": [{"key": k, "count": c} for k, c in by_type],
        "top_requested": [
            {"asset_id": a, "product_name": n, "request_count": c} for a, n, c in top
        ],
        "limited_stock": [
            {
                "asset_id": a.id,
                "product_name": a.product_name,
                "available_quantity": a.available_quantity,
            }
            for a in limited
        ],
        "package_limit": hr.package_limit,
        "current_employees": hr.current_employees,
    }
