"""Роуты каталога пакетов."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from assetdesk.core.database import get_db
from assetdesk.modules.billing.models import Package
from assetdesk.modules.billing.schemas import PackageOut

router = APIRouter(tags=["packages"])


@router.get("/packages", response_model=List[PackageOut])
def list_packages(db: Session = Depends(get_db)) -> List[Package]:
    return db.query(Package).order_by(Package.employee_limit).all()
