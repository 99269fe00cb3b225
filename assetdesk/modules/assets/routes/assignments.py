"""Роуты выдачи активов сотрудникам."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from assetdesk.core.errors import AssetDeskError
from assetdesk.core.pagination import Page, PageParams, page_params, paginate
from assetdesk.core.permissions import Operation
from assetdesk.modules.assets.models import AssignedAsset, AssignmentStatus
from assetdesk.modules.assets.schemas.assignment import (
    AssignableEmployeeOut,
    AssignedAssetOut,
    AssignRequest,
)
from assetdesk.modules.assets.services.workflow import assign_asset, return_asset
from assetdesk.modules.hr.dependencies import get_current_user, get_db, require_operation
from assetdesk.modules.hr.models.employee import EmployeeAffiliation
from assetdesk.modules.hr.models.user import User

router = APIRouter(tags=["assignments"])


@router.post("/assign", response_model=AssignedAssetOut, status_code=201)
def assign(
    payload: AssignRequest,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.ASSIGN_ASSET)),
) -> AssignedAsset:
    try:
        return assign_asset(db, payload.asset_id, payload.employee_email, hr)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/assignable", response_model=List[AssignableEmployeeOut])
def assignable_employees(
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.ASSIGN_ASSET)),
    asset_id: Optional[int] = Query(None, alias="assetId"),
) -> List[AssignableEmployeeOut]:
    """Сотрудники компании, которым можно выдать актив (без текущих держателей asset_id)"""
    q = db.query(EmployeeAffiliation).filter(
        EmployeeAffiliation.company_name == hr.company_name
    )
    if asset_id is not None:
        holders = select(AssignedAsset.employee_email).where(
            AssignedAsset.asset_id == asset_id,
            AssignedAsset.status == AssignmentStatus.ASSIGNED.value,
        )
        q = q.filter(EmployeeAffiliation.employee_email.notin_(holders))
    affiliations = q.order_by(EmployeeAffiliation.employee_name).all()

    counts = dict(
        db.query(AssignedAsset.employee_email, func.count(AssignedAsset.id))
        .filter(
            AssignedAsset.company_name == hr.company_name,
            AssignedAsset.status == AssignmentStatus.ASSIGNED.value,
        )
        .group_by(AssignedAsset.employee_email)
        .all()
    )
    return [
        AssignableEmployeeOut(
            email=a.employee_email,
            name=a.employee_name,
            photo=a.employee_photo,
            assigned_count=counts.get(a.employee_email, 0),
        )
        for a in affiliations
    ]


@router.get("/assigned", response_model=Page[AssignedAssetOut])
def list_assigned(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    status: Optional[AssignmentStatus] = Query(None),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
) -> dict:
    """HR: выдачи своей компании. Сотрудник: свои выдачи."""
    q = db.query(AssignedAsset)
    if user.is_hr:
        q = q.filter(AssignedAsset.company_name == user.company_name)
    else:
        q = q.filter(AssignedAsset.employee_email == user.email)
    if status:
        q = q.filter(AssignedAsset.status == status.value)
    if search and search.strip():
        q = q.filter(AssignedAsset.product_name.ilike(f"%{search.strip()}%"))

    q = q.order_by(AssignedAsset.assigned_at.desc(), AssignedAsset.id.desc())
    items, total = paginate(q, params)
    return {"items": items, "total": total, "page": params.page, "limit": params.limit}


@router.patch("/assigned/{assignment_id}/return", response_model=AssignedAssetOut)
def return_assigned(
    assignment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_operation(Operation.RETURN_ASSET)),
) -> AssignedAsset:
    """Вернуть возвратный актив на склад"""
    try:
        return return_asset(db, assignment_id, user)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
