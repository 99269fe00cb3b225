"""Роуты команды HR: список сотрудников, удаление, команда сотрудника."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from assetdesk.core.errors import AssetDeskError
from assetdesk.core.pagination import Page, PageParams, page_params, paginate
from assetdesk.core.permissions import Operation
from assetdesk.modules.assets.models import AssignedAsset, AssignmentStatus
from assetdesk.modules.assets.services.workflow import remove_employee
from assetdesk.modules.hr.dependencies import get_db, require_operation
from assetdesk.modules.hr.models.employee import EmployeeAffiliation
from assetdesk.modules.hr.models.user import User
from assetdesk.modules.hr.schemas.employee import (
    EmployeeOut,
    RemoveEmployeeRequest,
    RemoveEmployeeResult,
    TeamMemberOut,
)

router = APIRouter(tags=["employees"])


def _assigned_counts(db: Session, company_name: str, emails: List[str]) -> dict[str, int]:
    if not emails:
        return {}
    rows = (
        db.query(AssignedAsset.employee_email, func.count(AssignedAsset.id))
        .filter(
            AssignedAsset.company_name == company_name,
            AssignedAsset.status == AssignmentStatus.ASSIGNED.value,
            AssignedAsset.employee_email.in_(emails),
        )
        .group_by(AssignedAsset.employee_email)
        .all()
    )
    return dict(rows)


@router.get("/emlist", response_model=Page[EmployeeOut])
def list_employees(
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.LIST_EMPLOYEES)),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
) -> dict:
    """Сотрудники компании HR с количеством выданных активов"""
    q = db.query(EmployeeAffiliation).filter(
        EmployeeAffiliation.company_name == hr.company_name
    )
    if search and search.strip():
        s = f"%{search.strip()}%"
        q = q.filter(
            or_(
                EmployeeAffiliation.employee_name.ilike(s),
                EmployeeAffiliation.employee_email.ilike(s),
            )
        )
    q = q.order_by(EmployeeAffiliation.employee_name, EmployeeAffiliation.id)
    affiliations, total = paginate(q, params)

    counts = _assigned_counts(db, hr.company_name, [a.employee_email for a in affiliations])
    items = []
    for a in affiliations:
        item = EmployeeOut.model_validate(a)
        item.assigned_count = counts.get(a.employee_email, 0)
        items.append(item)

    return {"items": items, "total": total, "page": params.page, "limit": params.limit}


@router.delete("/emdelete", response_model=RemoveEmployeeResult)
def delete_employee(
    payload: RemoveEmployeeRequest,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.REMOVE_EMPLOYEE)),
) -> dict:
    """Удалить сотрудника из команды: вернуть активы на склад, освободить место в пакете"""
    try:
        return remove_employee(db, payload.employee_email, hr)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/myteam", response_model=List[TeamMemberOut])
def my_team(
    db: Session = Depends(get_db),
    user: User = Depends(require_operation(Operation.VIEW_TEAM)),
) -> List[TeamMemberOut]:
    """Коллеги сотрудника по всем его компаниям, включая HR"""
    companies = [
        c
        for (c,) in db.query(EmployeeAffiliation.company_name).filter(
            EmployeeAffiliation.employee_email == user.email
        )
    ]
    if not companies:
        return []

    result = []
    hrs = db.query(User).filter(User.company_name.in_(companies)).order_by(User.name).all()
    for hr in hrs:
        result.append(
            TeamMemberOut(
                email=hr.email,
                name=hr.name,
                photo=hr.photo,
                company_name=hr.company_name,
                is_hr=True,
            )
        )

    colleagues = (
        db.query(EmployeeAffiliation)
        .filter(EmployeeAffiliation.company_name.in_(companies))
        .order_by(EmployeeAffiliation.company_name, EmployeeAffiliation.employee_name)
        .all()
    )
    for a in colleagues:
        result.append(
            TeamMemberOut(
                email=a.employee_email,
                name=a.employee_name,
                photo=a.employee_photo,
                company_name=a.company_name,
            )
        )
    return result
