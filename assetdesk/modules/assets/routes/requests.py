"""Роуты заявок на активы."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session

from assetdesk.core.errors import AssetDeskError
from assetdesk.core.pagination import Page, PageParams, page_params, paginate
from assetdesk.core.permissions import Operation
from assetdesk.modules.assets.models import AssetRequest, RequestStatus
from assetdesk.modules.assets.schemas.asset_request import (
    AssetRequestCreate,
    AssetRequestOut,
    DecisionRequest,
)
from assetdesk.modules.assets.services.workflow import decide_request, submit_request
from assetdesk.modules.hr.dependencies import get_current_user, get_db, require_operation
from assetdesk.modules.hr.models.user import User

router = APIRouter(tags=["requests"])


@router.post("/reqasset", response_model=AssetRequestOut, status_code=201)
def request_asset(
    payload: AssetRequestCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_operation(Operation.REQUEST_ASSET)),
) -> AssetRequest:
    try:
        return submit_request(db, payload.asset_id, user, payload.note)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/requests", response_model=Page[AssetRequestOut])
def list_requests(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    status: Optional[RequestStatus] = Query(None),
    search: Optional[str] = Query(None),
    params: PageParams = Depends(page_params),
) -> dict:
    """
    HR: заявки своей компании, поиск по имени или email заявителя.
    Сотрудник: свои заявки, поиск по названию актива.
    """
    q = db.query(AssetRequest)
    s = f"%{search.strip()}%" if search and search.strip() else None
    if user.is_hr:
        q = q.filter(AssetRequest.company_name == user.company_name)
        if s:
            q = q.filter(
                or_(
                    AssetRequest.requester_name.ilike(s),
                    AssetRequest.requester_email.ilike(s),
                )
            )
    else:
        q = q.filter(AssetRequest.requester_email == user.email)
        if s:
            q = q.filter(AssetRequest.product_name.ilike(s))
    if status:
        q = q.filter(AssetRequest.status == status.value)

    q = q.order_by(AssetRequest.request_date.desc(), AssetRequest.id.desc())
    requests, total = paginate(q, params)
    return {"items": requests, "total": total, "page": params.page, "limit": params.limit}


@router.patch("/request/updatestatus", response_model=AssetRequestOut)
def update_request_status(
    payload: DecisionRequest,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.DECIDE_REQUEST)),
) -> AssetRequest:
    """Одобрить или отклонить заявку"""
    if payload.status is RequestStatus.PENDING:
        raise HTTPException(
            status_code=400, detail="Некорректный статус. Допустимые: approved, rejected"
        )
    try:
        return decide_request(db, payload.request_id, payload.status, hr)
    except AssetDeskError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
