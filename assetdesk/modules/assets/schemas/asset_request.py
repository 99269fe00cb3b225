"""
Схемы для заявок на активы
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from assetdesk.modules.assets.models import RequestStatus


class AssetRequestCreate(BaseModel):
    asset_id: int
    note: Optional[str] = Field(None, max_length=1000)


class DecisionRequest(BaseModel):
    request_id: int
    status: RequestStatus  # approved, rejected


class AssetRequestOut(BaseModel):
    id: int
    asset_id: int
    product_name: str
    product_type: str
    requester_email: str
    requester_name: str
    hr_email: str
    company_name: str
    note: Optional[str] = None
    status: RequestStatus
    approval_date: Optional[datetime] = None
    processed_by: Optional[str] = None
    request_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
