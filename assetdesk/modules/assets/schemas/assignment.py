"""
Схемы для выдачи активов
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr

from assetdesk.modules.assets.models import AssignmentStatus


class AssignRequest(BaseModel):
    asset_id: int
    employee_email: EmailStr


class AssignedAssetOut(BaseModel):
    id: int
    asset_id: int
    product_name: str
    product_type: str
    employee_email: str
    employee_name: str
    hr_email: str
    company_name: str
    status: AssignmentStatus
    assigned_at: Optional[datetime] = None
    returned_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AssignableEmployeeOut(BaseModel):
    email: str
    name: str
    photo: Optional[str] = None
    assigned_count: int = 0
