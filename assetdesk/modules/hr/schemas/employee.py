from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr


class AffiliationOut(BaseModel):
    id: int
    employee_email: str
    employee_name: str
    employee_photo: Optional[str] = None
    hr_email: str
    company_name: str
    company_logo: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeOut(AffiliationOut):
    # Сколько активов сейчас на руках
    assigned_count: int = 0


class RemoveEmployeeRequest(BaseModel):
    employee_email: EmailStr


class RemoveEmployeeResult(BaseModel):
    employee_email: str
    company_name: str
    restocked: int
    assignments_deleted: int
    requests_reset: int
    current_employees: int


class TeamMemberOut(BaseModel):
    email: str
    name: str
    photo: Optional[str] = None
    company_name: str
    is_hr: bool = False


class CountByKey(BaseModel):
    key: str
    count: int


class TopAsset(BaseModel):
    asset_id: int
    product_name: str
    request_count: int


class LimitedStockAsset(BaseModel):
    asset_id: int
    product_name: str
    available_quantity: int


class HRStatsOut(BaseModel):
    requests_by_status: List[CountByKey]
    requests_by_type: List[CountByKey]
    top_requested: List[TopAsset]
    limited_stock: List[LimitedStockAsset]
    package_limit: int
    current_employees: int
