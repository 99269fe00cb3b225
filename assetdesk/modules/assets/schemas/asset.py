"""
Схемы для активов склада
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from assetdesk.modules.assets.models import ProductType


class AssetBase(BaseModel):
    product_name: str = Field(..., min_length=1)
    product_type: ProductType = ProductType.RETURNABLE
    product_image: Optional[str] = None


class AssetCreate(AssetBase):
    product_quantity: int = Field(..., ge=0)


class AssetUpdate(BaseModel):
    product_name: Optional[str] = Field(None, min_length=1)
    product_type: Optional[ProductType] = None
    product_image: Optional[str] = None
    # Доступный остаток сдвигается на ту же разницу
    product_quantity: Optional[int] = Field(None, ge=0)


class AssetOut(AssetBase):
    id: int
    product_quantity: int
    available_quantity: int
    hr_email: str
    company_name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
