"""Роуты склада: список, карточка, добавление, изменение, удаление актива."""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from assetdesk.core.pagination import Page, PageParams, page_params, paginate
from assetdesk.core.permissions import Operation
from assetdesk.modules.assets.models import Asset, ProductType
from assetdesk.modules.assets.schemas.asset import AssetCreate, AssetOut, AssetUpdate
from assetdesk.modules.hr.dependencies import get_current_user, get_db, require_operation
from assetdesk.modules.hr.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assets"])


def _get_own_asset(db: Session, asset_id: int, hr: User) -> Asset:
    asset = db.query(Asset).filter(Asset.id == asset_id).first()
    if not asset or asset.company_name != hr.company_name:
        raise HTTPException(status_code=404, detail="Актив не найден")
    return asset


@router.get("/assets", response_model=Page[AssetOut])
def list_assets(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    search: Optional[str] = Query(None),
    availability: Optional[Literal["available", "out_of_stock"]] = Query(None),
    product_type: Optional[ProductType] = Query(None),
    sort: Optional[Literal["asc", "desc"]] = Query(None),
    params: PageParams = Depends(page_params),
) -> dict:
    """
    Список активов.
    HR видит склад своей компании, сотрудник видит активы всех компаний.
    sort: по количеству (product_quantity).
    """
    q = db.query(Asset)
    if user.is_hr:
        q = q.filter(Asset.company_name == user.company_name)
    if search and search.strip():
        q = q.filter(Asset.product_name.ilike(f"%{search.strip()}%"))
    if availability == "available":
        q = q.filter(Asset.available_quantity > 0)
    elif availability == "out_of_stock":
        q = q.filter(Asset.available_quantity == 0)
    if product_type:
        q = q.filter(Asset.product_type == product_type.value)

    if sort == "asc":
        q = q.order_by(Asset.product_quantity.asc(), Asset.id)
    elif sort == "desc":
        q = q.order_by(Asset.product_quantity.desc(), Asset.id)
    else:
        q = q.order_by(Asset.created_at.desc(), Asset.id.desc())

    assets, total = paginate(q, params)
    return {"items": assets, "total": total, "page": params.page, "limit": params.limit}


@router.get("/assets/{asset_id}", response_model=AssetOut)
def get_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Asset:
    asset = db.query(Asset).filter(Asset.id == asset_id).first()
    if not asset or (user.is_hr and asset.company_name != user.company_name):
        raise HTTPException(status_code=404, detail="Актив не найден")
    return asset


@router.post("/addasset", response_model=AssetOut, status_code=201)
def add_asset(
    payload: AssetCreate,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_ASSETS)),
) -> Asset:
    """Добавить актив на склад компании. Весь объём сразу доступен к выдаче."""
    asset = Asset(
        product_name=payload.product_name.strip(),
        product_type=payload.product_type.value,
        product_image=payload.product_image,
        product_quantity=payload.product_quantity,
        available_quantity=payload.product_quantity,
        hr_email=hr.email,
        company_name=hr.company_name,
    )
    db.add(asset)
    db.commit()
    db.refresh(asset)
    logger.info(f"Актив {asset.id} добавлен: {asset.product_name} x{asset.product_quantity} ({hr.company_name})")
    return asset


@router.patch("/assets/{asset_id}", response_model=AssetOut)
def update_asset(
    asset_id: int,
    payload: AssetUpdate,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_ASSETS)),
) -> Asset:
    """Изменить актив. product_quantity меняет и доступный остаток на ту же разницу."""
    asset = _get_own_asset(db, asset_id, hr)
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "product_type" in data:
        data["product_type"] = data["product_type"].value
    if "product_name" in data:
        data["product_name"] = data["product_name"].strip()

    new_quantity = data.pop("product_quantity", None)
    if new_quantity is not None and new_quantity != asset.product_quantity:
        delta = new_quantity - asset.product_quantity
        taken = (
            db.query(Asset)
            .filter(
                Asset.id == asset.id,
                Asset.product_quantity == asset.product_quantity,
                Asset.available_quantity + delta >= 0,
            )
            .update(
                {
                    Asset.product_quantity: new_quantity,
                    Asset.available_quantity: Asset.available_quantity + delta,
                },
                synchronize_session=False,
            )
        )
        if not taken:
            db.rollback()
            raise HTTPException(
                status_code=409,
                detail="Нельзя уменьшить количество ниже числа выданных единиц",
            )

    for field, value in data.items():
        setattr(asset, field, value)
    db.commit()
    db.refresh(asset)
    return asset


@router.delete("/assets/delete/{asset_id}", status_code=204)
def delete_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    hr: User = Depends(require_operation(Operation.MANAGE_ASSETS)),
) -> None:
    """Удалить актив вместе с заявками и выдачами по нему."""
    asset = _get_own_asset(db, asset_id, hr)
    db.delete(asset)
    db.commit()
    logger.info(f"Актив {asset_id} удалён ({hr.email})")
