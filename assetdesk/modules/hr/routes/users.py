"""Роуты регистрации и профиля пользователя."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assetdesk.core.auth import get_password_hash
from assetdesk.core.config import settings
from assetdesk.core.permissions import Role
from assetdesk.modules.hr.dependencies import get_current_user, get_db
from assetdesk.modules.hr.models.user import User
from assetdesk.modules.hr.schemas.user import UserOut, UserRegister, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: UserRegister, db: Session = Depends(get_db)) -> User:
    """Регистрация сотрудника или HR. Email уникален."""
    if db.query(User).filter(User.email == payload.email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Пользователь с таким email уже существует",
        )

    user = User(
        email=payload.email,
        name=payload.name.strip(),
        password_hash=get_password_hash(payload.password),
        role=payload.role.value,
        photo=payload.photo,
        date_of_birth=payload.date_of_birth,
    )
    if payload.role is Role.HR:
        user.company_name = payload.company_name.strip()
        user.company_logo = payload.company_logo
        user.package_limit = settings.default_package_limit
        user.current_employees = 0

    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Пользователь с таким email уже существует",
        )
    db.refresh(user)
    logger.info(f"Зарегистрирован пользователь {user.email} ({user.role})")
    return user


@router.get("/users/{email}", response_model=UserOut)
def get_user(email: str, user: User = Depends(get_current_user)) -> User:
    """Профиль пользователя (только свой)."""
    if email != user.email:
        raise HTTPException(status_code=403, detail="Недостаточно прав доступа")
    return user


@router.patch("/users/{email}", response_model=UserOut)
def update_user(
    email: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> User:
    """Обновить собственный профиль (имя, фото, дата рождения, логотип компании)."""
    if email != user.email:
        raise HTTPException(status_code=403, detail="Недостаточно прав доступа")

    update_data = payload.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = (update_data["name"] or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Имя не может быть пустым")
        update_data["name"] = name
    if "company_logo" in update_data and not user.is_hr:
        update_data.pop("company_logo")

    for k, v in update_data.items():
        setattr(user, k, v)

    db.commit()
    db.refresh(user)
    return user
