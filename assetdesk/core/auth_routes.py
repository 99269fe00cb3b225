"""
API роуты для аутентификации
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from assetdesk.core.auth import create_access_token, verify_password
from assetdesk.core.config import settings
from assetdesk.core.database import get_db
from assetdesk.modules.hr.dependencies import get_current_user
from assetdesk.modules.hr.models.user import User
from assetdesk.modules.hr.schemas.user import LoginRequest, LoginResponse, UserOut

router = APIRouter(prefix=f"{settings.api_v1_prefix}/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
) -> LoginResponse:
    """
    Вход в систему.
    Принимает email и password, возвращает JWT токен.
    """
    user = db.query(User).filter(User.email == login_data.email).first()

    if not user or not user.password_hash:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
        )

    if not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
        )

    token = create_access_token(email=user.email, role=user.role)

    return LoginResponse(
        access_token=token,
        token_type="bearer",
        user=UserOut.model_validate(user),
    )


@router.post("/login/form", response_model=LoginResponse)
def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
) -> LoginResponse:
    """
    Вход через OAuth2PasswordRequestForm (для Swagger UI).
    Принимает username (email) и password.
    """
    login_request = LoginRequest(email=form_data.username, password=form_data.password)
    return login(login_request, db)


@router.get("/me", response_model=UserOut)
def get_current_user_info(user: User = Depends(get_current_user)) -> User:
    """Информация о текущем авторизованном пользователе."""
    return user
