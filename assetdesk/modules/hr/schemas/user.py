from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, model_validator

from assetdesk.core.permissions import Role


class UserRegister(BaseModel):
    """Регистрация сотрудника или HR"""

    email: EmailStr
    password: str
    name: str
    role: Role = Role.EMPLOYEE
    photo: Optional[str] = None
    date_of_birth: Optional[date] = None
    # Только для HR
    company_name: Optional[str] = None
    company_logo: Optional[str] = None

    @model_validator(mode="after")
    def _check_company(self) -> "UserRegister":
        if self.role is Role.HR and not (self.company_name and self.company_name.strip()):
            raise ValueError("Для HR обязательно название компании")
        if len(self.password) < 6:
            raise ValueError("Пароль должен быть не короче 6 символов")
        return self


class UserOut(BaseModel):
    """Ответ с данными пользователя"""

    id: int
    email: str
    name: str
    role: Role
    photo: Optional[str] = None
    date_of_birth: Optional[date] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    package_limit: int = 0
    current_employees: int = 0
    subscription: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    """Обновление собственного профиля"""

    name: Optional[str] = None
    photo: Optional[str] = None
    date_of_birth: Optional[date] = None
    company_logo: Optional[str] = None


class LoginRequest(BaseModel):
    """Запрос на вход. email типа str, чтобы допускать .local и иные домены."""

    email: str
    password: str


class LoginResponse(BaseModel):
    """Ответ на вход"""

    access_token: str
    token_type: str = "bearer"
    user: UserOut
