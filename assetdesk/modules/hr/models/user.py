from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.sql import func

from assetdesk.core.database import Base
from assetdesk.core.permissions import Operation, Role, is_allowed


class User(Base):
    """
    Учётная запись: сотрудник или HR-представитель компании.
    Для HR хранится ёмкость пакета: package_limit и current_employees.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(16), nullable=False, default=Role.EMPLOYEE.value)
    photo = Column(String(512), nullable=True)
    date_of_birth = Column(Date, nullable=True)

    # Только для HR
    company_name = Column(String(255), nullable=True, index=True)
    company_logo = Column(String(512), nullable=True)
    package_limit = Column(Integer, nullable=False, default=0)
    current_employees = Column(Integer, nullable=False, default=0)
    subscription = Column(String(64), nullable=True)  # название купленного пакета

    # Метаданные
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def role_enum(self) -> Role:
        return Role(self.role)

    @property
    def is_hr(self) -> bool:
        return self.role_enum is Role.HR

    def can(self, operation: Operation) -> bool:
        """Проверить право пользователя на операцию"""
        return is_allowed(self.role_enum, operation)
