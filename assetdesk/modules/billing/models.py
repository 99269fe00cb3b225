"""
Модели биллинга: каталог пакетов и платежи
"""
from sqlalchemy import DECIMAL, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from assetdesk.core.database import Base


class Package(Base):
    """Тарифный пакет: сколько сотрудников может вести HR"""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(64), unique=True, nullable=False)  # basic, standard, premium
    employee_limit = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)


class Payment(Base):
    """Подтверждённая оплата пакета"""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(String(64), unique=True, nullable=False, index=True)
    session_id = Column(String(255), unique=True, nullable=False)
    hr_email = Column(String(255), nullable=False, index=True)
    package_name = Column(String(64), nullable=False)
    employee_limit = Column(Integer, nullable=False)
    amount = Column(DECIMAL(10, 2), nullable=False)
    currency = Column(String(8), nullable=False, default="usd")
    status = Column(String(32), nullable=False, default="paid")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
