"""
Модели модуля активов: склад, заявки, выдачи.
"""
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from assetdesk.core.database import Base


class ProductType(str, Enum):
    RETURNABLE = "returnable"
    NON_RETURNABLE = "non_returnable"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    RETURNED = "returned"


class Asset(Base):
    """Позиция склада компании"""

    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("available_quantity >= 0", name="ck_assets_available_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    product_name = Column(String(255), nullable=False, index=True)
    product_type = Column(String(32), nullable=False, default=ProductType.RETURNABLE.value)
    product_image = Column(String(512), nullable=True)
    product_quantity = Column(Integer, nullable=False, default=0)  # добавлено на склад
    available_quantity = Column(Integer, nullable=False, default=0)  # осталось к выдаче

    # Владелец
    hr_email = Column(String(255), nullable=False, index=True)
    company_name = Column(String(255), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    requests = relationship(
        "AssetRequest", back_populates="asset", cascade="all, delete-orphan"
    )
    assignments = relationship(
        "AssignedAsset", back_populates="asset", cascade="all, delete-orphan"
    )


class AssetRequest(Base):
    """Заявка сотрудника на актив"""

    __tablename__ = "asset_requests"
    __table_args__ = (
        # Не более одной pending-заявки на пару (актив, сотрудник)
        Index(
            "uq_asset_requests_pending",
            "asset_id",
            "requester_email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Снимок актива на момент заявки
    product_name = Column(String(255), nullable=False)
    product_type = Column(String(32), nullable=False)

    requester_email = Column(String(255), nullable=False, index=True)
    requester_name = Column(String(255), nullable=False)
    hr_email = Column(String(255), nullable=False, index=True)
    company_name = Column(String(255), nullable=False, index=True)
    note = Column(Text, nullable=True)

    status = Column(
        String(16), nullable=False, default=RequestStatus.PENDING.value, index=True
    )  # pending, approved, rejected
    approval_date = Column(DateTime(timezone=True), nullable=True)
    processed_by = Column(String(255), nullable=True)  # email HR

    request_date = Column(DateTime(timezone=True), server_default=func.now())

    asset = relationship("Asset", back_populates="requests")


class AssignedAsset(Base):
    """Выданная сотруднику единица актива"""

    __tablename__ = "assigned_assets"
    __table_args__ = (
        # Одна активная выдача на пару (актив, сотрудник)
        Index(
            "uq_assigned_assets_active",
            "asset_id",
            "employee_email",
            unique=True,
            sqlite_where=text("status = 'assigned'"),
            postgresql_where=text("status = 'assigned'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    asset_id = Column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_name = Column(String(255), nullable=False)
    product_type = Column(String(32), nullable=False)

    employee_email = Column(String(255), nullable=False, index=True)
    employee_name = Column(String(255), nullable=False)
    hr_email = Column(String(255), nullable=False, index=True)
    company_name = Column(String(255), nullable=False, index=True)

    status = Column(
        String(16), nullable=False, default=AssignmentStatus.ASSIGNED.value
    )  # assigned, returned
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    returned_at = Column(DateTime(timezone=True), nullable=True)

    asset = relationship("Asset", back_populates="assignments")
