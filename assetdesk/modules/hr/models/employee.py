from sqlalchemy import Boolean, Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from assetdesk.core.database import Base


class EmployeeAffiliation(Base):
    """
    Привязка сотрудника к компании HR.
    Создаётся при одобрении заявки, удаляется при удалении сотрудника из команды.
    Ссылки идут по email, как и в остальных коллекциях.
    """

    __tablename__ = "employee_affiliations"
    __table_args__ = (
        UniqueConstraint("employee_email", "company_name", name="uq_affiliation_employee_company"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_email = Column(String(255), nullable=False, index=True)
    employee_name = Column(String(255), nullable=False)
    employee_photo = Column(String(512), nullable=True)
    hr_email = Column(String(255), nullable=False, index=True)
    company_name = Column(String(255), nullable=False, index=True)
    company_logo = Column(String(512), nullable=True)
    status = Column(String(32), nullable=False, default="active")
    # Занимает ли сотрудник место в пакете HR (с первой выдачи до удаления)
    holds_seat = Column(Boolean, nullable=False, default=False)
    # HR, у которого занято место: при удалении освобождается его счётчик
    seat_hr_email = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
