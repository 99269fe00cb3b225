"""Движок заявок и выдачи активов.

Жизненный цикл заявки: pending -> approved | rejected. Удаление сотрудника
из команды возвращает его одобренные заявки в pending.
Жизненный цикл выдачи: assigned -> returned (или удаление вместе с сотрудником).

Каждая операция выполняется в одной транзакции: при любой ошибке сессия
откатывается, и ни одна из частичных записей не сохраняется.
"""

import logging
from collections import Counter
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assetdesk.core.errors import (
    CapacityExceededError,
    ConflictError,
    ExhaustedError,
    NotFoundError,
)
from assetdesk.modules.assets.models import (
    Asset,
    AssetRequest,
    AssignedAsset,
    AssignmentStatus,
    ProductType,
    RequestStatus,
)
from assetdesk.modules.hr.models.employee import EmployeeAffiliation
from assetdesk.modules.hr.models.user import User

logger = logging.getLogger(__name__)


@contextmanager
def _atomic(db: Session, conflict_message: str = "Конфликт данных") -> Iterator[None]:
    """Граница транзакции одной операции."""
    try:
        yield
        db.commit()
    except IntegrityError:
        # Частичные уникальные индексы ловят гонки между проверкой и вставкой
        db.rollback()
        raise ConflictError(conflict_message)
    except Exception:
        db.rollback()
        raise


def _get_affiliation(db: Session, employee_email: str, company_name: str) -> EmployeeAffiliation | None:
    return (
        db.query(EmployeeAffiliation)
        .filter(
            EmployeeAffiliation.employee_email == employee_email,
            EmployeeAffiliation.company_name == company_name,
        )
        .first()
    )


def submit_request(db: Session, asset_id: int, requester: User, note: str | None = None) -> AssetRequest:
    """Сотрудник запрашивает актив. Вторая pending-заявка на тот же актив даёт конфликт."""
    asset = db.query(Asset).filter(Asset.id == asset_id).first()
    if not asset:
        raise NotFoundError("Актив не найден")

    duplicate = (
        db.query(AssetRequest.id)
        .filter(
            AssetRequest.asset_id == asset_id,
            AssetRequest.requester_email == requester.email,
            AssetRequest.status == RequestStatus.PENDING.value,
        )
        .first()
    )
    if duplicate:
        raise ConflictError("Заявка на этот актив уже ожидает рассмотрения")

    req = AssetRequest(
        asset_id=asset.id,
        product_name=asset.product_name,
        product_type=asset.product_type,
        requester_email=requester.email,
        requester_name=requester.name,
        hr_email=asset.hr_email,
        company_name=asset.company_name,
        note=note,
        status=RequestStatus.PENDING.value,
        approval_date=None,
    )
    with _atomic(db, "Заявка на этот актив уже ожидает рассмотрения"):
        db.add(req)
    db.refresh(req)
    logger.info(f"Заявка {req.id}: {requester.email} -> актив {asset.id} ({asset.company_name})")
    return req


def decide_request(db: Session, request_id: int, decision: RequestStatus, decided_by: User) -> AssetRequest:
    """
    HR одобряет или отклоняет заявку.

    Одобрение в той же транзакции создаёт привязку сотрудника к компании
    (если её ещё нет). Отклонение привязку не трогает.
    """
    if decision not in (RequestStatus.APPROVED, RequestStatus.REJECTED):
        raise ConflictError("Некорректный статус. Допустимые: approved, rejected")

    req = db.query(AssetRequest).filter(AssetRequest.id == request_id).first()
    if not req or req.company_name != decided_by.company_name:
        raise NotFoundError("Заявка не найдена")
    if req.status != RequestStatus.PENDING.value:
        raise ConflictError("Можно рассматривать только заявки в статусе pending")

    with _atomic(db):
        req.status = decision.value
        req.processed_by = decided_by.email

        if decision is RequestStatus.APPROVED:
            req.approval_date = datetime.now(timezone.utc)

            requester = db.query(User).filter(User.email == req.requester_email).first()
            if not requester:
                raise NotFoundError("Заявитель не найден")

            if not _get_affiliation(db, requester.email, decided_by.company_name):
                db.add(
                    EmployeeAffiliation(
                        employee_email=requester.email,
                        employee_name=requester.name,
                        employee_photo=requester.photo,
                        hr_email=decided_by.email,
                        company_name=decided_by.company_name,
                        company_logo=decided_by.company_logo,
                        status="active",
                    )
                )
    db.refresh(req)
    logger.info(f"Заявка {req.id}: {req.status} ({decided_by.email})")
    return req


def assign_asset(db: Session, asset_id: int, employee_email: str, hr: User) -> AssignedAsset:
    """
    Выдаёт единицу актива сотруднику компании.

    Первая выдача сотруднику занимает место в пакете HR: счётчик
    current_employees увеличивается условным UPDATE (current_employees < package_limit).
    Если UPDATE не затронул строку, лимит исчерпан и других записей не делается.
    """
    asset = db.query(Asset).filter(Asset.id == asset_id).first()
    if not asset or asset.company_name != hr.company_name:
        raise NotFoundError("Актив не найден")

    affiliation = _get_affiliation(db, employee_email, hr.company_name)
    if not affiliation:
        raise NotFoundError("Сотрудник не состоит в компании")

    active = (
        db.query(AssignedAsset.id)
        .filter(
            AssignedAsset.asset_id == asset.id,
            AssignedAsset.employee_email == employee_email,
            AssignedAsset.status == AssignmentStatus.ASSIGNED.value,
        )
        .first()
    )
    if active:
        raise ConflictError("Актив уже выдан этому сотруднику")

    if asset.available_quantity <= 0:
        raise ExhaustedError("Актив закончился на складе")

    with _atomic(db, "Актив уже выдан этому сотруднику"):
        claimed = (
            db.query(EmployeeAffiliation)
            .filter(
                EmployeeAffiliation.id == affiliation.id,
                EmployeeAffiliation.holds_seat.is_(False),
            )
            .update(
                {
                    EmployeeAffiliation.holds_seat: True,
                    EmployeeAffiliation.seat_hr_email: hr.email,
                },
                synchronize_session=False,
            )
        )
        if claimed:
            taken = (
                db.query(User)
                .filter(User.id == hr.id, User.current_employees < User.package_limit)
                .update(
                    {User.current_employees: User.current_employees + 1},
                    synchronize_session=False,
                )
            )
            if not taken:
                logger.warning(
                    f"Лимит пакета исчерпан: {hr.email} ({hr.current_employees}/{hr.package_limit})"
                )
                raise CapacityExceededError(
                    "Достигнут лимит сотрудников пакета. Обновите пакет"
                )

        taken = (
            db.query(Asset)
            .filter(Asset.id == asset.id, Asset.available_quantity > 0)
            .update(
                {Asset.available_quantity: Asset.available_quantity - 1},
                synchronize_session=False,
            )
        )
        if not taken:
            raise ExhaustedError("Актив закончился на складе")

        assignment = AssignedAsset(
            asset_id=asset.id,
            product_name=asset.product_name,
            product_type=asset.product_type,
            employee_email=employee_email,
            employee_name=affiliation.employee_name,
            hr_email=hr.email,
            company_name=hr.company_name,
            status=AssignmentStatus.ASSIGNED.value,
        )
        db.add(assignment)
    db.refresh(assignment)
    logger.info(f"Актив {asset.id} выдан {employee_email} ({hr.company_name})")
    return assignment


def return_asset(db: Session, assignment_id: int, employee: User) -> AssignedAsset:
    """Сотрудник возвращает возвратный актив на склад."""
    assignment = db.query(AssignedAsset).filter(AssignedAsset.id == assignment_id).first()
    if not assignment or assignment.employee_email != employee.email:
        raise NotFoundError("Выдача не найдена")
    if assignment.status != AssignmentStatus.ASSIGNED.value:
        raise ConflictError("Актив уже возвращён")
    if assignment.product_type != ProductType.RETURNABLE.value:
        raise ConflictError("Невозвратный актив нельзя вернуть")

    with _atomic(db):
        assignment.status = AssignmentStatus.RETURNED.value
        assignment.returned_at = datetime.now(timezone.utc)
        db.query(Asset).filter(Asset.id == assignment.asset_id).update(
            {Asset.available_quantity: Asset.available_quantity + 1},
            synchronize_session=False,
        )
    db.refresh(assignment)
    logger.info(f"Актив {assignment.asset_id} возвращён {employee.email}")
    return assignment


def remove_employee(db: Session, employee_email: str, hr: User) -> dict:
    """
    Удаляет сотрудника из команды HR.

    Порядок: возврат выданных единиц на склад, удаление выдач, удаление
    привязки, освобождение места в пакете, возврат одобренных заявок в pending.
    Всё в одной транзакции.
    """
    company = hr.company_name
    affiliation = _get_affiliation(db, employee_email, company)
    if not affiliation:
        raise NotFoundError("Сотрудник не найден в компании")

    assignments = (
        db.query(AssignedAsset)
        .filter(
            AssignedAsset.employee_email == employee_email,
            AssignedAsset.company_name == company,
        )
        .all()
    )
    restock = Counter(
        a.asset_id for a in assignments if a.status == AssignmentStatus.ASSIGNED.value
    )

    approved = (
        db.query(AssetRequest)
        .filter(
            AssetRequest.requester_email == employee_email,
            AssetRequest.company_name == company,
            AssetRequest.status == RequestStatus.APPROVED.value,
        )
        .order_by(AssetRequest.request_date.desc(), AssetRequest.id.desc())
        .all()
    )
    pending_assets = {
        asset_id
        for (asset_id,) in db.query(AssetRequest.asset_id).filter(
            AssetRequest.requester_email == employee_email,
            AssetRequest.company_name == company,
            AssetRequest.status == RequestStatus.PENDING.value,
        )
    }

    reset = 0
    with _atomic(db):
        for asset_id, count in restock.items():
            db.query(Asset).filter(Asset.id == asset_id).update(
                {Asset.available_quantity: Asset.available_quantity + count},
                synchronize_session=False,
            )

        for a in assignments:
            db.delete(a)
        db.delete(affiliation)

        if affiliation.holds_seat:
            seat_owner = affiliation.seat_hr_email or hr.email
            db.query(User).filter(
                User.email == seat_owner, User.current_employees > 0
            ).update(
                {User.current_employees: User.current_employees - 1},
                synchronize_session=False,
            )

        # Новейшая одобренная заявка на актив возвращается в pending, остальные
        # на тот же актив удаляются: pending-заявка на пару может быть только одна
        for req in approved:
            if req.asset_id in pending_assets:
                db.delete(req)
                continue
            req.status = RequestStatus.PENDING.value
            req.approval_date = None
            req.processed_by = None
            pending_assets.add(req.asset_id)
            reset += 1

    db.refresh(hr)
    logger.info(
        f"Сотрудник {employee_email} удалён из {company}: "
        f"возвращено {sum(restock.values())}, заявок сброшено {reset}"
    )
    return {
        "employee_email": employee_email,
        "company_name": company,
        "restocked": sum(restock.values()),
        "assignments_deleted": len(assignments),
        "requests_reset": reset,
        "current_employees": hr.current_employees,
    }
