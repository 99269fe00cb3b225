"""
Сервис оплаты пакетов.

Подтверждение идемпотентно по transaction_id: повторное подтверждение
возвращает сохранённый платёж и не увеличивает лимит повторно.
"""
import logging
import uuid
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assetdesk.core.errors import NotFoundError, PaymentError
from assetdesk.modules.billing.models import Package, Payment
from assetdesk.modules.billing.services.stripe_gateway import CheckoutSession, StripeGateway
from assetdesk.modules.hr.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_PACKAGES: List[Tuple[str, int, Decimal]] = [
    ("basic", 5, Decimal("5.00")),
    ("standard", 10, Decimal("8.00")),
    ("premium", 20, Decimal("15.00")),
]


def seed_packages(db: Session) -> int:
    """Заполняет каталог пакетов, если он пуст. Возвращает число добавленных."""
    if db.query(Package.id).first():
        return 0
    for name, limit, price in DEFAULT_PACKAGES:
        db.add(Package(name=name, employee_limit=limit, price=price))
    db.commit()
    logger.info(f"Каталог пакетов заполнен: {len(DEFAULT_PACKAGES)}")
    return len(DEFAULT_PACKAGES)


def get_package(db: Session, name: str) -> Package:
    package = db.query(Package).filter(Package.name == name).first()
    if not package:
        raise NotFoundError("Пакет не найден")
    return package


async def start_checkout(db: Session, gateway: StripeGateway, hr: User, package_name: str) -> dict:
    """Создаёт сессию оплаты пакета с новым transaction_id"""
    package = get_package(db, package_name)
    transaction_id = uuid.uuid4().hex
    session = await gateway.create_checkout_session(
        package_name=package.name,
        price=package.price,
        transaction_id=transaction_id,
        customer_email=hr.email,
    )
    if not session.url:
        raise PaymentError("Платёжный шлюз не вернул ссылку на оплату")
    return {"url": session.url, "session_id": session.id, "transaction_id": transaction_id}


def _result(payment: Payment, hr: User, already_applied: bool) -> dict:
    return {
        "payment": payment,
        "package_limit": hr.package_limit,
        "current_employees": hr.current_employees,
        "subscription": hr.subscription,
        "already_applied": already_applied,
    }


def apply_payment(db: Session, session: CheckoutSession, hr: User) -> dict:
    """
    Применяет оплаченную сессию к аккаунту HR.

    Платёж и увеличение лимита пишутся в одной транзакции; уникальный
    transaction_id не даёт применить одну оплату дважды.
    """
    if not session.paid:
        raise PaymentError("Оплата не завершена")

    transaction_id = session.metadata.get("transaction_id")
    package_name = session.metadata.get("package_name")
    if not transaction_id or not package_name:
        raise PaymentError("Сессия оплаты не содержит данных о пакете")
    if session.metadata.get("hr_email") != hr.email:
        raise PaymentError("Платёж принадлежит другому пользователю")

    existing = db.query(Payment).filter(Payment.transaction_id == transaction_id).first()
    if existing:
        if existing.hr_email != hr.email:
            raise PaymentError("Платёж принадлежит другому пользователю")
        return _result(existing, hr, already_applied=True)

    package = get_package(db, package_name)
    amount = (
        Decimal(session.amount_total) / 100 if session.amount_total is not None else package.price
    )
    payment = Payment(
        transaction_id=transaction_id,
        session_id=session.id,
        hr_email=hr.email,
        package_name=package.name,
        employee_limit=package.employee_limit,
        amount=amount,
        currency=session.currency or "usd",
        status="paid",
    )
    try:
        db.add(payment)
        db.query(User).filter(User.id == hr.id).update(
            {
                User.package_limit: User.package_limit + package.employee_limit,
                User.subscription: package.name,
            },
            synchronize_session=False,
        )
        db.commit()
    except IntegrityError:
        # Параллельное подтверждение той же оплаты успело раньше
        db.rollback()
        existing = db.query(Payment).filter(Payment.transaction_id == transaction_id).first()
        if not existing:
            raise
        db.refresh(hr)
        return _result(existing, hr, already_applied=True)

    db.refresh(payment)
    db.refresh(hr)
    logger.info(
        f"Оплата {transaction_id}: {hr.email} пакет {package.name}, лимит {hr.package_limit}"
    )
    return _result(payment, hr, already_applied=False)


async def confirm_payment(db: Session, gateway: StripeGateway, hr: User, session_id: str) -> dict:
    """Проверяет сессию в шлюзе и применяет оплату"""
    session = await gateway.retrieve_session(session_id)
    return apply_payment(db, session, hr)
