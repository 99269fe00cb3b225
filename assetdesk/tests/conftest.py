"""
Общие фикстуры: приложение на in-memory SQLite, фейковый платёжный шлюз,
регистрация и вход пользователей.
"""
from decimal import Decimal
from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from assetdesk.core.config import Settings
from assetdesk.core.database import Database
from assetdesk.main import create_app
from assetdesk.modules.billing.dependencies import get_payment_gateway
from assetdesk.modules.billing.services.stripe_gateway import CheckoutSession

API = "/api/v1"
PASSWORD = "secret123"


class FakeGateway:
    """Шлюз оплаты в памяти: сессии создаются неоплаченными, mark_paid помечает оплату."""

    def __init__(self):
        self.sessions: Dict[str, CheckoutSession] = {}

    async def create_checkout_session(
        self, package_name: str, price: Decimal, transaction_id: str, customer_email: str
    ) -> CheckoutSession:
        session_id = f"cs_test_{len(self.sessions) + 1}"
        session = CheckoutSession(
            id=session_id,
            url=f"https://checkout.stripe.com/pay/{session_id}",
            payment_status="unpaid",
            amount_total=int(Decimal(price) * 100),
            currency="usd",
            metadata={
                "transaction_id": transaction_id,
                "package_name": package_name,
                "hr_email": customer_email,
            },
        )
        self.sessions[session_id] = session
        return session

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        from assetdesk.core.errors import GatewayError

        if session_id not in self.sessions:
            raise GatewayError("No such checkout.session")
        return self.sessions[session_id]

    def mark_paid(self, session_id: str) -> None:
        self.sessions[session_id].payment_status = "paid"


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def app(gateway):
    application = create_app(Settings(database_url="sqlite://"))
    application.dependency_overrides[get_payment_gateway] = lambda: gateway
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    """Сессия для тестов сервисного слоя без HTTP."""
    database = Database("sqlite://")
    database.create_all()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.dispose()


def register(
    client: TestClient,
    email: str,
    role: str = "employee",
    name: Optional[str] = None,
    company_name: Optional[str] = None,
) -> dict:
    payload = {"email": email, "password": PASSWORD, "name": name or email.split("@")[0], "role": role}
    if company_name:
        payload["company_name"] = company_name
    response = client.post(f"{API}/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def login(client: TestClient, email: str) -> Dict[str, str]:
    response = client.post(f"{API}/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def hr_headers(client) -> Dict[str, str]:
    register(client, "hr@acme.com", role="hr", name="Anna HR", company_name="Acme")
    return login(client, "hr@acme.com")


@pytest.fixture
def employee_headers(client) -> Dict[str, str]:
    register(client, "ivan@mail.com", name="Ivan")
    return login(client, "ivan@mail.com")


def add_asset(client: TestClient, headers: Dict[str, str], name: str = "Laptop", quantity: int = 3,
              product_type: str = "returnable") -> dict:
    response = client.post(
        f"{API}/addasset",
        json={"product_name": name, "product_quantity": quantity, "product_type": product_type},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def request_asset(client: TestClient, headers: Dict[str, str], asset_id: int) -> dict:
    response = client.post(f"{API}/reqasset", json={"asset_id": asset_id}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def decide(client: TestClient, headers: Dict[str, str], request_id: int, status: str = "approved"):
    return client.patch(
        f"{API}/request/updatestatus",
        json={"request_id": request_id, "status": status},
        headers=headers,
    )
