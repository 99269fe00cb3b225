"""
Клиент платёжного шлюза Stripe (Checkout Sessions).

Работает с REST API напрямую через httpx: создание сессии оплаты
и проверка её статуса при подтверждении.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional

import httpx

from assetdesk.core.config import Settings
from assetdesk.core.errors import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    id: str
    url: Optional[str]
    payment_status: str
    amount_total: Optional[int] = None
    currency: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def paid(self) -> bool:
        return self.payment_status == "paid"

    @classmethod
    def from_api(cls, data: dict) -> "CheckoutSession":
        return cls(
            id=data["id"],
            url=data.get("url"),
            payment_status=data.get("payment_status") or "unpaid",
            amount_total=data.get("amount_total"),
            currency=data.get("currency"),
            metadata=dict(data.get("metadata") or {}),
        )


class StripeGateway:
    """Клиент Stripe Checkout"""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.stripe_api_url.rstrip("/")
        self.secret_key = settings.stripe_secret_key
        self.timeout = settings.stripe_timeout_seconds
        self.currency = settings.payment_currency
        self.site_url = settings.site_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self.secret_key:
            raise GatewayError("STRIPE_SECRET_KEY не настроен")
        return httpx.AsyncClient(
            base_url=self.api_url,
            auth=(self.secret_key, ""),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, data: Optional[dict] = None) -> dict:
        try:
            async with self._client() as client:
                response = await client.request(method, path, data=data)
        except httpx.HTTPError as e:
            logger.error(f"Ошибка соединения с платёжным шлюзом: {e}")
            raise GatewayError("Платёжный шлюз недоступен") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message", "")
            except ValueError:
                message = response.text
            logger.error(f"Платёжный шлюз вернул {response.status_code}: {message}")
            raise GatewayError(f"Ошибка платёжного шлюза: {message or response.status_code}")
        return response.json()

    async def create_checkout_session(
        self,
        package_name: str,
        price: Decimal,
        transaction_id: str,
        customer_email: str,
    ) -> CheckoutSession:
        """
        Создаёт сессию оплаты пакета.

        Сумма передаётся в минимальных единицах валюты (центах).
        transaction_id сохраняется в metadata и client_reference_id,
        email плательщика в metadata[hr_email].
        """
        amount = int((Decimal(price) * 100).quantize(Decimal("1")))
        data = {
            "mode": "payment",
            "success_url": f"{self.site_url}/payment/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.site_url}/payment/cancel",
            "customer_email": customer_email,
            "client_reference_id": transaction_id,
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": self.currency,
            "line_items[0][price_data][unit_amount]": str(amount),
            "line_items[0][price_data][product_data][name]": f"Пакет {package_name}",
            "metadata[transaction_id]": transaction_id,
            "metadata[package_name]": package_name,
            "metadata[hr_email]": customer_email,
        }
        session = CheckoutSession.from_api(await self._request("POST", "/checkout/sessions", data))
        logger.info(f"Создана платёжная сессия {session.id} ({package_name}, {customer_email})")
        return session

    async def retrieve_session(self, session_id: str) -> CheckoutSession:
        """Получает сессию оплаты по id"""
        return CheckoutSession.from_api(await self._request("GET", f"/checkout/sessions/{session_id}"))
