"""Dependencies биллинга."""
from fastapi import Request

from assetdesk.modules.billing.services.stripe_gateway import StripeGateway


def get_payment_gateway(request: Request) -> StripeGateway:
    """Клиент шлюза из состояния приложения (в тестах подменяется через dependency_overrides)."""
    return request.app.state.payment_gateway
