"""
Доменные ошибки AssetDesk.

Сервисы бросают их, роуты переводят в HTTPException с тем же статусом.
"""


class AssetDeskError(Exception):
    """Базовая ошибка бизнес-логики"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AssetDeskError):
    status_code = 404


class ConflictError(AssetDeskError):
    status_code = 409


class ExhaustedError(AssetDeskError):
    """Актив закончился на складе"""

    status_code = 409


class CapacityExceededError(AssetDeskError):
    """Достигнут лимит сотрудников пакета"""

    status_code = 402


class PaymentError(AssetDeskError):
    """Платёжная сессия не оплачена или не относится к пользователю"""

    status_code = 402


class GatewayError(AssetDeskError):
    """Сбой платёжного шлюза"""

    status_code = 502
