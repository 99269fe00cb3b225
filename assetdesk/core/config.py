"""
Конфигурация сервиса AssetDesk
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_strip(s: str) -> List[str]:
    """Разбивает строку по запятой и убирает пробелы."""
    return [x.strip() for x in s.split(",") if x.strip()]


class Settings(BaseSettings):
    """Настройки приложения"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        # Читать переменные окружения (DATABASE_URL -> database_url)
        env_prefix="",
    )

    # Основные настройки
    app_name: str = "AssetDesk"
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    port: int = 8000

    # База данных
    database_url: str = "sqlite:///./assetdesk.db"

    # JWT аутентификация
    secret_key: str = "assetdesk-super-secret-key-change-in-production-min-32-chars"
    # Время жизни access token. По умолчанию: 7 дней.
    access_token_expire_minutes: int = 60 * 24 * 7
    algorithm: str = "HS256"

    # CORS — в .env строка "*" или "http://a,http://b"
    cors_origins: str = "*"

    # Платёжный шлюз (Stripe Checkout)
    stripe_secret_key: str = ""
    stripe_api_url: str = "https://api.stripe.com/v1"
    stripe_timeout_seconds: int = 10
    payment_currency: str = "usd"
    # Публичный адрес фронтенда для редиректов после оплаты
    site_url: str = "http://localhost:5173"

    # Лимит сотрудников у только что зарегистрированного HR
    default_package_limit: int = 5

    def get_cors_origins(self) -> List[str]:
        out = _split_strip(self.cors_origins)
        return out if out else ["*"]

    def validate_secret(self) -> None:
        """Валидация критичных настроек."""
        if len(self.secret_key) < 32:
            raise ValueError(
                "SECRET_KEY должен быть минимум 32 символа. "
                "Сгенерируйте командой: openssl rand -hex 32"
            )


# Глобальный экземпляр настроек
settings = Settings()

# Валидация критичных настроек при импорте
settings.validate_secret()
