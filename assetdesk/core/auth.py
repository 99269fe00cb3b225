"""
Аутентификация AssetDesk: пароли и JWT.

Проверенная личность: email пользователя (claim "sub").
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from .config import settings

# OAuth2 схема для получения токена из заголовка Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_v1_prefix}/auth/login",
    auto_error=False
)


def _to_bytes(s: str, max_len: int = 72) -> bytes:
    b = s.encode("utf-8")
    return b[:max_len] if len(b) > max_len else b


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверяет пароль против хеша (bcrypt, до 72 байт)."""
    try:
        plain = _to_bytes(plain_password)
        h = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
        return bcrypt.checkpw(plain, h)
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Хеширует пароль (bcrypt, до 72 байт)."""
    plain = _to_bytes(password)
    return bcrypt.hashpw(plain, bcrypt.gensalt()).decode("utf-8")


def create_access_token(
    email: str,
    role: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Создаёт JWT токен.

    Payload структура:
        {
            "sub": "user@company.com",
            "role": "hr",
            "exp": 1234567890,
            "iat": 1234567890
        }

    Роль в токене справочная: права всегда определяются по записи пользователя в БД.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = {
        "sub": email,
        "exp": expire,
        "iat": now,
    }
    if role:
        to_encode["role"] = role

    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Optional[Dict]:
    """
    Декодирует JWT токен.

    Returns:
        Payload токена или None при ошибке
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def get_token_payload(token: Optional[str] = Depends(oauth2_scheme)) -> Dict:
    """
    Получает payload из JWT токена.
    Используется как dependency в FastAPI.

    Raises:
        HTTPException: Если токен невалиден или отсутствует
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Не удалось проверить учетные данные",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception

    return payload


def get_email_from_token(payload: Dict = Depends(get_token_payload)) -> str:
    """
    Извлекает проверенный email из JWT токена.

    Raises:
        HTTPException: Если в токене нет "sub"
    """
    email = payload.get("sub")
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный формат токена",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return email
