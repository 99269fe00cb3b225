"""
Dependencies для модулей AssetDesk.
get_db общий с core, get_current_user ищет пользователя по email из JWT, require_operation проверяет роль.
"""
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from assetdesk.core.auth import get_email_from_token
from assetdesk.core.database import get_db as core_get_db
from assetdesk.core.permissions import Operation
from assetdesk.modules.hr.models.user import User

get_db = core_get_db


def get_current_user(
    db: Session = Depends(get_db),
    email: str = Depends(get_email_from_token),
) -> User:
    """Текущий пользователь из JWT (core.auth + User)."""
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Пользователь не найден",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_operation(operation: Operation):
    """
    Проверяет право на операцию до входа в обработчик.

    Пример использования:
        @router.post("/", dependencies=[Depends(require_operation(Operation.MANAGE_ASSETS))])
    """

    def _checker(user: User = Depends(get_current_user)) -> User:
        if user.can(operation):
            return user
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Недостаточно прав для этой операции",
        )

    return _checker
