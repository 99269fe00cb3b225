"""
Модели HR модуля
"""
from .user import User
from .employee import EmployeeAffiliation

__all__ = [
    "User",
    "EmployeeAffiliation",
]
