"""
Подроуты биллинга (packages, payments).
Подключаются в api.py с префиксом API.
"""

from . import packages, payments

__all__ = ["packages", "payments"]
