"""
HR API подроуты (users, employees, stats).
Подключаются в api.py с префиксом API.
"""

from . import employees, stats, users

__all__ = ["employees", "stats", "users"]
