"""
Подроуты модуля активов (assets, requests, assignments).
Подключаются в api.py с префиксом API.
"""

from . import assets, assignments, requests

__all__ = ["assets", "assignments", "requests"]
