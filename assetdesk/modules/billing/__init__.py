"""Модуль биллинга: пакеты и оплата через платёжный шлюз."""
