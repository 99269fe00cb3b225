"""Ядро: конфигурация, БД, аутентификация, права, ошибки."""
