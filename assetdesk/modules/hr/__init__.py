"""HR модуль: пользователи, команда, статистика."""
