"""Модуль активов: склад, заявки сотрудников, выдача."""
