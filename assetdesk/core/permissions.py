"""
Роли и права доступа AssetDesk.

Роль пользователя берётся из закрытого набора значений. Проверка прав
выполняется чистой функцией (роль, операция) -> bool, без обращения к БД.
"""
from enum import Enum


class Role(str, Enum):
    EMPLOYEE = "employee"
    HR = "hr"


class Operation(str, Enum):
    """Операции с ограничением по роли"""

    REQUEST_ASSET = "request_asset"
    RETURN_ASSET = "return_asset"
    VIEW_TEAM = "view_team"
    MANAGE_ASSETS = "manage_assets"
    DECIDE_REQUEST = "decide_request"
    LIST_EMPLOYEES = "list_employees"
    REMOVE_EMPLOYEE = "remove_employee"
    ASSIGN_ASSET = "assign_asset"
    VIEW_STATS = "view_stats"
    MANAGE_BILLING = "manage_billing"


# Кому разрешена операция
_GRANTS: dict[Operation, frozenset[Role]] = {
    Operation.REQUEST_ASSET: frozenset({Role.EMPLOYEE}),
    Operation.RETURN_ASSET: frozenset({Role.EMPLOYEE}),
    Operation.VIEW_TEAM: frozenset({Role.EMPLOYEE}),
    Operation.MANAGE_ASSETS: frozenset({Role.HR}),
    Operation.DECIDE_REQUEST: frozenset({Role.HR}),
    Operation.LIST_EMPLOYEES: frozenset({Role.HR}),
    Operation.REMOVE_EMPLOYEE: frozenset({Role.HR}),
    Operation.ASSIGN_ASSET: frozenset({Role.HR}),
    Operation.VIEW_STATS: frozenset({Role.HR}),
    Operation.MANAGE_BILLING: frozenset({Role.HR}),
}


def is_allowed(role: Role, operation: Operation) -> bool:
    """Разрешена ли операция для роли."""
    return role in _GRANTS.get(operation, frozenset())
