from __future__ import annotations

from typing import Dict, FrozenSet

PERMISSIONS: Dict[str, Dict[str, FrozenSet[str]]] = {
    "admin": {
        "users": frozenset({"create", "read", "update", "delete"}),
        "employees": frozenset({"create", "read", "update", "delete"}),
        "payroll": frozenset({"create", "read", "update", "delete"}),
        "settings": frozenset({"read", "update"}),
        "reports": frozenset({"read"}),
        "audit": frozenset({"read"}),
    },
    "hr": {
        "employees": frozenset({"create", "read", "update"}),
        "payroll": frozenset({"create", "read", "update"}),
        "leave": frozenset({"read", "update"}),
        "time": frozenset({"read", "update"}),
        "reports": frozenset({"read"}),
    },
    "employee": {
        "profile": frozenset({"read", "update"}),
        "payroll": frozenset({"read"}),
        "leave": frozenset({"create", "read"}),
        "time": frozenset({"create", "read"}),
    },
}

ROLES = tuple(PERMISSIONS)


def can_access(role: str | None, resource: str, action: str) -> bool:
    if not role:
        return False
    return action in PERMISSIONS.get(role, {}).get(resource, frozenset())


def has_role(role: str | None, allowed_roles) -> bool:
    return role is not None and role in allowed_roles
