import pytest

from payroll_engine.permissions import ROLES, can_access, has_role


@pytest.mark.parametrize(
    "role, resource, action, allowed",
    [
        ("admin", "payroll", "delete", True),
        ("admin", "settings", "update", True),
        ("admin", "leave", "read", False),
        ("hr", "payroll", "create", True),
        ("hr", "payroll", "delete", False),
        ("hr", "settings", "read", False),
        ("employee", "payroll", "read", True),
        ("employee", "payroll", "create", False),
        ("employee", "time", "create", True),
        ("auditor", "reports", "read", False),
        (None, "payroll", "read", False),
    ],
)
def test_can_access(role, resource, action, allowed):
    assert can_access(role, resource, action) is allowed


def test_known_roles():
    assert set(ROLES) == {"admin", "hr", "employee"}


def test_has_role():
    assert has_role("hr", ["admin", "hr"])
    assert not has_role("employee", ["admin", "hr"])
    assert not has_role(None, ["admin"])
