"""Static role to permission mapping for checkout endpoints.

Permissions are ``resource:action`` strings; a ``resource:*`` grant covers every
action on that resource and ``*`` covers everything.
"""

ALL = "*"
BILLS_READ = "bills:read"
BILLS_WRITE = "bills:write"
BILLS_READ_OWN = "bills:read:own"
BILLS_MANAGE = "bills:*"

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "SUPER_OWNER": frozenset({ALL}),
    "REGIONAL_MANAGER": frozenset({BILLS_MANAGE}),
    "BRANCH_MANAGER": frozenset({BILLS_MANAGE}),
    "RECEPTIONIST": frozenset({BILLS_READ, BILLS_WRITE}),
    "STYLIST": frozenset({BILLS_READ_OWN}),
    "ACCOUNTANT": frozenset({BILLS_READ}),
}


def _normalize_role(role: str | None) -> str:
    return (role or "").upper()


def permissions_for_role(role: str | None) -> frozenset[str]:
    return ROLE_PERMISSIONS.get(_normalize_role(role), frozenset())


def has_permission(role: str | None, permission: str) -> bool:
    granted = permissions_for_role(role)
    if ALL in granted:
        return True
    resource = permission.split(":", 1)[0]
    return permission in granted or f"{resource}:*" in granted
