from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Depends, HTTPException, status

from enterprise_crm.core.auth import AuthUser, get_current_user


ROLE_ADMIN = "Admin"
ROLE_MANAGER = "Manager"
ROLE_USER = "User"
ROLE_READ_ONLY = "ReadOnly"

POLICIES: dict[str, frozenset[str]] = {
    "AdminOnly": frozenset({ROLE_ADMIN}),
    "ManagerOrAdmin": frozenset({ROLE_MANAGER, ROLE_ADMIN}),
    "UserOrAbove": frozenset({ROLE_USER, ROLE_MANAGER, ROLE_ADMIN}),
    "ReadOnlyOrAbove": frozenset({ROLE_READ_ONLY, ROLE_USER, ROLE_MANAGER, ROLE_ADMIN}),
}


def require_policy(policy: str) -> Callable[..., Coroutine[Any, Any, AuthUser]]:
    allowed_roles = POLICIES[policy]

    async def checker(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not allowed_roles.intersection(user.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Policy '{policy}' requires one of: {', '.join(sorted(allowed_roles))}",
            )
        return user

    return checker


admin_only = require_policy("AdminOnly")
manager_or_admin = require_policy("ManagerOrAdmin")
user_or_above = require_policy("UserOrAbove")
read_only_or_above = require_policy("ReadOnlyOrAbove")
