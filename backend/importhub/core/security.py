"""
# `importhub/core/security.py` — Role capabilities

Capabilities are expressed as predicates over `Principal.role` instead of comparing
role strings at each call site:

- `is_admin(principal)`
- `can_update_status(principal)` — status transitions of any import order
- `can_view_all_imports(principal)` — list/detail without the ownership filter

`require_admin` is the FastAPI dependency for admin-only endpoints; it raises
`AuthorizationError` (403) before the endpoint body runs.
"""
from fastapi import Depends

from importhub.core.auth import get_principal
from importhub.core.errors import AuthorizationError
from importhub.schemas.principal import Principal, Role


def is_admin(principal: Principal) -> bool:
    return principal.role == Role.ADMIN


def can_update_status(principal: Principal) -> bool:
    return is_admin(principal)


def can_view_all_imports(principal: Principal) -> bool:
    return is_admin(principal)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    """
    Only admin users pass.
    """
    if not is_admin(principal):
        raise AuthorizationError("Admin privilege required.")
    return principal
