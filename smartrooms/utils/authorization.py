"""
Role based authorization.

``authorize`` is the whole policy: a caller passes a gate when it holds at
least one of the gate's roles. Role membership is read from the user row
loaded for the current request, so a revoked role stops working on the next
call.
"""
from typing import AbstractSet, FrozenSet
from fastapi import Depends
from smartrooms.errors import Forbidden
from smartrooms.models.role import RoleName
from smartrooms.models.user import User
from smartrooms.utils.auth import get_current_user

ADMIN_ONLY: FrozenSet[RoleName] = frozenset({RoleName.ADMIN})
MODERATOR_ONLY: FrozenSet[RoleName] = frozenset({RoleName.MODERATOR})
MODERATOR_OR_ADMIN: FrozenSet[RoleName] = frozenset({RoleName.MODERATOR, RoleName.ADMIN})


def authorize(caller_roles: AbstractSet[RoleName], required_roles: AbstractSet[RoleName]) -> bool:
    return bool(set(caller_roles) & set(required_roles))


class RoleGate:
    """FastAPI dependency that admits the current user only with a required role."""

    def __init__(self, required_roles: FrozenSet[RoleName], message: str):
        self.required_roles = required_roles
        self.message = message

    def __call__(self, current_user: User = Depends(get_current_user)) -> User:
        if not authorize(current_user.role_names, self.required_roles):
            raise Forbidden(self.message)
        return current_user


is_admin = RoleGate(ADMIN_ONLY, "Require Admin Role!")
is_moderator = RoleGate(MODERATOR_ONLY, "Require Moderator Role!")
is_moderator_or_admin = RoleGate(MODERATOR_OR_ADMIN, "Require Moderator or Admin Role!")
