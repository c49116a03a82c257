"""Role resolution and the permission predicate every command goes through."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from hyvmind_core.db.enums import Role
from hyvmind_core.db.models import RoleAssignment
from hyvmind_core.errors import Unauthorized
from hyvmind_core.settings import settings

logger = logging.getLogger(__name__)

ANONYMOUS_PRINCIPAL = "2vxsx-fae"


def is_anonymous(caller: str | None) -> bool:
    return caller is None or not caller.strip() or caller.strip() == ANONYMOUS_PRINCIPAL


def get_role(session: Session, caller: str | None) -> Role:
    if is_anonymous(caller):
        return Role.guest
    if caller in settings.admin_principals:
        return Role.admin
    assignment = session.get(RoleAssignment, caller)
    if assignment is not None:
        return assignment.role
    return Role.user


def has_permission(session: Session, caller: str | None, required: Role) -> bool:
    return get_role(session, caller).rank >= required.rank


def is_admin(session: Session, caller: str | None) -> bool:
    return has_permission(session, caller, Role.admin)


def require_user(session: Session, caller: str | None) -> str:
    """Return the caller principal, or raise if it is not at least a `user`."""
    if not has_permission(session, caller, Role.user):
        raise Unauthorized("Unauthorized: only users can perform this action")
    return caller.strip()


def require_admin(session: Session, caller: str | None) -> str:
    if not is_admin(session, caller):
        raise Unauthorized("Unauthorized: only admins can perform this action")
    return caller.strip()


def assign_role(session: Session, principal: str, role: Role, *, caller: str | None = None, bypass: bool = False) -> None:
    """
    Store a role for `principal`.

    The HTTP layer passes the caller and requires admin; the CLI passes
    `bypass=True` to bootstrap the first admin.
    """
    if not bypass:
        require_admin(session, caller)
    if is_anonymous(principal):
        raise Unauthorized("Unauthorized: the anonymous principal cannot hold a role")

    assignment = session.get(RoleAssignment, principal)
    if assignment is None:
        session.add(RoleAssignment(principal=principal, role=role))
    else:
        assignment.role = role
    session.flush()
    logger.info("role assigned principal=%s role=%s", principal, role.value)
