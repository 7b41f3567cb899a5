"""
Authorization decisions for blog resources.

can_perform is a pure predicate over already-loaded data: it never raises
for a failed check and never mutates anything. Callers enforce the result
(see juice.api.v1.auth.ensure_allowed). Anything the rules do not
explicitly allow is denied.
"""

import logging
from enum import Enum
from typing import Any

from juice.models import Comment, Post, Role, User, UserSession
from juice.schemas.auth import CurrentUser
from juice.services.roles import RoleLookup, is_admin

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


def _resource_type(resource: Any) -> type | None:
    """Model class of an instance, or the class itself for create/collection checks."""
    for model in (Post, Comment, User, Role, UserSession):
        if resource is model or isinstance(resource, model):
            return model
    return None


def _owns(requester: CurrentUser | None, owner_id: int | None) -> bool:
    if requester is None or requester.id is None or owner_id is None:
        return False
    return requester.id == owner_id


def _owner_id(resource: Any) -> int | None:
    # A class (create/list checks) has no owner.
    if isinstance(resource, type):
        return None
    return getattr(resource, "user_id", None)


def _decide(
    requester: CurrentUser | None,
    action: Action,
    resource: Any,
    roles: RoleLookup,
) -> bool:
    model = _resource_type(resource)
    if model is None:
        return False

    if model is Post:
        if action is Action.READ:
            return True
        if action is Action.CREATE:
            return requester is not None
        if action in (Action.UPDATE, Action.DELETE):
            return _owns(requester, _owner_id(resource)) or is_admin(requester, roles)
        return False

    if model is Comment:
        if action in (Action.READ, Action.CREATE):
            return True
        if action in (Action.UPDATE, Action.DELETE, Action.APPROVE):
            return is_admin(requester, roles)
        return False

    if model is User:
        # Authors are listed publicly on the blog index.
        if action is Action.READ:
            return True
        if action in (Action.CREATE, Action.UPDATE, Action.DELETE):
            return is_admin(requester, roles)
        return False

    if model is Role:
        if action in (Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE):
            return is_admin(requester, roles)
        return False

    if model is UserSession:
        # Logging in is gated by the credential check, not here.
        if action is Action.CREATE:
            return True
        if action in (Action.READ, Action.DELETE):
            return _owns(requester, _owner_id(resource)) or is_admin(requester, roles)
        return False

    return False


def can_perform(
    requester: CurrentUser | None,
    action: Action,
    resource: Any,
    roles: RoleLookup,
) -> Decision:
    """
    Decide whether requester (None for anonymous) may apply action to resource.

    resource is a model instance, or the model class when no instance exists
    yet (create) or the check covers a whole collection (list).
    Unknown actions are denied.
    """
    try:
        action = Action(action)
    except ValueError:
        logger.info("Authorization denied: unknown action %r", action)
        return Decision.DENY
    if _decide(requester, action, resource, roles):
        return Decision.ALLOW
    logger.info(
        "Authorization denied",
        extra={
            "requester_id": requester.id if requester is not None else None,
            "action": action.value,
            "resource_type": getattr(_resource_type(resource), "__name__", type(resource).__name__),
            "resource_id": None if isinstance(resource, type) else getattr(resource, "id", None),
        },
    )
    return Decision.DENY
