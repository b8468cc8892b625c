# Overview: Service-layer operations for permission; encapsulates business logic and database work.

"""
Permission resolution and security event logging.

Permissions come from code-defined lookup tables (harierp.permissions):
job role -> permission roles -> permission codes. Nothing is stored per user
except the role name.

DESIGN PRINCIPLES:
- Fail closed: an unknown role holds no permissions
- Log denials only: permission grants are not logged
"""

from ..extensions import db
from ..models import SecurityEvent, User
from ..permissions import (
    get_permission_roles,
    get_role_modules,
    get_role_permission_codes,
)
from . import settings_service
from harierp.time_utils import utcnow


def log_security_event(
    user_id: int | None,
    event_type: str,
    success: bool,
    resource: str | None = None,
    action: str | None = None,
    reason: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> SecurityEvent:
    """
    Log security event to audit trail and commit it.

    event_type examples:
    - PERMISSION_DENIED
    - LOGIN_FAILED / LOGIN_SUCCESS
    - LOGOUT
    - PASSWORD_CHANGED / PASSWORD_RESET
    """
    event = SecurityEvent(
        user_id=user_id,
        event_type=event_type,
        resource=resource,
        action=action,
        success=success,
        reason=reason,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
        occurred_at=utcnow()
    )

    db.session.add(event)
    db.session.commit()

    return event


def get_user_permissions(user: User) -> set[str]:
    """Permission codes held by the user's role (empty for deactivated users)."""
    if user is None or not user.is_active:
        return set()
    return get_role_permission_codes(user.role)


def user_has_permission(user: User, permission_code: str) -> bool:
    return permission_code in get_user_permissions(user)


def get_visible_modules(user: User) -> list[str]:
    """Modules the user's roles open, minus modules disabled in settings."""
    if user is None or not user.is_active:
        return []
    return get_role_modules(user.role, settings_service.get_module_settings())


def describe_access(user: User) -> dict:
    """The access block returned by login and /me."""
    return {
        "user": user.to_dict(),
        "role": user.role,
        "permission_roles": get_permission_roles(user.role),
        "permissions": sorted(get_user_permissions(user)),
        "modules": get_visible_modules(user),
    }
