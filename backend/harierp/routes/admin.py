# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

"""
Admin routes for user, role and settings management.

Provides endpoints for:
- User management (list, register, bulk activate/deactivate, password reset)
- Role lookup (job roles, their permission roles and codes)
- Module visibility settings

All endpoints require authentication and MANAGE_USERS or MANAGE_SETTINGS.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..services import auth_service, permission_service, settings_service
from ..services.auth_service import PasswordValidationError
from ..decorators import require_auth, require_permission
from ..permissions import (
    ASSIGNABLE_ROLES,
    JOB_ROLES,
    PERMISSION_DEFINITIONS,
    get_permission_roles,
    get_role_modules,
    get_role_permission_codes,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# =============================================================================
# USER MANAGEMENT
# =============================================================================

@admin_bp.get("/users")
@require_auth
@require_permission("MANAGE_USERS")
def list_users():
    """
    List all users.

    Query params:
    - include_inactive: bool (default true)
    """
    include_inactive = request.args.get("include_inactive", "true").lower() == "true"
    users = auth_service.list_users()
    if not include_inactive:
        users = [u for u in users if u.is_active]
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@admin_bp.post("/users")
@require_auth
@require_permission("MANAGE_USERS")
def create_user():
    """
    Register a user.

    Request body:
    {
        "username": "jdoe",
        "password": "SecurePass123!",
        "role": "SalesManager"
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            role=data.get("role"),
            actor=g.current_user,
        )
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({"user": user.to_dict()}), 201


@admin_bp.put("/users/status")
@require_auth
@require_permission("MANAGE_USERS")
def set_users_status():
    """
    Bulk activate/deactivate.

    Request body: {"users": [{"id": 3, "is_active": false}, ...]}
    """
    data = request.get_json(silent=True) or {}
    users = auth_service.set_users_active(data.get("users"), actor=g.current_user)
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)})


@admin_bp.post("/users/<int:user_id>/reset-password")
@require_auth
@require_permission("MANAGE_USERS")
def reset_password(user_id: int):
    """Set the configured default password and sign the user out everywhere."""
    user = auth_service.reset_password(user_id, actor=g.current_user)
    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type="PASSWORD_RESET",
        success=True,
        resource=request.path,
        action=request.method,
        reason=f"Password reset for user {user.id}",
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    current_app.logger.info("User %s reset the password of %s", g.current_user.username, user.username)
    return jsonify({"user": user.to_dict(), "message": "Password reset to the default password"})


# =============================================================================
# ROLES & PERMISSIONS
# =============================================================================

@admin_bp.get("/roles")
@require_auth
@require_permission("MANAGE_USERS")
def list_roles():
    """Assignable roles with their permission roles, codes and modules."""
    roles = []
    for role in ASSIGNABLE_ROLES:
        roles.append({
            "name": role,
            "is_job_role": role in JOB_ROLES,
            "permission_roles": get_permission_roles(role),
            "permissions": sorted(get_role_permission_codes(role)),
            "modules": get_role_modules(role),
        })
    return jsonify({"roles": roles, "count": len(roles)})


@admin_bp.get("/permissions")
@require_auth
@require_permission("MANAGE_USERS")
def list_permissions():
    permissions = [
        {"code": code, "name": name, "description": description, "category": category}
        for code, name, description, category in PERMISSION_DEFINITIONS
    ]
    return jsonify({"permissions": permissions, "count": len(permissions)})


# =============================================================================
# SETTINGS
# =============================================================================

@admin_bp.get("/settings/modules")
@require_auth
@require_permission("MANAGE_SETTINGS")
def get_module_settings():
    return jsonify({"modules": settings_service.get_module_settings()})


@admin_bp.put("/settings/modules")
@require_auth
@require_permission("MANAGE_SETTINGS")
def update_module_settings():
    """Request body: {"modules": {"Laboratory": false}}"""
    data = request.get_json(silent=True) or {}
    modules = settings_service.update_module_settings(data.get("modules"), actor=g.current_user)
    return jsonify({"modules": modules})
