# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes.

SECURITY FEATURES:
- Login throttling: 10 failures in 15 minutes lock the identifier
- Every refused login is written to security_events with its reason
- Session tokens are returned once and stored only as SHA-256 hashes
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..extensions import db
from ..choices import ActivityType
from ..services import activity_service
from ..services import auth_service
from ..services import session_service
from ..services import login_throttle_service
from ..services import permission_service
from ..services.auth_service import InvalidCredentialsError, LoginError, PasswordValidationError
from ..decorators import bearer_token, require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate a user and create a session token.

    The token must be sent as "Authorization: Bearer <token>" on protected routes.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username") or data.get("identifier")
    password = data.get("password")

    if not username or not password:
        return jsonify({"error": "username and password required"}), 400
    username = str(username).strip()

    user_agent = request.headers.get("User-Agent")
    ip_address = request.remote_addr

    # Failures count against the account whichever alias (name or id) was typed
    target = auth_service.find_user_by_login(username)
    target_id = target.id if target else None

    is_locked, seconds_remaining = login_throttle_service.is_account_locked(username, target_id)
    if is_locked:
        minutes_remaining = (seconds_remaining // 60) + 1 if seconds_remaining else 15
        return jsonify({
            "error": "Account temporarily locked due to too many failed login attempts",
            "locked": True,
            "retry_after_seconds": seconds_remaining,
            "retry_after_minutes": minutes_remaining,
        }), 429

    try:
        user = auth_service.authenticate(username, str(password))
    except LoginError as e:
        db.session.rollback()
        failed_count = login_throttle_service.record_failed_attempt(
            username,
            user_id=e.user_id if e.user_id is not None else target_id,
            ip_address=ip_address,
            user_agent=user_agent,
            reason=e.reason,
        )
        body = {"error": str(e)}
        remaining = login_throttle_service.MAX_FAILED_ATTEMPTS - failed_count
        if e.status_code == 401 and 0 < remaining <= 3:
            body["warning"] = f"{remaining} attempts remaining before account lockout"
        return jsonify(body), e.status_code

    try:
        login_throttle_service.record_successful_login(
            user_id=user.id,
            identifier=username,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        session, token = session_service.create_session(
            user_id=user.id,
            user_agent=user_agent,
            ip_address=ip_address,
        )
        activity_service.record_activity(user, ActivityType.USER, "User logged in", {"user_id": user.id})
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info("User %s logged in", user.username)
    body = permission_service.describe_access(user)
    body.update({
        "token": token,
        "session": session.to_dict(),
        "message": "Login successful",
    })
    return jsonify(body), 200


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the session used for this request."""
    session_service.revoke_session(bearer_token(), reason="User logout")
    permission_service.log_security_event(
        user_id=g.current_user.id,
        event_type="LOGOUT",
        success=True,
        resource=request.path,
        action=request.method,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify({"message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user with resolved permission roles, codes and visible modules."""
    body = permission_service.describe_access(g.current_user)
    body["session"] = g.session_context.session.to_dict()
    return jsonify(body), 200


@auth_bp.post("/change-password")
@require_auth
def change_password_route():
    data = request.get_json(silent=True) or {}
    user = g.current_user
    try:
        auth_service.change_password(
            user,
            old_password=data.get("old_password"),
            new_password=data.get("new_password"),
        )
    except InvalidCredentialsError as e:
        permission_service.log_security_event(
            user_id=user.id,
            event_type="PASSWORD_CHANGED",
            success=False,
            resource=request.path,
            action=request.method,
            reason=str(e),
            ip_address=request.remote_addr,
            user_agent=request.headers.get("User-Agent"),
        )
        return jsonify({"error": str(e)}), 401
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400

    permission_service.log_security_event(
        user_id=user.id,
        event_type="PASSWORD_CHANGED",
        success=True,
        resource=request.path,
        action=request.method,
        ip_address=request.remote_addr,
        user_agent=request.headers.get("User-Agent"),
    )
    return jsonify({"message": "Password changed"}), 200
