# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication and user account service.

WHY: Every action must be attributable. Uses bcrypt for password hashing and
validates password strength on every new password.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters, upper, lower, digit and special character
- Session tokens managed separately (see session_service.py)
- Login accepts the user name or the numeric user id
"""

import logging
import re

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from ..permissions import validate_role, ASSIGNABLE_ROLES
from ..validation import ConflictError, NotFoundError, ValidationError, coerce_int
from . import activity_service, session_service
from ..choices import ActivityType
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


class LoginError(Exception):
    """
    Raised when a login attempt is refused.

    status_code is 401 for bad credentials and 403 for deactivated accounts;
    reason is the audit reason recorded on the LOGIN_FAILED event.
    """

    def __init__(self, message: str, *, status_code: int, reason: str, user_id: int | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.user_id = user_id


class InvalidCredentialsError(Exception):
    """Raised when a supplied current password is wrong."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str):
        raise PasswordValidationError("Password is required")

    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.?'\":{}|<>_\-+=]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    bcrypt.checkpw() compares in constant time.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        logger.warning("Unreadable password hash encountered")
        return False


def find_user_by_login(identifier: str) -> User | None:
    """Resolve a login identifier: exact user name first, then numeric id."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    user = db.session.query(User).filter_by(username=identifier).first()
    if user is None and identifier.isdigit():
        user = db.session.get(User, int(identifier))
    return user


def authenticate(identifier: str, password: str) -> User:
    """
    Check credentials and account status.

    Order matters: unknown user and wrong password both give 401 with the same
    message; only a correct password reveals that an account is deactivated.

    Raises LoginError on refusal. Updates last_login_at on success (not committed).
    """
    user = find_user_by_login(identifier)
    if user is None:
        raise LoginError("Invalid credentials", status_code=401, reason="User not found")

    if not verify_password(password, user.password_hash):
        raise LoginError(
            "Invalid credentials",
            status_code=401,
            reason="Incorrect password",
            user_id=user.id,
        )

    if not user.is_active:
        raise LoginError(
            "Your account has been deactivated. Please contact an administrator.",
            status_code=403,
            reason="Account deactivated",
            user_id=user.id,
        )

    user.last_login_at = utcnow()
    return user


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.username.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(*, username: str, password: str, role: str, actor: User | None = None) -> User:
    """
    Register a staff account.

    Raises:
        ValidationError: missing name or unknown role
        PasswordValidationError: weak password
        ConflictError: user name already taken
    """
    username = (username or "").strip()
    if not username:
        raise ValidationError("username is required")
    if len(username) > 64:
        raise ValidationError("username exceeds max length 64")
    if not validate_role(role):
        raise ValidationError(f"role must be one of: {', '.join(ASSIGNABLE_ROLES)}")

    if db.session.query(User).filter_by(username=username).first():
        raise ConflictError("A user with this name already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        is_active=True,
    )
    db.session.add(user)
    db.session.flush()

    activity_service.record_activity(
        actor,
        ActivityType.USER,
        f"Registered user {username} ({role})",
        {"user_id": user.id},
    )
    db.session.commit()
    logger.info("User %s registered with role %s", username, role)
    return user


def change_password(user: User, *, old_password: str, new_password: str) -> None:
    """Raises InvalidCredentialsError or PasswordValidationError."""
    if not old_password or not new_password:
        raise ValidationError("old_password and new_password are required")
    if not verify_password(old_password, user.password_hash):
        raise InvalidCredentialsError("Incorrect current password")
    user.password_hash = hash_password(new_password)
    db.session.commit()


def reset_password(user_id: int, *, actor: User | None = None) -> User:
    """
    Set the configured default password and sign the user out everywhere.

    The user is expected to change it after the next login.
    """
    user = get_user(user_id)
    user.password_hash = hash_password(current_app.config["DEFAULT_RESET_PASSWORD"])
    session_service.revoke_all_user_sessions(user.id, reason="Password reset", commit=False)
    activity_service.record_activity(
        actor,
        ActivityType.USER,
        f"Reset password for {user.username}",
        {"user_id": user.id},
    )
    db.session.commit()
    logger.info("Password reset for user %s", user.username)
    return user


def set_users_active(entries: list, *, actor: User | None = None) -> list[User]:
    """
    Bulk activate/deactivate users in one transaction.

    entries: [{"id": 3, "is_active": false}, ...]. Any invalid entry fails the
    whole batch before anything is written. Deactivated users lose their sessions.
    """
    if not isinstance(entries, list) or not entries:
        raise ValidationError("users must be a non-empty list")

    changes: list[tuple[User, bool]] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each entry in users must be an object")
        if "id" not in entry or "is_active" not in entry:
            raise ValidationError("Each entry requires id and is_active")
        if not isinstance(entry["is_active"], bool):
            raise ValidationError("is_active must be a boolean")
        user = db.session.get(User, coerce_int("id", entry["id"]))
        if user is None:
            raise NotFoundError(f"User {entry['id']} not found")
        if actor is not None and user.id == actor.id and not entry["is_active"]:
            raise ValidationError("You cannot deactivate your own account")
        changes.append((user, entry["is_active"]))

    try:
        for user, is_active in changes:
            if user.is_active == is_active:
                continue
            user.is_active = is_active
            if not is_active:
                session_service.revoke_all_user_sessions(
                    user.id, reason="User account deactivated", commit=False
                )
            activity_service.record_activity(
                actor,
                ActivityType.USER,
                f"{'Activated' if is_active else 'Deactivated'} user {user.username}",
                {"user_id": user.id},
            )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    return [user for user, _ in changes]
