"""
Login Throttling Service

WHY: Prevent brute-force password attacks by limiting failed login attempts.

- Tracks failed attempts per account; a user name and its numeric id share
  one counter. Identifiers that match no account are counted as typed
- Lockout after MAX_FAILED_ATTEMPTS failures within LOCKOUT_WINDOW
- Uses the security_events table for tracking
"""

import logging
from datetime import timedelta

from ..extensions import db
from ..models import SecurityEvent
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)

MAX_FAILED_ATTEMPTS = 10
LOCKOUT_WINDOW = timedelta(minutes=15)
LOCKOUT_DURATION = timedelta(minutes=15)


def _failed_logins(identifier: str, user_id: int | None):
    query = db.session.query(SecurityEvent).filter(SecurityEvent.event_type == "LOGIN_FAILED")
    if user_id is not None:
        return query.filter(SecurityEvent.user_id == user_id)
    return query.filter(SecurityEvent.action == identifier)


def get_recent_failed_attempts(identifier: str, user_id: int | None = None) -> int:
    """
    Count LOGIN_FAILED events within LOCKOUT_WINDOW.

    With user_id, every failure against that account counts whatever alias was
    typed; otherwise the identifier stored in SecurityEvent.action is matched.
    """
    cutoff = utcnow() - LOCKOUT_WINDOW
    return _failed_logins(identifier, user_id).filter(SecurityEvent.occurred_at >= cutoff).count()


def is_account_locked(identifier: str, user_id: int | None = None) -> tuple[bool, int | None]:
    """
    Returns:
    - (True, seconds_remaining) if locked
    - (False, None) if not locked
    """
    if get_recent_failed_attempts(identifier, user_id) < MAX_FAILED_ATTEMPTS:
        return False, None

    most_recent = _failed_logins(identifier, user_id).order_by(SecurityEvent.occurred_at.desc()).first()

    if most_recent:
        lockout_end = most_recent.occurred_at + LOCKOUT_DURATION
        now = utcnow()
        if now < lockout_end:
            return True, int((lockout_end - now).total_seconds())

    return False, None


def record_failed_attempt(
    identifier: str,
    *,
    user_id: int | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    reason: str = "Invalid credentials"
) -> int:
    """
    Record a failed login attempt.

    Returns the total number of recent failed attempts.
    """
    event = SecurityEvent(
        user_id=user_id,
        event_type="LOGIN_FAILED",
        resource="/api/auth/login",
        action=(identifier or "")[:128],
        success=False,
        reason=reason,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
        occurred_at=utcnow()
    )
    db.session.add(event)
    db.session.commit()

    logger.warning("Failed login for %r: %s", identifier, reason)
    return get_recent_failed_attempts(identifier, user_id)


def record_successful_login(
    user_id: int,
    identifier: str,
    ip_address: str | None = None,
    user_agent: str | None = None
) -> None:
    """Adds a LOGIN_SUCCESS event; committed with the new session."""
    db.session.add(SecurityEvent(
        user_id=user_id,
        event_type="LOGIN_SUCCESS",
        resource="/api/auth/login",
        action=(identifier or "")[:128],
        success=True,
        reason=None,
        ip_address=ip_address,
        user_agent=(user_agent or "")[:512] or None,
        occurred_at=utcnow()
    ))
