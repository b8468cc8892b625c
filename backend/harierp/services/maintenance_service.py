# Overview: Retention cleanup for audit tables.

from __future__ import annotations

from datetime import timedelta

from ..extensions import db
from ..models import ActivityLog, SecurityEvent
from harierp.time_utils import utcnow


def cleanup_security_events(*, retention_days: int = 90) -> int:
    """Delete security events older than retention_days."""
    cutoff = utcnow() - timedelta(days=retention_days)
    deleted = db.session.query(SecurityEvent).filter(
        SecurityEvent.occurred_at < cutoff
    ).delete(synchronize_session=False)
    db.session.commit()
    return deleted


def cleanup_activity_logs(*, retention_days: int = 365) -> int:
    """Delete activity feed rows older than retention_days."""
    cutoff = utcnow() - timedelta(days=retention_days)
    deleted = db.session.query(ActivityLog).filter(
        ActivityLog.created_at < cutoff
    ).delete(synchronize_session=False)
    db.session.commit()
    return deleted
