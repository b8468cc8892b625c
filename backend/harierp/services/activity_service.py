# Overview: Append-only business activity feed.

from __future__ import annotations

from ..extensions import db
from ..models import ActivityLog
from ..validation import clamp_limit


def record_activity(actor, activity_type: str, message: str, details: dict | None = None) -> ActivityLog:
    """
    Add an activity row to the current transaction.

    Not committed here: the row is written (or rolled back) together with the
    business change it describes.
    """
    entry = ActivityLog(
        user_id=actor.id if actor is not None else None,
        user_name=actor.username if actor is not None else "system",
        activity_type=activity_type,
        message=message[:500],
        details=details,
    )
    db.session.add(entry)
    return entry


def list_activity(*, activity_type: str | None = None, limit=None) -> list[ActivityLog]:
    query = db.session.query(ActivityLog)
    if activity_type:
        query = query.filter(ActivityLog.activity_type == activity_type)
    return (
        query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )
