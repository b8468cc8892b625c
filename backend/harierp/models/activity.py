from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_utc_z


class ActivityLog(db.Model):
    """
    Business activity feed shown on the dashboards.

    Append-only; written in the same transaction as the change it describes.
    """
    __tablename__ = "activity_logs"
    __table_args__ = (
        db.Index("ix_activity_logs_type_created", "activity_type", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    user_name = db.Column(db.String(64), nullable=True)

    activity_type = db.Column(db.String(64), nullable=False, index=True)
    message = db.Column(db.String(500), nullable=False)
    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "activity_type": self.activity_type,
            "message": self.message,
            "details": self.details,
            "created_at": to_utc_z(self.created_at),
        }
