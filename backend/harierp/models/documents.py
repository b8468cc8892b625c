from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_utc_z


class DocumentSequence(db.Model):
    """
    Atomic document number sequences (LOG-, INV-, RCT-, CN-, PO-, USE-).

    WHY: Two clerks saving at the same moment must never receive the same number.
    """
    __tablename__ = "document_sequences"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String(32), nullable=False, unique=True, index=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "document_type": self.document_type,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
