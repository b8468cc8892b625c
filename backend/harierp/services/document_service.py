# Overview: Human-readable document numbers (LOG-000001, INV-0001, ...).

from __future__ import annotations

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import DocumentSequence


class DocumentSequenceError(Exception):
    """Raised when document sequence operations fail."""
    pass


# document_type -> (prefix, zero padding)
DOCUMENT_PREFIXES = {
    "STOCK_LOG": ("LOG", 6),
    "SALE": ("SALE", 4),
    "INVOICE": ("INV", 4),
    "RECEIPT": ("RCT", 4),
    "CREDIT_NOTE": ("CN", 4),
    "PURCHASE_ORDER": ("PO", 4),
    "MATERIAL_USAGE": ("USE", 5),
    "RAW_MATERIAL": ("RM", 4),
}


def _current_number(document_type: str) -> int:
    return (
        db.session.query(DocumentSequence.next_number)
        .filter_by(document_type=document_type)
        .scalar()
    )


def next_document_number(document_type: str) -> str:
    """
    Atomically allocate the next document number for a type.

    The UPDATE ... SET next_number = next_number + 1 takes the row lock, so two
    concurrent transactions can never read the same value. Runs inside the
    caller's transaction: a rollback also gives the number back.
    """
    if document_type not in DOCUMENT_PREFIXES:
        raise DocumentSequenceError(f"Unknown document type: {document_type}")
    prefix, pad = DOCUMENT_PREFIXES[document_type]

    stmt = (
        update(DocumentSequence)
        .where(DocumentSequence.document_type == document_type)
        .values(next_number=DocumentSequence.next_number + 1)
    )

    result = db.session.execute(stmt)
    if result.rowcount:
        next_num = _current_number(document_type) - 1
    else:
        # First number of this type; a concurrent first insert loses on the unique key
        try:
            with db.session.begin_nested():
                db.session.add(DocumentSequence(document_type=document_type, next_number=2))
            next_num = 1
        except IntegrityError:
            result = db.session.execute(stmt)
            if not result.rowcount:
                raise DocumentSequenceError(f"Could not allocate {document_type} number")
            next_num = _current_number(document_type) - 1

    return f"{prefix}-{next_num:0{pad}d}"
