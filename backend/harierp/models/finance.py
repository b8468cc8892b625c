from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_iso_date, to_utc_z


class LedgerAccount(db.Model):
    """
    Any counterparty or book account: customers, suppliers, sales reps, banks.

    price_level selects the product price tier used when selling to the account.
    """
    __tablename__ = "ledger_accounts"
    __table_args__ = (
        db.Index("ix_ledger_accounts_type_name", "account_type", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    account_code = db.Column(db.String(64), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False)
    account_type = db.Column(db.String(32), nullable=False)

    price_level = db.Column(db.String(64), nullable=True)
    zone = db.Column(db.String(64), nullable=True)
    credit_period = db.Column(db.Integer, nullable=True)  # days
    credit_limit_cents = db.Column(db.Integer, nullable=True)

    address = db.Column(db.Text, nullable=True)
    phone = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    bank_details = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<LedgerAccount id={self.id} code={self.account_code!r} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "account_code": self.account_code,
            "name": self.name,
            "account_type": self.account_type,
            "price_level": self.price_level,
            "zone": self.zone,
            "credit_period": self.credit_period,
            "credit_limit_cents": self.credit_limit_cents,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "bank_details": self.bank_details,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class Receipt(db.Model):
    """Payment received against a ledger account."""
    __tablename__ = "receipts"
    __table_args__ = (
        db.Index("ix_receipts_account_date", "ledger_account_id", "receipt_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    receipt_number = db.Column(db.String(32), nullable=False, unique=True, index=True)
    receipt_date = db.Column(db.Date, nullable=False)

    ledger_account_id = db.Column(db.Integer, db.ForeignKey("ledger_accounts.id"), nullable=False, index=True)
    ledger_account_name = db.Column(db.String(255), nullable=False)

    amount_cents = db.Column(db.Integer, nullable=False)
    payment_method = db.Column(db.String(32), nullable=False)
    bank_name = db.Column(db.String(64), nullable=True)
    reference_number = db.Column(db.String(128), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    ledger_account = db.relationship("LedgerAccount", backref=db.backref("receipts", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "receipt_number": self.receipt_number,
            "receipt_date": to_iso_date(self.receipt_date),
            "ledger_account_id": self.ledger_account_id,
            "ledger_account_name": self.ledger_account_name,
            "amount_cents": self.amount_cents,
            "payment_method": self.payment_method,
            "bank_name": self.bank_name,
            "reference_number": self.reference_number,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class CreditNote(db.Model):
    """
    Credit issued to a ledger account (returned goods, damages, commissions, ...).

    items is an optional list of {product_id, product_name, quantity, unit_price_cents}.
    """
    __tablename__ = "credit_notes"
    __table_args__ = (
        db.Index("ix_credit_notes_account_date", "ledger_account_id", "credit_note_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    credit_note_number = db.Column(db.String(32), nullable=False, unique=True, index=True)
    credit_note_date = db.Column(db.Date, nullable=False)

    ledger_account_id = db.Column(db.Integer, db.ForeignKey("ledger_accounts.id"), nullable=False, index=True)
    ledger_account_name = db.Column(db.String(255), nullable=False)

    amount_cents = db.Column(db.Integer, nullable=False)
    reason = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=True)
    related_invoice_id = db.Column(db.Integer, db.ForeignKey("invoices.id"), nullable=True)
    items = db.Column(db.JSON, nullable=True)

    created_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    ledger_account = db.relationship("LedgerAccount", backref=db.backref("credit_notes", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "credit_note_number": self.credit_note_number,
            "credit_note_date": to_iso_date(self.credit_note_date),
            "ledger_account_id": self.ledger_account_id,
            "ledger_account_name": self.ledger_account_name,
            "amount_cents": self.amount_cents,
            "reason": self.reason,
            "description": self.description,
            "related_invoice_id": self.related_invoice_id,
            "items": self.items or [],
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
