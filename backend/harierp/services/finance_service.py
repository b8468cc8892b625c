# Overview: Receipts and credit notes against ledger accounts.

from __future__ import annotations

from ..extensions import db
from ..models import CreditNote, Invoice, Receipt
from ..choices import BANK_NAMES, CREDIT_NOTE_REASONS, RECEIPT_PAYMENT_METHODS, ActivityType
from ..validation import (
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_float,
    coerce_int,
    enforce_amount,
    validate_payload,
)
from . import activity_service, ledger_service
from .document_service import next_document_number
from harierp.time_utils import utcnow

RECEIPT_POLICY = ModelValidationPolicy(
    writable_fields={
        "receipt_date",
        "ledger_account_id",
        "amount_cents",
        "payment_method",
        "bank_name",
        "reference_number",
        "notes",
    },
    required_on_create={"ledger_account_id", "amount_cents", "payment_method"},
    choices={
        "payment_method": RECEIPT_PAYMENT_METHODS,
        "bank_name": BANK_NAMES,
    },
)

CREDIT_NOTE_POLICY = ModelValidationPolicy(
    writable_fields={
        "credit_note_date",
        "ledger_account_id",
        "amount_cents",
        "reason",
        "description",
        "related_invoice_id",
        "items",
    },
    required_on_create={"ledger_account_id", "amount_cents", "reason"},
    choices={"reason": CREDIT_NOTE_REASONS},
)


def create_receipt(payload: dict, *, actor=None) -> Receipt:
    patch = validate_payload(model=Receipt, payload=payload, policy=RECEIPT_POLICY, partial=False)
    enforce_amount(patch, "amount_cents", positive=True)
    account = ledger_service.get_account(patch["ledger_account_id"])

    receipt = Receipt(
        receipt_number=next_document_number("RECEIPT"),
        receipt_date=patch.pop("receipt_date", None) or utcnow().date(),
        ledger_account_name=account.name,
        created_by_user_id=actor.id if actor is not None else None,
        **patch,
    )
    db.session.add(receipt)
    activity_service.record_activity(
        actor,
        ActivityType.RECEIPT,
        f"Receipt {receipt.receipt_number} from {account.name}",
        {"amount_cents": receipt.amount_cents},
    )
    db.session.commit()
    return receipt


def list_receipts(*, ledger_account_id=None, limit=None) -> list[Receipt]:
    query = db.session.query(Receipt)
    if ledger_account_id not in (None, ""):
        query = query.filter(Receipt.ledger_account_id == coerce_int("ledger_account_id", ledger_account_id))
    return (
        query.order_by(Receipt.receipt_date.desc(), Receipt.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_receipt(receipt_id: int) -> Receipt:
    receipt = db.session.get(Receipt, receipt_id)
    if receipt is None:
        raise NotFoundError("Receipt not found")
    return receipt


def _clean_credit_items(items) -> list[dict]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError("items must be a list")
    cleaned = []
    for item in items:
        if not isinstance(item, dict) or not str(item.get("product_name") or "").strip():
            raise ValidationError("Each credit note item needs a product_name")
        quantity = coerce_float("quantity", item.get("quantity"))
        unit_price = coerce_int("unit_price_cents", item.get("unit_price_cents"))
        if quantity <= 0:
            raise ValidationError("quantity must be > 0")
        enforce_amount({"unit_price_cents": unit_price}, "unit_price_cents")
        cleaned.append({
            "product_id": item.get("product_id"),
            "product_name": str(item["product_name"]).strip(),
            "quantity": quantity,
            "unit_price_cents": unit_price,
            "line_total_cents": int(round(quantity * unit_price)),
        })
    return cleaned


def create_credit_note(payload: dict, *, actor=None) -> CreditNote:
    patch = validate_payload(model=CreditNote, payload=payload, policy=CREDIT_NOTE_POLICY, partial=False)
    enforce_amount(patch, "amount_cents", positive=True)
    account = ledger_service.get_account(patch["ledger_account_id"])
    if patch.get("related_invoice_id") is not None:
        if db.session.get(Invoice, patch["related_invoice_id"]) is None:
            raise ValidationError("related_invoice_id does not match an invoice")
    patch["items"] = _clean_credit_items(patch.get("items"))

    note = CreditNote(
        credit_note_number=next_document_number("CREDIT_NOTE"),
        credit_note_date=patch.pop("credit_note_date", None) or utcnow().date(),
        ledger_account_name=account.name,
        created_by_user_id=actor.id if actor is not None else None,
        **patch,
    )
    db.session.add(note)
    activity_service.record_activity(
        actor,
        ActivityType.CREDIT_NOTE,
        f"Credit note {note.credit_note_number} for {account.name} ({note.reason})",
        {"amount_cents": note.amount_cents},
    )
    db.session.commit()
    return note


def list_credit_notes(*, ledger_account_id=None, limit=None) -> list[CreditNote]:
    query = db.session.query(CreditNote)
    if ledger_account_id not in (None, ""):
        query = query.filter(CreditNote.ledger_account_id == coerce_int("ledger_account_id", ledger_account_id))
    return (
        query.order_by(CreditNote.credit_note_date.desc(), CreditNote.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_credit_note(note_id: int) -> CreditNote:
    note = db.session.get(CreditNote, note_id)
    if note is None:
        raise NotFoundError("Credit note not found")
    return note
