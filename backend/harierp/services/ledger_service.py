# Overview: Ledger accounts (customers, suppliers, sales reps, banks) and statements.

from __future__ import annotations

from ..extensions import db
from ..models import CreditNote, LedgerAccount, Receipt, Sale
from ..choices import LEDGER_ACCOUNT_TYPES, PRICE_LEVELS
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    enforce_amount,
    validate_payload,
)

LEDGER_ACCOUNT_POLICY = ModelValidationPolicy(
    writable_fields={
        "account_code",
        "name",
        "account_type",
        "price_level",
        "zone",
        "credit_period",
        "credit_limit_cents",
        "address",
        "phone",
        "email",
        "bank_details",
    },
    required_on_create={"account_code", "name", "account_type"},
    choices={
        "account_type": LEDGER_ACCOUNT_TYPES,
        "price_level": PRICE_LEVELS,
    },
)


def _enforce_rules(patch: dict) -> None:
    enforce_amount(patch, "credit_limit_cents")
    if patch.get("credit_period") is not None and patch["credit_period"] < 0:
        raise ValidationError("credit_period must be >= 0")


def _ensure_unique_code(code: str, exclude_id: int | None = None) -> None:
    query = db.session.query(LedgerAccount).filter(LedgerAccount.account_code == code)
    if exclude_id is not None:
        query = query.filter(LedgerAccount.id != exclude_id)
    if query.first():
        raise ConflictError(f"Account code {code} is already in use")


def list_accounts(*, account_type: str | None = None, search: str | None = None) -> list[LedgerAccount]:
    query = db.session.query(LedgerAccount)
    if account_type:
        query = query.filter(LedgerAccount.account_type == account_type)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(LedgerAccount.name.ilike(like), LedgerAccount.account_code.ilike(like)))
    return query.order_by(LedgerAccount.name.asc()).all()


def get_account(account_id: int) -> LedgerAccount:
    account = db.session.get(LedgerAccount, account_id)
    if account is None:
        raise NotFoundError("Ledger account not found")
    return account


def create_account(payload: dict) -> LedgerAccount:
    patch = validate_payload(model=LedgerAccount, payload=payload, policy=LEDGER_ACCOUNT_POLICY, partial=False)
    _enforce_rules(patch)
    _ensure_unique_code(patch["account_code"])
    account = LedgerAccount(**patch)
    db.session.add(account)
    db.session.commit()
    return account


def update_account(account_id: int, payload: dict) -> LedgerAccount:
    account = get_account(account_id)
    patch = validate_payload(model=LedgerAccount, payload=payload, policy=LEDGER_ACCOUNT_POLICY, partial=True)
    _enforce_rules(patch)
    if "account_code" in patch:
        _ensure_unique_code(patch["account_code"], exclude_id=account.id)
    for key, value in patch.items():
        setattr(account, key, value)
    db.session.commit()
    return account


def get_statement(account_id: int) -> dict:
    """
    Account statement: sales are debits, receipts and credit notes are credits.

    Entries are ordered by date then creation; balance is running debit - credit.
    Cancelled sales are excluded.
    """
    account = get_account(account_id)
    entries = []

    sales = db.session.query(Sale).filter(
        Sale.customer_id == account.id,
        Sale.status != "Cancelled",
    ).all()
    for sale in sales:
        entries.append({
            "date": sale.sale_date,
            "created_at": sale.created_at,
            "type": "Sale",
            "reference": sale.sale_number,
            "debit_cents": sale.total_cents,
            "credit_cents": 0,
        })

    for receipt in db.session.query(Receipt).filter(Receipt.ledger_account_id == account.id).all():
        entries.append({
            "date": receipt.receipt_date,
            "created_at": receipt.created_at,
            "type": "Receipt",
            "reference": receipt.receipt_number,
            "debit_cents": 0,
            "credit_cents": receipt.amount_cents,
        })

    for note in db.session.query(CreditNote).filter(CreditNote.ledger_account_id == account.id).all():
        entries.append({
            "date": note.credit_note_date,
            "created_at": note.created_at,
            "type": "Credit Note",
            "reference": note.credit_note_number,
            "debit_cents": 0,
            "credit_cents": note.amount_cents,
        })

    entries.sort(key=lambda e: (e["date"], e["created_at"] or e["date"]))

    balance = 0
    total_debit = 0
    total_credit = 0
    rows = []
    for entry in entries:
        balance += entry["debit_cents"] - entry["credit_cents"]
        total_debit += entry["debit_cents"]
        total_credit += entry["credit_cents"]
        rows.append({
            "date": entry["date"].isoformat(),
            "type": entry["type"],
            "reference": entry["reference"],
            "debit_cents": entry["debit_cents"],
            "credit_cents": entry["credit_cents"],
            "balance_cents": balance,
        })

    return {
        "account": account.to_dict(),
        "entries": rows,
        "total_debit_cents": total_debit,
        "total_credit_cents": total_credit,
        "balance_cents": balance,
    }
