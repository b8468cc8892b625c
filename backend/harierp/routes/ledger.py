# Overview: Flask API routes for ledger account operations; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import ledger_service
from ..decorators import require_auth, require_permission

ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/ledger-accounts")


@ledger_bp.get("")
@require_auth
@require_permission("VIEW_LEDGER_ACCOUNTS")
def list_accounts():
    """Query params: type (account type), search (name or code)."""
    accounts = ledger_service.list_accounts(
        account_type=request.args.get("type"),
        search=request.args.get("search"),
    )
    return {"items": [a.to_dict() for a in accounts], "count": len(accounts)}


@ledger_bp.get("/<int:account_id>")
@require_auth
@require_permission("VIEW_LEDGER_ACCOUNTS")
def get_account(account_id: int):
    return ledger_service.get_account(account_id).to_dict()


@ledger_bp.post("")
@require_auth
@require_permission("MANAGE_LEDGER_ACCOUNTS")
def create_account():
    payload = request.get_json(silent=True) or {}
    return ledger_service.create_account(payload).to_dict(), 201


@ledger_bp.put("/<int:account_id>")
@require_auth
@require_permission("MANAGE_LEDGER_ACCOUNTS")
def update_account(account_id: int):
    payload = request.get_json(silent=True) or {}
    return ledger_service.update_account(account_id, payload).to_dict()


@ledger_bp.get("/<int:account_id>/statement")
@require_auth
@require_permission("VIEW_LEDGER_ACCOUNTS")
def get_statement(account_id: int):
    """Sales (debits), receipts and credit notes (credits) with a running balance."""
    return ledger_service.get_statement(account_id)
