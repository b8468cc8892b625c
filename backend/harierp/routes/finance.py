# Overview: Flask API routes for receipts and credit notes; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import finance_service
from ..decorators import require_auth, require_permission

finance_bp = Blueprint("finance", __name__, url_prefix="/api")


# =============================================================================
# RECEIPTS
# =============================================================================

@finance_bp.get("/receipts")
@require_auth
@require_permission("VIEW_RECEIPTS")
def list_receipts():
    receipts = finance_service.list_receipts(
        ledger_account_id=request.args.get("ledger_account_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [r.to_dict() for r in receipts], "count": len(receipts)}


@finance_bp.get("/receipts/<int:receipt_id>")
@require_auth
@require_permission("VIEW_RECEIPTS")
def get_receipt(receipt_id: int):
    return finance_service.get_receipt(receipt_id).to_dict()


@finance_bp.post("/receipts")
@require_auth
@require_permission("CREATE_RECEIPT")
def create_receipt():
    payload = request.get_json(silent=True) or {}
    return finance_service.create_receipt(payload, actor=g.current_user).to_dict(), 201


# =============================================================================
# CREDIT NOTES
# =============================================================================

@finance_bp.get("/credit-notes")
@require_auth
@require_permission("VIEW_CREDIT_NOTES")
def list_credit_notes():
    notes = finance_service.list_credit_notes(
        ledger_account_id=request.args.get("ledger_account_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [n.to_dict() for n in notes], "count": len(notes)}


@finance_bp.get("/credit-notes/<int:note_id>")
@require_auth
@require_permission("VIEW_CREDIT_NOTES")
def get_credit_note(note_id: int):
    return finance_service.get_credit_note(note_id).to_dict()


@finance_bp.post("/credit-notes")
@require_auth
@require_permission("CREATE_CREDIT_NOTE")
def create_credit_note():
    payload = request.get_json(silent=True) or {}
    return finance_service.create_credit_note(payload, actor=g.current_user).to_dict(), 201
