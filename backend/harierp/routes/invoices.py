# Overview: Flask API routes for invoice operations; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import invoice_service
from ..decorators import require_auth, require_permission

invoices_bp = Blueprint("invoices", __name__, url_prefix="/api/invoices")


@invoices_bp.get("")
@require_auth
@require_permission("VIEW_INVOICES")
def list_invoices():
    """Query params: status, customer_id, limit. Newest issue date first."""
    invoices = invoice_service.list_invoices(
        status=request.args.get("status"),
        customer_id=request.args.get("customer_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [i.to_dict() for i in invoices], "count": len(invoices)}


@invoices_bp.get("/<int:invoice_id>")
@require_auth
@require_permission("VIEW_INVOICES")
def get_invoice(invoice_id: int):
    return invoice_service.get_invoice(invoice_id).to_dict()


@invoices_bp.post("")
@require_auth
@require_permission("MANAGE_INVOICES")
def create_invoice():
    """With sale_id, customer and items default from the sale."""
    payload = request.get_json(silent=True) or {}
    return invoice_service.create_invoice(payload, actor=g.current_user).to_dict(), 201


@invoices_bp.put("/<int:invoice_id>")
@require_auth
@require_permission("MANAGE_INVOICES")
def update_invoice(invoice_id: int):
    payload = request.get_json(silent=True) or {}
    return invoice_service.update_invoice(invoice_id, payload, actor=g.current_user).to_dict()
