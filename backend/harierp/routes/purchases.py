# Overview: Flask API routes for purchase order operations; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..services import purchase_service
from ..decorators import require_auth, require_permission

purchases_bp = Blueprint("purchases", __name__, url_prefix="/api/purchase-orders")


@purchases_bp.get("")
@require_auth
@require_permission("VIEW_PURCHASE_ORDERS")
def list_purchase_orders():
    orders = purchase_service.list_purchase_orders(
        status=request.args.get("status"),
        supplier_id=request.args.get("supplier_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [o.to_dict() for o in orders], "count": len(orders)}


@purchases_bp.get("/<int:po_id>")
@require_auth
@require_permission("VIEW_PURCHASE_ORDERS")
def get_purchase_order(po_id: int):
    return purchase_service.get_purchase_order(po_id).to_dict()


@purchases_bp.post("")
@require_auth
@require_permission("MANAGE_PURCHASE_ORDERS")
def create_purchase_order():
    payload = request.get_json(silent=True) or {}
    return purchase_service.create_purchase_order(payload, actor=g.current_user).to_dict(), 201


@purchases_bp.put("/<int:po_id>")
@require_auth
@require_permission("MANAGE_PURCHASE_ORDERS")
def update_purchase_order(po_id: int):
    payload = request.get_json(silent=True) or {}
    return purchase_service.update_purchase_order(po_id, payload, actor=g.current_user).to_dict()


@purchases_bp.post("/<int:po_id>/receive")
@require_auth
@require_permission("RECEIVE_PURCHASE_ORDERS")
def receive_purchase_order(po_id: int):
    """Adds every line to store stock and marks the order Received."""
    po = purchase_service.receive_purchase_order(po_id, actor=g.current_user)
    current_app.logger.info("Purchase order %s received by %s", po.po_number, g.current_user.username)
    return po.to_dict()
