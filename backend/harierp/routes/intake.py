# Overview: Flask API routes for milk and raw water intake; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import intake_service
from ..decorators import require_auth, require_permission

intake_bp = Blueprint("intake", __name__, url_prefix="/api")


# =============================================================================
# MILK SUPPLIERS
# =============================================================================

@intake_bp.get("/milk-suppliers")
@require_auth
@require_permission("VIEW_LAB")
def list_milk_suppliers():
    suppliers = intake_service.list_milk_suppliers(supplier_type=request.args.get("type"))
    return {"items": [s.to_dict() for s in suppliers], "count": len(suppliers)}


@intake_bp.get("/milk-suppliers/<int:supplier_id>")
@require_auth
@require_permission("VIEW_LAB")
def get_milk_supplier(supplier_id: int):
    return intake_service.get_milk_supplier(supplier_id).to_dict()


@intake_bp.post("/milk-suppliers")
@require_auth
@require_permission("MANAGE_LAB")
def create_milk_supplier():
    payload = request.get_json(silent=True) or {}
    return intake_service.create_milk_supplier(payload).to_dict(), 201


@intake_bp.put("/milk-suppliers/<int:supplier_id>")
@require_auth
@require_permission("MANAGE_LAB")
def update_milk_supplier(supplier_id: int):
    payload = request.get_json(silent=True) or {}
    return intake_service.update_milk_supplier(supplier_id, payload).to_dict()


# =============================================================================
# DELIVERIES
# =============================================================================

@intake_bp.post("/intake/milk")
@require_auth
@require_permission("RECORD_INTAKE")
def record_milk():
    payload = request.get_json(silent=True) or {}
    return intake_service.record_delivery("MILK", payload, actor=g.current_user).to_dict(), 201


@intake_bp.post("/intake/water")
@require_auth
@require_permission("RECORD_INTAKE")
def record_water():
    payload = request.get_json(silent=True) or {}
    return intake_service.record_delivery("WATER", payload, actor=g.current_user).to_dict(), 201


@intake_bp.get("/intake/deliveries")
@require_auth
@require_permission("VIEW_LAB")
def list_deliveries():
    """Query params: kind (milk|water), supplier_id, limit."""
    deliveries = intake_service.list_deliveries(
        kind=request.args.get("kind"),
        supplier_id=request.args.get("supplier_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [d.to_dict() for d in deliveries], "count": len(deliveries)}


@intake_bp.get("/intake/deliveries/<int:delivery_pk>")
@require_auth
@require_permission("VIEW_LAB")
def get_delivery(delivery_pk: int):
    return intake_service.get_delivery(delivery_pk).to_dict()


@intake_bp.get("/intake/tanks/<kind>")
@require_auth
@require_permission("VIEW_LAB")
def get_tank(kind: str):
    tank = intake_service.get_tank(kind)
    return {
        "kind": kind.lower(),
        "sku": tank.sku,
        "name": tank.name,
        "level": tank.stock,
        "unit_of_measure": tank.unit_of_measure,
    }
