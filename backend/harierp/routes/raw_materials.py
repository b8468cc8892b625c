# Overview: Flask API routes for raw material (store) operations; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import raw_material_service
from ..decorators import require_auth, require_permission

raw_materials_bp = Blueprint("raw_materials", __name__, url_prefix="/api/raw-materials")


@raw_materials_bp.get("")
@require_auth
@require_permission("VIEW_RAW_MATERIALS")
def list_raw_materials():
    """Query params: category, search. Each item includes supplier_name."""
    materials = raw_material_service.list_raw_materials(
        category=request.args.get("category"),
        search=request.args.get("search"),
    )
    return {"items": [m.to_dict() for m in materials], "count": len(materials)}


@raw_materials_bp.get("/<int:material_id>")
@require_auth
@require_permission("VIEW_RAW_MATERIALS")
def get_raw_material(material_id: int):
    return raw_material_service.get_raw_material(material_id).to_dict()


@raw_materials_bp.post("")
@require_auth
@require_permission("MANAGE_RAW_MATERIALS")
def create_raw_material():
    payload = request.get_json(silent=True) or {}
    return raw_material_service.create_raw_material(payload).to_dict(), 201


@raw_materials_bp.put("/<int:material_id>")
@require_auth
@require_permission("MANAGE_RAW_MATERIALS")
def update_raw_material(material_id: int):
    payload = request.get_json(silent=True) or {}
    return raw_material_service.update_raw_material(material_id, payload).to_dict()


@raw_materials_bp.post("/usage")
@require_auth
@require_permission("RECORD_MATERIAL_USAGE")
def record_usage():
    """
    Request body:
    {"raw_material_id": 4, "quantity_used": 20, "department": "Production", "usage_date": "2024-05-01"}
    """
    payload = request.get_json(silent=True) or {}
    usage = raw_material_service.record_usage(payload, actor=g.current_user)
    return usage.to_dict(), 201


@raw_materials_bp.get("/usage")
@require_auth
@require_permission("VIEW_RAW_MATERIALS")
def list_usage():
    usages = raw_material_service.list_usages(
        raw_material_id=request.args.get("raw_material_id"),
        department=request.args.get("department"),
        limit=request.args.get("limit"),
    )
    return {"items": [u.to_dict() for u in usages], "count": len(usages)}
