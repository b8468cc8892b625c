# Overview: Flask API routes for production batch operations; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import production_service
from ..decorators import require_auth, require_permission

production_bp = Blueprint("production", __name__, url_prefix="/api/production")


@production_bp.post("/batches")
@require_auth
@require_permission("CREATE_PRODUCTION_BATCH")
def create_batch():
    """
    Consume raw materials for a batch, all-or-nothing.

    Request body:
    {"batch_id": "B-0412", "production_date": "2024-05-01",
     "consumed_items": [{"material_id": 3, "quantity_used": 120}], "notes": "..."}
    """
    payload = request.get_json(silent=True) or {}
    return production_service.create_batch(payload, actor=g.current_user), 201


@production_bp.get("/batches")
@require_auth
@require_permission("VIEW_PRODUCTION")
def list_batches():
    batches = production_service.list_batches()
    return {"items": batches, "count": len(batches)}
