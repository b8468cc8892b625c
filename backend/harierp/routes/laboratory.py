# Overview: Flask API routes for laboratory test operations; parses input and returns JSON responses.

from flask import Blueprint, request, g

from ..services import lab_service
from ..decorators import require_auth, require_permission

laboratory_bp = Blueprint("laboratory", __name__, url_prefix="/api/lab-tests")


@laboratory_bp.get("")
@require_auth
@require_permission("VIEW_LAB")
def list_lab_tests():
    """Query params: batch_number, status (overall status), limit."""
    tests = lab_service.list_lab_tests(
        batch_number=request.args.get("batch_number"),
        status=request.args.get("status"),
        limit=request.args.get("limit"),
    )
    return {"items": [t.to_dict() for t in tests], "count": len(tests)}


@laboratory_bp.get("/<int:test_id>")
@require_auth
@require_permission("VIEW_LAB")
def get_lab_test(test_id: int):
    return lab_service.get_lab_test(test_id).to_dict()


@laboratory_bp.post("")
@require_auth
@require_permission("MANAGE_LAB")
def create_lab_test():
    payload = request.get_json(silent=True) or {}
    return lab_service.create_lab_test(payload, actor=g.current_user).to_dict(), 201
