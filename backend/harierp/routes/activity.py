# Overview: Flask API routes for the activity feed and dashboard; parses input and returns JSON responses.

from flask import Blueprint, request

from ..services import activity_service, reporting_service
from ..decorators import require_auth, require_permission

activity_bp = Blueprint("activity", __name__, url_prefix="/api")


@activity_bp.get("/activity")
@require_auth
@require_permission("VIEW_ACTIVITY")
def list_activity():
    """Query params: type (activity type), limit (default 200). Newest first."""
    entries = activity_service.list_activity(
        activity_type=request.args.get("type"),
        limit=request.args.get("limit"),
    )
    return {"items": [e.to_dict() for e in entries], "count": len(entries)}


@activity_bp.get("/dashboard/summary")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard_summary():
    return reporting_service.dashboard_summary()
