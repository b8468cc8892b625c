# Overview: Flask API routes for stock log operations; parses input and returns JSON responses.

"""
Product stock log and the Finish Bay approval flow.

- /api/stock-logs: manual adjustments, edits and reversals
- /api/stock-submissions: production/packaging submissions awaiting approval
"""
from flask import Blueprint, request, g, current_app

from ..services import stock_service
from ..decorators import require_auth, require_permission, require_any_permission

stock_logs_bp = Blueprint("stock_logs", __name__, url_prefix="/api")


def _logs(rows):
    return {"items": [row.to_dict() for row in rows], "count": len(rows)}


@stock_logs_bp.get("/stock-logs")
@require_auth
@require_permission("VIEW_STOCK_LOGS")
def list_stock_logs():
    """Query params: type, product_id, limit."""
    rows = stock_service.list_stock_logs(
        adjustment_type=request.args.get("type"),
        product_id=request.args.get("product_id"),
        limit=request.args.get("limit"),
    )
    return _logs(rows)


@stock_logs_bp.get("/stock-logs/<int:log_id>")
@require_auth
@require_permission("VIEW_STOCK_LOGS")
def get_stock_log(log_id: int):
    return stock_service.get_stock_log(log_id).to_dict()


@stock_logs_bp.post("/stock-logs/batch")
@require_auth
@require_permission("ADJUST_STOCK")
def save_batch():
    """
    Save several adjustments at once; all succeed or none do.

    Request body: {"items": [{"product_id", "quantity_adjusted", "adjustment_type", ...}]}
    """
    payload = request.get_json(silent=True) or {}
    rows = stock_service.save_stock_log_batch(payload.get("items"), actor=g.current_user)
    return _logs(rows), 201


@stock_logs_bp.patch("/stock-logs/<int:log_id>")
@require_auth
@require_permission("ADJUST_STOCK")
def update_stock_log(log_id: int):
    payload = request.get_json(silent=True) or {}
    return stock_service.update_stock_log(log_id, payload, actor=g.current_user).to_dict()


@stock_logs_bp.delete("/stock-logs/<int:log_id>")
@require_auth
@require_permission("ADJUST_STOCK")
def delete_stock_log(log_id: int):
    stock_service.delete_stock_log(log_id, actor=g.current_user)
    return {"ok": True}, 200


@stock_logs_bp.post("/stock-logs/<int:log_id>/approve")
@require_auth
@require_permission("APPROVE_STOCK")
def approve(log_id: int):
    """Body (optional): {"quantity_adjusted": corrected quantity, "notes": "..."}"""
    payload = request.get_json(silent=True) or {}
    log = stock_service.approve_submission(
        log_id,
        actor=g.current_user,
        quantity=payload.get("quantity_adjusted"),
        notes=payload.get("notes"),
    )
    current_app.logger.info("Stock submission %s approved by %s", log.log_number, g.current_user.username)
    return log.to_dict()


@stock_logs_bp.post("/stock-logs/<int:log_id>/reject")
@require_auth
@require_permission("APPROVE_STOCK")
def reject(log_id: int):
    payload = request.get_json(silent=True) or {}
    log = stock_service.reject_submission(log_id, actor=g.current_user, notes=payload.get("notes"))
    return log.to_dict()


@stock_logs_bp.post("/stock-submissions")
@require_auth
@require_permission("SUBMIT_STOCK")
def submit():
    """Submissions never touch stock until Finish Bay approves them."""
    payload = request.get_json(silent=True) or {}
    rows = stock_service.submit_stock(payload.get("items"), actor=g.current_user)
    return _logs(rows), 201


@stock_logs_bp.get("/stock-submissions/pending")
@require_auth
@require_any_permission("APPROVE_STOCK", "SUBMIT_STOCK")
def pending():
    return _logs(stock_service.list_pending_submissions())


@stock_logs_bp.get("/stock-submissions/history")
@require_auth
@require_any_permission("APPROVE_STOCK", "SUBMIT_STOCK")
def history():
    return _logs(stock_service.list_submission_history(limit=request.args.get("limit")))
