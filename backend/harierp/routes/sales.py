# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

"""
Sales of finished goods to ledger-account customers.

Each sale deducts product stock line by line (SALE_DEDUCTION logs); the
whole sale is one transaction.
"""
from flask import Blueprint, request, g, current_app

from ..services import sales_service
from ..decorators import require_auth, require_permission

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
@require_auth
@require_permission("CREATE_SALE")
def create_sale():
    """
    Request body:
    {
        "customer_id": 7,
        "sale_date": "2024-05-01",
        "items": [{"product_id": 1, "quantity": 10, "unit_price_cents": 150000}],
        "discount_cents": 0,
        "tax_cents": 0,
        "payment_method": "Transfer",
        "notes": "..."
    }
    """
    payload = request.get_json(silent=True) or {}
    sale = sales_service.create_sale(payload, actor=g.current_user)
    current_app.logger.info("Sale %s created by %s", sale.sale_number, g.current_user.username)
    return sale.to_dict(), 201


@sales_bp.get("")
@require_auth
@require_permission("VIEW_SALES")
def list_sales():
    sales = sales_service.list_sales(
        customer_id=request.args.get("customer_id"),
        limit=request.args.get("limit"),
    )
    return {"items": [s.to_dict() for s in sales], "count": len(sales)}


@sales_bp.get("/<int:sale_id>")
@require_auth
@require_permission("VIEW_SALES")
def get_sale(sale_id: int):
    return sales_service.get_sale(sale_id).to_dict()
