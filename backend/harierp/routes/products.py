# Overview: Flask API routes for products operations; parses input and returns JSON responses.

"""
Finished-goods catalogue.

SECURITY: All routes require authentication.
- Read operations require VIEW_PRODUCTS
- Write operations require MANAGE_PRODUCTS
"""
from flask import Blueprint, request, g

from ..services import products_service
from ..decorators import require_auth, require_permission

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_permission("VIEW_PRODUCTS")
def list_products():
    """
    Query params:
    - category: exact category
    - search: matches name or SKU
    - low_stock: "true" for products at or below their threshold
    """
    products = products_service.list_products(
        category=request.args.get("category"),
        search=request.args.get("search"),
        low_stock=request.args.get("low_stock", "false").lower() == "true",
    )
    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/<int:product_id>")
@require_auth
@require_permission("VIEW_PRODUCTS")
def get_product(product_id: int):
    return products_service.get_product(product_id).to_dict()


@products_bp.post("")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def create_product_route():
    """A non-zero opening stock is recorded as an INITIAL_STOCK log."""
    payload = request.get_json(silent=True) or {}
    product = products_service.create_product(payload, actor=g.current_user)
    return product.to_dict(), 201


@products_bp.put("/<int:product_id>")
@require_auth
@require_permission("MANAGE_PRODUCTS")
def update_product_route(product_id: int):
    """Stock is not writable here; it moves through stock logs, sales and approvals."""
    payload = request.get_json(silent=True) or {}
    return products_service.update_product(product_id, payload).to_dict()
