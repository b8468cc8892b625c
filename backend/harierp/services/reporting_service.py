# Overview: Dashboard aggregates across stock, sales, receipts and tanks.

from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from ..models import Product, Receipt, Sale
from . import intake_service, raw_material_service, stock_service
from harierp.time_utils import start_of_month, to_utc_z, utcnow


def _sales_since(since) -> dict:
    count, total = (
        db.session.query(func.count(Sale.id), func.coalesce(func.sum(Sale.total_cents), 0))
        .filter(Sale.sale_date >= since, Sale.status != "Cancelled")
        .one()
    )
    return {"count": int(count or 0), "total_cents": int(total or 0)}


def dashboard_summary() -> dict:
    """Headline numbers for the dashboard landing page."""
    now = utcnow()
    today = now.date()
    month_start = start_of_month(now).date()

    low_products = (
        db.session.query(Product)
        .filter(Product.low_stock_threshold.isnot(None), Product.stock <= Product.low_stock_threshold)
        .order_by(Product.name.asc())
        .all()
    )
    low_materials = raw_material_service.list_low_stock()

    receipts_month = (
        db.session.query(func.coalesce(func.sum(Receipt.amount_cents), 0))
        .filter(Receipt.receipt_date >= month_start)
        .scalar()
    )

    return {
        "generated_at": to_utc_z(now),
        "product_count": db.session.query(func.count(Product.id)).scalar() or 0,
        "low_stock_products": [
            {"id": p.id, "name": p.name, "stock": p.stock, "low_stock_threshold": p.low_stock_threshold}
            for p in low_products
        ],
        "low_stock_raw_materials": [
            {"id": m.id, "name": m.name, "stock": m.stock, "low_stock_threshold": m.low_stock_threshold}
            for m in low_materials
        ],
        "pending_approvals": stock_service.count_pending_submissions(),
        "sales_today": _sales_since(today),
        "sales_this_month": _sales_since(month_start),
        "receipts_this_month_cents": int(receipts_month or 0),
        "tank_levels": intake_service.tank_levels(),
    }
