# Overview: Sales of finished goods; each line deducts stock with a SALE_DEDUCTION log.

from __future__ import annotations

import logging

from ..extensions import db
from ..models import Sale, SaleItem
from ..choices import SALE_PAYMENT_METHODS, SALE_STATUSES, ActivityType, AdjustmentType
from ..validation import (
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_date,
    coerce_float,
    coerce_int,
    enforce_amount,
    require_items,
)
from . import activity_service, ledger_service, stock_service
from .concurrency import run_with_retry
from .document_service import next_document_number
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)


def parse_lines(items) -> list[dict]:
    """Validate [{product_id, quantity, unit_price_cents}] lines."""
    lines = []
    for item in require_items({"items": items}):
        for key in ("product_id", "quantity", "unit_price_cents"):
            if item.get(key) in (None, ""):
                raise ValidationError(f"Each item requires {key}")
        quantity = coerce_float("quantity", item["quantity"])
        if quantity <= 0:
            raise ValidationError("quantity must be > 0")
        unit_price = coerce_int("unit_price_cents", item["unit_price_cents"])
        enforce_amount({"unit_price_cents": unit_price}, "unit_price_cents")
        lines.append({
            "product_id": coerce_int("product_id", item["product_id"]),
            "quantity": quantity,
            "unit_price_cents": unit_price,
        })
    return lines


def compute_totals(lines: list[dict], *, discount_cents: int = 0, tax_cents: int = 0) -> dict:
    """Line totals, subtotal and grand total in kobo."""
    subtotal = 0
    for line in lines:
        line["line_total_cents"] = int(round(line["quantity"] * line["unit_price_cents"]))
        subtotal += line["line_total_cents"]
    total = subtotal - discount_cents + tax_cents
    if total < 0:
        raise ValidationError("discount_cents cannot exceed the subtotal")
    return {"subtotal_cents": subtotal, "total_cents": total}


def _optional_amount(payload: dict, key: str) -> int:
    if payload.get(key) in (None, ""):
        return 0
    amount = coerce_int(key, payload[key])
    enforce_amount({key: amount}, key)
    return amount


def create_sale(payload: dict, *, actor=None) -> Sale:
    """
    Record a sale atomically.

    Each line locks its product, refuses insufficient stock, deducts stock and
    writes a SALE_DEDUCTION log linked to the sale.
    """
    payload = payload or {}
    if payload.get("customer_id") in (None, ""):
        raise ValidationError("customer_id is required")
    payment_method = payload.get("payment_method")
    if payment_method not in SALE_PAYMENT_METHODS:
        raise ValidationError(f"payment_method must be one of: {', '.join(SALE_PAYMENT_METHODS)}")
    status = payload.get("status") or "Completed"
    if status not in SALE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(SALE_STATUSES)}")
    if status == "Cancelled":
        raise ValidationError("A new sale cannot be created as Cancelled")

    lines = parse_lines(payload.get("items"))
    discount = _optional_amount(payload, "discount_cents")
    tax = _optional_amount(payload, "tax_cents")
    totals = compute_totals(lines, discount_cents=discount, tax_cents=tax)
    sale_date = coerce_date("sale_date", payload["sale_date"]) if payload.get("sale_date") else utcnow().date()
    notes = str(payload["notes"]).strip() if payload.get("notes") else None

    customer = ledger_service.get_account(coerce_int("customer_id", payload["customer_id"]))

    def _op():
        try:
            sale = Sale(
                sale_number=next_document_number("SALE"),
                sale_date=sale_date,
                customer_id=customer.id,
                customer_name=customer.name,
                price_level=customer.price_level,
                subtotal_cents=totals["subtotal_cents"],
                discount_cents=discount,
                tax_cents=tax,
                total_cents=totals["total_cents"],
                payment_method=payment_method,
                status=status,
                notes=notes,
                created_by_user_id=actor.id if actor is not None else None,
            )
            db.session.add(sale)
            db.session.flush()

            for line in lines:
                product = stock_service.lock_product(line["product_id"])
                stock_service.apply_stock_change(
                    product,
                    quantity=-line["quantity"],
                    adjustment_type=AdjustmentType.SALE_DEDUCTION,
                    notes=f"Sale {sale.sale_number}",
                    actor=actor,
                    adjustment_date=sale_date,
                    sale_id=sale.id,
                )
                sale.items.append(SaleItem(
                    product_id=product.id,
                    product_name=product.name,
                    unit_of_measure=product.unit_of_measure,
                    quantity=line["quantity"],
                    unit_price_cents=line["unit_price_cents"],
                    line_total_cents=line["line_total_cents"],
                ))

            activity_service.record_activity(
                actor,
                ActivityType.SALE,
                f"Sale {sale.sale_number} to {customer.name}",
                {"sale_id": sale.id, "total_cents": sale.total_cents},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Sale %s recorded (%s kobo)", sale.sale_number, sale.total_cents)
        return sale

    return run_with_retry(_op)


def list_sales(*, customer_id=None, limit=None) -> list[Sale]:
    query = db.session.query(Sale)
    if customer_id not in (None, ""):
        query = query.filter(Sale.customer_id == coerce_int("customer_id", customer_id))
    return (
        query.order_by(Sale.sale_date.desc(), Sale.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_sale(sale_id: int) -> Sale:
    sale = db.session.get(Sale, sale_id)
    if sale is None:
        raise NotFoundError("Sale not found")
    return sale
