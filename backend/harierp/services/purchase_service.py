# Overview: Purchase orders for store items and receiving into raw material stock.

from __future__ import annotations

import logging

from ..extensions import db
from ..models import PurchaseOrder, PurchaseOrderItem, RawMaterial
from ..choices import (
    PURCHASE_ORDER_STATUSES,
    RAW_MATERIAL_CATEGORIES,
    UNITS_OF_MEASURE,
    ActivityType,
    PurchaseOrderStatus,
)
from ..validation import (
    ConflictError,
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_date,
    coerce_float,
    coerce_int,
    enforce_amount,
    require_items,
)
from . import activity_service, ledger_service, raw_material_service
from .concurrency import lock_for_update, run_with_retry
from .document_service import next_document_number
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED)


def _parse_items(items) -> list[dict]:
    lines = []
    for item in require_items({"items": items}):
        name = str(item.get("product_name") or "").strip()
        if not name:
            raise ValidationError("Each item requires product_name")
        if item.get("quantity") in (None, "") or item.get("unit_cost_cents") in (None, ""):
            raise ValidationError("Each item requires quantity and unit_cost_cents")
        quantity = coerce_float("quantity", item["quantity"])
        if quantity <= 0:
            raise ValidationError("quantity must be > 0")
        unit_cost = coerce_int("unit_cost_cents", item["unit_cost_cents"])
        enforce_amount({"unit_cost_cents": unit_cost}, "unit_cost_cents")

        category = item.get("category") or None
        if category is not None and category not in RAW_MATERIAL_CATEGORIES:
            raise ValidationError(f"category must be one of: {', '.join(RAW_MATERIAL_CATEGORIES)}")
        unit = item.get("unit_of_measure") or None
        if unit is not None and unit not in UNITS_OF_MEASURE:
            raise ValidationError(f"unit_of_measure must be one of: {', '.join(UNITS_OF_MEASURE)}")

        lines.append({
            "product_name": name,
            "category": category,
            "unit_of_measure": unit,
            "quantity": quantity,
            "unit_cost_cents": unit_cost,
            "line_total_cents": int(round(quantity * unit_cost)),
        })
    return lines


def _charge(payload: dict, key: str, default: int = 0) -> int:
    if payload.get(key) in (None, ""):
        return default
    value = coerce_int(key, payload[key])
    enforce_amount({key: value}, key)
    return value


def _replace_items(po: PurchaseOrder, lines: list[dict]) -> None:
    po.items.clear()
    for line in lines:
        po.items.append(PurchaseOrderItem(**line))


def _recompute(po: PurchaseOrder, lines: list[dict]) -> None:
    po.subtotal_cents = sum(line["line_total_cents"] for line in lines)
    po.total_cents = po.subtotal_cents + po.shipping_cents + po.other_charges_cents


def _check_status(status: str) -> None:
    if status not in PURCHASE_ORDER_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PURCHASE_ORDER_STATUSES)}")
    if status == PurchaseOrderStatus.RECEIVED:
        raise ValidationError("Use the receive action to mark a purchase order as Received")


def create_purchase_order(payload: dict, *, actor=None) -> PurchaseOrder:
    payload = payload or {}
    if payload.get("supplier_id") in (None, ""):
        raise ValidationError("supplier_id is required")
    supplier = ledger_service.get_account(coerce_int("supplier_id", payload["supplier_id"]))
    lines = _parse_items(payload.get("items"))

    status = payload.get("status") or PurchaseOrderStatus.DRAFT
    _check_status(status)
    order_date = coerce_date("order_date", payload["order_date"]) if payload.get("order_date") else utcnow().date()
    expected = None
    if payload.get("expected_delivery_date"):
        expected = coerce_date("expected_delivery_date", payload["expected_delivery_date"])
        if expected < order_date:
            raise ValidationError("expected_delivery_date cannot be before order_date")

    try:
        po = PurchaseOrder(
            po_number=next_document_number("PURCHASE_ORDER"),
            order_date=order_date,
            expected_delivery_date=expected,
            supplier_id=supplier.id,
            supplier_name=supplier.name,
            shipping_cents=_charge(payload, "shipping_cents"),
            other_charges_cents=_charge(payload, "other_charges_cents"),
            status=status,
            notes=str(payload["notes"]).strip() if payload.get("notes") else None,
            created_by_user_id=actor.id if actor is not None else None,
        )
        _replace_items(po, lines)
        _recompute(po, lines)
        db.session.add(po)
        db.session.flush()

        activity_service.record_activity(
            actor,
            ActivityType.PURCHASE_ORDER,
            f"Purchase order {po.po_number} for {supplier.name}",
            {"purchase_order_id": po.id, "total_cents": po.total_cents},
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return po


def update_purchase_order(po_id: int, payload: dict, *, actor=None) -> PurchaseOrder:
    """Edit an open order; items, when given, replace the existing lines."""
    payload = payload or {}
    po = get_purchase_order(po_id)
    if po.status in CLOSED_STATUSES:
        raise ConflictError(f"Purchase order {po.po_number} is {po.status} and can no longer be edited")

    if payload.get("supplier_id") not in (None, ""):
        supplier = ledger_service.get_account(coerce_int("supplier_id", payload["supplier_id"]))
        po.supplier_id = supplier.id
        po.supplier_name = supplier.name
    if "status" in payload:
        _check_status(payload["status"])
        po.status = payload["status"]
    if payload.get("order_date"):
        po.order_date = coerce_date("order_date", payload["order_date"])
    if "expected_delivery_date" in payload:
        value = payload["expected_delivery_date"]
        po.expected_delivery_date = coerce_date("expected_delivery_date", value) if value else None
    if po.expected_delivery_date and po.expected_delivery_date < po.order_date:
        raise ValidationError("expected_delivery_date cannot be before order_date")
    if "notes" in payload:
        po.notes = str(payload["notes"]).strip() if payload["notes"] else None
    po.shipping_cents = _charge(payload, "shipping_cents", po.shipping_cents)
    po.other_charges_cents = _charge(payload, "other_charges_cents", po.other_charges_cents)

    if payload.get("items") is not None:
        lines = _parse_items(payload["items"])
        _replace_items(po, lines)
    else:
        lines = [item.to_dict() for item in po.items]
    _recompute(po, lines)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return po


def _next_generated_sku() -> str:
    """RM-0001 style SKU for materials created on receipt; skips SKUs taken by hand."""
    while True:
        sku = next_document_number("RAW_MATERIAL")
        if raw_material_service.get_by_sku(sku) is None:
            return sku


def _find_material_by_name(name: str) -> RawMaterial | None:
    query = db.session.query(RawMaterial).filter(db.func.lower(RawMaterial.name) == name.lower())
    return lock_for_update(query).first()


def receive_purchase_order(po_id: int, *, actor=None) -> PurchaseOrder:
    """
    Receive every line into store stock.

    Lines are matched to raw materials by name, case-insensitively; unknown
    names create a new raw material with a generated SKU.
    """

    def _op():
        try:
            po = lock_for_update(db.session.query(PurchaseOrder).filter_by(id=po_id)).first()
            if po is None:
                raise NotFoundError("Purchase order not found")
            if po.status in CLOSED_STATUSES:
                raise ConflictError(f"Purchase order {po.po_number} is already {po.status}")

            for item in po.items:
                material = _find_material_by_name(item.product_name)
                if material is None:
                    material = RawMaterial(
                        sku=_next_generated_sku(),
                        name=item.product_name,
                        category=item.category or "Other Supplies",
                        unit_of_measure=item.unit_of_measure or "Unit",
                        stock=0.0,
                        cost_price_cents=item.unit_cost_cents,
                        supplier_id=po.supplier_id,
                    )
                    db.session.add(material)
                    db.session.flush()
                    logger.info("Created raw material %s (%s) from %s", material.name, material.sku, po.po_number)
                raw_material_service.add_stock(material, item.quantity)
                item.raw_material_id = material.id

            po.status = PurchaseOrderStatus.RECEIVED
            po.received_at = utcnow()
            po.received_by_user_id = actor.id if actor is not None else None

            activity_service.record_activity(
                actor,
                ActivityType.STOCK_ADDITION,
                f"Received purchase order {po.po_number} from {po.supplier_name}",
                {"purchase_order_id": po.id, "items": len(po.items)},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Purchase order %s received", po.po_number)
        return po

    return run_with_retry(_op)


def list_purchase_orders(*, status: str | None = None, supplier_id=None, limit=None) -> list[PurchaseOrder]:
    query = db.session.query(PurchaseOrder)
    if status:
        query = query.filter(PurchaseOrder.status == status)
    if supplier_id not in (None, ""):
        query = query.filter(PurchaseOrder.supplier_id == coerce_int("supplier_id", supplier_id))
    return (
        query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_purchase_order(po_id: int) -> PurchaseOrder:
    po = db.session.get(PurchaseOrder, po_id)
    if po is None:
        raise NotFoundError("Purchase order not found")
    return po
