# Overview: Finished-goods stock log and the Finish Bay approval flow.

"""
Product stock adjustments.

Invariants:
- Product.stock only changes together with a ProductStockLog row, in one
  transaction, with previous_stock/new_stock recorded from the locked product.
- Stock never goes negative.
- PENDING_APPROVAL submissions do not touch stock until approved; approval
  turns them into PRODUCTION_YIELD, rejection into REJECTED_BY_INVENTORY.
- Batches are all-or-nothing.
"""

from __future__ import annotations

import logging
from datetime import date

from ..extensions import db
from ..models import Product, ProductStockLog
from ..choices import (
    ADJUSTMENT_TYPES,
    CLIENT_ADJUSTMENT_TYPES,
    NEGATIVE_ADJUSTMENT_TYPES,
    PROTECTED_ADJUSTMENT_TYPES,
    UNAPPLIED_ADJUSTMENT_TYPES,
    ActivityType,
    AdjustmentType,
)
from ..validation import (
    ConflictError,
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_date,
    coerce_float,
    coerce_int,
    require_items,
)
from . import activity_service
from .concurrency import lock_for_update, run_with_retry
from .document_service import next_document_number
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)

ALREADY_PROCESSED_MESSAGE = "This submission has already been processed and is no longer pending approval."


def _format_qty(value: float):
    return int(value) if float(value).is_integer() else value


def insufficient_stock_message(product_name: str, required: float, available: float) -> str:
    return (
        f"Insufficient stock for product {product_name}. "
        f"Required: {_format_qty(required)}, Available: {_format_qty(available)}."
    )


def lock_product(product_id: int) -> Product:
    product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
    if product is None:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def _lock_log(log_id: int) -> ProductStockLog:
    log = lock_for_update(db.session.query(ProductStockLog).filter_by(id=log_id)).first()
    if log is None:
        raise NotFoundError("Stock log not found")
    return log


def check_sign(adjustment_type: str, quantity: float) -> None:
    """Quantity must be non-zero, negative for subtractions and positive otherwise."""
    if quantity == 0:
        raise ValidationError("quantity_adjusted cannot be zero")
    if adjustment_type in NEGATIVE_ADJUSTMENT_TYPES:
        if quantity > 0:
            raise ValidationError(f"quantity_adjusted must be negative for {adjustment_type}")
    elif quantity < 0:
        raise ValidationError(f"quantity_adjusted must be positive for {adjustment_type}")


def apply_stock_change(
    product: Product,
    *,
    quantity: float,
    adjustment_type: str,
    notes: str | None = None,
    actor=None,
    adjustment_date: date | None = None,
    sale_id: int | None = None,
) -> ProductStockLog:
    """
    Change a locked product's stock and write the matching log.

    The caller must hold the product row lock and commit.
    """
    previous = product.stock or 0.0
    new_stock = previous + quantity
    if new_stock < 0:
        raise ConflictError(insufficient_stock_message(product.name, abs(quantity), previous))

    product.stock = new_stock
    log = ProductStockLog(
        log_number=next_document_number("STOCK_LOG"),
        product_id=product.id,
        product_name=product.name,
        quantity_adjusted=quantity,
        adjustment_type=adjustment_type,
        adjustment_date=adjustment_date or utcnow().date(),
        notes=notes,
        previous_stock=previous,
        new_stock=new_stock,
        sale_id=sale_id,
        recorded_by_user_id=actor.id if actor is not None else None,
        recorded_by=actor.username if actor is not None else None,
    )
    db.session.add(log)
    db.session.flush()
    return log


def _record_pending(product: Product, *, quantity: float, notes, actor, adjustment_date) -> ProductStockLog:
    """Pending submission: stock untouched, new_stock is the projection."""
    current = product.stock or 0.0
    log = ProductStockLog(
        log_number=next_document_number("STOCK_LOG"),
        product_id=product.id,
        product_name=product.name,
        quantity_adjusted=quantity,
        adjustment_type=AdjustmentType.PENDING_APPROVAL,
        adjustment_date=adjustment_date or utcnow().date(),
        notes=notes,
        previous_stock=current,
        new_stock=current + quantity,
        recorded_by_user_id=actor.id if actor is not None else None,
        recorded_by=actor.username if actor is not None else None,
    )
    db.session.add(log)
    db.session.flush()
    return log


def _parse_item(item: dict, *, forced_type: str | None = None) -> dict:
    if item.get("product_id") in (None, ""):
        raise ValidationError("product_id is required")
    if item.get("quantity_adjusted") in (None, ""):
        raise ValidationError("quantity_adjusted is required")

    adjustment_type = forced_type or item.get("adjustment_type")
    if adjustment_type not in CLIENT_ADJUSTMENT_TYPES:
        raise ValidationError(f"adjustment_type must be one of: {', '.join(CLIENT_ADJUSTMENT_TYPES)}")

    quantity = coerce_float("quantity_adjusted", item["quantity_adjusted"])
    check_sign(adjustment_type, quantity)

    adjustment_date = None
    if item.get("adjustment_date"):
        adjustment_date = coerce_date("adjustment_date", item["adjustment_date"])

    notes = item.get("notes")
    return {
        "product_id": coerce_int("product_id", item["product_id"]),
        "quantity": quantity,
        "adjustment_type": adjustment_type,
        "adjustment_date": adjustment_date,
        "notes": str(notes).strip() if notes else None,
    }


def _save_items(parsed: list[dict], actor) -> list[ProductStockLog]:
    logs = []
    for entry in parsed:
        product = lock_product(entry["product_id"])
        if entry["adjustment_type"] == AdjustmentType.PENDING_APPROVAL:
            log = _record_pending(
                product,
                quantity=entry["quantity"],
                notes=entry["notes"],
                actor=actor,
                adjustment_date=entry["adjustment_date"],
            )
        else:
            log = apply_stock_change(
                product,
                quantity=entry["quantity"],
                adjustment_type=entry["adjustment_type"],
                notes=entry["notes"],
                actor=actor,
                adjustment_date=entry["adjustment_date"],
            )
        logs.append(log)
    return logs


def save_stock_log_batch(items, *, actor=None) -> list[ProductStockLog]:
    """
    Record several adjustments atomically.

    Raises ValidationError for bad input, NotFoundError for unknown products
    and ConflictError when an item would drive stock negative. Nothing is
    written unless every item succeeds.
    """
    parsed = [_parse_item(item) for item in require_items({"items": items})]

    def _op():
        try:
            logs = _save_items(parsed, actor)
            activity_service.record_activity(
                actor,
                ActivityType.STOCK_ADDITION,
                f"Recorded {len(logs)} stock adjustment(s)",
                {"log_numbers": [log.log_number for log in logs]},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return logs

    return run_with_retry(_op)


def submit_stock(items, *, actor=None) -> list[ProductStockLog]:
    """Production/packaging hands finished goods to the Finish Bay."""
    parsed = [
        _parse_item(item, forced_type=AdjustmentType.PENDING_APPROVAL)
        for item in require_items({"items": items})
    ]

    def _op():
        try:
            logs = _save_items(parsed, actor)
            activity_service.record_activity(
                actor,
                ActivityType.PACKAGING_SUBMISSION,
                f"Submitted {len(logs)} item(s) for inventory approval",
                {"log_numbers": [log.log_number for log in logs]},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return logs

    return run_with_retry(_op)


def approve_submission(log_id: int, *, actor=None, quantity=None, notes: str | None = None) -> ProductStockLog:
    """
    Accept a pending submission into stock.

    One short transaction: lock the log, check it is still pending, lock the
    product, add the quantity, mark the log PRODUCTION_YIELD, commit.
    """
    approved_qty = None
    if quantity not in (None, ""):
        approved_qty = coerce_float("quantity_adjusted", quantity)
        if approved_qty <= 0:
            raise ValidationError("quantity_adjusted must be positive")

    def _op():
        try:
            log = _lock_log(log_id)
            if log.adjustment_type != AdjustmentType.PENDING_APPROVAL:
                raise ConflictError(ALREADY_PROCESSED_MESSAGE)

            product = None
            if log.product_id is not None:
                product = lock_for_update(
                    db.session.query(Product).filter_by(id=log.product_id)
                ).first()
            if product is None:
                raise NotFoundError(f"Product with ID '{log.product_id}' not found")

            qty = approved_qty if approved_qty is not None else log.quantity_adjusted
            previous = product.stock or 0.0
            product.stock = previous + qty

            log.adjustment_type = AdjustmentType.PRODUCTION_YIELD
            log.quantity_adjusted = qty
            log.previous_stock = previous
            log.new_stock = product.stock
            if notes not in (None, ""):
                log.notes = str(notes).strip()
            log.approved_by_user_id = actor.id if actor is not None else None
            log.approved_by = actor.username if actor is not None else None
            log.approved_at = utcnow()
            log.updated_at = utcnow()

            activity_service.record_activity(
                actor,
                ActivityType.INVENTORY_APPROVAL,
                f"Approved {_format_qty(qty)} x {product.name} ({log.log_number})",
                {"log_id": log.id, "product_id": product.id, "quantity": qty},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Stock submission %s approved: +%s %s", log.log_number, qty, product.name)
        return log

    return run_with_retry(_op)


def reject_submission(log_id: int, *, actor=None, notes: str | None = None) -> ProductStockLog:
    """Refuse a pending submission; stock is untouched."""
    def _op():
        try:
            log = _lock_log(log_id)
            if log.adjustment_type != AdjustmentType.PENDING_APPROVAL:
                raise ConflictError(ALREADY_PROCESSED_MESSAGE)

            log.adjustment_type = AdjustmentType.REJECTED_BY_INVENTORY
            log.new_stock = log.previous_stock
            if notes not in (None, ""):
                log.notes = str(notes).strip()
            log.approved_by_user_id = actor.id if actor is not None else None
            log.approved_by = actor.username if actor is not None else None
            log.approved_at = utcnow()
            log.updated_at = utcnow()

            activity_service.record_activity(
                actor,
                ActivityType.INVENTORY_APPROVAL,
                f"Rejected submission {log.log_number} ({log.product_name})",
                {"log_id": log.id},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info("Stock submission %s rejected", log.log_number)
        return log

    return run_with_retry(_op)


def delete_stock_log(log_id: int, *, actor=None) -> None:
    """
    Remove a log, reversing its effect on stock.

    Sale deductions and returns belong to their documents and cannot be
    deleted here. Pending/rejected logs never touched stock.
    """
    def _op():
        try:
            log = _lock_log(log_id)
            if log.adjustment_type in PROTECTED_ADJUSTMENT_TYPES:
                raise ConflictError(
                    f"{log.adjustment_type} logs cannot be deleted directly; reverse the originating document"
                )

            if log.adjustment_type not in UNAPPLIED_ADJUSTMENT_TYPES and log.product_id is not None:
                product = lock_for_update(
                    db.session.query(Product).filter_by(id=log.product_id)
                ).first()
                if product is not None:
                    reversed_stock = (product.stock or 0.0) - log.quantity_adjusted
                    if reversed_stock < 0:
                        raise ConflictError(
                            f"Deleting this log would make stock of {product.name} negative "
                            f"(current: {_format_qty(product.stock)}, reversal: {_format_qty(-log.quantity_adjusted)})"
                        )
                    product.stock = reversed_stock

            activity_service.record_activity(
                actor,
                ActivityType.STOCK_ADDITION,
                f"Deleted stock log {log.log_number} ({log.product_name})",
                {"log_id": log.id, "adjustment_type": log.adjustment_type},
            )
            db.session.delete(log)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    run_with_retry(_op)


def update_stock_log(log_id: int, payload: dict, *, actor=None) -> ProductStockLog:
    """
    Edit quantity, date or notes of a log.

    Editing the quantity of an applied manual log re-applies the difference
    to stock; pending logs only update their projection.
    """
    payload = payload or {}
    allowed = {"quantity_adjusted", "adjustment_date", "notes"}
    for key in payload:
        if key not in allowed:
            raise ValidationError(f"Field not allowed: {key}")

    new_qty = None
    if payload.get("quantity_adjusted") not in (None, ""):
        new_qty = coerce_float("quantity_adjusted", payload["quantity_adjusted"])
    new_date = coerce_date("adjustment_date", payload["adjustment_date"]) if payload.get("adjustment_date") else None

    def _op():
        try:
            log = _lock_log(log_id)

            if new_qty is not None and new_qty != log.quantity_adjusted:
                if log.adjustment_type in PROTECTED_ADJUSTMENT_TYPES or log.adjustment_type == AdjustmentType.REJECTED_BY_INVENTORY:
                    raise ConflictError(f"Quantity of {log.adjustment_type} logs cannot be edited")
                check_sign(log.adjustment_type, new_qty)

                if log.adjustment_type == AdjustmentType.PENDING_APPROVAL:
                    log.new_stock = (log.previous_stock or 0.0) + new_qty
                else:
                    product = lock_product(log.product_id)
                    diff = new_qty - log.quantity_adjusted
                    if (product.stock or 0.0) + diff < 0:
                        raise ConflictError(insufficient_stock_message(product.name, abs(diff), product.stock or 0.0))
                    product.stock = (product.stock or 0.0) + diff
                    log.new_stock = (log.previous_stock or 0.0) + new_qty
                log.quantity_adjusted = new_qty

            if new_date is not None:
                log.adjustment_date = new_date
            if "notes" in payload:
                log.notes = str(payload["notes"]).strip() if payload["notes"] else None
            log.updated_at = utcnow()

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return log

    return run_with_retry(_op)


def get_stock_log(log_id: int) -> ProductStockLog:
    log = db.session.get(ProductStockLog, log_id)
    if log is None:
        raise NotFoundError("Stock log not found")
    return log


def list_stock_logs(*, adjustment_type: str | None = None, product_id=None, limit=None) -> list[ProductStockLog]:
    query = db.session.query(ProductStockLog)
    if adjustment_type:
        if adjustment_type not in ADJUSTMENT_TYPES:
            raise ValidationError(f"Unknown adjustment type: {adjustment_type}")
        query = query.filter(ProductStockLog.adjustment_type == adjustment_type)
    if product_id not in (None, ""):
        query = query.filter(ProductStockLog.product_id == coerce_int("product_id", product_id))
    return (
        query.order_by(ProductStockLog.adjustment_date.desc(), ProductStockLog.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def list_pending_submissions() -> list[ProductStockLog]:
    return (
        db.session.query(ProductStockLog)
        .filter(ProductStockLog.adjustment_type == AdjustmentType.PENDING_APPROVAL)
        .order_by(ProductStockLog.created_at.asc(), ProductStockLog.id.asc())
        .all()
    )


def list_submission_history(*, limit=None) -> list[ProductStockLog]:
    """Pending, approved and rejected submissions, newest first."""
    return (
        db.session.query(ProductStockLog)
        .filter(ProductStockLog.adjustment_type.in_((
            AdjustmentType.PENDING_APPROVAL,
            AdjustmentType.PRODUCTION_YIELD,
            AdjustmentType.REJECTED_BY_INVENTORY,
        )))
        .order_by(ProductStockLog.updated_at.desc(), ProductStockLog.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def count_pending_submissions() -> int:
    return (
        db.session.query(ProductStockLog)
        .filter(ProductStockLog.adjustment_type == AdjustmentType.PENDING_APPROVAL)
        .count()
    )
