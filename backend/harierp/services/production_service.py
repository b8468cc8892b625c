# Overview: Production batches (raw material consumption grouped by batch id).

from __future__ import annotations

import logging
from collections import OrderedDict

from ..extensions import db
from ..models import RawMaterialUsage
from ..choices import ActivityType
from ..validation import ConflictError, ValidationError, coerce_date, coerce_float, coerce_int, require_items
from . import activity_service, raw_material_service
from .concurrency import run_with_retry
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)

PRODUCTION_DEPARTMENT = "Production"


def create_batch(payload: dict, *, actor=None) -> dict:
    """
    Consume raw materials for one batch, all-or-nothing.

    Usage numbers are PROD-<batch_id>-<n>, department Production.
    """
    payload = payload or {}
    batch_id = str(payload.get("batch_id") or "").strip()
    if not batch_id:
        raise ValidationError("batch_id is required")
    if len(batch_id) > 48:
        raise ValidationError("batch_id exceeds max length 48")
    production_date = (
        coerce_date("production_date", payload["production_date"])
        if payload.get("production_date") else utcnow().date()
    )
    notes = str(payload["notes"]).strip() if payload.get("notes") else None

    consumed = []
    for item in require_items(payload, "consumed_items"):
        if item.get("material_id") in (None, "") or item.get("quantity_used") in (None, ""):
            raise ValidationError("Each consumed item requires material_id and quantity_used")
        quantity = coerce_float("quantity_used", item["quantity_used"])
        if quantity <= 0:
            raise ValidationError("quantity_used must be > 0")
        consumed.append((coerce_int("material_id", item["material_id"]), quantity))

    if db.session.query(RawMaterialUsage).filter_by(batch_id=batch_id).first():
        raise ConflictError(f"Production batch {batch_id} already exists")

    def _op():
        try:
            usages = []
            for n, (material_id, quantity) in enumerate(consumed, start=1):
                material = raw_material_service.lock_raw_material(material_id)
                usages.append(raw_material_service.consume(
                    material,
                    quantity=quantity,
                    department=PRODUCTION_DEPARTMENT,
                    usage_date=production_date,
                    usage_number=f"PROD-{batch_id}-{n}",
                    actor=actor,
                    batch_id=batch_id,
                    notes=notes,
                ))
            activity_service.record_activity(
                actor,
                ActivityType.PRODUCTION_BATCH,
                f"Production batch {batch_id} consumed {len(usages)} material(s)",
                {"batch_id": batch_id},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("Production batch %s recorded", batch_id)
        return _summarize(batch_id, usages)

    return run_with_retry(_op)


def _summarize(batch_id: str, usages: list[RawMaterialUsage]) -> dict:
    first = usages[0]
    return {
        "batch_id": batch_id,
        "production_date": first.usage_date.isoformat(),
        "notes": first.notes,
        "recorded_by": first.recorded_by,
        "item_count": len(usages),
        "total_quantity_used": sum(u.quantity_used for u in usages),
        "consumed_items": [u.to_dict() for u in usages],
    }


def list_batches() -> list[dict]:
    """Usages grouped by batch id, newest production date first."""
    usages = (
        db.session.query(RawMaterialUsage)
        .filter(RawMaterialUsage.batch_id.isnot(None))
        .order_by(RawMaterialUsage.usage_date.desc(), RawMaterialUsage.id.asc())
        .all()
    )
    grouped: "OrderedDict[str, list[RawMaterialUsage]]" = OrderedDict()
    for usage in usages:
        grouped.setdefault(usage.batch_id, []).append(usage)
    return [_summarize(batch_id, rows) for batch_id, rows in grouped.items()]
