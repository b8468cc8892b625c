# Overview: Store items (raw materials) and their usage log.

from __future__ import annotations

import logging

from ..extensions import db
from ..models import LedgerAccount, RawMaterial, RawMaterialUsage
from ..choices import RAW_MATERIAL_CATEGORIES, UNITS_OF_MEASURE, USAGE_DEPARTMENTS, ActivityType
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_date,
    coerce_float,
    coerce_int,
    enforce_amount,
    enforce_non_negative,
    validate_payload,
)
from . import activity_service
from .concurrency import lock_for_update, run_with_retry
from .document_service import next_document_number
from harierp.time_utils import utcnow

logger = logging.getLogger(__name__)

RAW_MATERIAL_POLICY = ModelValidationPolicy(
    writable_fields={
        "sku",
        "name",
        "description",
        "category",
        "unit_of_measure",
        "litres",
        "stock",
        "cost_price_cents",
        "low_stock_threshold",
        "image_url",
        "supplier_id",
    },
    required_on_create={"sku", "name", "category", "unit_of_measure"},
    choices={
        "category": RAW_MATERIAL_CATEGORIES,
        "unit_of_measure": UNITS_OF_MEASURE,
    },
)


def _enforce_rules(patch: dict) -> None:
    enforce_amount(patch, "cost_price_cents")
    enforce_non_negative(patch, "stock", "litres", "low_stock_threshold")
    if patch.get("supplier_id") is not None:
        if db.session.get(LedgerAccount, patch["supplier_id"]) is None:
            raise ValidationError("supplier_id does not match a ledger account")


def _ensure_unique_sku(sku: str, exclude_id: int | None = None) -> None:
    query = db.session.query(RawMaterial).filter(RawMaterial.sku == sku)
    if exclude_id is not None:
        query = query.filter(RawMaterial.id != exclude_id)
    if query.first():
        raise ConflictError(f"A raw material with SKU {sku} already exists")


def list_raw_materials(*, category: str | None = None, search: str | None = None) -> list[RawMaterial]:
    query = db.session.query(RawMaterial)
    if category:
        query = query.filter(RawMaterial.category == category)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(RawMaterial.name.ilike(like), RawMaterial.sku.ilike(like)))
    return query.order_by(RawMaterial.name.asc(), RawMaterial.id.asc()).all()


def get_raw_material(material_id: int) -> RawMaterial:
    material = db.session.get(RawMaterial, material_id)
    if material is None:
        raise NotFoundError("Raw material not found")
    return material


def get_by_sku(sku: str) -> RawMaterial | None:
    return db.session.query(RawMaterial).filter_by(sku=sku).first()


def create_raw_material(payload: dict) -> RawMaterial:
    patch = validate_payload(model=RawMaterial, payload=payload, policy=RAW_MATERIAL_POLICY, partial=False)
    _enforce_rules(patch)
    _ensure_unique_sku(patch["sku"])
    material = RawMaterial(**patch)
    db.session.add(material)
    db.session.commit()
    return material


def update_raw_material(material_id: int, payload: dict) -> RawMaterial:
    """
    Store edits may correct stock directly (stock counts); there is no
    separate adjustment log for raw materials.
    """
    material = get_raw_material(material_id)
    patch = validate_payload(model=RawMaterial, payload=payload, policy=RAW_MATERIAL_POLICY, partial=True)
    _enforce_rules(patch)
    if "sku" in patch:
        _ensure_unique_sku(patch["sku"], exclude_id=material.id)
    for key, value in patch.items():
        setattr(material, key, value)
    db.session.commit()
    return material


def lock_raw_material(material_id: int) -> RawMaterial:
    material = lock_for_update(db.session.query(RawMaterial).filter_by(id=material_id)).first()
    if material is None:
        raise NotFoundError(f"Raw material {material_id} not found")
    return material


def consume(
    material: RawMaterial,
    *,
    quantity: float,
    department: str,
    usage_date,
    usage_number: str,
    actor=None,
    batch_id: str | None = None,
    notes: str | None = None,
) -> RawMaterialUsage:
    """
    Deduct a locked material's stock and write the usage row.

    The caller holds the lock and commits.
    """
    if quantity <= 0:
        raise ValidationError("quantity_used must be > 0")
    available = material.stock or 0.0
    if quantity > available:
        raise ConflictError(
            f"Insufficient stock for {material.name}. Required: {quantity:g}, Available: {available:g}."
        )
    material.stock = available - quantity

    usage = RawMaterialUsage(
        usage_number=usage_number,
        raw_material_id=material.id,
        raw_material_name=material.name,
        quantity_used=quantity,
        unit_of_measure=material.unit_of_measure,
        department=department,
        usage_date=usage_date,
        batch_id=batch_id,
        notes=notes,
        recorded_by_user_id=actor.id if actor is not None else None,
        recorded_by=actor.username if actor is not None else None,
    )
    db.session.add(usage)
    db.session.flush()
    return usage


def record_usage(payload: dict, *, actor=None) -> RawMaterialUsage:
    """Issue a raw material to a department (USE- number)."""
    payload = payload or {}
    for key in ("raw_material_id", "quantity_used", "department"):
        if payload.get(key) in (None, ""):
            raise ValidationError(f"{key} is required")
    material_id = coerce_int("raw_material_id", payload["raw_material_id"])
    quantity = coerce_float("quantity_used", payload["quantity_used"])
    department = payload["department"]
    if department not in USAGE_DEPARTMENTS:
        raise ValidationError(f"department must be one of: {', '.join(USAGE_DEPARTMENTS)}")
    usage_date = coerce_date("usage_date", payload["usage_date"]) if payload.get("usage_date") else utcnow().date()
    notes = str(payload["notes"]).strip() if payload.get("notes") else None

    def _op():
        try:
            material = lock_raw_material(material_id)
            usage = consume(
                material,
                quantity=quantity,
                department=department,
                usage_date=usage_date,
                usage_number=next_document_number("MATERIAL_USAGE"),
                actor=actor,
                notes=notes,
            )
            activity_service.record_activity(
                actor,
                ActivityType.MATERIAL_USAGE,
                f"Issued {quantity:g} {material.unit_of_measure} of {material.name} to {department}",
                {"usage_number": usage.usage_number, "raw_material_id": material.id},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return usage

    return run_with_retry(_op)


def list_usages(*, raw_material_id=None, department: str | None = None, limit=None) -> list[RawMaterialUsage]:
    query = db.session.query(RawMaterialUsage)
    if raw_material_id not in (None, ""):
        query = query.filter(RawMaterialUsage.raw_material_id == coerce_int("raw_material_id", raw_material_id))
    if department:
        query = query.filter(RawMaterialUsage.department == department)
    return (
        query.order_by(RawMaterialUsage.usage_date.desc(), RawMaterialUsage.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def add_stock(material: RawMaterial, quantity: float) -> None:
    """Increase a locked material's stock (deliveries, purchase receipts)."""
    material.stock = (material.stock or 0.0) + quantity


def list_low_stock() -> list[RawMaterial]:
    return (
        db.session.query(RawMaterial)
        .filter(
            RawMaterial.low_stock_threshold.isnot(None),
            RawMaterial.stock <= RawMaterial.low_stock_threshold,
        )
        .order_by(RawMaterial.name.asc())
        .all()
    )
