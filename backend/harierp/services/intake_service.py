# Overview: Milk suppliers, milk collections and raw water deliveries.

"""
Intake deliveries add their litres to the matching tank raw material
(MILK_TANK_SKU / RAW_WATER_TANK_SKU) in the same transaction.
"""

from __future__ import annotations

import logging

from flask import current_app

from ..extensions import db
from ..models import IntakeDelivery, LedgerAccount, MilkSupplier, RawMaterial
from ..choices import MILK_SUPPLIER_TYPES, ActivityType
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    clamp_limit,
    coerce_date,
    coerce_float,
    coerce_int,
    validate_payload,
)
from . import activity_service, raw_material_service
from .concurrency import lock_for_update, run_with_retry

logger = logging.getLogger(__name__)

COOPERATIVE_ONLY_FIELDS = ("registration_number", "chairman_name", "secretary_name", "member_count")

MILK_SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={
        "supplier_type",
        "name",
        "code",
        "phone",
        "address",
        "bank_details",
        "registration_number",
        "chairman_name",
        "secretary_name",
        "member_count",
    },
    required_on_create={"supplier_type", "name", "code"},
    choices={"supplier_type": MILK_SUPPLIER_TYPES},
)

TANK_CONFIG_KEYS = {"MILK": "MILK_TANK_SKU", "WATER": "RAW_WATER_TANK_SKU"}


# -- Milk suppliers --

def _apply_supplier_rules(supplier: MilkSupplier) -> None:
    if supplier.supplier_type == "Individual":
        for field in COOPERATIVE_ONLY_FIELDS:
            setattr(supplier, field, None)
    if supplier.member_count is not None and supplier.member_count < 0:
        raise ValidationError("member_count must be >= 0")


def _ensure_unique_code(code: str, exclude_id: int | None = None) -> None:
    query = db.session.query(MilkSupplier).filter(MilkSupplier.code == code)
    if exclude_id is not None:
        query = query.filter(MilkSupplier.id != exclude_id)
    if query.first():
        raise ConflictError(f"A milk supplier with code {code} already exists")


def list_milk_suppliers(*, supplier_type: str | None = None) -> list[MilkSupplier]:
    query = db.session.query(MilkSupplier)
    if supplier_type:
        query = query.filter(MilkSupplier.supplier_type == supplier_type)
    return query.order_by(MilkSupplier.name.asc()).all()


def get_milk_supplier(supplier_id: int) -> MilkSupplier:
    supplier = db.session.get(MilkSupplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Milk supplier not found")
    return supplier


def create_milk_supplier(payload: dict) -> MilkSupplier:
    patch = validate_payload(model=MilkSupplier, payload=payload, policy=MILK_SUPPLIER_POLICY, partial=False)
    _ensure_unique_code(patch["code"])
    supplier = MilkSupplier(**patch)
    _apply_supplier_rules(supplier)
    db.session.add(supplier)
    db.session.commit()
    return supplier


def update_milk_supplier(supplier_id: int, payload: dict) -> MilkSupplier:
    supplier = get_milk_supplier(supplier_id)
    patch = validate_payload(model=MilkSupplier, payload=payload, policy=MILK_SUPPLIER_POLICY, partial=True)
    if "code" in patch:
        _ensure_unique_code(patch["code"], exclude_id=supplier.id)
    for key, value in patch.items():
        setattr(supplier, key, value)
    _apply_supplier_rules(supplier)
    db.session.commit()
    return supplier


# -- Deliveries --

def tank_sku(kind: str) -> str:
    return current_app.config[TANK_CONFIG_KEYS[kind]]


def get_tank(kind: str) -> RawMaterial:
    kind = (kind or "").upper()
    if kind not in TANK_CONFIG_KEYS:
        raise NotFoundError("Unknown tank")
    material = raw_material_service.get_by_sku(tank_sku(kind))
    if material is None:
        raise NotFoundError(f"Tank material with SKU '{tank_sku(kind)}' not found")
    return material


def record_delivery(kind: str, payload: dict, *, actor=None) -> IntakeDelivery:
    """
    Log a milk collection or water delivery and add it to the tank.

    Raises ValidationError for bad input, NotFoundError for an unknown supplier,
    ConflictError if the tank material is missing or the delivery id is reused.
    """
    payload = payload or {}
    for key in ("delivery_id", "delivery_date", "supplier_id", "quantity_ltrs"):
        if payload.get(key) in (None, ""):
            raise ValidationError(f"{key} is required")

    delivery_id = str(payload["delivery_id"]).strip()
    delivery_date = coerce_date("delivery_date", payload["delivery_date"])
    supplier_id = coerce_int("supplier_id", payload["supplier_id"])
    quantity = coerce_float("quantity_ltrs", payload["quantity_ltrs"])
    if quantity <= 0:
        raise ValidationError("quantity_ltrs must be > 0")

    def _opt_float(key):
        value = payload.get(key)
        return coerce_float(key, value) if value not in (None, "") else None

    temperature = _opt_float("temperature")
    fat_percentage = _opt_float("fat_percentage") if kind == "MILK" else None
    ph_level = _opt_float("ph_level") if kind == "WATER" else None
    notes = str(payload["notes"]).strip() if payload.get("notes") else None

    if kind == "MILK":
        supplier = db.session.get(MilkSupplier, supplier_id)
        if supplier is None:
            raise NotFoundError("Milk supplier not found")
    else:
        supplier = db.session.get(LedgerAccount, supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier account not found")

    if db.session.query(IntakeDelivery).filter_by(delivery_id=delivery_id).first():
        raise ConflictError(f"Delivery {delivery_id} has already been recorded")

    sku = tank_sku(kind)

    def _op():
        try:
            tank = lock_for_update(db.session.query(RawMaterial).filter_by(sku=sku)).first()
            if tank is None:
                raise ConflictError(
                    f"Tank material with SKU '{sku}' not found. Create it in the store before recording deliveries."
                )

            delivery = IntakeDelivery(
                kind=kind,
                delivery_id=delivery_id,
                delivery_date=delivery_date,
                milk_supplier_id=supplier.id if kind == "MILK" else None,
                ledger_account_id=supplier.id if kind == "WATER" else None,
                supplier_name=supplier.name,
                quantity_ltrs=quantity,
                temperature=temperature,
                fat_percentage=fat_percentage,
                ph_level=ph_level,
                status="Accepted",
                notes=notes,
                recorded_by_user_id=actor.id if actor is not None else None,
            )
            db.session.add(delivery)
            raw_material_service.add_stock(tank, quantity)

            label = "Milk collection" if kind == "MILK" else "Water delivery"
            activity_service.record_activity(
                actor,
                ActivityType.MILK_COLLECTION if kind == "MILK" else ActivityType.WATER_DELIVERY,
                f"{label} {delivery_id}: {quantity:g} L from {supplier.name}",
                {"delivery_id": delivery_id, "tank_sku": sku},
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        logger.info("%s %s recorded (%s L)", kind, delivery_id, quantity)
        return delivery

    return run_with_retry(_op)


def list_deliveries(*, kind: str | None = None, supplier_id=None, limit=None) -> list[IntakeDelivery]:
    query = db.session.query(IntakeDelivery)
    if kind:
        kind = kind.upper()
        if kind not in TANK_CONFIG_KEYS:
            raise ValidationError("kind must be MILK or WATER")
        query = query.filter(IntakeDelivery.kind == kind)
    if supplier_id not in (None, ""):
        supplier_id = coerce_int("supplier_id", supplier_id)
        query = query.filter(db.or_(
            IntakeDelivery.milk_supplier_id == supplier_id,
            IntakeDelivery.ledger_account_id == supplier_id,
        ))
    return (
        query.order_by(IntakeDelivery.delivery_date.desc(), IntakeDelivery.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_delivery(delivery_pk: int) -> IntakeDelivery:
    delivery = db.session.get(IntakeDelivery, delivery_pk)
    if delivery is None:
        raise NotFoundError("Delivery not found")
    return delivery


def tank_levels() -> dict:
    """Current stock of both tanks; None when a tank material is missing."""
    levels = {}
    for kind in TANK_CONFIG_KEYS:
        material = raw_material_service.get_by_sku(tank_sku(kind))
        levels[kind.lower()] = material.stock if material is not None else None
    return levels
