# Overview: Finished goods catalog.

"""
Products Service

Stock is not writable through create/update patches: an opening stock on
create becomes an INITIAL_STOCK log, later changes go through stock_service.
"""
from __future__ import annotations

from ..extensions import db
from ..models import Product
from ..choices import PRICE_LEVELS, PRODUCT_CATEGORIES, UNITS_OF_MEASURE, AdjustmentType
from ..validation import (
    ConflictError,
    ModelValidationPolicy,
    NotFoundError,
    ValidationError,
    coerce_float,
    coerce_int,
    enforce_amount,
    enforce_non_negative,
    validate_payload,
)
from . import stock_service

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "sku",
        "name",
        "description",
        "category",
        "unit_of_measure",
        "price_cents",
        "cost_price_cents",
        "price_tiers",
        "alternate_units",
        "pcs_per_unit",
        "litres",
        "low_stock_threshold",
        "image_url",
    },
    required_on_create={"sku", "name", "category", "unit_of_measure", "price_cents"},
    choices={
        "category": PRODUCT_CATEGORIES,
        "unit_of_measure": UNITS_OF_MEASURE,
    },
)


def _clean_price_tiers(tiers) -> list[dict]:
    if tiers is None:
        return []
    if not isinstance(tiers, list):
        raise ValidationError("price_tiers must be a list")
    cleaned = []
    seen = set()
    for tier in tiers:
        if not isinstance(tier, dict):
            raise ValidationError("Each price tier must be an object")
        level = tier.get("price_level")
        if level not in PRICE_LEVELS:
            raise ValidationError(f"price_level must be one of: {', '.join(PRICE_LEVELS)}")
        if level in seen:
            raise ValidationError(f"Duplicate price tier: {level}")
        seen.add(level)
        price = coerce_int("price_cents", tier.get("price_cents"))
        enforce_amount({"price_cents": price}, "price_cents")
        cleaned.append({"price_level": level, "price_cents": price})
    return cleaned


def _clean_alternate_units(units) -> list[dict]:
    if units is None:
        return []
    if not isinstance(units, list):
        raise ValidationError("alternate_units must be a list")
    cleaned = []
    for unit in units:
        if not isinstance(unit, dict) or not str(unit.get("name") or "").strip():
            raise ValidationError("Each alternate unit needs a name")
        factor = coerce_float("factor", unit.get("factor"))
        if factor <= 0:
            raise ValidationError("factor must be > 0")
        cleaned.append({"name": str(unit["name"]).strip(), "factor": factor})
    return cleaned


def _enforce_rules(patch: dict) -> None:
    enforce_amount(patch, "price_cents")
    enforce_amount(patch, "cost_price_cents")
    enforce_non_negative(patch, "pcs_per_unit", "litres", "low_stock_threshold")
    if "price_tiers" in patch:
        patch["price_tiers"] = _clean_price_tiers(patch["price_tiers"])
    if "alternate_units" in patch:
        patch["alternate_units"] = _clean_alternate_units(patch["alternate_units"])


def _ensure_unique_sku(sku: str, exclude_id: int | None = None) -> None:
    query = db.session.query(Product).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise ConflictError(f"A product with SKU {sku} already exists")


def list_products(*, category: str | None = None, search: str | None = None, low_stock: bool = False) -> list[Product]:
    query = db.session.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(db.or_(Product.name.ilike(like), Product.sku.ilike(like)))
    if low_stock:
        query = query.filter(
            Product.low_stock_threshold.isnot(None),
            Product.stock <= Product.low_stock_threshold,
        )
    return query.order_by(Product.name.asc(), Product.id.asc()).all()


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


def create_product(payload: dict, *, actor=None) -> Product:
    """
    Create a product; a non-zero opening stock is logged as INITIAL_STOCK.

    Raises ValidationError / ConflictError.
    """
    payload = dict(payload or {})
    opening_stock = payload.pop("stock", None)
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
    _enforce_rules(patch)
    _ensure_unique_sku(patch["sku"])

    opening = coerce_float("stock", opening_stock) if opening_stock not in (None, "") else 0.0
    if opening < 0:
        raise ValidationError("stock must be >= 0")

    product = Product(stock=0, **patch)
    db.session.add(product)
    db.session.flush()

    if opening:
        stock_service.apply_stock_change(
            product,
            quantity=opening,
            adjustment_type=AdjustmentType.INITIAL_STOCK,
            notes="Opening stock",
            actor=actor,
        )

    db.session.commit()
    return product


def update_product(product_id: int, payload: dict) -> Product:
    payload = payload or {}
    if "stock" in payload:
        raise ValidationError("stock cannot be edited directly; record a stock adjustment instead")
    product = get_product(product_id)
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
    _enforce_rules(patch)
    if "sku" in patch:
        _ensure_unique_sku(patch["sku"], exclude_id=product.id)

    for key, value in patch.items():
        setattr(product, key, value)
    db.session.commit()
    return product
