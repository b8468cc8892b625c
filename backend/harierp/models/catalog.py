from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_utc_z


class Product(db.Model):
    """
    Finished goods (bottled water, sachets, yoghurt, ...).

    stock is only changed by stock logs, approvals and sales; every change
    leaves a ProductStockLog row with previous/new stock.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_category_name", "category", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    sku = db.Column(db.String(64), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(64), nullable=False)
    unit_of_measure = db.Column(db.String(32), nullable=False, default="Pcs")

    # Authoritative storage in kobo
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    cost_price_cents = db.Column(db.Integer, nullable=True)

    # [{"price_level": "Distributor", "price_cents": 12000}, ...]
    price_tiers = db.Column(db.JSON, nullable=True)
    # [{"name": "Pack", "factor": 12}, ...]
    alternate_units = db.Column(db.JSON, nullable=True)
    pcs_per_unit = db.Column(db.Integer, nullable=True)
    litres = db.Column(db.Float, nullable=True)

    stock = db.Column(db.Float, nullable=False, default=0)
    low_stock_threshold = db.Column(db.Float, nullable=True)
    image_url = db.Column(db.String(512), nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r}>"

    @property
    def is_low_stock(self) -> bool:
        return self.low_stock_threshold is not None and self.stock <= self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "unit_of_measure": self.unit_of_measure,
            "price_cents": self.price_cents,
            "cost_price_cents": self.cost_price_cents,
            "price_tiers": self.price_tiers or [],
            "alternate_units": self.alternate_units or [],
            "pcs_per_unit": self.pcs_per_unit,
            "litres": self.litres,
            "stock": self.stock,
            "low_stock_threshold": self.low_stock_threshold,
            "is_low_stock": self.is_low_stock,
            "image_url": self.image_url,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class RawMaterial(db.Model):
    """
    Store items: raw water, chemicals, preforms, caps, labels, packaging.

    The milk and raw-water tanks are raw materials identified by SKU.
    """
    __tablename__ = "raw_materials"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    sku = db.Column(db.String(64), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(64), nullable=False)
    unit_of_measure = db.Column(db.String(32), nullable=False, default="Pcs")
    litres = db.Column(db.Float, nullable=True)

    stock = db.Column(db.Float, nullable=False, default=0)
    cost_price_cents = db.Column(db.Integer, nullable=True)
    low_stock_threshold = db.Column(db.Float, nullable=True)
    image_url = db.Column(db.String(512), nullable=True)

    supplier_id = db.Column(db.Integer, db.ForeignKey("ledger_accounts.id"), nullable=True, index=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    supplier = db.relationship("LedgerAccount", backref=db.backref("raw_materials", lazy=True))
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<RawMaterial id={self.id} sku={self.sku!r} name={self.name!r}>"

    @property
    def is_low_stock(self) -> bool:
        return self.low_stock_threshold is not None and self.stock <= self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sku": self.sku,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "unit_of_measure": self.unit_of_measure,
            "litres": self.litres,
            "stock": self.stock,
            "cost_price_cents": self.cost_price_cents,
            "low_stock_threshold": self.low_stock_threshold,
            "is_low_stock": self.is_low_stock,
            "image_url": self.image_url,
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier.name if self.supplier else None,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
