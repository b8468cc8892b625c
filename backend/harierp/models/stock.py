from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_iso_date, to_utc_z


class ProductStockLog(db.Model):
    """
    One finished-goods stock movement.

    quantity_adjusted is signed (negative for subtractions and sales).
    PENDING_APPROVAL rows are submissions waiting for the Finish Bay; they do
    not touch Product.stock until approved (then become PRODUCTION_YIELD) or
    rejected (REJECTED_BY_INVENTORY).

    product_name is denormalised so history survives product renames.
    """
    __tablename__ = "product_stock_logs"
    __table_args__ = (
        db.Index("ix_stock_logs_product_date", "product_id", "adjustment_date"),
        db.Index("ix_stock_logs_type", "adjustment_type"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    log_number = db.Column(db.String(32), nullable=False, unique=True, index=True)

    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True, index=True)
    product_name = db.Column(db.String(255), nullable=False)

    quantity_adjusted = db.Column(db.Float, nullable=False)
    adjustment_type = db.Column(db.String(32), nullable=False)
    adjustment_date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    previous_stock = db.Column(db.Float, nullable=True)
    new_stock = db.Column(db.Float, nullable=True)

    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=True, index=True)

    recorded_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    recorded_by = db.Column(db.String(64), nullable=True)
    approved_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    approved_by = db.Column(db.String(64), nullable=True)
    approved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    product = db.relationship("Product", backref=db.backref("stock_logs", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "log_number": self.log_number,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity_adjusted": self.quantity_adjusted,
            "adjustment_type": self.adjustment_type,
            "adjustment_date": to_iso_date(self.adjustment_date),
            "notes": self.notes,
            "previous_stock": self.previous_stock,
            "new_stock": self.new_stock,
            "sale_id": self.sale_id,
            "recorded_by": self.recorded_by,
            "approved_by": self.approved_by,
            "approved_at": to_utc_z(self.approved_at) if self.approved_at else None,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class RawMaterialUsage(db.Model):
    """
    Raw material issued from the store to a department.

    Production batches are usages sharing a batch_id (usage numbers PROD-<batch>-<n>).
    """
    __tablename__ = "raw_material_usages"
    __table_args__ = (
        db.Index("ix_material_usages_batch", "batch_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    usage_number = db.Column(db.String(64), nullable=False, unique=True, index=True)

    raw_material_id = db.Column(db.Integer, db.ForeignKey("raw_materials.id"), nullable=False, index=True)
    raw_material_name = db.Column(db.String(255), nullable=False)

    quantity_used = db.Column(db.Float, nullable=False)
    unit_of_measure = db.Column(db.String(32), nullable=True)
    department = db.Column(db.String(64), nullable=False)
    usage_date = db.Column(db.Date, nullable=False)
    batch_id = db.Column(db.String(64), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    recorded_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    recorded_by = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    raw_material = db.relationship("RawMaterial", backref=db.backref("usages", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "usage_number": self.usage_number,
            "raw_material_id": self.raw_material_id,
            "raw_material_name": self.raw_material_name,
            "quantity_used": self.quantity_used,
            "unit_of_measure": self.unit_of_measure,
            "department": self.department,
            "usage_date": to_iso_date(self.usage_date),
            "batch_id": self.batch_id,
            "notes": self.notes,
            "recorded_by": self.recorded_by,
            "created_at": to_utc_z(self.created_at),
        }
