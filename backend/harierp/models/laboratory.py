from __future__ import annotations

from ..extensions import db
from harierp.time_utils import to_iso_date, to_utc_z


class MilkSupplier(db.Model):
    """
    Milk producers: cooperatives or individual farmers.

    Cooperative-only fields are cleared for individuals.
    """
    __tablename__ = "milk_suppliers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    supplier_type = db.Column(db.String(16), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    code = db.Column(db.String(64), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(64), nullable=True)
    address = db.Column(db.Text, nullable=True)
    bank_details = db.Column(db.Text, nullable=True)

    registration_number = db.Column(db.String(128), nullable=True)
    chairman_name = db.Column(db.String(255), nullable=True)
    secretary_name = db.Column(db.String(255), nullable=True)
    member_count = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "supplier_type": self.supplier_type,
            "name": self.name,
            "code": self.code,
            "phone": self.phone,
            "address": self.address,
            "bank_details": self.bank_details,
            "registration_number": self.registration_number,
            "chairman_name": self.chairman_name,
            "secretary_name": self.secretary_name,
            "member_count": self.member_count,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class IntakeDelivery(db.Model):
    """
    Milk collection (kind MILK) or raw water delivery (kind WATER).

    Milk deliveries reference a milk supplier; water deliveries reference a
    supplier ledger account.
    """
    __tablename__ = "intake_deliveries"
    __table_args__ = (
        db.Index("ix_intake_kind_date", "kind", "delivery_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String(8), nullable=False)
    delivery_id = db.Column(db.String(64), nullable=False, unique=True, index=True)
    delivery_date = db.Column(db.Date, nullable=False)

    milk_supplier_id = db.Column(db.Integer, db.ForeignKey("milk_suppliers.id"), nullable=True, index=True)
    ledger_account_id = db.Column(db.Integer, db.ForeignKey("ledger_accounts.id"), nullable=True, index=True)
    supplier_name = db.Column(db.String(255), nullable=True)

    quantity_ltrs = db.Column(db.Float, nullable=False)
    temperature = db.Column(db.Float, nullable=True)
    fat_percentage = db.Column(db.Float, nullable=True)
    ph_level = db.Column(db.Float, nullable=True)

    status = db.Column(db.String(16), nullable=False, default="Accepted")
    notes = db.Column(db.Text, nullable=True)

    recorded_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    milk_supplier = db.relationship("MilkSupplier", backref=db.backref("deliveries", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "delivery_id": self.delivery_id,
            "delivery_date": to_iso_date(self.delivery_date),
            "supplier_id": self.milk_supplier_id if self.kind == "MILK" else self.ledger_account_id,
            "supplier_name": self.supplier_name,
            "quantity_ltrs": self.quantity_ltrs,
            "temperature": self.temperature,
            "fat_percentage": self.fat_percentage,
            "ph_level": self.ph_level,
            "status": self.status,
            "notes": self.notes,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }


class LabTest(db.Model):
    """Quality control test of a production batch."""
    __tablename__ = "lab_tests"
    __table_args__ = (
        db.Index("ix_lab_tests_date", "test_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    batch_number = db.Column(db.String(64), nullable=False, index=True)
    sample_id = db.Column(db.String(64), nullable=True)
    test_date = db.Column(db.Date, nullable=False)
    product_name = db.Column(db.String(255), nullable=False)

    ph_level = db.Column(db.Float, nullable=True)
    tds_level = db.Column(db.Float, nullable=True)
    chlorine_level = db.Column(db.Float, nullable=True)
    turbidity = db.Column(db.Float, nullable=True)
    conductivity = db.Column(db.Float, nullable=True)
    temperature = db.Column(db.Float, nullable=True)

    microbiological_test = db.Column(db.String(16), nullable=False, default="Pending")
    chemical_test = db.Column(db.String(16), nullable=False, default="Pending")
    physical_test = db.Column(db.String(16), nullable=False, default="Pending")
    overall_status = db.Column(db.String(16), nullable=False, default="Pending")
    notes = db.Column(db.Text, nullable=True)

    tested_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    tested_by = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "batch_number": self.batch_number,
            "sample_id": self.sample_id,
            "test_date": to_iso_date(self.test_date),
            "product_name": self.product_name,
            "ph_level": self.ph_level,
            "tds_level": self.tds_level,
            "chlorine_level": self.chlorine_level,
            "turbidity": self.turbidity,
            "conductivity": self.conductivity,
            "temperature": self.temperature,
            "microbiological_test": self.microbiological_test,
            "chemical_test": self.chemical_test,
            "physical_test": self.physical_test,
            "overall_status": self.overall_status,
            "notes": self.notes,
            "tested_by": self.tested_by,
            "created_at": to_utc_z(self.created_at),
        }
