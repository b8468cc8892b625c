# Overview: Customer invoices, optionally generated from a sale.

from __future__ import annotations

from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models import Invoice, InvoiceItem, Product
from ..choices import INVOICE_STATUSES, ActivityType
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
from . import activity_service, ledger_service, sales_service
from .document_service import next_document_number
from harierp.time_utils import utcnow

COMPANY_FIELDS = {
    "name": "COMPANY_NAME",
    "address": "COMPANY_ADDRESS",
    "phone": "COMPANY_PHONE",
    "email": "COMPANY_EMAIL",
    "logo_url": "COMPANY_LOGO_URL",
}


def _parse_items(items) -> list[dict]:
    """
    Invoice lines may reference a product or just carry a name
    (services, transport, ...).
    """
    lines = []
    for item in require_items({"items": items}):
        product = None
        if item.get("product_id") not in (None, ""):
            product = db.session.get(Product, coerce_int("product_id", item["product_id"]))
            if product is None:
                raise ValidationError(f"Product {item['product_id']} not found")
        name = str(item.get("product_name") or (product.name if product else "")).strip()
        if not name:
            raise ValidationError("Each item requires product_id or product_name")
        if item.get("quantity") in (None, "") or item.get("unit_price_cents") in (None, ""):
            raise ValidationError("Each item requires quantity and unit_price_cents")
        quantity = coerce_float("quantity", item["quantity"])
        if quantity <= 0:
            raise ValidationError("quantity must be > 0")
        unit_price = coerce_int("unit_price_cents", item["unit_price_cents"])
        enforce_amount({"unit_price_cents": unit_price}, "unit_price_cents")
        lines.append({
            "product_id": product.id if product else None,
            "product_name": name,
            "unit_of_measure": item.get("unit_of_measure") or (product.unit_of_measure if product else None),
            "quantity": quantity,
            "unit_price_cents": unit_price,
        })
    return lines


def _amount(payload: dict, key: str, default: int = 0) -> int:
    if payload.get(key) in (None, ""):
        return default
    value = coerce_int(key, payload[key])
    enforce_amount({key: value}, key)
    return value


def _replace_items(invoice: Invoice, lines: list[dict]) -> None:
    invoice.items.clear()
    for line in lines:
        invoice.items.append(InvoiceItem(
            product_id=line["product_id"],
            product_name=line["product_name"],
            unit_of_measure=line["unit_of_measure"],
            quantity=line["quantity"],
            unit_price_cents=line["unit_price_cents"],
            line_total_cents=line["line_total_cents"],
        ))


def _apply_company(invoice: Invoice, details) -> None:
    details = details if isinstance(details, dict) else {}
    for key, config_key in COMPANY_FIELDS.items():
        value = details.get(key)
        if value in (None, ""):
            value = current_app.config.get(config_key) or None
        setattr(invoice, f"company_{key}", value)


def _next_invoice_number() -> str:
    """INV-0001 style number; skips numbers already taken by hand."""
    while True:
        number = next_document_number("INVOICE")
        if db.session.query(Invoice).filter_by(invoice_number=number).first() is None:
            return number


def create_invoice(payload: dict, *, actor=None) -> Invoice:
    """
    Create an invoice; with sale_id, customer and items default from the sale
    and the sale is linked back to the invoice.
    """
    payload = payload or {}

    sale = None
    if payload.get("sale_id") not in (None, ""):
        sale = sales_service.get_sale(coerce_int("sale_id", payload["sale_id"]))
        if sale.invoice_id is not None:
            raise ConflictError(f"Sale {sale.sale_number} is already invoiced")

    if payload.get("items") is None and sale is not None:
        items = [item.to_dict() for item in sale.items]
    else:
        items = payload.get("items")
    lines = _parse_items(items)

    customer_id = payload.get("customer_id") or (sale.customer_id if sale else None)
    if customer_id in (None, ""):
        raise ValidationError("customer_id is required")
    customer = ledger_service.get_account(coerce_int("customer_id", customer_id))

    status = payload.get("status") or "Draft"
    if status not in INVOICE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(INVOICE_STATUSES)}")

    issue_date = coerce_date("issue_date", payload["issue_date"]) if payload.get("issue_date") else utcnow().date()
    if payload.get("due_date"):
        due_date = coerce_date("due_date", payload["due_date"])
    else:
        due_date = issue_date + timedelta(days=customer.credit_period or 0)
    if due_date < issue_date:
        raise ValidationError("due_date cannot be before issue_date")

    discount = _amount(payload, "discount_cents", sale.discount_cents if sale else 0)
    tax = _amount(payload, "tax_cents", sale.tax_cents if sale else 0)
    totals = sales_service.compute_totals(lines, discount_cents=discount, tax_cents=tax)

    invoice_number = str(payload.get("invoice_number") or "").strip()
    if invoice_number:
        if db.session.query(Invoice).filter_by(invoice_number=invoice_number).first():
            raise ConflictError(f"Invoice number {invoice_number} already exists")

    try:
        if not invoice_number:
            invoice_number = _next_invoice_number()
        invoice = Invoice(
            invoice_number=invoice_number,
            sale_id=sale.id if sale else None,
            issue_date=issue_date,
            due_date=due_date,
            customer_id=customer.id,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_address=customer.address,
            subtotal_cents=totals["subtotal_cents"],
            discount_cents=discount,
            tax_cents=tax,
            total_cents=totals["total_cents"],
            status=status,
            notes=str(payload["notes"]).strip() if payload.get("notes") else None,
            created_by_user_id=actor.id if actor is not None else None,
        )
        _apply_company(invoice, payload.get("company_details"))
        _replace_items(invoice, lines)
        db.session.add(invoice)
        db.session.flush()

        if sale is not None:
            sale.invoice_id = invoice.id

        activity_service.record_activity(
            actor,
            ActivityType.INVOICE,
            f"Invoice {invoice.invoice_number} for {customer.name}",
            {"invoice_id": invoice.id, "total_cents": invoice.total_cents},
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return invoice


def update_invoice(invoice_id: int, payload: dict, *, actor=None) -> Invoice:
    """Update header fields; items, when given, replace the existing lines."""
    payload = payload or {}
    invoice = get_invoice(invoice_id)

    if "status" in payload:
        if payload["status"] not in INVOICE_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(INVOICE_STATUSES)}")
        invoice.status = payload["status"]
    if payload.get("issue_date"):
        invoice.issue_date = coerce_date("issue_date", payload["issue_date"])
    if payload.get("due_date"):
        invoice.due_date = coerce_date("due_date", payload["due_date"])
    if invoice.due_date < invoice.issue_date:
        raise ValidationError("due_date cannot be before issue_date")
    if "notes" in payload:
        invoice.notes = str(payload["notes"]).strip() if payload["notes"] else None
    if payload.get("customer_id") not in (None, ""):
        customer = ledger_service.get_account(coerce_int("customer_id", payload["customer_id"]))
        invoice.customer_id = customer.id
        invoice.customer_name = customer.name
        invoice.customer_email = customer.email
        invoice.customer_address = customer.address
    if "company_details" in payload:
        _apply_company(invoice, payload["company_details"])

    discount = _amount(payload, "discount_cents", invoice.discount_cents)
    tax = _amount(payload, "tax_cents", invoice.tax_cents)
    if payload.get("items") is not None:
        lines = _parse_items(payload["items"])
    else:
        lines = [item.to_dict() for item in invoice.items]
    totals = sales_service.compute_totals(lines, discount_cents=discount, tax_cents=tax)

    try:
        if payload.get("items") is not None:
            _replace_items(invoice, lines)
        invoice.discount_cents = discount
        invoice.tax_cents = tax
        invoice.subtotal_cents = totals["subtotal_cents"]
        invoice.total_cents = totals["total_cents"]
        invoice.updated_at = utcnow()

        activity_service.record_activity(
            actor,
            ActivityType.INVOICE,
            f"Updated invoice {invoice.invoice_number} ({invoice.status})",
            {"invoice_id": invoice.id},
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return invoice


def list_invoices(*, status: str | None = None, customer_id=None, limit=None) -> list[Invoice]:
    query = db.session.query(Invoice)
    if status:
        query = query.filter(Invoice.status == status)
    if customer_id not in (None, ""):
        query = query.filter(Invoice.customer_id == coerce_int("customer_id", customer_id))
    return (
        query.order_by(Invoice.issue_date.desc(), Invoice.id.desc())
        .limit(clamp_limit(limit))
        .all()
    )


def get_invoice(invoice_id: int) -> Invoice:
    invoice = db.session.get(Invoice, invoice_id)
    if invoice is None:
        raise NotFoundError("Invoice not found")
    return invoice
