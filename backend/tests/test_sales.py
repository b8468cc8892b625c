"""
Sales and invoice tests.

Verifies:
- A sale deducts stock line by line with SALE_DEDUCTION logs
- Insufficient stock rolls the whole sale back
- Invoices can be generated from a sale once, with due dates from credit terms
"""

from datetime import date, timedelta

from harierp.extensions import db
from harierp.models import Product, ProductStockLog, Sale
from harierp.services.sales_service import compute_totals


def _sale(client, headers, customer, *lines, **extra):
    payload = {"customer_id": customer.id, "payment_method": "Transfer", "items": list(lines)}
    payload.update(extra)
    return client.post("/api/sales", headers=headers, json=payload)


# =============================================================================
# SALES
# =============================================================================


class TestSales:

    def test_totals(self):
        lines = [
            {"quantity": 2, "unit_price_cents": 150000},
            {"quantity": 1.5, "unit_price_cents": 1001},
        ]
        totals = compute_totals(lines, discount_cents=10000, tax_cents=500)
        assert lines[1]["line_total_cents"] == 1502
        assert totals == {"subtotal_cents": 301502, "total_cents": 292002}

    def test_sale_deducts_stock(self, client, sales_headers, customer, product, db_session):
        resp = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 12, "unit_price_cents": 150000},
            discount_cents=50000,
        )
        assert resp.status_code == 201
        sale = resp.json
        assert sale["sale_number"] == "SALE-0001"
        assert sale["customer_name"] == "Zaria Retail Ltd"
        assert sale["price_level"] == "R-RETAILER-Z1/RTL"
        assert sale["subtotal_cents"] == 1800000
        assert sale["total_cents"] == 1750000
        assert sale["items"][0]["product_name"] == "Hari Bottled Water 75cl"

        assert db_session.get(Product, product.id).stock == 88
        log = db_session.query(ProductStockLog).filter_by(sale_id=sale["id"]).one()
        assert log.adjustment_type == "SALE_DEDUCTION"
        assert log.quantity_adjusted == -12
        assert (log.previous_stock, log.new_stock) == (100, 88)

    def test_insufficient_stock_rolls_back(self, client, sales_headers, customer, product, db_session):
        other = Product(
            sku="DW-19L",
            name="Dispenser Water 19L",
            category="Dispenser Water",
            unit_of_measure="PCS",
            price_cents=80000,
            stock=3.0,
        )
        db_session.add(other)
        db_session.commit()

        resp = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 10, "unit_price_cents": 150000},
            {"product_id": other.id, "quantity": 4, "unit_price_cents": 80000},
        )
        assert resp.status_code == 409
        assert resp.json["error"] == "Insufficient stock for product Dispenser Water 19L. Required: 4, Available: 3."

        db.session.expire_all()
        assert db_session.get(Product, product.id).stock == 100
        assert db_session.query(Sale).count() == 0
        assert db_session.query(ProductStockLog).count() == 0

    def test_unknown_customer_is_404(self, client, sales_headers, product, db_session):
        resp = client.post("/api/sales", headers=sales_headers, json={
            "customer_id": 999999,
            "payment_method": "Cash",
            "items": [{"product_id": product.id, "quantity": 1, "unit_price_cents": 1}],
        })
        assert resp.status_code == 404

    def test_invalid_payment_method_is_400(self, client, sales_headers, customer, product):
        resp = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 1, "unit_price_cents": 1},
            payment_method="Barter",
        )
        assert resp.status_code == 400

    def test_cannot_create_cancelled_sale(self, client, sales_headers, customer, product):
        resp = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 1, "unit_price_cents": 1},
            status="Cancelled",
        )
        assert resp.status_code == 400

    def test_discount_cannot_exceed_subtotal(self, client, sales_headers, customer, product):
        resp = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 1, "unit_price_cents": 100},
            discount_cents=101,
        )
        assert resp.status_code == 400

    def test_list_by_customer(self, client, sales_headers, customer, product):
        _sale(client, sales_headers, customer, {"product_id": product.id, "quantity": 1, "unit_price_cents": 1})
        _sale(client, sales_headers, customer, {"product_id": product.id, "quantity": 1, "unit_price_cents": 1})
        listed = client.get(f"/api/sales?customer_id={customer.id}", headers=sales_headers).json
        assert listed["count"] == 2
        assert [s["sale_number"] for s in listed["items"]] == ["SALE-0002", "SALE-0001"]


# =============================================================================
# INVOICES
# =============================================================================


class TestInvoices:

    def test_invoice_from_sale(self, client, sales_headers, customer, product, db_session):
        sale = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 2, "unit_price_cents": 150000},
            tax_cents=1000,
        ).json
        resp = client.post("/api/invoices", headers=sales_headers, json={
            "sale_id": sale["id"],
            "issue_date": "2026-03-01",
        })
        assert resp.status_code == 201
        invoice = resp.json
        assert invoice["invoice_number"] == "INV-0001"
        assert invoice["customer"]["email"] == "accounts@zariaretail.ng"
        assert invoice["total_cents"] == 301000
        assert invoice["due_date"] == "2026-03-31"
        assert invoice["status"] == "Draft"
        assert invoice["company_details"]["name"] == "Hari Industries Limited"
        assert len(invoice["items"]) == 1

        assert db_session.get(Sale, sale["id"]).invoice_id == invoice["id"]

    def test_sale_can_only_be_invoiced_once(self, client, sales_headers, customer, product):
        sale = _sale(
            client, sales_headers, customer,
            {"product_id": product.id, "quantity": 1, "unit_price_cents": 150000},
        ).json
        assert client.post("/api/invoices", headers=sales_headers, json={"sale_id": sale["id"]}).status_code == 201
        assert client.post("/api/invoices", headers=sales_headers, json={"sale_id": sale["id"]}).status_code == 409

    def test_free_form_invoice_lines(self, client, sales_headers, customer):
        resp = client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id,
            "items": [{"product_name": "Delivery to Kano", "quantity": 1, "unit_price_cents": 2500000}],
            "company_details": {"name": "Hari Dairies"},
        })
        assert resp.status_code == 201
        assert resp.json["items"][0]["product_id"] is None
        assert resp.json["company_details"]["name"] == "Hari Dairies"
        assert resp.json["company_details"]["address"]

    def test_due_date_before_issue_date_is_400(self, client, sales_headers, customer):
        resp = client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id,
            "issue_date": "2026-03-10",
            "due_date": "2026-03-01",
            "items": [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}],
        })
        assert resp.status_code == 400

    def test_duplicate_invoice_number_is_409(self, client, sales_headers, customer):
        payload = {
            "customer_id": customer.id,
            "invoice_number": "INV-MANUAL-1",
            "items": [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}],
        }
        assert client.post("/api/invoices", headers=sales_headers, json=payload).status_code == 201
        assert client.post("/api/invoices", headers=sales_headers, json=payload).status_code == 409

    def test_generated_number_skips_manual_number(self, client, sales_headers, customer):
        items = [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}]
        manual = client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id, "invoice_number": "INV-0001", "items": items,
        })
        assert manual.status_code == 201

        generated = client.post("/api/invoices", headers=sales_headers, json={"customer_id": customer.id, "items": items})
        assert generated.status_code == 201
        assert generated.json["invoice_number"] == "INV-0002"

        following = client.post("/api/invoices", headers=sales_headers, json={"customer_id": customer.id, "items": items})
        assert following.json["invoice_number"] == "INV-0003"

    def test_update_status_and_items(self, client, sales_headers, customer):
        invoice = client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id,
            "items": [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}],
        }).json
        resp = client.put(f"/api/invoices/{invoice['id']}", headers=sales_headers, json={
            "status": "Sent",
            "items": [
                {"product_name": "Service", "quantity": 2, "unit_price_cents": 100},
                {"product_name": "Transport", "quantity": 1, "unit_price_cents": 50},
            ],
        })
        assert resp.status_code == 200
        assert resp.json["status"] == "Sent"
        assert resp.json["subtotal_cents"] == 250
        assert len(resp.json["items"]) == 2

        listed = client.get("/api/invoices?status=Sent", headers=sales_headers).json
        assert listed["count"] == 1

    def test_default_due_date_uses_credit_period(self, client, sales_headers, customer):
        resp = client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id,
            "items": [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}],
        })
        issue = date.fromisoformat(resp.json["issue_date"])
        assert date.fromisoformat(resp.json["due_date"]) == issue + timedelta(days=30)
