"""
Ledger account, receipt and credit note tests.

Verifies:
- Ledger accounts are validated against their choice lists
- Receipts and credit notes get sequential document numbers
- Statements run a debit/credit balance across sales, receipts and credit notes
"""

from harierp.models import ActivityLog


# =============================================================================
# LEDGER ACCOUNTS
# =============================================================================


class TestLedgerAccounts:

    def test_create_account(self, client, finance_headers):
        resp = client.post("/api/ledger-accounts", headers=finance_headers, json={
            "account_code": "CUST-002",
            "name": "Kano Distributors",
            "account_type": "Customer",
            "price_level": "B1-EX-F/DLR",
            "credit_period": 14,
            "credit_limit_cents": 500000000,
        })
        assert resp.status_code == 201
        assert resp.json["price_level"] == "B1-EX-F/DLR"
        assert resp.json["credit_period"] == 14

    def test_duplicate_code_is_409(self, client, finance_headers, customer):
        resp = client.post("/api/ledger-accounts", headers=finance_headers, json={
            "account_code": "CUST-001",
            "name": "Another Customer",
            "account_type": "Customer",
        })
        assert resp.status_code == 409

    def test_unknown_account_type_is_400(self, client, finance_headers):
        resp = client.post("/api/ledger-accounts", headers=finance_headers, json={
            "account_code": "X-1",
            "name": "Mystery",
            "account_type": "Friend",
        })
        assert resp.status_code == 400

    def test_negative_credit_period_is_400(self, client, finance_headers, customer):
        resp = client.put(f"/api/ledger-accounts/{customer.id}", headers=finance_headers, json={
            "credit_period": -1,
        })
        assert resp.status_code == 400

    def test_update_and_filter(self, client, finance_headers, customer, supplier):
        resp = client.put(f"/api/ledger-accounts/{customer.id}", headers=finance_headers, json={
            "zone": "Zone 1",
            "phone": "08030000000",
        })
        assert resp.status_code == 200
        assert resp.json["zone"] == "Zone 1"

        listed = client.get("/api/ledger-accounts?type=Supplier", headers=finance_headers).json
        assert [a["account_code"] for a in listed["items"]] == ["SUP-001"]

        searched = client.get("/api/ledger-accounts?search=zaria", headers=finance_headers).json
        assert searched["count"] == 1


# =============================================================================
# RECEIPTS AND CREDIT NOTES
# =============================================================================


class TestReceipts:

    def test_create_receipt(self, client, finance_headers, customer, db_session):
        resp = client.post("/api/receipts", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 1000000,
            "payment_method": "Transfer",
            "bank_name": "GT Bank",
            "reference_number": "TRF-88231",
            "receipt_date": "2026-03-05",
        })
        assert resp.status_code == 201
        assert resp.json["receipt_number"] == "RCT-0001"
        assert resp.json["ledger_account_name"] == "Zaria Retail Ltd"
        assert resp.json["receipt_date"] == "2026-03-05"

        entry = db_session.query(ActivityLog).filter_by(activity_type="Receipt").one()
        assert "RCT-0001" in entry.message

    def test_zero_amount_is_400(self, client, finance_headers, customer):
        resp = client.post("/api/receipts", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 0,
            "payment_method": "Cash",
        })
        assert resp.status_code == 400

    def test_unknown_bank_is_400(self, client, finance_headers, customer):
        resp = client.post("/api/receipts", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 100,
            "payment_method": "Transfer",
            "bank_name": "Bank of Atlantis",
        })
        assert resp.status_code == 400

    def test_sales_cannot_record_receipts(self, client, sales_headers, customer):
        resp = client.post("/api/receipts", headers=sales_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 100,
            "payment_method": "Cash",
        })
        assert resp.status_code == 403


class TestCreditNotes:

    def test_create_credit_note(self, client, finance_headers, customer):
        resp = client.post("/api/credit-notes", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 300000,
            "reason": "Returned Goods",
            "description": "Two cartons damaged in transit",
            "items": [{"product_name": "Hari Bottled Water 75cl", "quantity": 2, "unit_price_cents": 150000}],
        })
        assert resp.status_code == 201
        assert resp.json["credit_note_number"] == "CN-0001"
        assert resp.json["items"][0]["line_total_cents"] == 300000

    def test_unknown_related_invoice_is_400(self, client, finance_headers, customer):
        resp = client.post("/api/credit-notes", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 100,
            "reason": "Damages",
            "related_invoice_id": 999999,
        })
        assert resp.status_code == 400

    def test_unknown_reason_is_400(self, client, finance_headers, customer):
        resp = client.post("/api/credit-notes", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 100,
            "reason": "Because",
        })
        assert resp.status_code == 400


# =============================================================================
# STATEMENTS
# =============================================================================


class TestStatement:

    def test_running_balance(self, client, sales_headers, finance_headers, customer, product):
        client.post("/api/sales", headers=sales_headers, json={
            "customer_id": customer.id,
            "payment_method": "Credit",
            "sale_date": "2026-03-01",
            "items": [{"product_id": product.id, "quantity": 10, "unit_price_cents": 150000}],
        })
        client.post("/api/receipts", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 1000000,
            "payment_method": "Cash",
            "receipt_date": "2026-03-05",
        })
        client.post("/api/credit-notes", headers=finance_headers, json={
            "ledger_account_id": customer.id,
            "amount_cents": 150000,
            "reason": "Damages",
            "credit_note_date": "2026-03-10",
        })

        resp = client.get(f"/api/ledger-accounts/{customer.id}/statement", headers=finance_headers)
        assert resp.status_code == 200
        statement = resp.json
        assert [e["type"] for e in statement["entries"]] == ["Sale", "Receipt", "Credit Note"]
        assert [e["balance_cents"] for e in statement["entries"]] == [1500000, 500000, 350000]
        assert statement["total_debit_cents"] == 1500000
        assert statement["total_credit_cents"] == 1150000
        assert statement["balance_cents"] == 350000
        assert statement["account"]["account_code"] == "CUST-001"

    def test_unknown_account_is_404(self, client, finance_headers):
        resp = client.get("/api/ledger-accounts/999999/statement", headers=finance_headers)
        assert resp.status_code == 404
