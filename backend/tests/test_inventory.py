"""
Finished-goods catalogue and stock log tests.

Verifies:
- Products: create with opening stock, SKU uniqueness, stock not editable
- Batches are all-or-nothing and never drive stock negative
- Finish Bay submissions only touch stock on approval
- Deleting and editing logs re-applies their effect on stock
"""

from harierp.extensions import db
from harierp.models import ActivityLog, Product, ProductStockLog


def _batch(client, headers, *items):
    return client.post("/api/stock-logs/batch", headers=headers, json={"items": list(items)})


def _submit(client, headers, product_id, quantity):
    return client.post("/api/stock-submissions", headers=headers, json={
        "items": [{"product_id": product_id, "quantity_adjusted": quantity}],
    })


# =============================================================================
# PRODUCTS
# =============================================================================


class TestProducts:

    def test_create_with_opening_stock(self, client, admin_headers, db_session):
        resp = client.post("/api/products", headers=admin_headers, json={
            "sku": "SW-50CL",
            "name": "Hari Sachet Water",
            "category": "Sachet Water",
            "unit_of_measure": "Bag",
            "price_cents": 30000,
            "stock": 40,
            "price_tiers": [{"price_level": "B3-Z3/DLR", "price_cents": 28000}],
        })
        assert resp.status_code == 201
        assert resp.json["stock"] == 40
        assert resp.json["price_tiers"] == [{"price_level": "B3-Z3/DLR", "price_cents": 28000}]

        log = db_session.query(ProductStockLog).filter_by(product_id=resp.json["id"]).one()
        assert log.adjustment_type == "INITIAL_STOCK"
        assert log.previous_stock == 0
        assert log.new_stock == 40
        assert log.log_number == "LOG-000001"

    def test_duplicate_sku_is_409(self, client, admin_headers, product):
        resp = client.post("/api/products", headers=admin_headers, json={
            "sku": product.sku,
            "name": "Copy",
            "category": "Bottled Water",
            "unit_of_measure": "Carton",
            "price_cents": 1,
        })
        assert resp.status_code == 409

    def test_unknown_category_is_400(self, client, admin_headers):
        resp = client.post("/api/products", headers=admin_headers, json={
            "sku": "X-1",
            "name": "Mystery",
            "category": "Fizzy Drinks",
            "unit_of_measure": "PCS",
            "price_cents": 100,
        })
        assert resp.status_code == 400

    def test_stock_is_not_editable(self, client, admin_headers, product):
        resp = client.put(f"/api/products/{product.id}", headers=admin_headers, json={"stock": 5})
        assert resp.status_code == 400

    def test_update_price(self, client, admin_headers, product):
        resp = client.put(f"/api/products/{product.id}", headers=admin_headers, json={"price_cents": 160000})
        assert resp.status_code == 200
        assert resp.json["price_cents"] == 160000

    def test_low_stock_filter(self, client, admin_headers, product, db_session):
        product.stock = 10
        db_session.commit()
        resp = client.get("/api/products?low_stock=true", headers=admin_headers)
        assert [p["sku"] for p in resp.json["items"]] == [product.sku]
        assert resp.json["items"][0]["is_low_stock"] is True

    def test_missing_product_is_404(self, client, admin_headers, db_session):
        assert client.get("/api/products/999999", headers=admin_headers).status_code == 404


# =============================================================================
# STOCK LOG BATCHES
# =============================================================================


class TestStockLogBatch:

    def test_batch_updates_stock_and_logs(self, client, admin_headers, product, db_session):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 20, "adjustment_type": "ADDITION"},
            {"product_id": product.id, "quantity_adjusted": -5, "adjustment_type": "MANUAL_CORRECTION_SUBTRACT"},
        )
        assert resp.status_code == 201
        first, second = resp.json["items"]
        assert (first["previous_stock"], first["new_stock"]) == (100, 120)
        assert (second["previous_stock"], second["new_stock"]) == (120, 115)
        assert db_session.get(Product, product.id).stock == 115

    def test_batch_is_all_or_nothing(self, client, admin_headers, product, db_session):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 10, "adjustment_type": "ADDITION"},
            {"product_id": product.id, "quantity_adjusted": -500, "adjustment_type": "MANUAL_CORRECTION_SUBTRACT"},
        )
        assert resp.status_code == 409
        assert resp.json["error"] == (
            "Insufficient stock for product Hari Bottled Water 75cl. Required: 500, Available: 110."
        )
        db.session.expire_all()
        assert db_session.get(Product, product.id).stock == 100
        assert db_session.query(ProductStockLog).count() == 0

    def test_sign_must_match_type(self, client, admin_headers, product):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 5, "adjustment_type": "MANUAL_CORRECTION_SUBTRACT"},
        )
        assert resp.status_code == 400

    def test_zero_quantity_is_400(self, client, admin_headers, product):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 0, "adjustment_type": "ADDITION"},
        )
        assert resp.status_code == 400

    def test_sale_deduction_cannot_be_posted(self, client, admin_headers, product):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": -1, "adjustment_type": "SALE_DEDUCTION"},
        )
        assert resp.status_code == 400

    def test_unknown_product_is_404(self, client, admin_headers, db_session):
        resp = _batch(
            client, admin_headers,
            {"product_id": 999999, "quantity_adjusted": 1, "adjustment_type": "ADDITION"},
        )
        assert resp.status_code == 404

    def test_empty_batch_is_400(self, client, admin_headers):
        assert _batch(client, admin_headers).status_code == 400


# =============================================================================
# FINISH BAY APPROVALS
# =============================================================================


class TestSubmissions:

    def test_submission_does_not_touch_stock(self, client, production_headers, product, db_session):
        resp = _submit(client, production_headers, product.id, 30)
        assert resp.status_code == 201
        log = resp.json["items"][0]
        assert log["adjustment_type"] == "PENDING_APPROVAL"
        assert log["new_stock"] == 130
        assert db_session.get(Product, product.id).stock == 100

        pending = client.get("/api/stock-submissions/pending", headers=production_headers).json
        assert pending["count"] == 1

    def test_approve_adds_stock(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        resp = client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        assert resp.status_code == 200
        assert resp.json["adjustment_type"] == "PRODUCTION_YIELD"
        assert resp.json["approved_by"] == "production"
        assert db_session.get(Product, product.id).stock == 130
        assert client.get("/api/stock-submissions/pending", headers=production_headers).json["count"] == 0

    def test_approve_with_corrected_quantity(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        resp = client.post(
            f"/api/stock-logs/{log_id}/approve",
            headers=production_headers,
            json={"quantity_adjusted": 28, "notes": "Two cartons damaged"},
        )
        assert resp.json["quantity_adjusted"] == 28
        assert resp.json["notes"] == "Two cartons damaged"
        assert db_session.get(Product, product.id).stock == 128

    def test_second_approval_is_409(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        resp = client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        assert resp.status_code == 409
        assert "already been processed" in resp.json["error"]
        assert db_session.get(Product, product.id).stock == 130

    def test_reject_leaves_stock(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        resp = client.post(f"/api/stock-logs/{log_id}/reject", headers=production_headers)
        assert resp.status_code == 200
        assert resp.json["adjustment_type"] == "REJECTED_BY_INVENTORY"
        assert db_session.get(Product, product.id).stock == 100

        resp = client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        assert resp.status_code == 409

    def test_history_lists_processed_submissions(self, client, production_headers, product):
        first = _submit(client, production_headers, product.id, 5).json["items"][0]["id"]
        _submit(client, production_headers, product.id, 6)
        client.post(f"/api/stock-logs/{first}/approve", headers=production_headers)

        history = client.get("/api/stock-submissions/history", headers=production_headers).json
        types = sorted(item["adjustment_type"] for item in history["items"])
        assert types == ["PENDING_APPROVAL", "PRODUCTION_YIELD"]

    def test_approval_is_recorded_in_activity(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 3).json["items"][0]["id"]
        client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        entry = db_session.query(ActivityLog).filter_by(activity_type="Inventory Approval").one()
        assert entry.user_name == "production"

    def test_non_string_notes_are_stored_as_text(self, client, production_headers, product):
        first = _submit(client, production_headers, product.id, 3).json["items"][0]["id"]
        second = _submit(client, production_headers, product.id, 4).json["items"][0]["id"]

        resp = client.post(f"/api/stock-logs/{first}/approve", headers=production_headers, json={"notes": 12})
        assert resp.status_code == 200
        assert resp.json["notes"] == "12"

        resp = client.post(f"/api/stock-logs/{second}/reject", headers=production_headers, json={"notes": 7.5})
        assert resp.status_code == 200
        assert resp.json["notes"] == "7.5"

    def test_unknown_log_is_404(self, client, production_headers, db_session):
        assert client.post("/api/stock-logs/999999/approve", headers=production_headers).status_code == 404
        assert client.post("/api/stock-logs/999999/reject", headers=production_headers).status_code == 404

    def test_second_rejection_is_409(self, client, production_headers, product):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        assert client.post(f"/api/stock-logs/{log_id}/reject", headers=production_headers).status_code == 200
        resp = client.post(f"/api/stock-logs/{log_id}/reject", headers=production_headers)
        assert resp.status_code == 409
        assert "already been processed" in resp.json["error"]

    def test_approve_when_product_is_gone_is_404(self, client, production_headers, product, db_session):
        log_id = _submit(client, production_headers, product.id, 30).json["items"][0]["id"]
        products = Product.__table__
        db_session.execute(products.delete().where(products.c.id == product.id))
        db_session.commit()
        db.session.expire_all()

        resp = client.post(f"/api/stock-logs/{log_id}/approve", headers=production_headers)
        assert resp.status_code == 404
        assert db_session.get(ProductStockLog, log_id).adjustment_type == "PENDING_APPROVAL"


# =============================================================================
# EDITING AND DELETING LOGS
# =============================================================================


class TestLogMaintenance:

    def test_delete_reverses_stock(self, client, admin_headers, product, db_session):
        log_id = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 25, "adjustment_type": "ADDITION"},
        ).json["items"][0]["id"]
        resp = client.delete(f"/api/stock-logs/{log_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert db_session.get(Product, product.id).stock == 100
        assert db_session.get(ProductStockLog, log_id) is None

    def test_delete_pending_leaves_stock(self, client, admin_headers, product, db_session):
        log_id = _submit(client, admin_headers, product.id, 10).json["items"][0]["id"]
        client.delete(f"/api/stock-logs/{log_id}", headers=admin_headers)
        assert db_session.get(Product, product.id).stock == 100

    def test_sale_deduction_cannot_be_deleted(self, client, admin_headers, product, customer, db_session):
        client.post("/api/sales", headers=admin_headers, json={
            "customer_id": customer.id,
            "payment_method": "Cash",
            "items": [{"product_id": product.id, "quantity": 2, "unit_price_cents": 150000}],
        })
        log = db_session.query(ProductStockLog).filter_by(adjustment_type="SALE_DEDUCTION").one()
        resp = client.delete(f"/api/stock-logs/{log.id}", headers=admin_headers)
        assert resp.status_code == 409

    def test_delete_cannot_drive_stock_negative(self, client, admin_headers, product, db_session):
        log_id = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 10, "adjustment_type": "ADDITION"},
        ).json["items"][0]["id"]
        _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": -105, "adjustment_type": "MANUAL_CORRECTION_SUBTRACT"},
        )
        resp = client.delete(f"/api/stock-logs/{log_id}", headers=admin_headers)
        assert resp.status_code == 409
        assert db_session.get(Product, product.id).stock == 5

    def test_patch_quantity_reapplies_difference(self, client, admin_headers, product, db_session):
        log_id = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 10, "adjustment_type": "ADDITION"},
        ).json["items"][0]["id"]
        resp = client.patch(f"/api/stock-logs/{log_id}", headers=admin_headers, json={"quantity_adjusted": 4})
        assert resp.status_code == 200
        assert resp.json["new_stock"] == 104
        assert db_session.get(Product, product.id).stock == 104

    def test_patch_rejects_unknown_fields(self, client, admin_headers, product):
        log_id = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 10, "adjustment_type": "ADDITION"},
        ).json["items"][0]["id"]
        resp = client.patch(f"/api/stock-logs/{log_id}", headers=admin_headers, json={"product_id": 1})
        assert resp.status_code == 400

    def test_log_numbers_are_sequential(self, client, admin_headers, product):
        resp = _batch(
            client, admin_headers,
            {"product_id": product.id, "quantity_adjusted": 1, "adjustment_type": "ADDITION"},
            {"product_id": product.id, "quantity_adjusted": 1, "adjustment_type": "RETURN_ADDITION"},
        )
        assert [item["log_number"] for item in resp.json["items"]] == ["LOG-000001", "LOG-000002"]
