"""
Purchase order tests.

Verifies:
- Totals include shipping and other charges
- Receiving adds stock to matching raw materials or creates new ones
- Received and cancelled orders are closed
"""

from harierp.models import RawMaterial


def _order(client, headers, supplier, *items, **extra):
    payload = {"supplier_id": supplier.id, "items": list(items)}
    payload.update(extra)
    return client.post("/api/purchase-orders", headers=headers, json=payload)


class TestPurchaseOrders:

    def test_create_totals(self, client, production_headers, supplier):
        resp = _order(
            client, production_headers, supplier,
            {"product_name": "Preform 75cl", "quantity": 1000, "unit_cost_cents": 2500},
            {"product_name": "Shrink Wrap", "quantity": 3, "unit_cost_cents": 450000, "category": "Packaging Cartons"},
            shipping_cents=100000,
            other_charges_cents=5000,
            order_date="2026-03-01",
            expected_delivery_date="2026-03-08",
        )
        assert resp.status_code == 201
        po = resp.json
        assert po["po_number"] == "PO-0001"
        assert po["status"] == "Draft"
        assert po["supplier"] == {"id": supplier.id, "name": "Kaduna Packaging Co"}
        assert po["subtotal_cents"] == 3850000
        assert po["total_cents"] == 3955000
        assert po["received_at"] is None

    def test_cannot_create_as_received(self, client, production_headers, supplier):
        resp = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1},
            status="Received",
        )
        assert resp.status_code == 400

    def test_delivery_before_order_is_400(self, client, production_headers, supplier):
        resp = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1},
            order_date="2026-03-10",
            expected_delivery_date="2026-03-01",
        )
        assert resp.status_code == 400

    def test_unknown_category_is_400(self, client, production_headers, supplier):
        resp = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1, "category": "Snacks"},
        )
        assert resp.status_code == 400

    def test_update_replaces_items(self, client, production_headers, supplier):
        po = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 10, "unit_cost_cents": 100},
        ).json
        resp = client.put(f"/api/purchase-orders/{po['id']}", headers=production_headers, json={
            "status": "Ordered",
            "shipping_cents": 500,
            "items": [{"product_name": "Caps", "quantity": 20, "unit_cost_cents": 100}],
        })
        assert resp.status_code == 200
        assert resp.json["status"] == "Ordered"
        assert resp.json["total_cents"] == 2500
        assert len(resp.json["items"]) == 1

    def test_receive_updates_and_creates_materials(self, client, production_headers, supplier, material, db_session):
        po = _order(
            client, production_headers, supplier,
            {"product_name": "preform 75CL", "quantity": 1000, "unit_cost_cents": 2500},
            {"product_name": "Sodium Hypochlorite", "quantity": 25, "unit_cost_cents": 80000,
             "category": "Treatment Chemicals", "unit_of_measure": "Litres"},
            {"product_name": "Stretch Film", "quantity": 4, "unit_cost_cents": 9000},
        ).json

        resp = client.post(f"/api/purchase-orders/{po['id']}/receive", headers=production_headers)
        assert resp.status_code == 200
        assert resp.json["status"] == "Received"
        assert resp.json["received_at"] is not None
        assert all(item["raw_material_id"] for item in resp.json["items"])

        assert db_session.get(RawMaterial, material.id).stock == 1500

        chemical = db_session.query(RawMaterial).filter_by(name="Sodium Hypochlorite").one()
        assert chemical.sku == "RM-0001"
        assert chemical.category == "Treatment Chemicals"
        assert chemical.unit_of_measure == "Litres"
        assert chemical.stock == 25
        assert chemical.supplier_id == supplier.id

        film = db_session.query(RawMaterial).filter_by(name="Stretch Film").one()
        assert film.sku == "RM-0002"
        assert film.category == "Other Supplies"
        assert film.unit_of_measure == "Unit"

    def test_receive_twice_is_409(self, client, production_headers, supplier, db_session):
        po = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 10, "unit_cost_cents": 100},
        ).json
        url = f"/api/purchase-orders/{po['id']}/receive"
        assert client.post(url, headers=production_headers).status_code == 200
        assert client.post(url, headers=production_headers).status_code == 409
        assert db_session.query(RawMaterial).filter_by(name="Caps").one().stock == 10

    def test_received_order_cannot_be_edited(self, client, production_headers, supplier):
        po = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 10, "unit_cost_cents": 100},
        ).json
        client.post(f"/api/purchase-orders/{po['id']}/receive", headers=production_headers)
        resp = client.put(f"/api/purchase-orders/{po['id']}", headers=production_headers, json={"notes": "late"})
        assert resp.status_code == 409

    def test_cancelled_order_cannot_be_received(self, client, production_headers, supplier):
        po = _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 10, "unit_cost_cents": 100},
            status="Cancelled",
        ).json
        resp = client.post(f"/api/purchase-orders/{po['id']}/receive", headers=production_headers)
        assert resp.status_code == 409

    def test_list_by_status(self, client, production_headers, supplier):
        _order(client, production_headers, supplier, {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1})
        _order(
            client, production_headers, supplier,
            {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1},
            status="Ordered",
        )
        listed = client.get("/api/purchase-orders?status=Ordered", headers=production_headers).json
        assert listed["count"] == 1
        assert listed["items"][0]["po_number"] == "PO-0002"

    def test_sales_cannot_manage_orders(self, client, sales_headers, supplier):
        resp = _order(client, sales_headers, supplier, {"product_name": "Caps", "quantity": 1, "unit_cost_cents": 1})
        assert resp.status_code == 403
