"""
Store, production, intake and laboratory tests.

Verifies:
- Raw material usage deducts stock and refuses to go negative
- Production batches consume materials all-or-nothing
- Milk and water deliveries fill their tanks
- Lab tests derive their overall status
"""

from harierp.extensions import db
from harierp.models import ActivityLog, IntakeDelivery, RawMaterial, RawMaterialUsage
from harierp.services.lab_service import overall_status


# =============================================================================
# RAW MATERIALS
# =============================================================================


class TestRawMaterials:

    def test_create_and_update(self, client, production_headers, supplier):
        resp = client.post("/api/raw-materials", headers=production_headers, json={
            "sku": "CAP-BLUE",
            "name": "Blue Caps",
            "category": "Bottles & Caps",
            "unit_of_measure": "PCS",
            "stock": 1000,
            "supplier_id": supplier.id,
        })
        assert resp.status_code == 201
        assert resp.json["supplier_name"] == "Kaduna Packaging Co"

        # Store counts may correct stock directly
        resp = client.put(f"/api/raw-materials/{resp.json['id']}", headers=production_headers, json={"stock": 950})
        assert resp.status_code == 200
        assert resp.json["stock"] == 950

    def test_unknown_supplier_is_400(self, client, production_headers):
        resp = client.post("/api/raw-materials", headers=production_headers, json={
            "sku": "CAP-RED",
            "name": "Red Caps",
            "category": "Bottles & Caps",
            "unit_of_measure": "PCS",
            "supplier_id": 999999,
        })
        assert resp.status_code == 400

    def test_negative_stock_is_400(self, client, production_headers):
        resp = client.post("/api/raw-materials", headers=production_headers, json={
            "sku": "CAP-RED",
            "name": "Red Caps",
            "category": "Bottles & Caps",
            "unit_of_measure": "PCS",
            "stock": -1,
        })
        assert resp.status_code == 400

    def test_record_usage(self, client, production_headers, material, db_session):
        resp = client.post("/api/raw-materials/usage", headers=production_headers, json={
            "raw_material_id": material.id,
            "quantity_used": 120,
            "department": "Packaging",
            "usage_date": "2026-03-02",
        })
        assert resp.status_code == 201
        assert resp.json["usage_number"] == "USE-00001"
        assert resp.json["recorded_by"] == "production"
        assert db_session.get(RawMaterial, material.id).stock == 380

        listed = client.get(
            f"/api/raw-materials/usage?raw_material_id={material.id}", headers=production_headers
        ).json
        assert listed["count"] == 1

    def test_usage_beyond_stock_is_409(self, client, production_headers, material, db_session):
        resp = client.post("/api/raw-materials/usage", headers=production_headers, json={
            "raw_material_id": material.id,
            "quantity_used": 501,
            "department": "Production",
        })
        assert resp.status_code == 409
        assert resp.json["error"] == "Insufficient stock for Preform 75cl. Required: 501, Available: 500."
        assert db_session.query(RawMaterialUsage).count() == 0

    def test_unknown_department_is_400(self, client, production_headers, material):
        resp = client.post("/api/raw-materials/usage", headers=production_headers, json={
            "raw_material_id": material.id,
            "quantity_used": 1,
            "department": "Marketing",
        })
        assert resp.status_code == 400


# =============================================================================
# PRODUCTION BATCHES
# =============================================================================


class TestProductionBatches:

    def _labels(self, db_session):
        labels = RawMaterial(
            sku="LBL-75",
            name="Labels 75cl",
            category="Labels & Seals",
            unit_of_measure="PCS",
            stock=50.0,
        )
        db_session.add(labels)
        db_session.commit()
        return labels

    def test_batch_consumes_materials(self, client, production_headers, material, db_session):
        labels = self._labels(db_session)
        resp = client.post("/api/production/batches", headers=production_headers, json={
            "batch_id": "B-0412",
            "production_date": "2026-03-02",
            "consumed_items": [
                {"material_id": material.id, "quantity_used": 100},
                {"material_id": labels.id, "quantity_used": 40},
            ],
        })
        assert resp.status_code == 201
        assert resp.json["item_count"] == 2
        assert [i["usage_number"] for i in resp.json["consumed_items"]] == ["PROD-B-0412-1", "PROD-B-0412-2"]
        assert all(i["department"] == "Production" for i in resp.json["consumed_items"])
        assert db_session.get(RawMaterial, material.id).stock == 400
        assert db_session.get(RawMaterial, labels.id).stock == 10

        batches = client.get("/api/production/batches", headers=production_headers).json
        assert batches["items"][0]["batch_id"] == "B-0412"
        assert batches["items"][0]["total_quantity_used"] == 140

    def test_batch_is_all_or_nothing(self, client, production_headers, material, db_session):
        labels = self._labels(db_session)
        resp = client.post("/api/production/batches", headers=production_headers, json={
            "batch_id": "B-0413",
            "consumed_items": [
                {"material_id": material.id, "quantity_used": 100},
                {"material_id": labels.id, "quantity_used": 60},
            ],
        })
        assert resp.status_code == 409
        db.session.expire_all()
        assert db_session.get(RawMaterial, material.id).stock == 500
        assert db_session.query(RawMaterialUsage).count() == 0

    def test_duplicate_batch_id_is_409(self, client, production_headers, material):
        payload = {
            "batch_id": "B-0414",
            "consumed_items": [{"material_id": material.id, "quantity_used": 1}],
        }
        assert client.post("/api/production/batches", headers=production_headers, json=payload).status_code == 201
        assert client.post("/api/production/batches", headers=production_headers, json=payload).status_code == 409

    def test_missing_batch_id_is_400(self, client, production_headers, material):
        resp = client.post("/api/production/batches", headers=production_headers, json={
            "consumed_items": [{"material_id": material.id, "quantity_used": 1}],
        })
        assert resp.status_code == 400


# =============================================================================
# INTAKE
# =============================================================================


class TestIntake:

    def _cooperative(self, client, headers):
        return client.post("/api/milk-suppliers", headers=headers, json={
            "supplier_type": "Cooperative",
            "name": "Sabon Gari Dairy Cooperative",
            "code": "COOP-01",
            "chairman_name": "Musa Bello",
            "member_count": 42,
        }).json

    def test_individual_supplier_drops_cooperative_fields(self, client, lab_headers):
        resp = client.post("/api/milk-suppliers", headers=lab_headers, json={
            "supplier_type": "Individual",
            "name": "Aisha Farms",
            "code": "IND-01",
            "chairman_name": "Should be dropped",
        })
        assert resp.status_code == 201
        assert resp.json["chairman_name"] is None

    def test_milk_collection_fills_tank(self, client, lab_headers, tanks, db_session):
        supplier = self._cooperative(client, lab_headers)
        resp = client.post("/api/intake/milk", headers=lab_headers, json={
            "delivery_id": "MC-0001",
            "delivery_date": "2026-03-02",
            "supplier_id": supplier["id"],
            "quantity_ltrs": 350.5,
            "fat_percentage": 3.8,
            "temperature": 4,
        })
        assert resp.status_code == 201
        assert resp.json["supplier_name"] == "Sabon Gari Dairy Cooperative"
        assert resp.json["fat_percentage"] == 3.8
        assert db_session.get(RawMaterial, tanks["milk"].id).stock == 350.5

        tank = client.get("/api/intake/tanks/milk", headers=lab_headers).json
        assert tank["level"] == 350.5

        entry = db_session.query(ActivityLog).filter_by(activity_type="Milk Collection").one()
        assert "MC-0001" in entry.message

    def test_water_delivery_uses_ledger_supplier(self, client, lab_headers, tanks, supplier, db_session):
        resp = client.post("/api/intake/water", headers=lab_headers, json={
            "delivery_id": "WD-0001",
            "delivery_date": "2026-03-02",
            "supplier_id": supplier.id,
            "quantity_ltrs": 10000,
            "ph_level": 7.1,
        })
        assert resp.status_code == 201
        assert resp.json["kind"] == "WATER"
        assert db_session.get(RawMaterial, tanks["water"].id).stock == 10000

    def test_missing_tank_is_409(self, client, lab_headers, supplier, db_session):
        resp = client.post("/api/intake/water", headers=lab_headers, json={
            "delivery_id": "WD-0002",
            "delivery_date": "2026-03-02",
            "supplier_id": supplier.id,
            "quantity_ltrs": 100,
        })
        assert resp.status_code == 409
        assert "RAW-WATER-TANK-001" in resp.json["error"]
        assert db_session.query(IntakeDelivery).count() == 0

    def test_duplicate_delivery_id_is_409(self, client, lab_headers, tanks, supplier):
        payload = {
            "delivery_id": "WD-0003",
            "delivery_date": "2026-03-02",
            "supplier_id": supplier.id,
            "quantity_ltrs": 100,
        }
        assert client.post("/api/intake/water", headers=lab_headers, json=payload).status_code == 201
        assert client.post("/api/intake/water", headers=lab_headers, json=payload).status_code == 409

    def test_unknown_milk_supplier_is_404(self, client, lab_headers, tanks):
        resp = client.post("/api/intake/milk", headers=lab_headers, json={
            "delivery_id": "MC-0002",
            "delivery_date": "2026-03-02",
            "supplier_id": 999999,
            "quantity_ltrs": 10,
        })
        assert resp.status_code == 404

    def test_deliveries_filter_by_kind(self, client, lab_headers, tanks, supplier):
        client.post("/api/intake/water", headers=lab_headers, json={
            "delivery_id": "WD-0004",
            "delivery_date": "2026-03-02",
            "supplier_id": supplier.id,
            "quantity_ltrs": 100,
        })
        assert client.get("/api/intake/deliveries?kind=water", headers=lab_headers).json["count"] == 1
        assert client.get("/api/intake/deliveries?kind=milk", headers=lab_headers).json["count"] == 0


# =============================================================================
# LABORATORY
# =============================================================================


class TestLabTests:

    def test_overall_status_rules(self):
        assert overall_status(["Pass", "Pass", "Pass"]) == "Pass"
        assert overall_status(["Pass", "Pending", "Pass"]) == "Pending"
        assert overall_status(["Pending", "Fail", "Pass"]) == "Fail"

    def test_create_lab_test(self, client, lab_headers):
        resp = client.post("/api/lab-tests", headers=lab_headers, json={
            "batch_number": "B-0412",
            "test_date": "2026-03-02",
            "product_name": "Hari Bottled Water 75cl",
            "ph_level": 7.2,
            "tds_level": 110,
            "microbiological_test": "Pass",
            "chemical_test": "Pass",
        })
        assert resp.status_code == 201
        assert resp.json["physical_test"] == "Pending"
        assert resp.json["overall_status"] == "Pending"
        assert resp.json["tested_by"] == "lab"

    def test_failed_result_fails_the_test(self, client, lab_headers):
        resp = client.post("/api/lab-tests", headers=lab_headers, json={
            "batch_number": "B-0413",
            "test_date": "2026-03-02",
            "product_name": "Hari Bottled Water 75cl",
            "microbiological_test": "Fail",
            "chemical_test": "Pass",
            "physical_test": "Pass",
        })
        assert resp.json["overall_status"] == "Fail"
        listed = client.get("/api/lab-tests?status=Fail", headers=lab_headers).json
        assert listed["count"] == 1

    def test_invalid_result_is_400(self, client, lab_headers):
        resp = client.post("/api/lab-tests", headers=lab_headers, json={
            "batch_number": "B-0414",
            "test_date": "2026-03-02",
            "product_name": "Water",
            "chemical_test": "Maybe",
        })
        assert resp.status_code == 400
