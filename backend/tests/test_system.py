"""
System, dashboard, activity feed and upload tests.
"""

import io

from harierp import create_app
from harierp.services.document_service import next_document_number
from harierp.services.upload_service import detect_image_format

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_health(client, db_session):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json["status"] == "healthy"
    assert resp.json["checks"]["database"]["status"] == "healthy"


def test_version(client):
    resp = client.get("/version")
    assert resp.json == {"name": "harierp", "version": "1.0.0"}


def test_request_limit_follows_image_limit():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "MAX_IMAGE_BYTES": 10 * 1024 * 1024,
    })
    assert app.config["MAX_CONTENT_LENGTH"] == 10 * 1024 * 1024 + app.config["UPLOAD_OVERHEAD_BYTES"]


def test_document_numbers_are_sequential(app, db_session):
    assert next_document_number("STOCK_LOG") == "LOG-000001"
    assert next_document_number("STOCK_LOG") == "LOG-000002"
    assert next_document_number("MATERIAL_USAGE") == "USE-00001"
    assert next_document_number("SALE") == "SALE-0001"


# =============================================================================
# DASHBOARD AND ACTIVITY
# =============================================================================


class TestDashboard:

    def test_summary(self, client, admin_headers, sales_headers, customer, product, tanks, db_session):
        product.stock = 15.0
        db_session.commit()
        client.post("/api/sales", headers=sales_headers, json={
            "customer_id": customer.id,
            "payment_method": "Cash",
            "items": [{"product_id": product.id, "quantity": 5, "unit_price_cents": 150000}],
        })

        resp = client.get("/api/dashboard/summary", headers=admin_headers)
        assert resp.status_code == 200
        summary = resp.json
        assert summary["product_count"] == 1
        assert [p["name"] for p in summary["low_stock_products"]] == ["Hari Bottled Water 75cl"]
        assert summary["sales_today"] == {"count": 1, "total_cents": 750000}
        assert summary["sales_this_month"]["count"] == 1
        assert summary["pending_approvals"] == 0
        assert summary["tank_levels"] == {"milk": 0.0, "water": 0.0}

    def test_missing_tanks_report_none(self, client, admin_headers):
        summary = client.get("/api/dashboard/summary", headers=admin_headers).json
        assert summary["tank_levels"] == {"milk": None, "water": None}

    def test_lab_cannot_view_dashboard(self, client, lab_headers):
        assert client.get("/api/dashboard/summary", headers=lab_headers).status_code == 403


class TestActivityFeed:

    def test_feed_filters_by_type(self, client, sales_headers, customer, product):
        client.post("/api/sales", headers=sales_headers, json={
            "customer_id": customer.id,
            "payment_method": "Cash",
            "items": [{"product_id": product.id, "quantity": 1, "unit_price_cents": 150000}],
        })
        client.post("/api/invoices", headers=sales_headers, json={
            "customer_id": customer.id,
            "items": [{"product_name": "Service", "quantity": 1, "unit_price_cents": 100}],
        })

        # User registrations and logins are in the feed too
        feed = client.get("/api/activity", headers=sales_headers).json
        assert [e["activity_type"] for e in feed["items"][:2]] == ["Invoice", "Sale"]
        assert feed["items"][0]["user_name"] == "sales"
        assert {e["activity_type"] for e in feed["items"][2:]} == {"User"}

        sales_only = client.get("/api/activity?type=Sale", headers=sales_headers).json
        assert sales_only["count"] == 1

        limited = client.get("/api/activity?limit=1", headers=sales_headers).json
        assert limited["count"] == 1


# =============================================================================
# UPLOADS
# =============================================================================


class TestUploads:

    def test_signature_detection(self):
        assert detect_image_format(PNG_BYTES[:16]) == "png"
        assert detect_image_format(b"\xff\xd8\xff\xe0") == "jpeg"
        assert detect_image_format(b"GIF89a") == "gif"
        assert detect_image_format(b"%PDF-1.7") is None

    def test_upload_and_serve(self, client, admin_headers):
        resp = client.post(
            "/api/uploads/images",
            headers=admin_headers,
            data={"image": (io.BytesIO(PNG_BYTES), "label.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        assert resp.json["filename"].endswith(".png")
        assert resp.json["url"].endswith(f"/uploads/{resp.json['filename']}")

        served = client.get(f"/uploads/{resp.json['filename']}")
        assert served.status_code == 200
        assert served.data == PNG_BYTES

    def test_mismatched_signature_is_400(self, client, admin_headers):
        resp = client.post(
            "/api/uploads/images",
            headers=admin_headers,
            data={"image": (io.BytesIO(b"%PDF-1.7 not an image"), "label.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_bad_extension_is_400(self, client, admin_headers):
        resp = client.post(
            "/api/uploads/images",
            headers=admin_headers,
            data={"image": (io.BytesIO(PNG_BYTES), "label.exe")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_missing_field_is_400(self, client, admin_headers):
        resp = client.post("/api/uploads/images", headers=admin_headers, data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.json["error"] == "image is required"

    def test_sales_cannot_upload(self, client, sales_headers):
        resp = client.post(
            "/api/uploads/images",
            headers=sales_headers,
            data={"image": (io.BytesIO(PNG_BYTES), "label.png")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 403
