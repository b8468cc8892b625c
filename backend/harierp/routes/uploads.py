# Overview: Flask API routes for image uploads; parses input and returns JSON responses.

from flask import Blueprint, request, current_app, send_from_directory, url_for

from ..services import upload_service
from ..decorators import require_auth, require_permission

uploads_bp = Blueprint("uploads", __name__)


@uploads_bp.post("/api/uploads/images")
@require_auth
@require_permission("UPLOAD_IMAGES")
def upload_image():
    """Multipart form field "image"; returns the public URL of the stored file."""
    if "image" not in request.files:
        return {"error": "image is required"}, 400

    stored_name = upload_service.save_image(request.files["image"])
    return {
        "filename": stored_name,
        "url": url_for("uploads.serve_upload", filename=stored_name, _external=True),
    }, 201


@uploads_bp.get("/uploads/<path:filename>")
def serve_upload(filename: str):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)
