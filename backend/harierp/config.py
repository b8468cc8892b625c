# backend/harierp/config.py
from __future__ import annotations
import os


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _split_csv(value: str) -> set[str]:
    return {item.strip() for item in value.split(",") if item.strip()}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = _getenv("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/harierp.sqlite3 unless DATABASE_URL points at MySQL/Postgres
    SQLALCHEMY_DATABASE_URI = _getenv(
        "DATABASE_URL",
        "sqlite:///harierp.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Browser origins allowed to call the API (the Next.js frontend)
    CORS_ALLOWED_ORIGINS = _split_csv(
        _getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    )

    # Sessions
    SESSION_IDLE_TIMEOUT_MINUTES = int(_getenv("SESSION_IDLE_TIMEOUT_MINUTES", "5"))
    SESSION_ABSOLUTE_TIMEOUT_HOURS = int(_getenv("SESSION_ABSOLUTE_TIMEOUT_HOURS", "12"))

    # Passwords
    BCRYPT_ROUNDS = int(_getenv("BCRYPT_ROUNDS", "12"))
    DEFAULT_RESET_PASSWORD = _getenv("DEFAULT_RESET_PASSWORD", "Password123!")

    # Image uploads
    UPLOAD_FOLDER = _getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads"))
    MAX_IMAGE_BYTES = int(_getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))
    # Request body limit; multipart framing needs room beyond the image itself
    UPLOAD_OVERHEAD_BYTES = 1024 * 1024
    MAX_CONTENT_LENGTH = MAX_IMAGE_BYTES + UPLOAD_OVERHEAD_BYTES

    # Tank raw materials fed by intake deliveries
    MILK_TANK_SKU = _getenv("MILK_TANK_SKU", "MILK-TANK-001")
    RAW_WATER_TANK_SKU = _getenv("RAW_WATER_TANK_SKU", "RAW-WATER-TANK-001")

    # Invoice letterhead
    COMPANY_NAME = _getenv("COMPANY_NAME", "Hari Industries Limited")
    COMPANY_ADDRESS = _getenv(
        "COMPANY_ADDRESS",
        "KM 143 Kano-Kaduna Expressway, Maraban Gwanda, Sabon Gari Zaria Kaduna State",
    )
    COMPANY_PHONE = _getenv("COMPANY_PHONE", "+234 800 123 4567")
    COMPANY_EMAIL = _getenv("COMPANY_EMAIL", "billing@hariindustries.com.ng")
    COMPANY_LOGO_URL = _getenv("COMPANY_LOGO_URL", "")

    ACTIVITY_LOG_RETENTION_DAYS = int(_getenv("ACTIVITY_LOG_RETENTION_DAYS", "365"))
    APP_VERSION = _getenv("APP_VERSION", "1.0.0")
