# certintel/core/config.py
import os
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    app_name: str = "CertIntel"
    env: str = "local"

    # =========================
    # Uploads
    # =========================
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # =========================
    # Text acquisition
    # =========================
    OCR_LANG: str = "eng"
    OCR_DPI: int = 300
    # PDF text layers shorter than this (whitespace collapsed) also get OCR'd
    OCR_MIN_TEXT_CHARS: int = 80
    TESSERACT_CMD: str | None = None

    # Runtime controls
    EXTRACTION_TIMEOUT_SECONDS: float = 30.0
    EXTRACTION_MAX_WORKERS: int = 4
    EXTRACTION_BACKEND: str = "thread"   # "thread" | "celery"

    # Field parsing
    DATE_DAYFIRST: bool = False

    # =========================
    # Celery
    # =========================
    REDIS_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str | None = None

    # =========================
    # Collaborator seeds (dev / demo only)
    # =========================
    DIRECTORY_SEED_PATH: str | None = None
    CLASS_CATALOG_SEED_PATH: str | None = None

    CORS_ALLOW_ORIGINS: str | None = None

    model_config = SettingsConfigDict(
        env_file=os.path.join(PROJECT_ROOT, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

settings = Settings()
