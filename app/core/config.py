import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class PtoSettings(BaseModel):
    # Annual allowance given to a freshly created balance snapshot
    default_total_days: int = Field(default=int(os.getenv("PTO_DEFAULT_TOTAL_DAYS", "21")))
    # Ceiling applied to used days on every recompute, independent of a snapshot's own total_days
    max_used_days: int = Field(default=int(os.getenv("PTO_MAX_USED_DAYS", "21")))
    sync_all_rate_limit: str = Field(default=os.getenv("SYNC_ALL_RATE_LIMIT", "10/minute"))

class Config(BaseModel):
    app_name: str = "School Admin PTO Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./database.db")

    # Leave balance policy
    pto: PtoSettings = PtoSettings()

    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    enable_metrics: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # CORS — comma-separated origins loaded from env.
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:5000,http://localhost:5173,"
                "http://127.0.0.1:5000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

# --- Startup Validation for Production ---
_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production against SQLite — set DATABASE_URL to a PostgreSQL instance.")
if settings.pto.max_used_days != settings.pto.default_total_days:
    _logger.warning(
        "PTO ceiling (%s) differs from default allowance (%s)",
        settings.pto.max_used_days,
        settings.pto.default_total_days,
    )
