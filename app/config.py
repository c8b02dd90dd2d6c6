import os
from datetime import datetime
from pathlib import Path

# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent

# Database
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/worldcup.db")

# Security
SESSION_COOKIE_NAME = "worldcup_session"
SESSION_EXPIRE_DAYS = int(os.getenv("SESSION_EXPIRE_DAYS", "30"))

# Admin credentials (in production, use environment variables)
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _deadline(name: str, default: str) -> datetime:
    """Parse an ISO deadline from the environment as a naive UTC datetime."""
    return datetime.fromisoformat(os.getenv(name, default))


# Prediction deadlines (all naive UTC)
PREDICTION_DEADLINE_MINUTES = int(os.getenv("PREDICTION_DEADLINE_MINUTES", "15"))
TP1_TP2_DEADLINE = _deadline("TP1_TP2_DEADLINE", "2026-06-16T00:00:00")
TP3_DEADLINE = _deadline("TP3_DEADLINE", "2026-06-27T00:00:00")
DOUBLE_UP_DEADLINE = _deadline("DOUBLE_UP_DEADLINE", "2026-06-23T23:59:59")
RE_DOUBLE_UP_OPENS = _deadline("RE_DOUBLE_UP_OPENS", "2026-06-27T00:00:00")

# Off by default: TP3 only requires a TP1 on record
TP3_REQUIRE_ELIMINATED_TP1 = os.getenv("TP3_REQUIRE_ELIMINATED_TP1", "0") == "1"
