"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("CALENDAR_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "calendar.db"))
)
TEMPLATES_DIR = Path(__file__).parent.parent / "api" / "templates"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

DATE_FORMAT = "%Y-%m-%d"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# =============================================================================
# CLIENT CONFIGURATION
# =============================================================================

CALENDAR_API_URL = os.environ.get("CALENDAR_API_URL", "http://localhost:8000")
CLIENT_TIMEOUT_SECONDS = float(os.environ.get("CLIENT_TIMEOUT_SECONDS", "10"))
