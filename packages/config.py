from pathlib import Path
import os

try:
    from dotenv import load_dotenv
except ImportError:  # pragma: no cover - optional in some environments
    load_dotenv = None

ROOT = Path(__file__).resolve().parents[1]

if load_dotenv:
    load_dotenv(ROOT / ".env")

APP_VERSION = os.getenv("LIFELOG_APP_VERSION", "1.0.0")
RUN_MODE = os.getenv("LIFELOG_RUN_MODE", "dev").lower()
API_HOST = os.getenv("LIFELOG_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("LIFELOG_API_PORT", "8000"))

DB_DIR = Path(os.getenv("LIFELOG_DB_DIR", ROOT / "db"))
APPLEHEALTH_DB_PATH = Path(os.getenv("LIFELOG_APPLEHEALTH_DB_PATH", DB_DIR / "applehealth.sqlite"))
FOOTPRINT_DB_PATH = Path(os.getenv("LIFELOG_FOOTPRINT_DB_PATH", DB_DIR / "footprint.sqlite"))
PIXIU_DB_PATH = Path(os.getenv("LIFELOG_PIXIU_DB_PATH", DB_DIR / "pixiu.sqlite"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "LIFELOG_CORS_ORIGINS",
        "http://127.0.0.1:3000,http://localhost:3000",
    ).split(",")
    if origin.strip()
]

# Month/year response cache. Past periods never expire by time.
CACHE_MAX_ENTRIES = int(os.getenv("LIFELOG_CACHE_MAX_ENTRIES", "256"))
CACHE_TTL_SECONDS = int(os.getenv("LIFELOG_CACHE_TTL_SECONDS", "300"))
