from datetime import datetime, timezone

from fastapi import APIRouter

from packages.config import APP_VERSION
from ..schemas import HealthResponse
from ..utils import sources_status


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "sources": sources_status(),
    }
