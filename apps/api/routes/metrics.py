from fastapi import APIRouter, Response

from packages.metrics import render_text
from ..cache import size as cache_size

router = APIRouter()


@router.get("/metrics")
def metrics():
    body = render_text() + f"cache_entries {cache_size()}\n"
    return Response(content=body, media_type="text/plain")
