import logging
from typing import Any, Callable, Dict, Optional

from fastapi import HTTPException

import packages.config as config
from packages.db import SOURCES, source_exists, source_version
from services.views.periods import InvalidPeriodError

from .cache import get_or_set

logger = logging.getLogger("lifelog.api")


def require_period(parse: Callable[[Optional[str]], Any], value: Optional[str]) -> Any:
    try:
        return parse(value)
    except InvalidPeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None


def sources_status() -> Dict[str, bool]:
    return {name: source_exists(name) for name in SOURCES}


def cached_view(key: str, source: str, historical: bool, compute: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    """Serve a month/year view through the response cache.

    Past periods are only invalidated by a change of the source file; the
    current period also expires after ``CACHE_TTL_SECONDS``.
    """
    ttl = None if historical else config.CACHE_TTL_SECONDS
    return get_or_set(key, ttl, source_version(source), compute)


def view_or_missing(source: str, build: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    if not source_exists(source):
        logger.info("source_missing %s", source)
        return {"db": "missing"}
    return build()


def optional_view(source: str, build: Callable[[], Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Combined views treat a missing database as an empty section."""
    if not source_exists(source):
        return None
    return build()
