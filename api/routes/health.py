"""Health check routes"""

from fastapi import APIRouter, Depends
import logging

from api.dependencies import get_cache
from adapters.cache_adapter import SafeCache

router = APIRouter(tags=["Health"])
logger = logging.getLogger("pantrychef.api.health")


@router.get("/health-check")
def health_check(cache: SafeCache = Depends(get_cache)):
    """Basic health check; the cache is soft state so it only degrades status"""
    cache_ok = cache.ping()
    return {
        "status": "ok" if cache_ok else "degraded",
        "service": "PantryChef",
        "cache": "ok" if cache_ok else "unavailable",
    }
