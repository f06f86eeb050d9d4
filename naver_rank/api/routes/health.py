from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from naver_rank.config import settings
from naver_rank.infrastructure.database import connection

router = APIRouter(tags=["health"])

ENDPOINTS = {
    "place": {
        "checkRank": "POST /api/place/check-rank",
        "checkRankOnce": "POST /api/place/check-rank-once",
        "mainKeyword": "POST /api/place/main-keyword",
        "compareRank": "POST /api/place/compare-rank",
    },
    "blog": {
        "checkRank": "POST /api/blog/check-rank",
        "analyzeKeyword": "POST /api/blog/analyze-keyword",
    },
    "shopping": {
        "checkRank": "POST /api/shopping/check-rank",
        "checkRankOnce": "POST /api/shopping/check-rank-once",
    },
    "keyword": {
        "searchVolume": "POST /api/keyword/search-volume",
        "trend": "POST /api/keyword/trend",
    },
    "history": {
        "list": "GET /api/history/{contentType}",
    },
}


@router.get("/health")
async def health_check() -> dict:  # type: ignore[type-arg]
    """Liveness + dependency health check."""
    db_status = "disabled"
    if connection.AsyncSessionLocal is not None:
        db_status = "connected"
        try:
            async with connection.AsyncSessionLocal() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            db_status = f"error: {exc}"

    return {
        "status": "ok" if db_status in ("connected", "disabled") else "degraded",
        "service": settings.service_name,
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/")
async def service_descriptor() -> dict:  # type: ignore[type-arg]
    return {
        "service": settings.service_name,
        "version": "1.0.0",
        "endpoints": ENDPOINTS,
    }
