"""
Liveness and readiness probes.

Readiness also confirms the schema is migrated: every table the API reads must answer a
trivial query.
"""

import time
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import get_session_local
from app.core.logging_config import logger
from app.core.types import utcnow


router = APIRouter(prefix="/health", tags=["Health Checks"])

REQUIRED_TABLES = (
    "users", "faculty", "inventory_items", "projects", "resource_requests", "audit_logs",
    "courses", "class_schedules",
)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


async def probe_database() -> Dict[str, Any]:
    started = time.perf_counter()
    missing: List[str] = []
    try:
        async with get_session_local()() as session:
            await session.execute(text("SELECT 1"))
            for table in REQUIRED_TABLES:
                try:
                    await session.execute(text(f"SELECT 1 FROM {table} LIMIT 1"))
                except SQLAlchemyError:
                    missing.append(table)
                    await session.rollback()
    except (SQLAlchemyError, OSError) as exc:
        logger.error(f"[HealthCheck] database unreachable: {exc}")
        return {"status": "unhealthy", "latency_ms": _elapsed_ms(started), "error": str(exc)}

    return {
        "status": "healthy" if not missing else "unmigrated",
        "latency_ms": _elapsed_ms(started),
        "missing_tables": missing,
    }


@router.get("/live")
async def liveness_check():
    return {
        "status": "alive",
        "service": settings.APP_NAME,
        "version": settings.API_VERSION,
        "timestamp": utcnow().isoformat(),
    }


@router.get("/ready")
async def readiness_check():
    """503 until the database answers and every table exists"""
    database = await probe_database()
    body = {
        "status": "ready" if database["status"] == "healthy" else "not_ready",
        "timestamp": utcnow().isoformat(),
        "checks": {"database": database},
    }
    if body["status"] != "ready":
        logger.warning("[HealthCheck] not ready", extra={"event_type": "readiness", "checks": body["checks"]})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=body)
    return body
