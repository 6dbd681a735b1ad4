"""
Health check endpoints with database pool monitoring.
"""

import time

from fastapi import APIRouter, Depends

from app.config import settings
from app.db.pool import DatabasePoolManager, get_db_pool
from app.infrastructure.observability.logging import log_health_check

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "talent-profile-backend"}


@router.get("/readyz")
async def readyz(pool: DatabasePoolManager = Depends(get_db_pool)):
    """
    Readiness check: database pool plus required configuration.
    """
    checks = {}

    t0 = time.time()
    try:
        db_health = await pool.health_check()
        is_healthy = bool(db_health.get("healthy", False))
        latency_ms = round((time.time() - t0) * 1000, 1)
        checks["database"] = {"ok": is_healthy, "latency_ms": latency_ms}

        if "pool_stats" in db_health:
            checks["database"].update(db_health["pool_stats"])
        if "warnings" in db_health:
            checks["database"]["warnings"] = db_health["warnings"]
        if not is_healthy:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")

    except Exception as e:
        latency_ms = round((time.time() - t0) * 1000, 1)
        checks["database"] = {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
            "latency_ms": latency_ms,
        }

    log_health_check(
        "database",
        checks["database"]["ok"],
        checks["database"]["latency_ms"],
        checks["database"].get("error"),
    )

    config_issues = []
    if not settings.SUPABASE_DB_URL:
        config_issues.append("SUPABASE_DB_URL not set")
    if not settings.SUPABASE_URL:
        config_issues.append("SUPABASE_URL not set")

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }

    overall_ok = all(check["ok"] for check in checks.values())
    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}


@router.get("/health/database")
async def database_health(pool: DatabasePoolManager = Depends(get_db_pool)):
    """Detailed database pool health information."""
    return await pool.health_check()
