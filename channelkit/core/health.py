"""
/health payload: app metadata plus a listing-store check.

The endpoint always answers 200. A failed check marks the payload
``degraded`` so load balancers keep routing while dashboards see the
outage; exports would fail fast with a 500 anyway.
"""

import logging
import time
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

STATUS_UP = "up"
STATUS_DOWN = "down"


async def check_database(session: AsyncSession) -> dict:
    """Run ``SELECT 1`` against the listing store and time it."""
    started = time.perf_counter()
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Listing store unreachable: {e}")
        return {"status": STATUS_DOWN, "error": str(e)}

    elapsed_ms = (time.perf_counter() - started) * 1000
    return {"status": STATUS_UP, "latency_ms": round(elapsed_ms, 1)}


async def get_health_status(
    app_name: str,
    app_version: str,
    app_env: str,
    db_session: AsyncSession | None = None,
) -> dict:
    components = {}
    if db_session is not None:
        components["database"] = await check_database(db_session)

    degraded = any(c["status"] != STATUS_UP for c in components.values())
    return {
        "status": "degraded" if degraded else "healthy",
        "app": app_name,
        "version": app_version,
        "environment": app_env,
        "timestamp": datetime.now(UTC).isoformat(),
        "components": components,
    }
