"""Health & Readiness Probes: liveness plus a dependency check of both stores.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up (liveness)
    - GET /health returns 503 when the record store or object store check fails
    - Probe responses never include exception details

Design Decisions:
    - Readiness failure is 503 with per-store flags rather than a bare 500
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from payproof.api.dependencies import get_services
from payproof.infrastructure.wiring import Services

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/api/v1/health/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "payproof-api",
        "version": "1.0.0",
    }


@router.get("/health")
async def readiness_check(services: Services = Depends(get_services)):
    """Readiness probe: record store and object store connectivity."""
    database_ok = await _probe("record store", services.record_store.check)
    storage_ok = await _probe("object store", services.object_store.check)
    body = {
        "status": "OK" if database_ok and storage_ok else "Error",
        "database": "Connected" if database_ok else "Disconnected",
        "storage": "Connected" if storage_ok else "Disconnected",
    }
    if not (database_ok and storage_ok):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body,
        )
    return body


async def _probe(label: str, check) -> bool:
    try:
        await check()
        return True
    except Exception as e:
        logger.error(f"{label} health check failed: {e}")
        return False
