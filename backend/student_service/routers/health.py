"""
Health check router for liveness and readiness probes.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from student_service.database.connections import ping
from student_service.dependencies.auth import ServicesDep

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the API is running.
    """
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    summary="Readiness check with dependencies",
)
async def readiness_check(services: ServicesDep):
    """
    Readiness check that verifies the database connection.
    Returns 200 when the database answers, 503 otherwise.
    """
    checks = {
        "api": "healthy",
        "database": "healthy" if await ping(services.storage.engine) else "unhealthy",
    }

    all_healthy = all(v == "healthy" for v in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if all_healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if all_healthy else "degraded",
            "checks": checks,
        },
    )
