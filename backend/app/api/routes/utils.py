from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.deps import DatabaseDep
from app.core.config import settings
from app.core.health import liveness_check, readiness_check

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/liveness/", response_model=None)
async def liveness() -> bool | JSONResponse:
    """
    Liveness probe — is the process alive and responsive?

    Lightweight: no DB I/O.  If this fails the container should be
    restarted by the orchestrator.
    """
    ok, failures = liveness_check()
    if not ok:
        return JSONResponse(
            status_code=503,
            content={"success": False, "message": "Process unhealthy", "data": failures},
        )
    return True


@router.get("/health-check/", response_model=None)
async def health_check(database: DatabaseDep) -> bool | JSONResponse:
    """
    Readiness probe — can the service handle traffic?

    Runs SELECT 1 through the shared pool.
    Returns 200 with true if the database is reachable; 503 otherwise.
    """
    ok, failures, errors = await readiness_check(database)
    if not ok:
        content: dict[str, object] = {
            "success": False,
            "message": "Service Unavailable",
            "data": failures,
        }
        if settings.ENVIRONMENT == "local":
            content["detail"] = errors
        return JSONResponse(status_code=503, content=content)
    return True
