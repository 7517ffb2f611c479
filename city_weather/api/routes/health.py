import time
from fastapi import APIRouter, Request

from ...schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse, summary="Health status and configured roster")
def health(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    uptime = max(0.0, time.time() - float(getattr(request.app.state, "start_time", time.time())))
    return HealthResponse(
        status="ok",
        app_name=settings.app_name,
        app_env=settings.app_env,
        version=settings.app_version,
        uptime_s=uptime,
        cities=list(request.app.state.job.cities),
    )
