from typing import Optional

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI

from ..config import AppSettings, load_settings
from ..logging import init_logging
from ..services.ingestion_service import WeatherIngestionJob, build_job
from .middleware import RequestIDMiddleware, generic_exception_handler
from .routes import health, weather


def create_app(
    settings: Optional[AppSettings] = None,
    job: Optional[WeatherIngestionJob] = None,
) -> FastAPI:
    # Missing configuration raises ConfigError here, before the app exists.
    settings = settings or load_settings()
    init_logging(settings.log_level)
    job = job or build_job(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Shared collaborators live for the whole process
        close = getattr(app.state.job.client, "close", None)
        if callable(close):
            close()
        dispose = getattr(app.state.job.store, "dispose", None)
        if callable(dispose):
            dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health and uptime"},
            {"name": "weather", "description": "Current weather ingestion for the city roster"},
        ],
    )

    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(weather.router, prefix="/api/weather", tags=["weather"])

    app.state.settings = settings
    app.state.start_time = time.time()
    app.state.job = job

    return app


if __name__ == "__main__":
    import uvicorn

    s = load_settings()
    uvicorn.run(create_app(s), host=s.host, port=s.port)
