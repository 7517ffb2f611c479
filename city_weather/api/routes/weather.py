from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

import structlog

router = APIRouter()
logger = structlog.get_logger()

COMPLETED_MESSAGE = "Weather data processing completed"


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_class=PlainTextResponse,
    summary="Fetch and store current weather for every roster city",
    responses={
        200: {
            "description": "All cities were processed (individual cities may have failed)",
            "content": {"text/plain": {"example": COMPLETED_MESSAGE}},
        }
    },
)
def run_weather_batch(request: Request) -> PlainTextResponse:
    job = request.app.state.job
    logger.info("weather_batch_requested", method=request.method)
    job.run_batch()
    return PlainTextResponse(COMPLETED_MESSAGE)
