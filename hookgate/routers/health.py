from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])

_startup_time = datetime.now(timezone.utc)

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    endpoints: dict[str, int]
    downstream_configured: bool


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    uptime = (datetime.now(timezone.utc) - _startup_time).total_seconds()
    dispatcher = request.app.state.dispatcher

    return HealthResponse(
        status="ok" if len(dispatcher.registry) else "no endpoints configured",
        version=VERSION,
        uptime_seconds=round(uptime, 2),
        endpoints=dispatcher.registry.counts(),
        downstream_configured=bool(dispatcher.notifier.base_url),
    )
