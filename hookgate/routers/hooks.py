"""Hook ingestion endpoint - one route per registered provider endpoint."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from slowapi import Limiter
from starlette.responses import JSONResponse, Response

from hookgate.dispatcher import Dispatcher

# Statuses that must not carry a body
_BODYLESS = {204, 304}


class HookResponse(BaseModel):
    kind: str
    downstream_status: int


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def build_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """Hook routes rate limited by the given app's limiter."""
    router = APIRouter()

    @router.post("/hook/{fingerprint}", response_model=HookResponse)
    @limiter.limit(rate_limit)
    async def receive_hook(
        request: Request,
        fingerprint: str,
        dispatcher: Dispatcher = Depends(get_dispatcher),
    ):
        """Authenticate a provider hook and forward its update downstream.

        The response status mirrors the downstream API's answer.
        """
        body = await request.body()
        forwarded = await dispatcher.dispatch(fingerprint, request.headers, body)
        status = forwarded.downstream_status
        if status in _BODYLESS or status < 200:
            return Response(status_code=status)
        content = HookResponse(kind=forwarded.update.kind, downstream_status=status)
        return JSONResponse(content=content.model_dump(), status_code=status)

    return router
