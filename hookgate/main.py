"""Hook gateway - FastAPI application entry point."""

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from hookgate.config import Settings, settings as default_settings
from hookgate.dispatcher import Dispatcher
from hookgate.errors import HookError
from hookgate.keystore import FileSecretLoader, SecretLoader
from hookgate.notifier import Notifier
from hookgate.registry import EndpointRegistry
from hookgate.routers import health, hooks

logger = logging.getLogger(__name__)


async def _hook_error_handler(request: Request, exc: HookError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app(
    settings: Settings | None = None,
    *,
    secret_loader: SecretLoader | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the gateway with its endpoint set fixed.

    Keys for every configured endpoint are loaded here, so a missing key
    raises (SecretNotFound) and startup aborts rather than serving without it.
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    registry = EndpointRegistry.from_endpoints(
        settings.endpoints,
        secret_loader or FileSecretLoader(settings.keys_dir),
    )
    if not len(registry):
        logger.warning("No hook endpoints configured")
    notifier = Notifier(settings.downstream_url, timeout=settings.notify_timeout, transport=transport)

    app = FastAPI(
        title="Hook Gateway",
        description="Authenticates provider push hooks and forwards canonical updates",
        version=health.VERSION,
        debug=settings.debug,
    )
    app.state.dispatcher = Dispatcher(registry, notifier)

    # Rate limiting (per app, so each app honours its own settings)
    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(HookError, _hook_error_handler)

    # Routers (no API key: providers authenticate per endpoint)
    app.include_router(health.router)
    app.include_router(hooks.build_router(limiter, settings.hook_rate_limit), tags=["hooks"])
    return app


app = create_app()
