"""Per-request hook handling: route, authenticate, normalize, forward."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from hookgate.errors import HookError, RouteNotFound
from hookgate.models import GitUpdate, ImageUpdate
from hookgate.notifier import Notifier
from hookgate.registry import EndpointRegistry
from hookgate.sources import SOURCES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Forwarded:
    update: ImageUpdate | GitUpdate
    downstream_status: int


class Dispatcher:
    def __init__(self, registry: EndpointRegistry, notifier: Notifier):
        self.registry = registry
        self.notifier = notifier

    async def dispatch(self, fingerprint: str, headers: Mapping[str, str], body: bytes) -> Forwarded:
        """Handle one hook delivery.

        Raises a HookError subclass carrying the status for the caller:
        RouteNotFound, AuthenticationFailed, MalformedPayload,
        UnsupportedEvent or ForwardError.
        """
        registered = self.registry.resolve(fingerprint)
        if registered is None:
            logger.warning("Hook delivery to unknown route")
            raise RouteNotFound("Not found")

        kind = registered.endpoint.source
        try:
            update = SOURCES[kind].parse(headers, body, registered.secret)
        except HookError as e:
            logger.warning(f"Rejected {kind.value} hook ({type(e).__name__}): {e.detail}")
            raise

        status = await self.notifier.forward(update)
        logger.info(f"Forwarded {update.kind} update from {kind.value} ({status})")
        return Forwarded(update=update, downstream_status=status)
