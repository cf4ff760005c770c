"""Forwards canonical updates to the downstream notification API."""

import logging

import httpx

from hookgate.errors import ForwardError, parse_downstream_error
from hookgate.models import GitUpdate, ImageUpdate, to_wire

logger = logging.getLogger(__name__)

NOTIFY_PATH = "/v11/notify"


class Notifier:
    """One POST per update, no retry."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.url = f"{self.base_url}{NOTIFY_PATH}"
        self.timeout = timeout
        self._transport = transport

    async def forward(self, update: ImageUpdate | GitUpdate) -> int:
        """POST the update and return the downstream status code.

        Raises:
            ForwardError: the downstream could not be reached or timed out
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(
                    self.url,
                    content=to_wire(update),
                    headers={"content-type": "application/json"},
                )
        except httpx.ConnectError as e:
            logger.error(f"Downstream unreachable: {e}")
            raise ForwardError("Downstream API unreachable", status_code=503) from e
        except httpx.TimeoutException as e:
            logger.error(f"Downstream timed out after {self.timeout}s")
            raise ForwardError("Downstream API timed out", status_code=504) from e
        except httpx.HTTPError as e:
            logger.error(f"Downstream request failed: {e}")
            raise ForwardError("Downstream API request failed") from e

        if not r.is_success:
            logger.warning(f"Downstream rejected {update.kind} update ({r.status_code}): {parse_downstream_error(r.text)}")
        return r.status_code
