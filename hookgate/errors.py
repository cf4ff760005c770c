"""Error taxonomy for hook handling, plus downstream error-parsing utilities."""

import json


class HookError(Exception):
    """A request-scoped failure that maps onto an HTTP status."""

    status_code = 500

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class RouteNotFound(HookError):
    status_code = 404


class AuthenticationFailed(HookError):
    status_code = 401


class MalformedPayload(HookError):
    status_code = 400


class UnsupportedEvent(HookError):
    status_code = 400


class ForwardError(HookError):
    """The downstream API could not be reached. Never retried."""

    status_code = 502


class ConfigurationError(Exception):
    """Raised while building the endpoint registry; aborts startup."""


class SecretNotFound(ConfigurationError):
    pass


class DuplicateEndpoint(ConfigurationError):
    pass


def parse_downstream_error(response_text: str) -> str:
    """Extract a readable message from a downstream error response.

    The notification API answers errors with JSON like
    {"message": "...", "error": "..."} or plain text.
    Returns the message when parseable, raw text otherwise.
    """
    try:
        body = json.loads(response_text)
        if isinstance(body, dict):
            msg = body.get("message") or body.get("error") or ""
            if msg:
                return str(msg)
    except ValueError:
        pass
    return response_text.strip()
