"""Base source interface for hook providers."""

import hashlib
import hmac
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from starlette.datastructures import Headers

from hookgate.errors import AuthenticationFailed, MalformedPayload, UnsupportedEvent
from hookgate.models import GitUpdate, ImageUpdate, SourceKind

SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_PREFIX = "sha512="

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class Payload(BaseModel):
    """Provider payloads carry far more than we read; ignore the rest."""
    model_config = ConfigDict(extra="ignore")


def hub_signature(body: bytes, secret: bytes) -> str:
    """X-Hub-Signature value for a body: sha512=<hex HMAC-SHA512>."""
    return SIGNATURE_PREFIX + hmac.new(secret, body, hashlib.sha512).hexdigest()


def verify_hub_signature(headers: Headers, body: bytes, secret: bytes) -> None:
    """Check X-Hub-Signature against the raw body bytes as received.

    Raises:
        AuthenticationFailed: header missing, wrong scheme or wrong digest
    """
    signature = headers.get(SIGNATURE_HEADER)
    if not signature:
        raise AuthenticationFailed(f"Missing {SIGNATURE_HEADER} header")
    if not signature.startswith(SIGNATURE_PREFIX):
        raise AuthenticationFailed(f"{SIGNATURE_HEADER} must use {SIGNATURE_PREFIX.rstrip('=')}")
    if not hmac.compare_digest(signature.encode("latin-1"), hub_signature(body, secret).encode("latin-1")):
        raise AuthenticationFailed("Signature does not match payload")


def require_event(headers: Headers, header: str, *accepted: str) -> str:
    event = headers.get(header)
    if event not in accepted:
        raise UnsupportedEvent(f"Unsupported event {event!r} in {header}")
    return event


def load_payload(model: type[PayloadT], data: bytes | str) -> PayloadT:
    try:
        return model.model_validate_json(data)
    except ValidationError as e:
        raise MalformedPayload(f"Invalid payload: {e.error_count()} error(s), first: {e.errors()[0]['msg']}") from e


class BaseSource(ABC):
    """Authenticates a provider's hook request and normalizes its payload."""

    @property
    @abstractmethod
    def kind(self) -> SourceKind:
        """Return the provider this source handles."""
        pass

    def parse(
        self, headers: Mapping[str, str], body: bytes, secret: bytes
    ) -> ImageUpdate | GitUpdate:
        """Verify and normalize a request.

        Raises AuthenticationFailed, UnsupportedEvent or MalformedPayload.
        """
        if not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers))
        return self._parse(headers, body, secret)

    @abstractmethod
    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> ImageUpdate | GitUpdate:
        pass
