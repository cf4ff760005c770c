"""Endpoint registry and fingerprint derivation.

Each configured endpoint is served at ``/hook/{fingerprint}``. For DockerHub
and Bitbucket Cloud, which sign nothing, the fingerprint is the only thing
standing between the internet and the downstream API, so it is a keyed hash
of the provider kind under the endpoint's secret: reproducible from the
configuration, but not without the key. Fingerprints must never be logged.
"""

import hashlib
import hmac
import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from hookgate.errors import DuplicateEndpoint
from hookgate.keystore import SecretLoader
from hookgate.models import Endpoint, SourceKind

logger = logging.getLogger(__name__)


def fingerprint(source: SourceKind, secret: bytes) -> str:
    return hmac.new(secret, source.value.encode("utf-8"), hashlib.sha256).hexdigest()


@dataclass(frozen=True)
class RegisteredEndpoint:
    endpoint: Endpoint
    secret: bytes

    def __repr__(self) -> str:
        return f"RegisteredEndpoint(endpoint={self.endpoint!r}, secret=<redacted>)"


class EndpointRegistry:
    """Fingerprint -> endpoint lookup, populated before serving starts."""

    def __init__(self, loader: SecretLoader):
        self._loader = loader
        self._routes: dict[str, RegisteredEndpoint] = {}

    @classmethod
    def from_endpoints(cls, endpoints: Iterable[Endpoint], loader: SecretLoader) -> "EndpointRegistry":
        registry = cls(loader)
        for endpoint in endpoints:
            registry.register(endpoint)
        for source, count in sorted(registry.counts().items()):
            logger.info(f"Registered {count} {source} hook endpoint(s)")
        return registry

    def register(self, endpoint: Endpoint) -> str:
        """Load the endpoint's key and return its fingerprint.

        Raises SecretNotFound when the key is missing, and DuplicateEndpoint
        when a different endpoint already owns the same route.
        """
        secret = self._loader.load(endpoint.key_id)
        fp = fingerprint(endpoint.source, secret)

        existing = self._routes.get(fp)
        if existing is not None:
            if existing.endpoint == endpoint:
                return fp
            raise DuplicateEndpoint(
                f"{endpoint.source.value} endpoints {existing.endpoint.key_id!r} and "
                f"{endpoint.key_id!r} share a key and would share a route"
            )

        self._routes[fp] = RegisteredEndpoint(endpoint=endpoint, secret=secret)
        return fp

    def resolve(self, fp: str) -> RegisteredEndpoint | None:
        return self._routes.get(fp)

    @property
    def routes(self) -> Mapping[str, RegisteredEndpoint]:
        return MappingProxyType(self._routes)

    def counts(self) -> dict[str, int]:
        return dict(Counter(r.endpoint.source.value for r in self._routes.values()))

    def __len__(self) -> int:
        return len(self._routes)
