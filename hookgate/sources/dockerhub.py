"""DockerHub push hooks.

DockerHub does not sign its hooks, so anything that reaches the endpoint's
route and parses as a push is accepted. Docs:
https://docs.docker.com/docker-hub/webhooks/
"""

from pydantic import model_validator
from starlette.datastructures import Headers

from hookgate.models import ImageUpdate, SourceKind, image_update
from hookgate.sources.base import BaseSource, Payload, load_payload


class DockerHubRepository(Payload):
    repo_name: str = ""
    namespace: str = ""
    name: str = ""

    @model_validator(mode="after")
    def check_name(self):
        if not self.repo_name and not (self.namespace and self.name):
            raise ValueError("repository needs repo_name or namespace and name")
        return self

    @property
    def image(self) -> str:
        return self.repo_name or f"{self.namespace}/{self.name}"


class DockerHubPush(Payload):
    repository: DockerHubRepository


class DockerHubSource(BaseSource):
    @property
    def kind(self) -> SourceKind:
        return SourceKind.DOCKERHUB

    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> ImageUpdate:
        push = load_payload(DockerHubPush, body)
        # Images pushed to DockerHub live on the default registry
        return image_update(push.repository.image)
