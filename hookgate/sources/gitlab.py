"""GitLab push hooks.

GitLab does not sign payloads; it echoes the configured secret token in
X-Gitlab-Token, which must match the endpoint's key exactly. Docs:
https://docs.gitlab.com/ee/user/project/integrations/webhook_events.html#push-events
"""

import hmac

from pydantic import model_validator
from starlette.datastructures import Headers

from hookgate.errors import AuthenticationFailed
from hookgate.models import GitUpdate, SourceKind, git_update
from hookgate.sources.base import BaseSource, Payload, load_payload, require_event

TOKEN_HEADER = "X-Gitlab-Token"
EVENT_HEADER = "X-Gitlab-Event"
# Tag pushes share the push payload; their ref keeps its refs/tags/ prefix
PUSH_EVENTS = ("Push Hook", "Tag Push Hook")


class GitLabRepository(Payload):
    git_ssh_url: str


class GitLabPush(Payload):
    ref: str
    repository: GitLabRepository | None = None
    project: GitLabRepository | None = None

    @model_validator(mode="after")
    def check_repository(self):
        if self.repository is None and self.project is None:
            raise ValueError("push needs a repository or project")
        return self

    @property
    def ssh_url(self) -> str:
        return (self.repository or self.project).git_ssh_url


class GitLabSource(BaseSource):
    @property
    def kind(self) -> SourceKind:
        return SourceKind.GITLAB

    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> GitUpdate:
        token = headers.get(TOKEN_HEADER)
        if token is None:
            raise AuthenticationFailed(f"Missing {TOKEN_HEADER} header")
        if not hmac.compare_digest(token.encode("latin-1"), secret):
            raise AuthenticationFailed("Token does not match")
        require_event(headers, EVENT_HEADER, *PUSH_EVENTS)
        push = load_payload(GitLabPush, body)
        return git_update(push.ssh_url, push.ref)
