"""Bitbucket Cloud and Bitbucket Server push hooks.

Cloud ``repo:push`` hooks carry no secret, so the route is the credential.
Docs: https://support.atlassian.com/bitbucket-cloud/docs/event-payloads/#Push

Server ``repo:refs_changed`` hooks are signed with X-Hub-Signature, the same
HMAC-SHA512 scheme GitHub uses. Docs:
https://confluence.atlassian.com/bitbucketserver/event-payload-938025882.html
"""

from pydantic import Field
from starlette.datastructures import Headers

from hookgate.errors import MalformedPayload, UnsupportedEvent
from hookgate.models import GitUpdate, SourceKind, git_update
from hookgate.sources.base import BaseSource, Payload, load_payload, require_event, verify_hub_signature

EVENT_HEADER = "X-Event-Key"
CLOUD_SSH_HOST = "git@bitbucket.org"


class CloudRepository(Payload):
    full_name: str


class CloudRef(Payload):
    name: str
    type: str = "branch"


class CloudChange(Payload):
    # null when the push deleted the ref
    new: CloudRef | None = None


class CloudPushDetails(Payload):
    changes: list[CloudChange]


class CloudPush(Payload):
    push: CloudPushDetails
    repository: CloudRepository


class BitbucketCloudSource(BaseSource):
    @property
    def kind(self) -> SourceKind:
        return SourceKind.BITBUCKET_CLOUD

    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> GitUpdate:
        require_event(headers, EVENT_HEADER, "repo:push")
        push = load_payload(CloudPush, body)
        refs = [change.new for change in push.push.changes if change.new is not None]
        if not refs:
            raise UnsupportedEvent("Push did not update any refs")
        # Cloud payloads only carry an HTTPS link; the SSH clone URL is derived
        url = f"{CLOUD_SSH_HOST}:{push.repository.full_name}.git"
        return git_update(url, refs[0].name)


class ServerLink(Payload):
    href: str
    name: str = ""


class ServerLinks(Payload):
    clone: list[ServerLink] = []


class ServerRepository(Payload):
    links: ServerLinks


class ServerRef(Payload):
    id: str


class ServerChange(Payload):
    ref_id: str | None = Field(None, alias="refId")
    ref: ServerRef | None = None


class ServerPush(Payload):
    repository: ServerRepository
    changes: list[ServerChange]


class BitbucketServerSource(BaseSource):
    @property
    def kind(self) -> SourceKind:
        return SourceKind.BITBUCKET_SERVER

    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> GitUpdate:
        verify_hub_signature(headers, body, secret)
        require_event(headers, EVENT_HEADER, "repo:refs_changed")
        push = load_payload(ServerPush, body)

        ssh = [link.href for link in push.repository.links.clone if link.name == "ssh"]
        if not ssh:
            raise MalformedPayload("Repository has no ssh clone link")
        if not push.changes:
            raise MalformedPayload("Push has no changes")

        change = push.changes[0]
        ref = change.ref_id or (change.ref.id if change.ref else None)
        if not ref:
            raise MalformedPayload("Change has no ref")
        return git_update(ssh[0], ref)
