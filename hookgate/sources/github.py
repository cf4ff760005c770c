"""GitHub push hooks.

Signed with X-Hub-Signature (HMAC-SHA512 of the raw body). GitHub can deliver
the payload as JSON or as a form with the JSON in its ``payload`` field; the
signature always covers the bytes actually sent. Docs:
https://docs.github.com/en/webhooks/webhook-events-and-payloads#push
"""

from urllib.parse import parse_qs

from starlette.datastructures import Headers

from hookgate.errors import MalformedPayload
from hookgate.models import GitUpdate, SourceKind, git_update
from hookgate.sources.base import BaseSource, Payload, load_payload, require_event, verify_hub_signature

EVENT_HEADER = "X-GitHub-Event"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class GitHubRepository(Payload):
    ssh_url: str


class GitHubPush(Payload):
    ref: str
    repository: GitHubRepository


def _json_document(headers: Headers, body: bytes) -> bytes | str:
    content_type = headers.get("content-type", "").lower()
    if not content_type.startswith(FORM_CONTENT_TYPE):
        return body
    try:
        form = parse_qs(body.decode("utf-8"), strict_parsing=True)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPayload("Form body could not be decoded") from e
    values = form.get("payload")
    if not values:
        raise MalformedPayload("Form body has no payload field")
    return values[0]


class GitHubSource(BaseSource):
    @property
    def kind(self) -> SourceKind:
        return SourceKind.GITHUB

    def _parse(self, headers: Headers, body: bytes, secret: bytes) -> GitUpdate:
        verify_hub_signature(headers, body, secret)
        require_event(headers, EVENT_HEADER, "push")
        push = load_payload(GitHubPush, _json_document(headers, body))
        return git_update(push.repository.ssh_url, push.ref)
