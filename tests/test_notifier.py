"""Tests for the downstream notifier and dispatcher status mapping."""

import asyncio

import httpx
import pytest

from hookgate.dispatcher import Dispatcher
from hookgate.errors import (
    AuthenticationFailed,
    ForwardError,
    RouteNotFound,
    parse_downstream_error,
)
from hookgate.keystore import FileSecretLoader
from hookgate.models import Endpoint, SourceKind, image_update
from hookgate.notifier import Notifier
from hookgate.registry import EndpointRegistry

from conftest import FIXTURES, Downstream, load_fixture


class TestNotifier:
    def test_posts_wire_json(self):
        downstream = Downstream()
        notifier = Notifier("http://flux.test/", transport=downstream.transport)

        status = asyncio.run(notifier.forward(image_update("a/b")))

        assert status == 200
        request = downstream.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://flux.test/v11/notify"
        assert request.headers["content-type"] == "application/json"
        assert downstream.body == '{"Kind":"image","Source":{"Name":{"Domain":"","Image":"a/b"}}}'

    def test_relays_error_status(self):
        downstream = Downstream()
        downstream.status_code = 500
        notifier = Notifier("http://flux.test", transport=downstream.transport)

        assert asyncio.run(notifier.forward(image_update("a/b"))) == 500

    @pytest.mark.parametrize(
        "error, status",
        [
            (httpx.ConnectError("refused"), 503),
            (httpx.ReadTimeout("slow"), 504),
            (httpx.RemoteProtocolError("bad"), 502),
        ],
    )
    def test_transport_failures(self, error, status):
        downstream = Downstream()
        downstream.error = error
        notifier = Notifier("http://flux.test", transport=downstream.transport)

        with pytest.raises(ForwardError) as exc:
            asyncio.run(notifier.forward(image_update("a/b")))
        assert exc.value.status_code == status


class TestParseDownstreamError:
    def test_json_message(self):
        assert parse_downstream_error('{"message": "bad update"}') == "bad update"

    def test_json_error_field(self):
        assert parse_downstream_error('{"error": "nope"}') == "nope"

    def test_plain_text(self):
        assert parse_downstream_error("internal error\n") == "internal error"

    def test_json_without_message(self):
        assert parse_downstream_error("[1, 2]") == "[1, 2]"


class TestDispatcher:
    def make(self):
        downstream = Downstream()
        registry = EndpointRegistry(FileSecretLoader(FIXTURES))
        fp = registry.register(Endpoint(source=SourceKind.GITLAB, key_id="gitlab_key"))
        return Dispatcher(registry, Notifier("http://flux.test", transport=downstream.transport)), fp, downstream

    def test_forwards(self):
        dispatcher, fp, downstream = self.make()
        headers = {"X-Gitlab-Event": "Push Hook", "X-Gitlab-Token": load_fixture("gitlab_key").decode()}

        forwarded = asyncio.run(dispatcher.dispatch(fp, headers, load_fixture("gitlab_payload")))

        assert forwarded.downstream_status == 200
        assert forwarded.update.source.branch == "master"
        assert downstream.called

    def test_unknown_route(self):
        dispatcher, fp, downstream = self.make()
        with pytest.raises(RouteNotFound):
            asyncio.run(dispatcher.dispatch("f" * 64, {}, b"{}"))
        assert not downstream.called

    def test_adapter_error_not_forwarded(self):
        dispatcher, fp, downstream = self.make()
        headers = {"X-Gitlab-Event": "Push Hook", "X-Gitlab-Token": "wrong"}
        with pytest.raises(AuthenticationFailed):
            asyncio.run(dispatcher.dispatch(fp, headers, load_fixture("gitlab_payload")))
        assert not downstream.called
