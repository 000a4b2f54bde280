"""Unit tests for ResourceEndpoint: explicit per-call config and Outcome results."""

import httpx
import pytest
from pydantic import ValidationError

from core.errors import SchemaFieldNotFoundError
from core.services.endpoint import ResourceEndpoint
from core.services.parameters import RequestConfig

FULL = "https://api.test/api/tasks/"

SCHEMA = {
    "name": "Task List",
    "renders": ["application/json"],
    "actions": {
        "POST": {
            "title": {"type": "string", "required": True, "max_length": 200},
            "status": {
                "type": "choice",
                "choices": [{"value": "open", "display_name": "Open"}],
            },
        }
    },
}


@pytest.fixture
def endpoint(http, settings, connector):
    return ResourceEndpoint(http, "tasks/", settings=settings, connector=connector)


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_success_carries_payload(self, endpoint, recorder):
        recorder.reply(json=[{"id": 1}])
        outcome = await endpoint.get_all()
        assert outcome.ok
        assert outcome.value == [{"id": 1}]

    @pytest.mark.asyncio
    async def test_failure_carries_original_exception(self, endpoint, recorder):
        recorder.reply(503)
        outcome = await endpoint.get_all()
        assert not outcome.ok
        assert isinstance(outcome.error, httpx.HTTPStatusError)
        assert outcome.unwrap_or([]) == []

    @pytest.mark.asyncio
    async def test_malformed_url_is_a_failure(self, endpoint, recorder):
        outcome = await endpoint.get_by_url("https://api.test/api/tasks/\x00/")
        assert not outcome.ok
        assert isinstance(outcome.error, httpx.InvalidURL)
        assert not recorder.requests

    @pytest.mark.asyncio
    async def test_empty_list_and_failure_are_distinguishable(self, endpoint, recorder):
        recorder.reply(json=[])
        empty = await endpoint.get_all()
        recorder.fail()
        failed = await endpoint.get_all()
        assert empty.ok and empty.value == []
        assert not failed.ok and isinstance(failed.error, httpx.ConnectError)


class TestRequestConfig:
    @pytest.mark.asyncio
    async def test_config_is_per_call(self, endpoint, recorder):
        await endpoint.get_all(config=RequestConfig.of({"status": "open"}))
        await endpoint.get_all()
        assert recorder.requests[0].url.params["status"] == "open"
        assert not recorder.requests[1].url.params

    @pytest.mark.asyncio
    async def test_save_honours_explicit_params(self, endpoint, recorder):
        await endpoint.save({"title": "x"}, RequestConfig.of({"notify": "false"}))
        assert recorder.last.url.params["notify"] == "false"

    @pytest.mark.asyncio
    async def test_blob_response(self, endpoint, recorder):
        recorder.reply(content=b"\x00\x01")
        outcome = await endpoint.get_file_from_list_route("export")
        assert outcome.value == b"\x00\x01"

    @pytest.mark.asyncio
    async def test_unknown_verb_rejected(self, endpoint):
        with pytest.raises(ValueError, match="unsupported"):
            endpoint.request("PUT", FULL)


class TestSchema:
    @pytest.mark.asyncio
    async def test_options_returns_typed_metadata(self, endpoint, recorder):
        recorder.reply(json=SCHEMA)
        schema = (await endpoint.options()).unwrap()
        assert schema.name == "Task List"
        fields = schema.post_fields()
        assert fields["title"].required is True
        assert fields["title"].max_length == 200

    @pytest.mark.asyncio
    async def test_get_choices_success(self, endpoint, recorder):
        recorder.reply(json=SCHEMA)
        choices = (await endpoint.get_choices("status")).unwrap()
        assert [(c.value, c.display_name) for c in choices] == [("open", "Open")]

    @pytest.mark.asyncio
    async def test_get_choices_field_not_found_is_an_outcome(self, endpoint, recorder):
        recorder.reply(json=SCHEMA)
        outcome = await endpoint.get_choices("owner")
        assert not outcome.ok
        assert isinstance(outcome.error, SchemaFieldNotFoundError)
        assert outcome.error.field == "owner"
        with pytest.raises(KeyError):
            outcome.unwrap()

    @pytest.mark.asyncio
    async def test_get_choices_transport_failure(self, endpoint, recorder):
        recorder.fail()
        outcome = await endpoint.get_choices("status")
        assert isinstance(outcome.error, httpx.ConnectError)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("call", [lambda e: e.options(), lambda e: e.get_choices("status")])
    async def test_malformed_schema_is_a_failure(self, endpoint, recorder, call):
        recorder.reply(json={"actions": {"POST": {"status": {"choices": ["open", "done"]}}}})
        outcome = await call(endpoint)
        assert not outcome.ok
        assert isinstance(outcome.error, ValidationError)


class TestStreaming:
    @pytest.mark.asyncio
    async def test_stream_url_uses_explicit_params(self, endpoint):
        channel = endpoint.connect_stream("events", RequestConfig.of({"type": "x"}))
        assert channel.url == "wss://api.test/ws/events/?type=x"
        assert not channel.is_open

    @pytest.mark.asyncio
    async def test_custom_decoder(self, endpoint):
        channel = endpoint.connect_stream("events", decoder=lambda frame: f"raw:{frame}")
        messages = [m async for m in channel]
        assert messages[0].startswith("raw:{")
        await channel.close()

    @pytest.mark.asyncio
    async def test_default_connector_is_websockets(self, http, settings):
        from adapters.websocket_transport import WebSocketConnector

        endpoint = ResourceEndpoint(http, "tasks/", settings=settings)
        assert isinstance(endpoint.connector, WebSocketConnector)
