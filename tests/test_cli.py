"""CLI tests through typer's CliRunner with an offline httpx transport."""

import json

import httpx
import pytest
import typer
from typer.testing import CliRunner

import cli.main as cli_main
from adapters.http_client import build_async_client
from cli.doctor import check_socket_url
from cli.main import app, parse_params

runner = CliRunner()

SCHEMA = {
    "actions": {
        "POST": {
            "title": {"type": "string", "required": True, "label": "Title"},
            "status": {"type": "choice", "choices": [{"value": "open", "display_name": "Open"}]},
        }
    }
}


@pytest.fixture
def offline(monkeypatch, recorder):
    monkeypatch.setenv("RESOURCE_CLIENT_BASE_URL", "https://api.test/api/")
    monkeypatch.setenv("RESOURCE_CLIENT_SOCKET_URL", "wss://api.test/ws")
    monkeypatch.setattr(
        cli_main,
        "build_async_client",
        lambda settings: build_async_client(settings, transport=httpx.MockTransport(recorder)),
    )
    return recorder


class TestParseParams:
    def test_pairs_and_duplicates(self):
        assert parse_params(["a=1", "a=2", "q=x=y"]) == [("a", "1"), ("a", "2"), ("q", "x=y")]

    def test_none(self):
        assert parse_params(None) == []

    def test_rejects_missing_equals(self):
        with pytest.raises(typer.BadParameter):
            parse_params(["oops"])


class TestCommands:
    def test_list_with_params(self, offline):
        offline.reply(json=[{"id": 1, "title": "Write docs"}])
        result = runner.invoke(app, ["list", "tasks/", "-p", "status=open", "-p", "status=done"])
        assert result.exit_code == 0, result.output
        assert "Write docs" in result.output
        assert offline.last.url.params.get_list("status") == ["open", "done"]

    def test_list_failure_reports_no_data(self, offline):
        offline.fail()
        result = runner.invoke(app, ["list", "tasks/"])
        assert result.exit_code == 0
        assert "No data." in result.output

    def test_list_paginated_exports_json(self, offline, tmp_path):
        page = {"count": 1, "next": None, "previous": None, "results": [{"id": 1}]}
        offline.reply(json=page)
        out = tmp_path / "page.json"
        result = runner.invoke(app, ["list", "tasks/", "--paginated", "--json-output", str(out)])
        assert result.exit_code == 0, result.output
        assert "count: 1" in result.output
        assert json.loads(out.read_text(encoding="utf-8")) == page

    def test_get_with_route(self, offline):
        offline.reply(json={"id": 3})
        result = runner.invoke(app, ["get", "tasks/", "3", "--route", "history"])
        assert result.exit_code == 0, result.output
        assert str(offline.last.url) == "https://api.test/api/tasks/3/history/"

    def test_get_missing_exits_non_zero(self, offline):
        offline.reply(404)
        result = runner.invoke(app, ["get", "tasks/", "3"])
        assert result.exit_code == 1

    def test_fields(self, offline):
        offline.reply(json=SCHEMA)
        result = runner.invoke(app, ["fields", "tasks/"])
        assert result.exit_code == 0, result.output
        assert "title" in result.output
        assert offline.last.method == "OPTIONS"

    def test_fields_without_actions(self, offline):
        offline.reply(json={"name": "read only"})
        result = runner.invoke(app, ["fields", "tasks/"])
        assert result.exit_code == 1

    def test_choices(self, offline):
        offline.reply(json=SCHEMA)
        result = runner.invoke(app, ["choices", "tasks/", "status"])
        assert result.exit_code == 0, result.output
        assert "Open" in result.output

    def test_choices_unknown_field(self, offline):
        offline.reply(json=SCHEMA)
        result = runner.invoke(app, ["choices", "tasks/", "owner"])
        assert result.exit_code == 1
        assert "owner" in result.output

    def test_download(self, offline, tmp_path):
        offline.reply(content=b"a,b\n")
        target = tmp_path / "export.csv"
        result = runner.invoke(app, ["download", "tasks/", "export", "-o", str(target)])
        assert result.exit_code == 0, result.output
        assert target.read_bytes() == b"a,b\n"
        assert str(offline.last.url) == "https://api.test/api/tasks/export/"

    def test_watch(self, offline, monkeypatch, connector):
        monkeypatch.setattr(
            "adapters.websocket_transport.WebSocketConnector.connect",
            lambda self, url: connector.connect(url),
        )
        result = runner.invoke(app, ["watch", "events", "-p", "type=x", "--limit", "1"])
        assert result.exit_code == 0, result.output
        assert connector.urls == ["wss://api.test/ws/events/?type=x"]
        assert "1 message(s) received." in result.output
        assert connector.connections[0].closed


class TestDoctor:
    @pytest.mark.parametrize(
        ("url", "ok"),
        [("wss://api.test/ws", True), ("ws://localhost:8000/ws", True), ("https://api.test/ws", False), ("wss://api.test/ws/", False)],
    )
    def test_check_socket_url(self, url, ok):
        assert check_socket_url(url)[0] is ok

    def test_setup_writes_user_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        result = runner.invoke(app, ["doctor", "setup"], input="https://b/api/\nwss://b/ws\n")
        assert result.exit_code == 0, result.output
        env_text = (tmp_path / "resource-client" / ".env").read_text(encoding="utf-8")
        assert "RESOURCE_CLIENT_BASE_URL=https://b/api/" in env_text
        assert "RESOURCE_CLIENT_SOCKET_URL=wss://b/ws" in env_text
