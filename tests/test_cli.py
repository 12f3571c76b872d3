"""
Tests for the command line entry point.

Run with:
    python -m pytest tests/test_cli.py -v
"""

import httpx
import pytest

from sora_sdk import cli
from sora_sdk.services.video_generation import SoraClient

from conftest import ENDPOINT, RecordingHandler, json_response


@pytest.fixture
def sora_env(monkeypatch):
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", ENDPOINT)
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("SORA_RETRY_BASE_DELAY", "0.001")
    return monkeypatch


def route_client_to(monkeypatch, handler):
    """Make the CLI build its SoraClient on a mock transport."""

    def factory(config, **kwargs):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return SoraClient(config, http_client=http_client, **kwargs)

    monkeypatch.setattr(cli, "SoraClient", factory)


class TestDimensionsCommand:

    def test_prints_preset(self, capsys):
        assert cli.main(["dimensions", "16:9", "--quality", "high"]) == 0
        assert "1920x1080" in capsys.readouterr().out

    def test_invalid_ratio(self, capsys):
        assert cli.main(["dimensions", "wide"]) == 2
        assert "Error" in capsys.readouterr().err


class TestJobCommands:

    def test_status(self, sora_env, capsys):
        handler = RecordingHandler(json_response(200, {"id": "task_1", "status": "processing"}))
        route_client_to(sora_env, handler)

        assert cli.main(["status", "task_1"]) == 0
        assert "task_1: running (server: processing)" in capsys.readouterr().out

    def test_failed_job_exits_with_error(self, sora_env):
        handler = RecordingHandler(
            json_response(200, {"id": "task_1", "status": "failed", "failure_reason": "moderation"})
        )
        route_client_to(sora_env, handler)

        assert cli.main(["wait", "task_1", "--poll-interval", "0.01"]) == 1

    def test_missing_configuration(self, monkeypatch):
        monkeypatch.delenv("AZURE_OPENAI_ENDPOINT", raising=False)
        monkeypatch.delenv("AZURE_OPENAI_API_KEY", raising=False)

        assert cli.main(["status", "task_1"]) == 2

    def test_generate_downloads(self, sora_env, tmp_path, capsys):
        def route(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return json_response(201, {"id": "task_1"})
            if "/content/video" in request.url.path:
                return httpx.Response(200, content=b"mp4")
            return json_response(200, {"id": "task_1", "status": "succeeded", "generations": [{"id": "gen_1"}]})

        route_client_to(sora_env, route)
        output = tmp_path / "fox.mp4"

        assert cli.main(["generate", "A fox in the snow", "--quality", "low", "-o", str(output)]) == 0
        assert output.read_bytes() == b"mp4"
        assert "640x360" in capsys.readouterr().out
