"""Tests for settings loading and the stdio client helpers."""
import io
import json
from pathlib import Path

from instagram_mcp import client
from instagram_mcp.config import load_settings


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings.ig_username is None
        assert settings.port == 3001
        assert settings.log_level == "INFO"
        assert not settings.quiet and not settings.debug
        assert settings.staging_dir.name == "instagram-mcp-staging"

    def test_environment_values(self):
        settings = load_settings({
            "IG_USERNAME": "alice",
            "IG_PASSWORD": "secret",
            "MCP_STAGING_DIR": "/var/tmp/stage",
            "MCP_DOWNLOAD_TIMEOUT": "12.5",
            "MCP_SERVER_PORT": "8080",
            "LOG_LEVEL": "debug",
            "MCP_SERVER_QUIET": "1",
            "MCP_SERVER_DEBUG": "false",
        })
        assert (settings.ig_username, settings.ig_password) == ("alice", "secret")
        assert settings.staging_dir == Path("/var/tmp/stage")
        assert settings.download_timeout == 12.5
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.quiet is True
        assert settings.debug is False

    def test_empty_credentials_are_absent(self):
        settings = load_settings({"IG_USERNAME": "", "IG_PASSWORD": ""})
        assert settings.ig_username is None and settings.ig_password is None


class FakeProcess:
    """Pipe pair standing in for a spawned server."""

    def __init__(self, replies):
        self.stdin = io.BytesIO()
        self.stdout = io.BytesIO("".join(json.dumps(r) + "\n" for r in replies).encode())

    def sent(self):
        return [json.loads(line) for line in self.stdin.getvalue().decode().splitlines()]


class TestStdioClient:
    def test_send_request_skips_noise(self):
        proc = FakeProcess([
            {"debug": {"received": "tools.list"}},
            {"jsonrpc": "2.0", "id": 1, "result": []},
        ])
        assert client.send_request(proc, "tools.list") == {"jsonrpc": "2.0", "id": 1, "result": []}
        assert proc.sent() == [{"jsonrpc": "2.0", "id": 1, "method": "tools.list"}]

    def test_call_prints_content(self, capsys):
        proc = FakeProcess([{"jsonrpc": "2.0", "id": 2, "result": {"content": [{"type": "text", "text": "HI"}]}}])
        code = client.run_command(proc, ["call", "text_transform", '{"text": "hi", "operation": "uppercase"}'])
        assert code == 0
        assert capsys.readouterr().out.strip() == "HI"
        assert proc.sent()[0]["params"] == {
            "name": "text_transform",
            "arguments": {"text": "hi", "operation": "uppercase"},
        }

    def test_error_is_reported(self, capsys):
        proc = FakeProcess([{"jsonrpc": "2.0", "id": 2, "error": {"code": -32000, "message": "unknown tool 'x'"}}])
        assert client.run_command(proc, ["call", "x"]) == 1
        assert "unknown tool 'x'" in capsys.readouterr().out

    def test_unknown_command_prints_usage(self, capsys):
        assert client.run_command(FakeProcess([]), ["dance"]) == 1
        assert "Usage:" in capsys.readouterr().out
