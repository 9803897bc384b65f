"""Shared test fixtures for wrestler.

Provides isolated config directories, output-manager handling and a small
recording transport so that client tests never touch the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from wrestler.models import ResponseEnvelope
from wrestler.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches references to sys.stdout/sys.stderr at creation
    time; CliRunner swaps those streams, so a stale manager would write to
    closed files.
    """
    yield
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless, non-quiet PLAIN output manager (capsys-friendly)."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at *tmp_path* and clear WRESTLER_* variables."""
    monkeypatch.setattr("wrestler.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["WRESTLER_PROFILE", "WRESTLER_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport double that records every call and replays canned envelopes."""

    def __init__(self, *responses: ResponseEnvelope) -> None:
        self.calls: list[tuple[str, str, Optional[str], Optional[str]]] = []
        self._responses = list(responses)

    def _record(
        self, method: str, url: str, body: Optional[str], content_type: Optional[str]
    ) -> ResponseEnvelope:
        self.calls.append((method, url, body, content_type))
        if self._responses:
            return self._responses.pop(0)
        return ResponseEnvelope(status_code=204)

    def get(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> ResponseEnvelope:
        return self._record("GET", url, body, content_type)

    def post(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> ResponseEnvelope:
        return self._record("POST", url, body, content_type)

    def put(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> ResponseEnvelope:
        return self._record("PUT", url, body, content_type)

    def delete(self, url: str, body: Optional[str] = None, content_type: Optional[str] = None) -> ResponseEnvelope:
        return self._record("DELETE", url, body, content_type)


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_transport():
    """Factory for a :class:`RecordingTransport` that replays the given envelopes."""
    return RecordingTransport


def _json_envelope(data: Any, status_code: int = 200) -> ResponseEnvelope:
    return ResponseEnvelope(
        status_code=status_code,
        headers={"Content-Type": "application/json"},
        body=json.dumps(data),
    )


@pytest.fixture
def json_envelope():
    """Factory building a JSON :class:`ResponseEnvelope` from Python data."""
    return _json_envelope


@pytest.fixture
def mock_httpx_client():
    """Factory for an :class:`httpx.Client` answering every request with *handler*."""
    clients: list[httpx.Client] = []

    def _make(handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()