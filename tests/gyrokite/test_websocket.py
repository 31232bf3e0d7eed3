"""Tests for the /ws/simulate live-feedback handler.

Covers message builders, validation replies, size limits and a full
request/response round on a live connection.
"""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from gyrokite.aerodynamics import compute_state
from gyrokite.main import app
from gyrokite.models import DesignConfiguration, ValidationWarning
from gyrokite.routes.websocket import (
    MAX_MESSAGE_SIZE,
    _build_error_message,
    _build_state_message,
    _parse_design,
)


@pytest.fixture
def client() -> TestClient:
    """Return a TestClient for the FastAPI app."""
    return TestClient(app)


class TestBuildErrorMessage:
    def test_basic_error(self) -> None:
        payload = json.loads(_build_error_message("test error"))
        assert payload == {"type": "error", "error": "test error"}

    def test_error_with_detail_and_field(self) -> None:
        payload = json.loads(_build_error_message("bad", detail="some detail", field="blade_chord"))
        assert payload["detail"] == "some detail"
        assert payload["field"] == "blade_chord"


class TestBuildStateMessage:
    def test_camel_case_state(self, default_design: DesignConfiguration) -> None:
        warning = ValidationWarning(id="W06", message="clamped", fields=["blade_length"])
        payload = json.loads(_build_state_message(compute_state(default_design), [warning]))
        assert payload["type"] == "state"
        assert payload["state"]["rpm"] == 605
        assert "tipSpeedRatio" in payload["state"]
        assert "lowerLineTensionX" in payload["state"]["anchorAnalysis"]
        assert payload["warnings"][0]["id"] == "W06"


class TestParseDesign:
    def test_valid_design(self) -> None:
        parsed = _parse_design(json.dumps({"bladeLength": 1.5, "windSpeed": 12}))
        assert isinstance(parsed, DesignConfiguration)
        assert parsed.blade_length == 1.5

    def test_malformed_json(self) -> None:
        payload = json.loads(_parse_design("{not json"))
        assert payload["error"] == "Invalid JSON"

    def test_type_error(self) -> None:
        payload = json.loads(_parse_design(json.dumps({"windSpeed": "gusty"})))
        assert payload["error"] == "Validation error"
        assert "windSpeed" in payload["detail"]

    def test_meaningless_design(self) -> None:
        payload = json.loads(_parse_design(json.dumps({"bladeChord": 0})))
        assert payload["error"] == "Invalid design"
        assert payload["field"] == "blade_chord"


def test_max_message_size_is_64kb() -> None:
    assert MAX_MESSAGE_SIZE == 64 * 1024


# ---------------------------------------------------------------------------
# Live connection
# ---------------------------------------------------------------------------


class TestLiveConnection:
    def test_state_reply(self, client: TestClient, reference_design: DesignConfiguration) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_text(reference_design.model_dump_json(by_alias=True))
            reply = ws.receive_json()
        assert reply["type"] == "state"
        assert reply["state"]["rpm"] == 605
        assert "W06" in {w["id"] for w in reply["warnings"]}

    def test_error_then_recovery(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_text("{oops")
            assert ws.receive_json()["error"] == "Invalid JSON"

            ws.send_text(json.dumps({"bladeLength": 0}))
            reply = ws.receive_json()
            assert reply["type"] == "error"
            assert reply["field"] == "blade_length"

            ws.send_text(json.dumps({"lineAngle": 90}))
            reply = ws.receive_json()
            assert reply["type"] == "state"
            assert reply["state"]["rpm"] == 0

    def test_oversized_message(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_text("x" * (MAX_MESSAGE_SIZE + 1))
            assert ws.receive_json()["error"] == "Message too large"

    def test_non_utf8_binary_frame(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_bytes(b"\xff\xfe\xfd")
            assert ws.receive_json()["error"] == "Invalid message format"

    def test_overflowing_design_still_gets_state(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_text(json.dumps({"windSpeed": 1e200}))
            reply = ws.receive_json()
        assert reply["type"] == "state"
        assert reply["state"]["generatedThrust"] is None
        assert reply["state"]["stabilityScore"] == 77

    def test_model_failure_is_reported(self, client: TestClient, monkeypatch) -> None:
        def _boom(design):
            raise RuntimeError("solver exploded")

        monkeypatch.setattr("gyrokite.routes.websocket.compute_state", _boom)
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_text(json.dumps({"windSpeed": 10}))
            reply = ws.receive_json()
            assert reply["type"] == "error"
            assert reply["error"] == "Simulation failed"
            assert reply["detail"] == "solver exploded"

            monkeypatch.undo()
            ws.send_text(json.dumps({"windSpeed": 10}))
            assert ws.receive_json()["type"] == "state"

    def test_utf8_binary_frame_is_accepted(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/simulate") as ws:
            ws.send_bytes(json.dumps({"windSpeed": 10}).encode("utf-8"))
            assert ws.receive_json()["type"] == "state"
