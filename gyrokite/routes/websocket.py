"""/ws/simulate — WebSocket handler for live slider feedback.

Connection lifecycle:
1. Client opens ws://host:8000/ws/simulate
2. Client sends DesignConfiguration JSON on each parameter change
3. Server evaluates only the most recent design (last-write-wins)
4. Server replies with a JSON text message:
     {"type": "state", "state": {...}, "warnings": [...]}
   or {"type": "error", "error": ..., "detail": ..., "field": ...}
5. On disconnect both tasks finish and the handler returns

Concurrency model:
- A task group runs a reader and a compute task.
- The reader validates messages and posts designs to a memory channel,
  dropping stale entries when the channel is full.
- The compute task drains the channel to the newest design before each
  evaluation, so a burst of slider events yields one reply.
- A lock protects ws.send_text so the two tasks never interleave frames.
"""

from __future__ import annotations

import json
import logging
import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from gyrokite.aerodynamics import compute_state
from gyrokite.models import (
    DesignConfiguration,
    SimulationState,
    StateMessage,
    ValidationWarning,
)
from gyrokite.validation import DesignValidationError, compute_warnings, validate_design

logger = logging.getLogger("gyrokite.ws")

router = APIRouter()

# Maximum accepted message size (bytes or characters).
MAX_MESSAGE_SIZE = 64 * 1024  # 64 KB


def _build_error_message(error: str, detail: str = "", field: str = "") -> str:
    """Serialize an error reply."""
    payload: dict[str, str] = {"type": "error", "error": error}
    if detail:
        payload["detail"] = detail
    if field:
        payload["field"] = field
    return json.dumps(payload)


def _build_state_message(
    state: SimulationState,
    warnings: list[ValidationWarning],
) -> str:
    """Serialize a state reply with camelCase keys; inf/nan become null."""
    return StateMessage(state=state, warnings=warnings).model_dump_json(by_alias=True)


def _parse_design(text: str) -> DesignConfiguration | str:
    """Parse and validate one message; returns the design or an error reply."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed JSON from WebSocket client: %s", exc)
        return _build_error_message("Invalid JSON", detail=str(exc))

    try:
        design = DesignConfiguration.model_validate(data)
    except ValidationError as exc:
        logger.warning("Pydantic validation error: %s", exc)
        detail_parts = []
        for err in exc.errors()[:5]:
            loc = ".".join(str(part) for part in err["loc"])
            detail_parts.append(f"{loc}: {err['msg']}")
        return _build_error_message("Validation error", detail="; ".join(detail_parts))

    try:
        validate_design(design)
    except DesignValidationError as exc:
        return _build_error_message("Invalid design", detail=exc.message, field=exc.field)

    return design


@router.websocket("/ws/simulate")
async def simulate_websocket(ws: WebSocket) -> None:
    """Serve live simulation results for one client connection."""
    await ws.accept()
    logger.info("WebSocket client connected")

    send_ch, recv_ch = anyio.create_memory_object_stream[DesignConfiguration](max_buffer_size=16)
    ws_lock = anyio.Lock()

    async def _send(message: str) -> None:
        async with ws_lock:
            await ws.send_text(message)

    async def reader_task() -> None:
        """Receive messages and post validated designs to the channel."""
        try:
            while True:
                try:
                    raw = await ws.receive()
                except WebSocketDisconnect:
                    return
                if raw["type"] == "websocket.disconnect":
                    return

                text = raw.get("text")
                if text is None:
                    raw_bytes = raw.get("bytes")
                    if raw_bytes is None:
                        continue
                    if len(raw_bytes) > MAX_MESSAGE_SIZE:
                        await _send(_build_error_message(
                            "Message too large",
                            detail=f"Maximum message size is {MAX_MESSAGE_SIZE} bytes",
                        ))
                        continue
                    try:
                        text = raw_bytes.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.warning("Received non-UTF-8 binary frame, ignoring")
                        await _send(_build_error_message(
                            "Invalid message format",
                            detail="Expected UTF-8 encoded JSON text",
                        ))
                        continue

                if len(text) > MAX_MESSAGE_SIZE:
                    await _send(_build_error_message(
                        "Message too large",
                        detail=f"Maximum message size is {MAX_MESSAGE_SIZE} bytes",
                    ))
                    continue

                parsed = _parse_design(text)
                if isinstance(parsed, str):
                    await _send(parsed)
                    continue

                try:
                    _post(parsed)
                except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                    # compute task has stopped
                    return
        finally:
            send_ch.close()

    def _post(design: DesignConfiguration) -> None:
        try:
            send_ch.send_nowait(design)
        except anyio.WouldBlock:
            # Channel full: drop stale designs, keep the newest.
            while True:
                try:
                    recv_ch.receive_nowait()
                except anyio.WouldBlock:
                    break
            send_ch.send_nowait(design)

    async def compute_task() -> None:
        """Evaluate the newest pending design and send the result."""
        async with recv_ch:
            async for design in recv_ch:
                latest = design
                while True:
                    try:
                        latest = recv_ch.receive_nowait()
                    except anyio.WouldBlock:
                        break
                    except anyio.EndOfStream:
                        break

                try:
                    state = compute_state(latest)
                    warnings = compute_warnings(latest, state)
                    message = _build_state_message(state, warnings)
                except Exception as exc:
                    logger.exception("Simulation failed")
                    message = _build_error_message("Simulation failed", detail=str(exc))

                try:
                    await _send(message)
                except Exception:
                    logger.info("Could not deliver state, closing compute task")
                    return

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(reader_task)
            tg.start_soon(compute_task)
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    except Exception:
        logger.exception("WebSocket error")
    else:
        logger.info("WebSocket client disconnected")
