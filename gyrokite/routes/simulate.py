"""POST /api/simulate — evaluate one design.

Returns the SimulationState and non-blocking warnings. Physically
meaningless designs are rejected with 422 before reaching the model.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel

from gyrokite.aerodynamics import compute_state
from gyrokite.models import DesignConfiguration, SimulationResult
from gyrokite.validation import DesignValidationError, compute_warnings, validate_design

logger = logging.getLogger("gyrokite.simulate")

router = APIRouter(prefix="/api", tags=["simulate"])


def camel_json_response(model: BaseModel) -> Response:
    """camelCase JSON body; overflowed floats are sent as null, not Infinity."""
    return Response(model.model_dump_json(by_alias=True), media_type="application/json")


def validation_http_error(exc: DesignValidationError) -> HTTPException:
    """422 carrying the offending field so the editor can highlight it."""
    return HTTPException(
        status_code=422,
        detail={"message": exc.message, "field": exc.field},
    )


@router.post("/simulate", response_model=SimulationResult, response_model_by_alias=True)
async def simulate(design: DesignConfiguration) -> Response:
    """Compute the steady-state rotor outputs and warnings for a design."""
    try:
        validate_design(design)
    except DesignValidationError as exc:
        logger.warning("Rejected design: %s", exc)
        raise validation_http_error(exc) from exc

    try:
        state = compute_state(design)
        warnings = compute_warnings(design, state)
    except Exception as exc:
        logger.exception("Simulation failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return camel_json_response(SimulationResult(state=state, warnings=warnings))
