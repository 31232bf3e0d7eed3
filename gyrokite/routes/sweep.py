"""POST /api/sweep — response curve over one design parameter."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response

from gyrokite.models import SweepRequest, SweepResponse
from gyrokite.routes.simulate import camel_json_response, validation_http_error
from gyrokite.sweep import sweep_parameter, sweep_values
from gyrokite.validation import DesignValidationError, validate_design

logger = logging.getLogger("gyrokite.sweep")

router = APIRouter(prefix="/api", tags=["sweep"])


@router.post("/sweep", response_model=SweepResponse, response_model_by_alias=True)
async def sweep(request: SweepRequest) -> Response:
    """Evaluate the model across ``start..stop`` for ``parameter``.

    The base design is validated once; swept values are not, so a curve may
    deliberately run through zero wind or past the editor range.
    """
    try:
        validate_design(request.design)
    except DesignValidationError as exc:
        logger.warning("Rejected sweep design: %s", exc)
        raise validation_http_error(exc) from exc

    try:
        values = sweep_values(request.start, request.stop, request.step)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    points = sweep_parameter(request.design, request.parameter, values)
    return camel_json_response(SweepResponse(parameter=request.parameter, points=points))
