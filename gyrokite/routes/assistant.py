"""POST /api/assistant/context — grounding text for the design-assistant chat.

The chat itself runs against an external language-model service; this route
only supplies the system instruction and a prompt describing the current
design and its simulation results.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from gyrokite.aerodynamics import compute_state
from gyrokite.models import AssistantContextRequest, AssistantContextResponse
from gyrokite.narration import SYSTEM_INSTRUCTION, build_prompt
from gyrokite.routes.simulate import validation_http_error
from gyrokite.validation import DesignValidationError, validate_design

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


@router.post(
    "/context",
    response_model=AssistantContextResponse,
    response_model_by_alias=True,
)
async def assistant_context(request: AssistantContextRequest) -> AssistantContextResponse:
    """Build the assistant prompt for a question about the current design."""
    if not request.question.strip():
        raise HTTPException(status_code=422, detail="question must not be empty")
    try:
        validate_design(request.design)
    except DesignValidationError as exc:
        raise validation_http_error(exc) from exc

    state = compute_state(request.design)
    return AssistantContextResponse(
        system_instruction=SYSTEM_INSTRUCTION,
        prompt=build_prompt(request.question, request.design, state),
    )
