"""Travel plan generation endpoint.

POST /plans/generate turns a note into a plan. Pipeline errors are mapped to
HTTP statuses with generic messages. Provider bodies and validation details
go to the log only:

  AuthenticationError, ConfigurationError → 500 configuration error
  RateLimitError                          → 429 with Retry-After
  BadRequestError                         → 400
  InvalidJSONResponseError,
  SchemaValidationError                   → 500 try again
  ServerError                             → 503
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from tripnote.llm.errors import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    InvalidJSONResponseError,
    LLMError,
    RateLimitError,
    SchemaValidationError,
    ServerError,
)
from tripnote.schemas.api import GeneratePlanRequest, GeneratePlanResponse
from tripnote.services.travel_plan import (
    MIN_NOTE_WORDS,
    TravelPlanService,
    flatten_preferences,
    validate_note_content,
)
from tripnote.utils.logging import log, get_logger

MODULE = "plans"
logger = get_logger()

DEFAULT_RETRY_AFTER = "60"

router = APIRouter()

_service: Optional[TravelPlanService] = None


def get_travel_plan_service() -> TravelPlanService:
    global _service
    if _service is None:
        _service = TravelPlanService()
    return _service


def error_response(exc: LLMError) -> JSONResponse:
    """Map a pipeline error to a client-safe JSON response."""
    if isinstance(exc, (AuthenticationError, ConfigurationError)):
        return _error(500, "Configuration Error",
                      "AI service configuration error. Please contact support.")

    if isinstance(exc, RateLimitError):
        return _error(429, "Rate Limit Exceeded",
                      "Too many requests. Please try again in a few moments.",
                      headers={"Retry-After": exc.retry_after or DEFAULT_RETRY_AFTER})

    if isinstance(exc, BadRequestError):
        return _error(400, "Bad Request",
                      "The AI service rejected the generation request.")

    if isinstance(exc, InvalidJSONResponseError):
        return _error(500, "AI Response Error",
                      "AI service returned an invalid response. Please try again.")

    if isinstance(exc, SchemaValidationError):
        return _error(500, "AI Response Error",
                      "AI service returned data in an unexpected format. Please try again.")

    if isinstance(exc, ServerError):
        return _error(503, "Service Unavailable",
                      "AI service is currently unavailable. Please try again later.")

    return _error(500, "Internal Server Error",
                  "An unexpected error occurred while generating the travel plan.")


def _error(status_code: int, error: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message},
        headers=headers,
    )


@router.post("/generate", response_model=GeneratePlanResponse)
async def generate_plan(
    body: GeneratePlanRequest,
    service: TravelPlanService = Depends(get_travel_plan_service),
):
    """Generate a travel plan from a note."""
    if not validate_note_content(body.note):
        log.info(logger, MODULE, "note_too_short", "Note rejected before generation",
                 words=len(body.note.split()))
        raise HTTPException(
            status_code=400,
            detail=f"Note content must contain at least {MIN_NOTE_WORDS} words to generate a travel plan",
        )

    preferences = flatten_preferences(body.preferences)

    try:
        plan = await service.generate_plan(body.note, body.options, preferences)
    except LLMError as e:
        log.error(logger, MODULE, "generate_failed", "Travel plan generation failed",
                  error=str(e), error_type=type(e).__name__,
                  status_code=getattr(e, "status_code", None))
        return error_response(e)

    return GeneratePlanResponse(travel_plan=plan.to_json())
