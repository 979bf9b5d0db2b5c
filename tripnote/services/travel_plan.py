"""Travel plan generation from notes.

Wires the prompt composer and the itinerary schema to the structured
invoker. This is the only entry point the HTTP layer uses:

  service = TravelPlanService()
  plan = await service.generate_plan(note_text, options, preferences)

The LLM client is created on first use, so a missing OPENROUTER_API_KEY
surfaces as ConfigurationError from the first generation rather than at
import time.
"""

import datetime as dt
import os
from typing import Any, Optional, Sequence

from tripnote.llm import (
    GenerationRequest,
    LLMTransport,
    OpenRouterClient,
    StructuredInvoker,
    StructuredSchema,
)
from tripnote.llm.invoker import LLM_MAX_ATTEMPTS
from tripnote.prompts.travel_plan import compose_travel_plan_prompts
from tripnote.schemas.travel_plan import TravelPlanContent, TravelPlanOptions
from tripnote.utils.logging import log, get_logger, truncate

MODULE = "travel_plan"
logger = get_logger()

PLAN_SCHEMA = StructuredSchema(TravelPlanContent)
PLAN_SCHEMA_NAME = "create_travel_plan"
PLAN_SCHEMA_DESCRIPTION = (
    "Tworzy ustrukturyzowany plan podróży z notatek użytkownika, uwzględniający "
    "preferencje dotyczące stylu, transportu i budżetu."
)
PLAN_TEMPERATURE = 0.7
# Enough for long plans (5+ days)
PLAN_MAX_TOKENS = 8000

MIN_NOTE_WORDS = 10


def validate_note_content(content: Optional[str]) -> bool:
    """A note is ready for generation once it has at least MIN_NOTE_WORDS words."""
    if not content:
        return False
    return len(content.split()) >= MIN_NOTE_WORDS


def flatten_preferences(raw: Any) -> list[str]:
    """Turn a stored profile preferences payload into a flat list of tags.

    Profiles store either a list of tags or a mapping of category → tags,
    e.g. {"cuisine": ["włoska kuchnia"], "interests": ["historia"]}.
    Anything that is not a string is ignored.
    """
    if isinstance(raw, dict):
        values: list[Any] = []
        for value in raw.values():
            if isinstance(value, list):
                values.extend(value)
            else:
                values.append(value)
    elif isinstance(raw, list):
        values = raw
    else:
        return []
    return [item for item in values if isinstance(item, str)]


class TravelPlanService:
    """Generates structured travel plans from free-text notes."""

    def __init__(
        self,
        transport: Optional[LLMTransport] = None,
        *,
        model: Optional[str] = None,
        max_attempts: int = LLM_MAX_ATTEMPTS,
    ):
        self._transport = transport
        self.model = model or os.getenv("OPENROUTER_MODEL") or None
        self.max_attempts = max_attempts

    def _get_transport(self) -> LLMTransport:
        if self._transport is None:
            self._transport = OpenRouterClient()
        return self._transport

    def build_request(
        self,
        note_text: str,
        options: Optional[TravelPlanOptions] = None,
        user_preferences: Optional[Sequence[str]] = None,
        today: Optional[dt.date] = None,
    ) -> GenerationRequest:
        """The GenerationRequest for one note, without sending it."""
        prompts = compose_travel_plan_prompts(note_text, options, user_preferences, today)
        return GenerationRequest(
            system_prompt=prompts.system,
            user_prompt=prompts.user,
            response_schema=PLAN_SCHEMA,
            schema_name=PLAN_SCHEMA_NAME,
            schema_description=PLAN_SCHEMA_DESCRIPTION,
            model=self.model,
            temperature=PLAN_TEMPERATURE,
            max_tokens=PLAN_MAX_TOKENS,
        )

    async def generate_plan(
        self,
        note_text: str,
        options: Optional[TravelPlanOptions] = None,
        user_preferences: Optional[Sequence[str]] = None,
        *,
        today: Optional[dt.date] = None,
    ) -> TravelPlanContent:
        """Generate a validated travel plan for a note.

        Args:
            note_text: Free-text travel note
            options: Style/transport/budget; defaults to leisure/public/standard
            user_preferences: Profile tags such as "włoska kuchnia", "historia"
            today: Reference date for year inference (defaults to today)

        Raises:
            LLMError: any pipeline failure, see tripnote.llm.errors
        """
        options = options or TravelPlanOptions()
        request = self.build_request(note_text, options, user_preferences, today)

        log.info(logger, MODULE, "generate_start", "Generating travel plan",
                 style=options.style, transport=options.transport, budget=options.budget,
                 preferences=len(user_preferences or ()), note=truncate(note_text, 80),
                 model=request.model)

        invoker: StructuredInvoker[TravelPlanContent] = StructuredInvoker(
            self._get_transport(), max_attempts=self.max_attempts,
        )
        plan = await invoker.generate(request)

        log.info(logger, MODULE, "generate_done", "Travel plan generated",
                 days=len(plan.days))
        return plan
