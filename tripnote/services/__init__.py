"""Domain services built on the LLM pipeline."""

from tripnote.services.travel_plan import (
    TravelPlanService,
    flatten_preferences,
    validate_note_content,
)

__all__ = ["TravelPlanService", "flatten_preferences", "validate_note_content"]
