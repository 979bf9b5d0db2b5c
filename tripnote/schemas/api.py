"""Pydantic schemas for API requests/responses."""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from tripnote.schemas.travel_plan import TravelPlanOptions


class GeneratePlanRequest(BaseModel):
    """Request body for generating a plan from a note."""
    note: str = Field(..., description="Free-text travel note")
    options: Optional[TravelPlanOptions] = None
    preferences: Any = Field(
        default=None,
        description="Profile preferences: list of tags or mapping of category to tags",
    )

    @field_validator("note")
    @classmethod
    def note_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Note must not be empty")
        return v


class GeneratePlanResponse(BaseModel):
    """Generated plan in its stored JSON form (camelCase, absent fields omitted)."""
    travel_plan: dict


class ErrorResponse(BaseModel):
    error: str
    message: str
