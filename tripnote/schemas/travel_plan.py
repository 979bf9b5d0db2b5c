"""Pydantic schemas for the generated travel plan.

This is the contract the model has to satisfy through the
`create_travel_plan` tool. Field names on the wire are camelCase
(`dayOfWeek`, `priceCategory`, `mapLink`, `estimatedTime`) because the stored
plan JSON and the frontend use them. Python attributes are snake_case.

Time-of-day keys inside `activities` are all optional: an arrival day may
only have an evening, a departure day only a morning.
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PriceCategory = Literal["free", "budget", "moderate", "expensive"]

PRICE_CATEGORIES: tuple[str, ...] = ("free", "budget", "moderate", "expensive")

TravelStyle = Literal["adventure", "leisure"]
TransportMode = Literal["car", "public", "walking"]
BudgetLevel = Literal["economy", "standard", "luxury"]


class TravelPlanOptions(BaseModel):
    """Personalization options chosen by the user before generation."""

    style: TravelStyle = "leisure"
    transport: TransportMode = "public"
    budget: BudgetLevel = "standard"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# ACTIVITIES
# =============================================================================

class Logistics(_CamelModel):
    address: Optional[str] = Field(default=None, description="Street address of the place")
    map_link: Optional[str] = Field(
        default=None,
        description="https://www.google.com/maps/search/?api=1&query=PLACE+CITY",
    )
    estimated_time: Optional[str] = Field(
        default=None,
        description="How long the activity takes, e.g. '2 godziny'",
    )


class Activity(_CamelModel):
    name: str = Field(..., description="Name of the attraction, venue or activity")
    description: str = Field(..., description="Detailed description of the activity")
    price_category: PriceCategory = Field(
        ...,
        description="Exactly one of: free, budget, moderate, expensive",
    )
    logistics: Logistics = Field(default_factory=Logistics)


class DayActivities(_CamelModel):
    """Activities keyed by time of day. Every period is optional."""

    morning: Optional[list[Activity]] = None
    afternoon: Optional[list[Activity]] = None
    evening: Optional[list[Activity]] = None


# =============================================================================
# DAYS AND PLAN
# =============================================================================

class TravelDay(_CamelModel):
    day: int = Field(..., ge=1, description="Day number starting at 1")
    date: Optional[dt.date] = Field(
        default=None,
        description="ISO date (YYYY-MM-DD), only when the note gives explicit dates",
    )
    day_of_week: Optional[str] = Field(
        default=None,
        description="Polish weekday name, only together with date",
    )
    title: str = Field(..., description="Short title of the day")
    activities: DayActivities


class TravelPlanContent(_CamelModel):
    """Complete itinerary returned by the model."""

    days: list[TravelDay] = Field(..., min_length=1)
    disclaimer: str = Field(
        ...,
        description="Note that the plan is AI-generated and should be verified",
    )

    def to_json(self) -> dict:
        """Plan as stored/returned JSON: camelCase keys, absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
