"""Pydantic schemas for structured data validation.

This package contains:
- travel_plan.py: the itinerary the model must produce, plus generation options
- api.py: request/response schemas for the REST API

Model output is validated against these schemas BEFORE anything else uses it.
"""

from tripnote.schemas.travel_plan import (
    PRICE_CATEGORIES,
    Activity,
    DayActivities,
    Logistics,
    PriceCategory,
    TravelDay,
    TravelPlanContent,
    TravelPlanOptions,
)

from tripnote.schemas.api import (
    ErrorResponse,
    GeneratePlanRequest,
    GeneratePlanResponse,
)

__all__ = [
    # Travel plan
    "PRICE_CATEGORIES",
    "PriceCategory",
    "Logistics",
    "Activity",
    "DayActivities",
    "TravelDay",
    "TravelPlanContent",
    "TravelPlanOptions",
    # API
    "GeneratePlanRequest",
    "GeneratePlanResponse",
    "ErrorResponse",
]
