"""Tests for the travel plan service (end to end with a stub provider)."""

import datetime as dt

import pytest

from tripnote.llm.errors import ConfigurationError, SchemaValidationError
from tripnote.schemas.travel_plan import TravelPlanContent, TravelPlanOptions
from tripnote.services.travel_plan import (
    PLAN_MAX_TOKENS,
    PLAN_SCHEMA_NAME,
    PLAN_TEMPERATURE,
    TravelPlanService,
    flatten_preferences,
    validate_note_content,
)

from tests.mocks.plans import valid_plan
from tests.mocks.stub_transport import StubTransport

TODAY = dt.date(2025, 11, 5)
NOTE = "Weekend w Krakowie, Wawel, Rynek, dwa dni"


# =============================================================================
# Note and preference helpers
# =============================================================================

@pytest.mark.parametrize("content,expected", [
    (None, False),
    ("", False),
    ("Kraków Wawel Rynek", False),
    ("jeden dwa trzy cztery pięć sześć siedem osiem dziewięć", False),
    ("jeden dwa trzy cztery pięć sześć siedem osiem dziewięć dziesięć", True),
    ("  jeden\ndwa\ttrzy cztery pięć sześć siedem osiem dziewięć dziesięć  ", True),
])
def test_validate_note_content(content, expected):
    assert validate_note_content(content) is expected


def test_flatten_preferences():
    assert flatten_preferences(["historia", "sztuka"]) == ["historia", "sztuka"]
    assert flatten_preferences({
        "cuisine": ["włoska kuchnia"],
        "interests": ["historia", 3],
        "mood": "spokojnie",
    }) == ["włoska kuchnia", "historia", "spokojnie"]
    assert flatten_preferences(None) == []
    assert flatten_preferences("historia") == []


# =============================================================================
# Generation
# =============================================================================

@pytest.mark.asyncio
async def test_weekend_in_krakow_end_to_end():
    """Default options, no profile tags, well-formed plan on the first call."""
    transport = StubTransport(valid_plan())
    service = TravelPlanService(transport, max_attempts=1)

    plan = await service.generate_plan(
        NOTE, TravelPlanOptions(style="leisure", transport="public", budget="standard"), [],
        today=TODAY,
    )

    assert isinstance(plan, TravelPlanContent)
    assert plan.to_json() == valid_plan()
    assert transport.calls == 1

    request = transport.requests[0]
    assert "wypoczynkowy" in request.system_prompt
    assert "komunikacja publiczna" in request.system_prompt
    assert "standardowy" in request.system_prompt
    assert "PREFERENCJE UŻYTKOWNIKA" not in request.system_prompt
    assert NOTE in request.user_prompt


@pytest.mark.asyncio
async def test_request_parameters():
    transport = StubTransport(valid_plan())
    service = TravelPlanService(transport, model="openai/gpt-4o-mini")

    await service.generate_plan(NOTE, today=TODAY)

    request = transport.requests[0]
    assert request.schema_name == PLAN_SCHEMA_NAME == "create_travel_plan"
    assert request.temperature == PLAN_TEMPERATURE == 0.7
    assert request.max_tokens == PLAN_MAX_TOKENS == 8000
    assert request.model == "openai/gpt-4o-mini"
    assert request.response_schema.model is TravelPlanContent


@pytest.mark.asyncio
async def test_preferences_reach_the_prompt():
    transport = StubTransport(valid_plan())
    service = TravelPlanService(transport)

    await service.generate_plan(NOTE, None, ["włoska kuchnia"], today=TODAY)

    assert "• włoska kuchnia" in transport.requests[0].system_prompt


@pytest.mark.asyncio
async def test_malformed_plan_is_repaired():
    raw = valid_plan()
    disclaimer = raw.pop("disclaimer")
    raw["days"][0]["activities"] = (
        raw["days"][0]["activities"]["morning"] + raw["days"][0]["activities"]["afternoon"]
    )
    raw["days"].append({"disclaimer": disclaimer})
    raw["days"].append({})
    transport = StubTransport(raw)

    plan = await TravelPlanService(transport).generate_plan(NOTE, today=TODAY)

    assert plan.disclaimer == disclaimer
    assert [day.day for day in plan.days] == [1, 2]
    assert [a.name for a in plan.days[0].activities.afternoon] == [
        "Zamek Królewski na Wawelu", "Rynek Główny",
    ]


@pytest.mark.asyncio
async def test_invalid_plan_surfaces_validation_error():
    raw = valid_plan()
    raw["days"] = []
    transport = StubTransport(raw)

    with pytest.raises(SchemaValidationError):
        await TravelPlanService(transport, max_attempts=1).generate_plan(NOTE, today=TODAY)


@pytest.mark.asyncio
async def test_missing_api_key_is_configuration_error(monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    service = TravelPlanService()

    with pytest.raises(ConfigurationError):
        await service.generate_plan(NOTE, today=TODAY)
