"""Pre-validation repair of tool-call arguments.

Even with a forced tool call the model regularly returns almost-right
itineraries. The mistakes are predictable, so they are fixed here before the
document reaches schema validation:

  - disclaimer pushed into the `days` array as its own element
      {"days": [{...}, {"disclaimer": "..."}]}
  - trailing null / empty objects in `days`
      {"days": [{...}, {...}, {}]}
  - `activities` returned as a flat list instead of the time-of-day object
      {"activities": [{...}, {...}]}  →  {"activities": {"afternoon": [...]}}

Missing time-of-day periods are left missing. An absent `morning` means no
morning activities, which is valid (arrival and departure days).

Every rule is a pure function over plain JSON values. Nothing here mutates
its input, and repairing an already well-formed document returns an equal one.
"""

import json
from typing import Any

from tripnote.llm.errors import InvalidJSONResponseError
from tripnote.utils.logging import log, get_logger, truncate

MODULE = "llm.repair"
logger = get_logger()

# Unclassified activities are assumed to happen in the afternoon
DEFAULT_PERIOD = "afternoon"


def parse_arguments(raw_text: str) -> Any:
    """Parse the tool-call arguments string.

    Raises:
        InvalidJSONResponseError: the text is not JSON (usually a truncated response)
    """
    try:
        return json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as e:
        log.warning(logger, MODULE, "parse_failed",
                    "Tool-call arguments are not valid JSON",
                    error=str(e), raw_length=len(raw_text or ""),
                    raw=truncate(raw_text))
        raise InvalidJSONResponseError(raw_text) from e


def is_disclaimer_entry(value: Any) -> bool:
    """A `days` element that carries the disclaimer instead of a day."""
    return isinstance(value, dict) and "disclaimer" in value and "day" not in value


def is_blank_entry(value: Any) -> bool:
    """A `days` element with no usable content: null, non-object or {}."""
    return not isinstance(value, dict) or not value


def hoist_disclaimer(doc: dict) -> dict:
    """Move the first disclaimer found inside `days` to the top level."""
    days = doc["days"]
    for index, entry in enumerate(days):
        if is_disclaimer_entry(entry):
            return {
                **doc,
                "disclaimer": entry["disclaimer"],
                "days": days[:index] + days[index + 1:],
            }
    return doc


def normalize_activities(day: dict) -> dict:
    """Wrap a flat `activities` list into the time-of-day object."""
    activities = day.get("activities")
    if isinstance(activities, list):
        return {**day, "activities": {DEFAULT_PERIOD: activities}}
    return day


def drop_invalid_days(days: list) -> list:
    """Remove blank and disclaimer-only elements, normalizing the rest."""
    return [
        normalize_activities(entry)
        for entry in days
        if not is_blank_entry(entry) and not is_disclaimer_entry(entry)
    ]


def repair_document(doc: Any) -> Any:
    """Apply all repairs. Documents without a `days` list pass through untouched."""
    if not isinstance(doc, dict) or not isinstance(doc.get("days"), list):
        return doc

    repaired = hoist_disclaimer(doc)
    repaired = {**repaired, "days": drop_invalid_days(repaired["days"])}

    if repaired != doc:
        log.info(logger, MODULE, "document_repaired",
                 "Normalized malformed itinerary structure",
                 days_before=len(doc["days"]), days_after=len(repaired["days"]),
                 disclaimer_hoisted=repaired.get("disclaimer") != doc.get("disclaimer"))
    return repaired


def repair_arguments(raw_text: str) -> Any:
    """Parse and repair raw tool-call arguments in one step."""
    return repair_document(parse_arguments(raw_text))
