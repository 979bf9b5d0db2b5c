"""Prompt templates and composition for LLM calls."""

from tripnote.prompts.dates import DateMention, find_date_mentions, infer_year, resolve_date
from tripnote.prompts.travel_plan import ComposedPrompts, compose_travel_plan_prompts, map_link

__all__ = [
    "ComposedPrompts",
    "DateMention",
    "compose_travel_plan_prompts",
    "find_date_mentions",
    "infer_year",
    "map_link",
    "resolve_date",
]
