"""Date handling for travel notes.

Notes mention dates the way people write them: "15-18 listopada",
"od 15.11 do 18.11", "weekend 20-22 grudnia 2025". The year is usually
missing, and a bare day and month always means the next such date:

  infer_year(month, day, today)
    → today.year      if date(today.year, month, day) >= today
    → today.year + 1  otherwise

  today = 2025-11-05:  "15 listopada" → 2025-11-15
                       "5 czerwca"    → 2026-06-05
                       "10 stycznia"  → 2026-01-10

An explicit year in the note always wins and is never inferred.
"""

import datetime as dt
import re
from dataclasses import dataclass
from typing import Optional

POLISH_WEEKDAYS = (
    "Poniedziałek",
    "Wtorek",
    "Środa",
    "Czwartek",
    "Piątek",
    "Sobota",
    "Niedziela",
)

# Genitive forms, as used after a day number ("15 listopada")
POLISH_MONTHS = {
    "stycznia": 1,
    "lutego": 2,
    "marca": 3,
    "kwietnia": 4,
    "maja": 5,
    "czerwca": 6,
    "lipca": 7,
    "sierpnia": 8,
    "września": 9,
    "wrzesnia": 9,
    "października": 10,
    "pazdziernika": 10,
    "listopada": 11,
    "grudnia": 12,
}

_MONTH_ALTERNATION = "|".join(sorted(POLISH_MONTHS, key=len, reverse=True))

# "15 listopada", "15-18 listopada 2025", "15 do 18 listopada".
# A second day number always needs a separator: "1518 listopada" is not a range.
_TEXT_DATE = re.compile(
    r"\b(\d{1,2})(?:(?:\s*[-–]\s*|\s+do\s+)(\d{1,2}))?\s+(" + _MONTH_ALTERNATION + r")(?:\s+(\d{4}))?\b",
    re.IGNORECASE,
)

# Month must be two digits so "3.5 km" is not a date.
_NUMERIC_PART = r"(\d{1,2})\.(\d{2})(?:\.(\d{4}))?"

# "15.11-18.11", "od 15.11 do 18.11.2025"
_NUMERIC_RANGE = re.compile(
    r"(?<![\d.])" + _NUMERIC_PART + r"(?:\s*[-–]\s*|\s+do\s+)" + _NUMERIC_PART + r"(?!\d)"
)

# "15.11.2025". Without a year "12.05" reads as a clock time, so it is not a date.
_NUMERIC_DATE = re.compile(r"(?<![\d.])(\d{1,2})\.(\d{2})\.(\d{4})(?!\d)")

# "o 10.12-11.12", "godz. 9.15 - 10.12", "10.12-11.12 h"
_CLOCK_BEFORE = re.compile(r"(?:\bo|\bok\.?|\boko[lł]o|\bgodz\.?|\bgodzin[aie]?)\s*$", re.IGNORECASE)
_CLOCK_AFTER = re.compile(r"^\s*(?:h\b|godz)", re.IGNORECASE)


@dataclass(frozen=True)
class DateMention:
    """A date (or day range) found in note text, with its resolved calendar dates."""

    text: str
    start: dt.date
    end: Optional[dt.date] = None
    year_explicit: bool = False


def polish_weekday(value: dt.date) -> str:
    return POLISH_WEEKDAYS[value.weekday()]


def infer_year(month: int, day: int, today: dt.date) -> int:
    """Year for a day/month without a year: this year unless it has already passed.

    29 February moves forward to the first leap year in which it has not passed.

    Raises:
        ValueError: the day/month pair does not exist in any year
    """
    dt.date(2000, month, day)  # leap year: rejects only impossible pairs

    year = today.year
    while True:
        try:
            candidate = dt.date(year, month, day)
        except ValueError:
            year += 1
            continue
        if candidate >= today:
            return year
        year += 1


def resolve_date(day: int, month: int, today: dt.date, year: Optional[int] = None) -> dt.date:
    """Calendar date for a mention. An explicit year is used as given."""
    if year is not None:
        return dt.date(year, month, day)
    return dt.date(infer_year(month, day, today), month, day)


def find_date_mentions(note_text: str, today: dt.date) -> list[DateMention]:
    """All explicit dates in a note, in order of appearance.

    Numeric dates count only with a year ("15.11.2025") or as a range
    ("15.11-18.11"), and not next to a clock cue ("o 10.12", "10.12 h").
    Pairs that are not real calendar dates are skipped.
    """
    found: list[tuple[int, DateMention]] = []

    for match in _TEXT_DATE.finditer(note_text):
        first, second, month_name, year = match.groups()
        month = POLISH_MONTHS[month_name.lower()]
        start_day, end_day = (int(first), int(second)) if second else (int(first), None)
        mention = _build_mention(match.group(0), start_day, end_day, month, year, today)
        if mention is not None:
            found.append((match.start(), mention))

    taken: list[tuple[int, int]] = []
    for match in _NUMERIC_RANGE.finditer(note_text):
        taken.append(match.span())
        if _is_clock_time(note_text, match):
            continue
        mention = _build_numeric_range(match, today)
        if mention is not None:
            found.append((match.start(), mention))

    for match in _NUMERIC_DATE.finditer(note_text):
        if any(start <= match.start() < end for start, end in taken):
            continue
        day, month, year = match.groups()
        mention = _build_mention(match.group(0), int(day), None, int(month), year, today)
        if mention is not None:
            found.append((match.start(), mention))

    found.sort(key=lambda item: item[0])
    return [mention for _, mention in found]


def _is_clock_time(note_text: str, match: re.Match) -> bool:
    return bool(
        _CLOCK_BEFORE.search(note_text[:match.start()])
        or _CLOCK_AFTER.match(note_text[match.end():])
    )


def _build_numeric_range(match: re.Match, today: dt.date) -> Optional[DateMention]:
    """A year on either side applies to the whole range."""
    start_day, start_month, start_year, end_day, end_month, end_year = (
        int(group) if group else None for group in match.groups()
    )
    try:
        if start_year is None and end_year is None:
            start = resolve_date(start_day, start_month, today)
            end = dt.date(start.year, end_month, end_day)
            if end < start:
                end = dt.date(start.year + 1, end_month, end_day)
        elif start_year is not None:
            start = dt.date(start_year, start_month, start_day)
            end = dt.date(end_year or start_year, end_month, end_day)
            if end_year is None and end < start:
                end = dt.date(start_year + 1, end_month, end_day)
        else:
            end = dt.date(end_year, end_month, end_day)
            start = dt.date(end_year, start_month, start_day)
            if start > end:
                start = dt.date(end_year - 1, start_month, start_day)
    except ValueError:
        return None
    if end < start:
        return None
    return DateMention(
        text=match.group(0).strip(),
        start=start,
        end=end,
        year_explicit=start_year is not None or end_year is not None,
    )


def _build_mention(
    text: str,
    start_day: int,
    end_day: Optional[int],
    month: int,
    year: Optional[str],
    today: dt.date,
) -> Optional[DateMention]:
    explicit_year = int(year) if year else None
    try:
        start = resolve_date(start_day, month, today, explicit_year)
        end = dt.date(start.year, month, end_day) if end_day is not None else None
    except ValueError:
        return None
    if end is not None and end < start:
        end = None
    return DateMention(text=text.strip(), start=start, end=end, year_explicit=explicit_year is not None)
