"""Prompts for travel plan generation.

The model receives two messages:

  system → role, date rules (with year inference), personalization,
           optional profile preferences, output structure rules
  user   → the note itself plus a reminder of the chosen options

The product is Polish-language, so prompts are Polish and `dayOfWeek` uses
Polish weekday names.

Sections that do not apply are left out completely. An empty preference
list produces no preferences heading, and a note without recognisable
dates produces no recognised-dates block.
"""

import datetime as dt
from typing import NamedTuple, Optional, Sequence

from tripnote.prompts.dates import (
    DateMention,
    find_date_mentions,
    infer_year,
    polish_weekday,
)
from tripnote.schemas.travel_plan import TravelPlanOptions

MAP_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

STYLE_LABELS = {
    "adventure": "przygodowy (aktywne zwiedzanie, intensywny program)",
    "leisure": "wypoczynkowy (spokojne tempo, relaks)",
}

TRANSPORT_LABELS = {
    "car": "samochód",
    "public": "komunikacja publiczna",
    "walking": "piesze przemieszczanie się",
}

BUDGET_LABELS = {
    "economy": "ekonomiczny (tanie opcje)",
    "standard": "standardowy (średnie ceny)",
    "luxury": "luksusowy (premium opcje)",
}

# (day, month, Polish phrase) used to illustrate the year rule
_YEAR_RULE_EXAMPLES = (
    (15, 11, "15 listopada"),
    (20, 12, "20 grudnia"),
    (5, 6, "5 czerwca"),
    (10, 1, "10 stycznia"),
)


class ComposedPrompts(NamedTuple):
    system: str
    user: str


def map_link(place: str, city: str) -> str:
    """Full Google Maps search link, spaces replaced with '+', city appended."""
    query = f"{place.strip()} {city.strip()}".split()
    return MAP_SEARCH_URL + "+".join(query)


# =============================================================================
# SYSTEM PROMPT SECTIONS
# =============================================================================

ROLE_SECTION = """\
Jesteś ekspertem w planowaniu podróży i tworzeniu szczegółowych, spersonalizowanych planów wycieczek.

Twoim zadaniem jest przeanalizowanie notatek użytkownika dotyczących podróży i utworzenie kompleksowego planu wycieczki."""

DATE_RULES_SECTION = """\
WAŻNE - Daty i numeracja dni:
- Jeśli notatka zawiera konkretne daty podróży (np. "od 15 do 18 listopada", "weekend 20-22 grudnia", "15.11.2025"):
  * przypisz te daty do kolejnych dni planu
  * wypełnij pole "date" w formacie ISO (YYYY-MM-DD) dla KAŻDEGO dnia
  * wypełnij pole "dayOfWeek" po polsku: Poniedziałek, Wtorek, Środa, Czwartek, Piątek, Sobota, Niedziela
  * zachowaj numerację dni (day: 1, 2, 3, ...)
- Jeśli notatka NIE zawiera konkretnych dat albo są one nieprecyzyjne (np. "kiedyś w wakacje"):
  * pomiń pola "date" i "dayOfWeek" całkowicie - nie wpisuj żadnych wartości zastępczych
  * użyj tylko numeracji dni (day: 1, 2, 3, ...)

KRYTYCZNE - Wybór roku (dziś jest {today}):
- Jeśli rok JEST podany w notatce (np. "15 listopada {example_year}") → użyj dokładnie tego roku
- Jeśli rok NIE JEST podany:
  * jeśli ta data w roku {current_year} jeszcze nie minęła (przypada dziś lub później) → użyj roku {current_year}
  * jeśli ta data w roku {current_year} już minęła → użyj roku {next_year}
- Przykłady (dziś: {today}):
{examples}"""

RECOGNISED_DATES_SECTION = """\
Daty rozpoznane w notatce (rok ustalony według powyższych zasad, użyj ich):
{mentions}"""

PERSONALIZATION_SECTION = """\
Musisz wziąć pod uwagę następujące preferencje użytkownika:
- Styl: {style}
- Transport: {transport}
- Budżet: {budget}"""

PREFERENCES_SECTION = """\
PREFERENCJE UŻYTKOWNIKA Z PROFILU:
{tags}

Uwzględnij te preferencje przy planowaniu - traktuj je jako ważne wskazówki, ale nie sztywne wymagania.
W całym planie musi się pojawić przynajmniej jedna atrakcja, miejsce lub restauracja pasująca do KAŻDEJ preferencji.
Zachowaj równowagę między preferencjami użytkownika a autentycznymi, lokalnymi propozycjami (lokalna kuchnia, charakterystyczne miejsca).
- Preferencje kulinarne (np. "włoska kuchnia") → kilka restauracji tego typu, w opisie wyraźnie zaznacz typ kuchni
- Zainteresowania (np. "historia", "biologia", "geografia", "sztuka") → jedna-dwie pasujące atrakcje (muzea, ogrody botaniczne, punkty widokowe, galerie)"""

STRUCTURE_SECTION = """\
WAŻNE - Struktura danych:
- Pole "activities" każdego dnia MUSI być OBIEKTEM z kluczami "morning", "afternoon", "evening" - nigdy tablicą
- Każdy klucz zawiera TABLICĘ aktywności dla danej pory dnia i może zostać pominięty
- Pory dnia są OPCJONALNE: pomiń "morning", jeśli dzień zaczyna się później (przyjazd), albo "evening", jeśli kończy się wcześniej (wyjazd)
- Przykład dnia przyjazdu:
  "activities": {{
    "evening": [{{ "name": "...", "description": "...", "priceCategory": "moderate", "logistics": {{ ... }} }}]
  }}
- Każda aktywność MUSI mieć pole "priceCategory" o dokładnie jednej z wartości: "free", "budget", "moderate", "expensive"
- Każda aktywność MUSI mieć szczegółowy opis ("description")
- Uwzględnij realne miejsca i atrakcje z notatek użytkownika
- Dostosuj aktywności do wybranego stylu, transportu i budżetu
- Uwzględnij logistykę (adres, szacowany czas)
- Długość planu weź z notatek (domyślnie 3 dni)
- Pole "disclaimer" umieść na najwyższym poziomie obiektu, nie w tablicy "days"

WAŻNE - Linki do map (logistics.mapLink):
- ZAWSZE używaj pełnego formatu: {map_template}
- NIGDY nie używaj skróconych linków (np. goo.gl)
- Zamień spacje na + w nazwie miejsca i ZAWSZE dodaj nazwę miasta na końcu
- Przykład: {map_example_1}
- Przykład: {map_example_2}"""

TRAVEL_PLAN_USER = """\
Na podstawie poniższych notatek podróżnych stwórz szczegółowy, ustrukturyzowany plan wycieczki:

{note}

Pamiętaj o dostosowaniu planu do preferencji: styl {style}, transport {transport}, budżet {budget}."""


# =============================================================================
# COMPOSITION
# =============================================================================

def compose_travel_plan_prompts(
    note_text: str,
    options: Optional[TravelPlanOptions] = None,
    preferences: Optional[Sequence[str]] = None,
    today: Optional[dt.date] = None,
) -> ComposedPrompts:
    """Build the system and user prompts for one plan generation."""
    options = options or TravelPlanOptions()
    today = today or dt.date.today()
    tags = normalize_preferences(preferences)

    sections = [
        ROLE_SECTION,
        _date_rules(today),
        _recognised_dates(find_date_mentions(note_text, today)),
        PERSONALIZATION_SECTION.format(
            style=STYLE_LABELS[options.style],
            transport=TRANSPORT_LABELS[options.transport],
            budget=BUDGET_LABELS[options.budget],
        ),
        _preferences(tags),
        STRUCTURE_SECTION.format(
            map_template=MAP_SEARCH_URL + "NAZWA_MIEJSCA+MIASTO",
            map_example_1=map_link("Zamek Królewski", "Warszawa"),
            map_example_2=map_link("Łazienki Królewskie", "Warszawa"),
        ),
    ]
    system = "\n\n".join(section for section in sections if section)

    user = TRAVEL_PLAN_USER.format(
        note=note_text.strip(),
        style=options.style,
        transport=options.transport,
        budget=options.budget,
    )
    return ComposedPrompts(system=system, user=user)


def normalize_preferences(preferences: Optional[Sequence[str]]) -> list[str]:
    """Strip, drop blanks and de-duplicate tags, keeping their order."""
    seen: dict[str, None] = {}
    for tag in preferences or ():
        cleaned = tag.strip() if isinstance(tag, str) else ""
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _date_rules(today: dt.date) -> str:
    examples = []
    for day, month, phrase in _YEAR_RULE_EXAMPLES:
        year = infer_year(month, day, today)
        resolved = dt.date(year, month, day)
        reason = (
            f"nie minęło w {today.year}" if year == today.year
            else f"minęło w {today.year}, więc następny rok"
        )
        examples.append(f'  * "{phrase}" → {resolved.isoformat()} ({reason})')

    return DATE_RULES_SECTION.format(
        today=today.isoformat(),
        example_year=today.year + 2,
        current_year=today.year,
        next_year=today.year + 1,
        examples="\n".join(examples),
    )


def _recognised_dates(mentions: list[DateMention]) -> str:
    if not mentions:
        return ""
    lines = []
    for mention in mentions:
        resolved = f"{mention.start.isoformat()} ({polish_weekday(mention.start)})"
        if mention.end is not None:
            resolved += f" do {mention.end.isoformat()} ({polish_weekday(mention.end)})"
        source = "rok podany w notatce" if mention.year_explicit else "rok ustalony automatycznie"
        lines.append(f'- "{mention.text}" → {resolved}, {source}')
    return RECOGNISED_DATES_SECTION.format(mentions="\n".join(lines))


def _preferences(tags: list[str]) -> str:
    if not tags:
        return ""
    return PREFERENCES_SECTION.format(tags="\n".join(f"• {tag}" for tag in tags))
