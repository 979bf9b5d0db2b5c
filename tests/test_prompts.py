"""Tests for date inference and travel plan prompt composition."""

import datetime as dt

import pytest

from tripnote.prompts.dates import find_date_mentions, infer_year, polish_weekday, resolve_date
from tripnote.prompts.travel_plan import (
    MAP_SEARCH_URL,
    compose_travel_plan_prompts,
    map_link,
    normalize_preferences,
)
from tripnote.schemas.travel_plan import TravelPlanOptions

TODAY = dt.date(2025, 11, 5)

NOTE = "Weekend w Krakowie, Wawel, Rynek, dwa dni spokojnego zwiedzania z rodziną i dobre jedzenie"


# =============================================================================
# Year inference
# =============================================================================

@pytest.mark.parametrize("month,day,expected", [
    (11, 15, 2025),   # later this year
    (12, 20, 2025),
    (6, 5, 2026),     # already passed
    (1, 10, 2026),
    (11, 5, 2025),    # today counts as not passed
    (11, 4, 2026),
])
def test_infer_year(month, day, expected):
    assert infer_year(month, day, TODAY) == expected


def test_leap_day_moves_to_next_leap_year():
    assert infer_year(2, 29, TODAY) == 2028
    assert infer_year(2, 29, dt.date(2028, 2, 29)) == 2028
    assert infer_year(2, 29, dt.date(2028, 3, 1)) == 2032


def test_impossible_date_is_rejected():
    with pytest.raises(ValueError):
        infer_year(2, 30, TODAY)


def test_explicit_year_is_never_inferred():
    assert resolve_date(10, 1, TODAY, year=2024) == dt.date(2024, 1, 10)
    assert resolve_date(10, 1, TODAY) == dt.date(2026, 1, 10)


def test_polish_weekday():
    assert polish_weekday(dt.date(2025, 11, 15)) == "Sobota"
    assert polish_weekday(dt.date(2025, 11, 17)) == "Poniedziałek"


# =============================================================================
# Date mentions
# =============================================================================

def test_text_range_is_resolved():
    mentions = find_date_mentions("Wyjazd 15-18 listopada do Krakowa", TODAY)

    assert len(mentions) == 1
    mention = mentions[0]
    assert mention.text == "15-18 listopada"
    assert mention.start == dt.date(2025, 11, 15)
    assert mention.end == dt.date(2025, 11, 18)
    assert not mention.year_explicit


def test_explicit_year_in_note_wins():
    mentions = find_date_mentions("Ferie: 10 stycznia 2024, potem powrót", TODAY)

    assert mentions[0].start == dt.date(2024, 1, 10)
    assert mentions[0].year_explicit


def test_numeric_range_takes_year_from_either_side():
    mentions = find_date_mentions("od 15.11 do 18.11.2027", TODAY)

    assert len(mentions) == 1
    assert mentions[0].start == dt.date(2027, 11, 15)
    assert mentions[0].end == dt.date(2027, 11, 18)
    assert mentions[0].year_explicit


def test_numeric_range_without_year_crosses_new_year():
    mentions = find_date_mentions("Sylwester w górach 28.12-02.01", TODAY)

    assert mentions[0].text == "28.12-02.01"
    assert mentions[0].start == dt.date(2025, 12, 28)
    assert mentions[0].end == dt.date(2026, 1, 2)
    assert not mentions[0].year_explicit


def test_numeric_date_with_year():
    mentions = find_date_mentions("Przylot 15.11.2026, potem Wawel", TODAY)

    assert [(m.text, m.start, m.end) for m in mentions] == [
        ("15.11.2026", dt.date(2026, 11, 15), None),
    ]


def test_passed_date_rolls_to_next_year():
    mentions = find_date_mentions("Wakacje 5 czerwca", TODAY)
    assert mentions[0].start == dt.date(2026, 6, 5)


@pytest.mark.parametrize("note", [
    "Pociąg o 10.30, potem 3.5 km spacerem",
    "Pociąg do Krakowa o 12.05, potem Wawel i Rynek, kiedyś w wakacje",
    "Zbiórka o 10.12 przy dworcu",
    "Śniadanie 9.15, obiad ok. 13.10",
    "Rejs godz. 10.12-11.12 po Wiśle",
    "Zwiedzanie 10.12-11.12 h, potem kawa",
    "Kiedyś w wakacje, najlepiej latem",
    "Lot 31 lutego",
    "Wyjazd 1518 listopada",
])
def test_non_dates_are_ignored(note):
    assert find_date_mentions(note, TODAY) == []


# =============================================================================
# Prompt composition
# =============================================================================

def test_default_options_are_rendered_in_polish():
    prompts = compose_travel_plan_prompts(NOTE, today=TODAY)

    assert "wypoczynkowy" in prompts.system
    assert "komunikacja publiczna" in prompts.system
    assert "standardowy" in prompts.system
    assert NOTE in prompts.user
    assert "styl leisure, transport public, budżet standard" in prompts.user


def test_options_change_labels():
    options = TravelPlanOptions(style="adventure", transport="car", budget="luxury")
    prompts = compose_travel_plan_prompts(NOTE, options, today=TODAY)

    assert "przygodowy" in prompts.system
    assert "- Transport: samochód" in prompts.system
    assert "luksusowy" in prompts.system


def test_date_rules_use_reference_date():
    system = compose_travel_plan_prompts(NOTE, today=TODAY).system

    assert "dziś jest 2025-11-05" in system
    assert '"15 listopada" → 2025-11-15 (nie minęło w 2025)' in system
    assert '"5 czerwca" → 2026-06-05 (minęło w 2025, więc następny rok)' in system
    assert "użyj roku 2025" in system
    assert "użyj roku 2026" in system


def test_recognised_dates_block_only_when_note_has_dates():
    without = compose_travel_plan_prompts(NOTE, today=TODAY).system
    assert "Daty rozpoznane w notatce" not in without

    with_dates = compose_travel_plan_prompts(NOTE + " od 15-18 listopada", today=TODAY).system
    assert "Daty rozpoznane w notatce" in with_dates
    assert '- "15-18 listopada" → 2025-11-15 (Sobota) do 2025-11-18 (Wtorek), rok ustalony automatycznie' in with_dates


def test_preferences_block_absent_without_tags():
    for preferences in (None, [], ["", "   "]):
        system = compose_travel_plan_prompts(NOTE, preferences=preferences, today=TODAY).system
        assert "PREFERENCJE UŻYTKOWNIKA" not in system


def test_preferences_block_lists_each_tag():
    system = compose_travel_plan_prompts(
        NOTE, preferences=["włoska kuchnia", "historia"], today=TODAY,
    ).system

    assert "PREFERENCJE UŻYTKOWNIKA Z PROFILU:\n• włoska kuchnia\n• historia" in system
    assert "KAŻDEJ preferencji" in system


def test_normalize_preferences():
    assert normalize_preferences([" historia ", "", "historia", "sztuka", None]) == ["historia", "sztuka"]
    assert normalize_preferences(None) == []


def test_structure_rules():
    system = compose_travel_plan_prompts(NOTE, today=TODAY).system

    assert '"activities": {' in system
    assert '"free", "budget", "moderate", "expensive"' in system
    assert "nigdy tablicą" in system
    assert "goo.gl" in system
    assert MAP_SEARCH_URL + "NAZWA_MIEJSCA+MIASTO" in system
    assert "{{" not in system


def test_system_sections_are_ordered():
    system = compose_travel_plan_prompts(
        NOTE + " 15 listopada", preferences=["historia"], today=TODAY,
    ).system

    positions = [
        system.index("Jesteś ekspertem"),
        system.index("KRYTYCZNE - Wybór roku"),
        system.index("Daty rozpoznane w notatce"),
        system.index("- Styl:"),
        system.index("PREFERENCJE UŻYTKOWNIKA"),
        system.index("WAŻNE - Struktura danych"),
    ]
    assert positions == sorted(positions)


def test_map_link():
    assert map_link("Zamek Królewski", "Warszawa") == MAP_SEARCH_URL + "Zamek+Królewski+Warszawa"
    assert map_link("  Rynek  Główny ", "Kraków") == MAP_SEARCH_URL + "Rynek+Główny+Kraków"


def test_clock_times_do_not_add_recognised_dates():
    system = compose_travel_plan_prompts(
        "Pociąg do Krakowa o 12.05, potem Wawel i Rynek, kiedyś w wakacje", today=TODAY,
    ).system

    assert "Daty rozpoznane w notatce" not in system
    assert "2026-05-12" not in system
