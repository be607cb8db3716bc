"""Schedule, surface and event-text normalization tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from pickledger.data.normalization import (
    classify_pick_time,
    detect_surface,
    extract_tennis_players,
    is_today_or_future,
)

# 13:00 in Chicago on 2025-03-10 (CDT, UTC-5)
NOW = datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("tournament", "surface"),
    [
        ("Roland Garros", "Clay"),
        ("Internazionali BNL d'Italia Rome", "Clay"),
        ("Wimbledon", "Grass"),
        ("Queen's Club Championships", "Grass"),
        ("US Open", "Hard"),
        (None, "Hard"),
    ],
)
def test_detect_surface(tournament, surface) -> None:
    assert detect_surface(tournament) == surface


def test_scheduled_at_is_read_in_venue_timezone() -> None:
    # 03:00 UTC on the 11th is still the evening of the 10th in Chicago
    assert classify_pick_time(scheduled_at=datetime(2025, 3, 11, 3, 0), now=NOW) == "live"
    assert classify_pick_time(scheduled_at=datetime(2025, 3, 11, 23, 0), now=NOW) == "upcoming"


def test_scheduled_time_text_hints() -> None:
    assert classify_pick_time("Tonight - LIVE", now=NOW) == "live"
    assert classify_pick_time("Today 7:00 PM ET", now=NOW) == "live"
    assert classify_pick_time("Tomorrow 7pm", now=NOW) == "upcoming"
    assert classify_pick_time("2025-03-12T19:00:00Z", now=NOW) == "upcoming"
    assert classify_pick_time("2025-03-10T23:00:00Z", now=NOW) == "live"


def test_created_at_fallback() -> None:
    assert classify_pick_time("7:00 PM ET", created_at=datetime(2025, 3, 10, 15, 0), now=NOW) == "live"
    assert classify_pick_time(None, created_at=datetime(2025, 3, 9, 12, 0), now=NOW) == "upcoming"
    assert classify_pick_time(now=NOW) == "upcoming"


def test_is_today_or_future() -> None:
    assert is_today_or_future(datetime(2025, 3, 10, 6, 0), now=NOW)
    assert not is_today_or_future(datetime(2025, 3, 9, 12, 0), now=NOW)


def test_extract_wta_players_with_prefix() -> None:
    matchup = extract_tennis_players("Tennis", "WTA Indian Wells: Iga Swiatek vs Aryna Sabalenka")
    assert matchup is not None
    assert (matchup.player1, matchup.player2, matchup.league) == ("Iga Swiatek", "Aryna Sabalenka", "WTA")


def test_extract_strips_seeds_and_venue() -> None:
    matchup = extract_tennis_players(
        "tennis", "ATP Miami - Jannik Sinner vs. Carlos Alcaraz (3) @ Hard Rock Stadium"
    )
    assert matchup is not None
    assert matchup.player1 == "Jannik Sinner"
    assert matchup.player2 == "Carlos Alcaraz"
    assert matchup.league == "ATP"


def test_tour_hint_needs_a_whole_word() -> None:
    matchup = extract_tennis_players("Tennis", "Tournament final: Sinner vs Alcaraz")
    assert matchup is not None
    assert matchup.league is None


def test_non_tennis_or_unsplittable_events() -> None:
    assert extract_tennis_players("NHL", "Wild vs Kraken") is None
    assert extract_tennis_players("Tennis", "Sinner to win the title") is None
