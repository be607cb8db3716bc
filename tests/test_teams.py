"""NHL team matching tests."""

from __future__ import annotations

from pickledger.matching.teams import (
    event_key,
    extract_opponent_team_code,
    extract_team_code,
    is_pick_team_hot,
    mentions_team,
    team_name,
)


def test_short_codes_never_match_inside_words() -> None:
    assert not mentions_team("Atlanta Thrashers reunion", "LA")
    assert not mentions_team("MINNESOTA WILD", "MIN")
    assert mentions_team("STL Blues -1.5", "STL")
    assert mentions_team("backing the minnesota wild tonight", "Minnesota Wild")


def test_extract_team_code() -> None:
    assert extract_team_code("LA Kings ML") == "LAK"
    assert extract_team_code("Kraken +1.5") == "SEA"
    assert extract_team_code("Atlanta") is None


def test_extract_opponent_team_code() -> None:
    assert extract_opponent_team_code("Wild @ Kraken", "Kraken +1.5") == "MIN"
    assert extract_opponent_team_code("Wild @ Kraken", "Over 5.5") is None


def test_event_key_ignores_home_away_order() -> None:
    assert event_key("Bruins @ Kraken") == "BOS-SEA"
    assert event_key("Seattle Kraken vs Boston Bruins") == "BOS-SEA"
    assert event_key("Sinner  vs Alcaraz") == "sinner vs alcaraz"


def test_team_name_lookup() -> None:
    assert team_name("MIN") == "Minnesota Wild"
    assert team_name("XXX") == "XXX"


def test_hot_team_detection() -> None:
    hot = ["MIN", "Minnesota Wild"]
    assert is_pick_team_hot("NHL", "Minnesota Wild ML", "Wild @ Kraken", hot)
    assert not is_pick_team_hot("Tennis", "Minnesota Wild ML", "", hot)
    assert not is_pick_team_hot("NHL", "Atlanta ML", "", ["LA", "LAK"])
