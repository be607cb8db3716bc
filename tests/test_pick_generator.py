"""AI pick generator parsing tests; the LLM call is monkeypatched."""

from __future__ import annotations

import json

import pytest

from pickledger.agents import pick_generator as pg
from pickledger.errors import PickGenerationError

CHATTY_REPLY = """Here are today's picks:
{"picks": [
  {"sport": "nhl", "event": "Wild @ Kraken", "prediction": "Kraken +1.5",
   "reasoning": {"form": "Kraken won 4 straight at home."}, "confidence": 14,
   "scheduledTime": "Tonight 9pm", "odds": -210}, // best bet
  {"sport": "ATP", "event": "Sinner vs Alcaraz", "prediction": "Sinner ML"},
  {"event": "missing sport and prediction"}
]}
Good luck!"""


def test_parse_chatty_reply_with_comments() -> None:
    picks = pg.parse_generated_picks(CHATTY_REPLY)

    assert len(picks) == 2
    kraken, sinner = picks
    assert kraken.sport == "NHL"
    assert kraken.confidence == 10
    assert kraken.reasoning == "Kraken won 4 straight at home."
    assert kraken.odds == "-210"
    assert kraken.scheduled_time == "Tonight 9pm"
    assert sinner.sport == "Tennis"
    assert sinner.confidence == 5
    assert sinner.odds is None


def test_bare_array_and_alternate_keys() -> None:
    record = {"sport": "NHL", "event": "Bruins @ Leafs", "prediction": "Bruins ML", "confidence": "7"}
    assert pg.parse_generated_picks(json.dumps([record]))[0].confidence == 7
    assert len(pg.parse_generated_picks(json.dumps({"predictions": [record]}))) == 1
    assert pg.parse_generated_picks(json.dumps({"unexpected": [record]})) == []


def test_confidence_is_clamped() -> None:
    low = pg.GeneratedPick(sport="NHL", event="e", prediction="p", confidence=-3)
    junk = pg.GeneratedPick(sport="NHL", event="e", prediction="p", confidence="high")
    assert low.confidence == 1
    assert junk.confidence == 5


def test_unparseable_reply_raises() -> None:
    with pytest.raises(PickGenerationError):
        pg.parse_generated_picks("Sorry, no games I like today {see you tomorrow}")


def test_generate_picks_sends_strategy_and_caps_results(monkeypatch) -> None:
    captured = {}
    records = [
        {"sport": "NHL", "event": f"Game {idx}", "prediction": f"Team {idx} ML", "confidence": 6}
        for idx in range(7)
    ]

    def fake_completion(messages, temperature=0.3):
        captured["messages"] = messages
        return json.dumps({"picks": records})

    monkeypatch.setattr(pg, "chat_completion", fake_completion)
    picks = pg.generate_picks("Back road favourites", sport="NHL", schedule_context="HOT teams: Minnesota Wild")

    assert len(picks) == pg.MAX_PICKS
    system, user = captured["messages"]
    assert "Back road favourites" in system["content"]
    assert "HOT teams: Minnesota Wild" in system["content"]
    assert "NHL" in user["content"]


def test_slashes_inside_values_are_not_comments() -> None:
    reply = """{"picks": [
  {"sport": "NHL", "event": "Wild @ Kraken", "prediction": "Kraken +1.5",
   "reasoning": "Line moved -180 // now -210, see https://example.com/odds"}, // sharp side
  {"sport": "WTA", "event": "Swiatek vs Sabalenka", "prediction": "Swiatek ML"}
]}"""
    picks = pg.parse_generated_picks(reply)

    assert len(picks) == 2
    assert picks[0].reasoning == "Line moved -180 // now -210, see https://example.com/odds"
