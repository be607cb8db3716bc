"""Parlay engine tests."""

from __future__ import annotations

import math

import pytest

from pickledger.errors import InsufficientLegsError
from pickledger.parlays import engine
from pickledger.parlays.odds import american_to_decimal, format_decimal
from pickledger.parlays.types import OddsLeg


def _leg(odds: str, confidence: int = 5, event: str = "Wild @ Kraken") -> OddsLeg:
    return OddsLeg(odds=odds, confidence=confidence, sport="NHL", event=event, prediction=f"Pick {odds}")


def test_two_leg_parlay_prices_correctly() -> None:
    result = engine.combine_legs([_leg("-200"), _leg("+150")], bankroll=1000)
    assert result.combined_decimal_odds == "3.750"
    assert result.combined_odds == "+275"
    assert result.suggested_stake == 10
    assert result.potential_payout == 38
    assert result.profit == 28
    assert result.avg_confidence == 5.0
    assert result.leg_count == 2


def test_unparseable_leg_is_excluded_from_the_product() -> None:
    legs = [_leg("-110"), _leg("+120"), _leg("-150"), _leg("pick'em")]
    result = engine.combine_legs(legs, bankroll=1000)

    expected = american_to_decimal("-110") * american_to_decimal("+120") * american_to_decimal("-150")
    assert result.combined_decimal_odds == format_decimal(expected)
    assert result.leg_count == 4
    assert [item.included for item in result.breakdown] == [True, True, True, False]
    assert result.breakdown[3].decimal_odds is None
    assert result.breakdown[0].decimal_odds == "1.909"


def test_fewer_than_two_valid_legs_is_rejected() -> None:
    with pytest.raises(InsufficientLegsError) as excinfo:
        engine.combine_legs([_leg("-110"), _leg("TBD")], bankroll=1000)
    assert excinfo.value.valid_legs == 1

    with pytest.raises(InsufficientLegsError):
        engine.combine_legs([], bankroll=1000)


def test_stake_follows_least_confident_leg() -> None:
    legs = [_leg("-110", confidence=8), _leg("-110", confidence=6)]
    assert engine.suggested_stake(1000, legs) == 20
    assert engine.suggested_stake(1000, [_leg("-110", confidence=8)]) == 40


def test_average_confidence_uses_included_legs_only() -> None:
    legs = [_leg("-110", 7), _leg("+105", 8), _leg("-120", 8), _leg("", 1)]
    result = engine.combine_legs(legs, bankroll=1000)
    assert result.avg_confidence == 7.7
    assert result.suggested_stake == 30


def test_huge_parlay_is_capped() -> None:
    legs = [_leg("+10000") for _ in range(200)]
    result = engine.combine_legs(legs, bankroll=1000)
    assert result.combined_decimal_odds == format_decimal(engine.MAX_DECIMAL_ODDS)
    assert result.potential_payout <= engine.MAX_PAYOUT
    assert engine.potential_payout(10, math.inf) == engine.MAX_PAYOUT


def test_build_parlay_keeps_only_priced_legs() -> None:
    draft = engine.build_parlay([_leg("-200"), _leg("+150"), _leg("n/a")], bankroll=1000)
    assert draft.name == "2-Leg Parlay"
    assert len(draft.legs) == 2
    assert draft.stake == draft.suggested_stake == 10
    assert draft.combined_odds == "+275"


def test_build_parlay_custom_stake_and_name() -> None:
    draft = engine.build_parlay([_leg("-200"), _leg("+150")], bankroll=1000, stake=100, name="Friday")
    assert draft.name == "Friday"
    assert draft.stake == 100
    assert draft.suggested_stake == 10
    assert draft.potential_payout == 375


def test_even_money_product_prices_as_plus_100() -> None:
    result = engine.combine_legs([_leg("-500"), _leg("-150")], bankroll=1000)
    assert result.combined_decimal_odds == "2.000"
    assert result.combined_odds == "+100"
