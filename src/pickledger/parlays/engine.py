"""Parlay pricing and stake sizing."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from pickledger.errors import InsufficientLegsError, OddsParseError
from pickledger.parlays.odds import (
    american_to_decimal,
    decimal_to_american,
    format_decimal,
    round_half_up,
)
from pickledger.parlays.types import (
    DEFAULT_CONFIDENCE,
    CombinedResult,
    LegBreakdown,
    OddsLeg,
    ParlayDraft,
    PricedLeg,
)
from pickledger.picks.sizing import unit_percent

logger = logging.getLogger(__name__)

MIN_LEGS = 2
# Float products overflow long before any real ticket gets here.
MAX_DECIMAL_ODDS = 1_000_000.0
MAX_PAYOUT = 1_000_000_000


def price_legs(legs: Iterable[OddsLeg]) -> list[PricedLeg]:
    """Attach decimal odds to each leg, dropping legs whose odds do not parse."""

    priced: list[PricedLeg] = []
    for leg in legs:
        try:
            decimal = american_to_decimal(leg.odds)
        except OddsParseError:
            logger.info("Excluding leg %r with unparseable odds %r", leg.prediction or leg.event, leg.odds)
            continue
        priced.append(PricedLeg(leg=leg, decimal_odds=decimal))
    return priced


def combine_odds(priced: Iterable[PricedLeg]) -> float:
    decimal = 1.0
    for item in priced:
        decimal *= item.decimal_odds
    return min(decimal, MAX_DECIMAL_ODDS)


def average_confidence(legs: Sequence[OddsLeg]) -> float:
    if not legs:
        return float(DEFAULT_CONFIDENCE)
    mean = sum(leg.confidence for leg in legs) / len(legs)
    return round_half_up(mean * 10) / 10


def suggested_stake(bankroll: float, legs: Iterable[OddsLeg]) -> int:
    """Size the ticket off the least confident leg."""

    weakest = min((leg.confidence for leg in legs), default=DEFAULT_CONFIDENCE)
    return round_half_up(bankroll * unit_percent(weakest) / 100)


def potential_payout(stake: float, combined_decimal_odds: float) -> int:
    payout = stake * combined_decimal_odds
    if not math.isfinite(payout) or payout > MAX_PAYOUT:
        return MAX_PAYOUT
    return round_half_up(payout)


def _require_legs(priced: Sequence[PricedLeg]) -> None:
    if len(priced) < MIN_LEGS:
        raise InsufficientLegsError(len(priced), MIN_LEGS)


def combine_legs(legs: Sequence[OddsLeg], bankroll: int) -> CombinedResult:
    """Price a prospective parlay for display; nothing is persisted."""

    priced = price_legs(legs)
    _require_legs(priced)
    included = {id(item.leg): item.decimal_odds for item in priced}
    valid_legs = [item.leg for item in priced]

    combined = combine_odds(priced)
    stake = suggested_stake(bankroll, valid_legs)
    payout = potential_payout(stake, combined)
    breakdown = [
        LegBreakdown(
            event=leg.event,
            prediction=leg.prediction,
            odds=leg.odds,
            decimal_odds=format_decimal(included[id(leg)]) if id(leg) in included else None,
            confidence=leg.confidence,
            included=id(leg) in included,
        )
        for leg in legs
    ]
    return CombinedResult(
        combined_odds=decimal_to_american(combined),
        combined_decimal_odds=format_decimal(combined),
        suggested_stake=stake,
        potential_payout=payout,
        profit=payout - stake,
        bankroll=bankroll,
        avg_confidence=average_confidence(valid_legs),
        leg_count=len(legs),
        breakdown=breakdown,
    )


def build_parlay(
    legs: Sequence[OddsLeg],
    bankroll: int,
    stake: int | None = None,
    name: str | None = None,
) -> ParlayDraft:
    """Price legs for storage. Legs with unparseable odds are left off the ticket."""

    priced = price_legs(legs)
    _require_legs(priced)
    combined = combine_odds(priced)
    suggested = suggested_stake(bankroll, [item.leg for item in priced])
    actual_stake = stake if stake else suggested
    return ParlayDraft(
        name=name or f"{len(priced)}-Leg Parlay",
        legs=priced,
        combined_odds=decimal_to_american(combined),
        combined_decimal_odds=format_decimal(combined),
        stake=actual_stake,
        suggested_stake=suggested,
        potential_payout=potential_payout(actual_stake, combined),
    )
