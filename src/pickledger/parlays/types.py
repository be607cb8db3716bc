"""Dataclasses for parlay legs and calculation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

DEFAULT_CONFIDENCE = 5


@dataclass
class OddsLeg:
    odds: str
    confidence: int = DEFAULT_CONFIDENCE
    sport: str = ""
    event: str = ""
    prediction: str = ""
    pick_id: int | None = None


@dataclass
class LegBreakdown:
    event: str
    prediction: str
    odds: str
    decimal_odds: str | None
    confidence: int
    included: bool


@dataclass
class CombinedResult:
    combined_odds: str
    combined_decimal_odds: str
    suggested_stake: int
    potential_payout: int
    profit: int
    bankroll: int
    avg_confidence: float
    leg_count: int
    breakdown: List[LegBreakdown] = field(default_factory=list)


@dataclass
class PricedLeg:
    leg: OddsLeg
    decimal_odds: float


@dataclass
class ParlayDraft:
    """A parlay ready to persist: priced legs plus stake and payout."""

    name: str
    legs: List[PricedLeg]
    combined_odds: str
    combined_decimal_odds: str
    stake: int
    suggested_stake: int
    potential_payout: int
