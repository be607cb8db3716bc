"""Pydantic schemas for the PickLedger API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pickledger.parlays.types import OddsLeg


class OddsLegIn(BaseModel):
    sport: str = ""
    event: str = ""
    prediction: str = ""
    odds: str = ""
    confidence: int = Field(default=5, ge=1, le=10)
    pick_id: int | None = None

    @field_validator("odds", mode="before")
    @classmethod
    def _odds_as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def to_leg(self) -> OddsLeg:
        return OddsLeg(
            odds=self.odds,
            confidence=self.confidence,
            sport=self.sport,
            event=self.event,
            prediction=self.prediction,
            pick_id=self.pick_id,
        )


class ParlayCalculateRequest(BaseModel):
    legs: list[OddsLegIn]


class ParlayCreateRequest(BaseModel):
    name: str | None = None
    legs: list[OddsLegIn]
    stake: int | None = Field(default=None, ge=1)


class StatusUpdate(BaseModel):
    status: str


class LegBreakdownOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event: str
    prediction: str
    odds: str
    decimal_odds: str | None
    confidence: int
    included: bool


class CombinedResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    combined_odds: str
    combined_decimal_odds: str
    suggested_stake: int
    potential_payout: int
    profit: int
    bankroll: int
    avg_confidence: float
    leg_count: int
    breakdown: list[LegBreakdownOut]


class ParlayLegOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pick_id: int | None
    leg_order: int
    sport: str
    event: str
    prediction: str
    odds: str
    decimal_odds: str
    confidence: int
    status: str


class ParlayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    combined_odds: str
    combined_decimal_odds: str
    stake: int
    suggested_stake: int
    potential_payout: int
    status: str
    created_at: datetime
    legs: list[ParlayLegOut]


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    bankroll: int
    betting_strategy: str | None = None
    created_at: datetime


class StrategyUpdate(BaseModel):
    strategy: str = Field(min_length=1)


class GeneratePicksRequest(BaseModel):
    sport: str | None = None
    context: str | None = None


class TennisMatchupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player1: str
    player2: str
    league: str | None = None


class PickOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sport: str
    event: str
    prediction: str
    reasoning: str
    confidence: int
    status: str
    edge: str | None
    odds: str | None
    scheduled_time: str | None
    scheduled_at: datetime | None
    stake: int | None
    created_at: datetime
    unit_percent: int = 0
    bet_size: int = 0
    payout: int = 0
    hot: bool = False
    timing: str = "upcoming"
    insights: TennisMatchupOut | None = None


class SettlementOut(BaseModel):
    message: str
    status: str
    bet_size: int
    new_bankroll: int


class TeamStatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_code: str
    team_name: str
    win_streak: int
    loss_streak: int
    status: str
    last_result_at: datetime | None


class TeamListing(BaseModel):
    team_code: str
    team_name: str
    status: str


class TeamFlagsResponse(BaseModel):
    blacklisted: list[TeamStatusOut]
    warned: list[TeamStatusOut]
    permanently_banned: list[TeamListing]
    weak_teams: list[TeamListing]
    all: list[TeamStatusOut]


class TeamPerformanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    team_code: str
    team_name: str
    total_picks: int
    wins: int
    losses: int
    win_rate: float
    roi: float
    recent_form: str
    is_hot: bool
    is_cold: bool


class PerformanceSummary(BaseModel):
    total_teams_tracked: int
    hot_teams_count: int
    cold_teams_count: int


class PerformanceResponse(BaseModel):
    all: list[TeamPerformanceOut]
    hot_teams: list[TeamPerformanceOut]
    cold_teams: list[TeamPerformanceOut]
    summary: PerformanceSummary


class RecentMatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    opponent: str
    result: str
    score: str
    tournament: str
    surface: str


class PlayerFormOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    country: str | None
    last10: list[RecentMatchOut]
    recent_wins: int
    recent_losses: int


class HeadToHeadMatchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str
    winner: str
    tournament: str
    score: str
    surface: str


class HeadToHeadOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    player1_name: str
    player2_name: str
    player1_wins: int
    player2_wins: int
    matches: list[HeadToHeadMatchOut]
