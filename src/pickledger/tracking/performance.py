"""Per-team results from our own settled NHL picks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pickledger.matching.teams import extract_team_code, team_name
from pickledger.parlays.odds import round_half_up
from pickledger.picks.sizing import calculate_payout

HOT_MIN_PICKS = 2
HOT_MIN_WIN_RATE = 75.0
COLD_MIN_PICKS = 3
RECENT_FORM_LENGTH = 5


class SettledPick(Protocol):
    sport: str
    status: str | None
    prediction: str
    odds: str | None
    stake: int | None
    created_at: datetime | None


@dataclass
class TeamPerformance:
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


@dataclass
class _Tally:
    wins: int = 0
    losses: int = 0
    staked: int = 0
    profit: int = 0
    results: list[str] = field(default_factory=list)


def _one_decimal(value: float) -> float:
    return round_half_up(value * 10) / 10


def team_performance(picks: Iterable[SettledPick], sport: str = "NHL") -> list[TeamPerformance]:
    """Win rate, ROI and last-five form per backed team, best win rate first."""

    ordered = sorted(
        (p for p in picks if (p.sport or "").upper() == sport.upper()),
        key=lambda p: p.created_at or datetime.min,
    )
    tallies: dict[str, _Tally] = {}
    for pick in ordered:
        status = (pick.status or "").lower()
        if status not in ("won", "lost"):
            continue
        code = extract_team_code(pick.prediction)
        if not code:
            continue
        tally = tallies.setdefault(code, _Tally())
        stake = pick.stake or 0
        tally.staked += stake
        if status == "won":
            tally.wins += 1
            tally.results.append("W")
            tally.profit += calculate_payout(stake, pick.odds)
        else:
            tally.losses += 1
            tally.results.append("L")
            tally.profit -= stake

    rows = []
    for code, tally in tallies.items():
        total = tally.wins + tally.losses
        win_rate = tally.wins / total * 100 if total else 0.0
        roi = tally.profit / tally.staked * 100 if tally.staked else 0.0
        rows.append(
            TeamPerformance(
                team_code=code,
                team_name=team_name(code),
                total_picks=total,
                wins=tally.wins,
                losses=tally.losses,
                win_rate=_one_decimal(win_rate),
                roi=_one_decimal(roi),
                recent_form="".join(tally.results[-RECENT_FORM_LENGTH:]),
                is_hot=total >= HOT_MIN_PICKS and win_rate >= HOT_MIN_WIN_RATE,
                is_cold=total >= COLD_MIN_PICKS and tally.wins == 0,
            )
        )
    rows.sort(key=lambda row: row.win_rate, reverse=True)
    return rows


def hot_team_terms(rows: Iterable[TeamPerformance]) -> list[str]:
    """Codes and full names of hot teams, as fed to ``is_pick_team_hot``."""

    terms: list[str] = []
    for row in rows:
        if row.is_hot:
            terms.extend([row.team_code, row.team_name])
    return terms
