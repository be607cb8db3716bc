"""Team flag and performance tracking tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from pickledger.tracking.flags import TeamFlag, next_team_status
from pickledger.tracking.performance import hot_team_terms, team_performance


def _run(results: list[str]) -> TeamFlag:
    flag = None
    for result in results:
        flag = next_team_status(flag, result, "SEA")
    return flag


def test_consecutive_losses_warn_then_blacklist() -> None:
    assert _run(["lost"]).status == "clear"
    assert _run(["lost", "lost"]).status == "warn"
    assert _run(["lost", "lost", "lost"]).status == "blacklisted"


def test_blacklist_needs_two_straight_wins() -> None:
    flag = _run(["lost", "lost", "lost", "won"])
    assert flag.status == "blacklisted"
    assert flag.win_streak == 1
    assert _run(["lost", "lost", "lost", "won", "won"]).status == "clear"


def test_single_win_clears_a_warning() -> None:
    flag = _run(["lost", "lost", "won"])
    assert flag == TeamFlag(win_streak=1, loss_streak=0, status="clear")


def test_only_won_and_lost_are_tracked() -> None:
    with pytest.raises(ValueError):
        next_team_status(None, "void")


START = datetime(2025, 1, 1, 12, 0)


def _pick(day: int, prediction: str, status: str, odds: str = "-200", stake: int = 40, sport: str = "NHL"):
    return SimpleNamespace(
        sport=sport,
        status=status,
        prediction=prediction,
        odds=odds,
        stake=stake,
        created_at=START + timedelta(days=day),
    )


def test_team_performance_rows() -> None:
    picks = [
        _pick(1, "Minnesota Wild ML", "won"),
        _pick(3, "Wild -1.5", "won"),
        _pick(2, "Bruins ML", "won", odds="+150", stake=20),
        _pick(0, "Boston Bruins +1.5", "lost", stake=20),
        _pick(4, "Kraken ML", "lost", stake=10),
        _pick(5, "Kraken ML", "lost", stake=10),
        _pick(6, "Kraken +1.5", "lost", stake=10),
        _pick(7, "Kraken ML", "pending"),
        _pick(8, "Iga Swiatek ML", "won", sport="Tennis"),
    ]
    rows = team_performance(picks)

    assert [row.team_code for row in rows] == ["MIN", "BOS", "SEA"]
    wild, bruins, kraken = rows
    assert (wild.wins, wild.win_rate, wild.roi, wild.recent_form) == (2, 100.0, 50.0, "WW")
    assert wild.is_hot and not wild.is_cold
    assert (bruins.win_rate, bruins.roi, bruins.recent_form) == (50.0, 25.0, "LW")
    assert not bruins.is_hot
    assert (kraken.total_picks, kraken.roi, kraken.is_cold) == (3, -100.0, True)


def test_recent_form_keeps_last_five() -> None:
    picks = [_pick(day, "Kraken ML", "won" if day % 2 else "lost") for day in range(7)]
    (row,) = team_performance(picks)
    assert row.recent_form == "LWLWL"
    assert row.win_rate == 42.9


def test_hot_team_terms() -> None:
    rows = team_performance([_pick(1, "Wild ML", "won"), _pick(2, "Wild ML", "won")])
    assert hot_team_terms(rows) == ["MIN", "Minnesota Wild"]
