"""Single-pick stake sizing, payout and bankroll settlement."""

from __future__ import annotations

from pickledger.errors import InvalidStatusTransition, OddsParseError
from pickledger.parlays.odds import parse_american_odds, round_half_up

SETTLED_STATUSES = ("won", "lost", "void")

# (minimum confidence, percent of bankroll), checked top-down
UNIT_TIERS: tuple[tuple[int, int], ...] = ((8, 4), (7, 3), (6, 2))
BASE_UNIT_PERCENT = 1


def unit_percent(confidence: int | None) -> int:
    for threshold, percent in UNIT_TIERS:
        if (confidence or 0) >= threshold:
            return percent
    return BASE_UNIT_PERCENT


def pick_stake(bankroll: float, confidence: int | None, override: int | None = None) -> int:
    """Stake for a single pick: a stored override wins over the tier table."""

    if override:
        return override
    return round_half_up(bankroll * unit_percent(confidence) / 100)


def calculate_payout(bet_amount: float, odds: str | int | None) -> int:
    """Profit on a winning single pick.

    Unparseable odds pay 0 here, whereas parlay pricing drops such legs
    entirely; the two call sites are kept separate on purpose.
    """

    try:
        value = parse_american_odds(odds if odds is not None else "")
    except OddsParseError:
        return 0
    if value < 0:
        return round_half_up(bet_amount * 100 / abs(value))
    return round_half_up(bet_amount * value / 100)


def check_transition(current: str | None, new: str) -> None:
    if new not in SETTLED_STATUSES or (current or "pending") != "pending":
        raise InvalidStatusTransition(current, new)


def settle_bankroll(bankroll: int, stake: int, odds: str | int | None, new_status: str) -> int:
    if new_status == "won":
        return bankroll + calculate_payout(stake, odds)
    if new_status == "lost":
        return bankroll - stake
    return bankroll
