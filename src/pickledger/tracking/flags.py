"""NHL team warning/blacklist flags driven by consecutive pick results."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

WARN_AFTER_LOSSES = 2
BLACKLIST_AFTER_LOSSES = 3
WINS_TO_CLEAR_BLACKLIST = 2


@dataclass
class TeamFlag:
    win_streak: int = 0
    loss_streak: int = 0
    status: str = "clear"


def next_team_status(current: TeamFlag | None, result: str, team_code: str = "") -> TeamFlag:
    """Apply one settled pick (``"won"``/``"lost"``) to a team's flag.

    A blacklisted team stays blacklisted until it strings together two wins;
    a warned team is cleared by a single win.
    """

    if result not in ("won", "lost"):
        raise ValueError(f"Team flags only track won/lost results, got {result!r}")
    current = current or TeamFlag()
    won = result == "won"
    loss_streak = 0 if won else current.loss_streak + 1
    win_streak = current.win_streak + 1 if won else 0
    status = current.status or "clear"

    if loss_streak >= BLACKLIST_AFTER_LOSSES:
        status = "blacklisted"
        logger.info("%s blacklisted after %s straight losses", team_code, loss_streak)
    elif loss_streak >= WARN_AFTER_LOSSES:
        status = "warn"
        logger.info("%s warned after %s straight losses", team_code, loss_streak)
    elif won and current.status == "blacklisted":
        if win_streak >= WINS_TO_CLEAR_BLACKLIST:
            status = "clear"
            logger.info("%s cleared from blacklist", team_code)
        else:
            logger.info("%s still blacklisted (%s/%s wins)", team_code, win_streak, WINS_TO_CLEAR_BLACKLIST)
    elif won and current.status == "warn":
        status = "clear"

    return TeamFlag(win_streak=win_streak, loss_streak=loss_streak, status=status)
