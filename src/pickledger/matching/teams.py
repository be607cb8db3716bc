"""NHL team identities and word-boundary team matching."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from pickledger.matching.aliases import TABLES_DIR

NHL_TEAMS_PATH = TABLES_DIR / "nhl_teams.json"
MIN_TEAM_TERM_LENGTH = 3


@dataclass(frozen=True)
class TeamIdentity:
    code: str
    name: str
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def pattern(self) -> re.Pattern[str]:
        forms = sorted(self.aliases, key=len, reverse=True)
        body = "|".join(r"\s*".join(re.escape(part) for part in form.split()) for form in forms)
        return re.compile(rf"\b(?:{body})\b", re.IGNORECASE)


class TeamTable:
    """Ordered team list; the first team whose pattern hits a text wins."""

    def __init__(self, teams: Iterable[TeamIdentity]) -> None:
        self.teams = list(teams)
        self._by_code = {team.code: team for team in self.teams}
        self._patterns = [(team, team.pattern()) for team in self.teams]

    def get(self, code: str) -> TeamIdentity | None:
        return self._by_code.get((code or "").upper())

    def matching(self, text: str) -> list[TeamIdentity]:
        return [team for team, pattern in self._patterns if pattern.search(text or "")]

    @classmethod
    def from_json(cls, path: Path) -> "TeamTable":
        rows = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            TeamIdentity(code=row["code"], name=row["name"], aliases=tuple(row.get("aliases", ())))
            for row in rows
        )


@lru_cache(maxsize=1)
def nhl_teams() -> TeamTable:
    return TeamTable.from_json(NHL_TEAMS_PATH)


def resolve_team(text: str, table: TeamTable | None = None) -> TeamIdentity | None:
    found = (table or nhl_teams()).matching(text)
    return found[0] if found else None


def extract_team_code(text: str, table: TeamTable | None = None) -> str | None:
    team = resolve_team(text, table)
    return team.code if team else None


def extract_opponent_team_code(event: str, prediction: str, table: TeamTable | None = None) -> str | None:
    """``("Wild @ Kraken", "Kraken +1.5")`` -> ``"MIN"``."""

    table = table or nhl_teams()
    backed = extract_team_code(prediction, table)
    if not backed:
        return None
    for team in table.matching(event):
        if team.code != backed:
            return team.code
    return None


def team_name(code: str, table: TeamTable | None = None) -> str:
    team = (table or nhl_teams()).get(code)
    return team.name if team else code


def event_key(event: str, table: TeamTable | None = None) -> str:
    """Order-independent key for duplicate detection: ``"BOS-SEA"`` for either home/away spelling."""

    codes = sorted({team.code for team in (table or nhl_teams()).matching(event)})
    if codes:
        return "-".join(codes)
    return " ".join((event or "").lower().split())


def mentions_team(text: str, team: str) -> bool:
    """Whole-word, case-insensitive test; ``"LA"`` never matches inside ``"ATLANTA"``."""

    term = (team or "").strip().upper()
    if len(term) < MIN_TEAM_TERM_LENGTH:
        return False
    return re.search(rf"\b{re.escape(term)}\b", (text or "").upper()) is not None


def is_pick_team_hot(sport: str, prediction: str, event: str, hot_teams: Iterable[str]) -> bool:
    if (sport or "").upper() != "NHL":
        return False
    search_text = f"{prediction or ''} {event or ''}"
    return any(mentions_team(search_text, team) for team in hot_teams if team)
