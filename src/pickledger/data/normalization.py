"""Table-driven classifiers for upstream schedule and odds text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Literal
from zoneinfo import ZoneInfo

from pickledger.config import get_settings

PickTiming = Literal["live", "upcoming"]

CLAY_KEYWORDS = ("roland", "rome", "madrid", "monte", "barcelona", "clay")
GRASS_KEYWORDS = ("wimbledon", "grass", "queen's", "halle", "stuttgart")
CLAY, GRASS, HARD = "Clay", "Grass", "Hard"

_WTA_HINT = re.compile(r"\b(?:wta|women'?s?)\b", re.IGNORECASE)
_ATP_HINT = re.compile(r"\b(?:atp|men'?s?)\b", re.IGNORECASE)
_VS_SEPARATOR = re.compile(r"\s+vs\.?\s+", re.IGNORECASE)
_EVENT_PREFIX = re.compile(r"^.*?(?:\s+-\s+|\s*:\s*)(.+)$")
_NAME_SUFFIXES = (
    re.compile(r"\s*\|.*$"),
    re.compile(r"\s*@.*$"),
    re.compile(r"\s*\(.*?\)\s*"),
    re.compile(r"\s*\[.*?\]\s*"),
)


@dataclass(frozen=True)
class TennisMatchup:
    player1: str
    player2: str
    league: str | None = None


def detect_surface(tournament_name: str | None) -> str:
    """Infer the court surface from a tournament name; hard court unless a keyword says otherwise."""

    name = (tournament_name or "").lower()
    if any(keyword in name for keyword in CLAY_KEYWORDS):
        return CLAY
    if any(keyword in name for keyword in GRASS_KEYWORDS):
        return GRASS
    return HARD


def _zone(tz: str | None) -> ZoneInfo:
    return ZoneInfo(tz or get_settings().venue_timezone)


def local_date(moment: datetime, tz: str | None = None) -> date:
    """Calendar date of ``moment`` in the venue timezone; naive datetimes are read as UTC."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(_zone(tz)).date()


def _today(now: datetime | None, tz: str | None) -> date:
    return local_date(now or datetime.now(timezone.utc), tz)


def is_today_or_future(moment: datetime, now: datetime | None = None, tz: str | None = None) -> bool:
    return local_date(moment, tz) >= _today(now, tz)


def parse_datetime(text: str) -> datetime | None:
    candidate = text.strip().replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def classify_pick_time(
    scheduled_time: str | None = None,
    created_at: datetime | None = None,
    scheduled_at: datetime | None = None,
    now: datetime | None = None,
    tz: str | None = None,
) -> PickTiming:
    """Bucket a pick as today's ("live") or a later slate ("upcoming")."""

    today = _today(now, tz)

    if scheduled_at is not None:
        return "upcoming" if local_date(scheduled_at, tz) > today else "live"

    if scheduled_time:
        lowered = scheduled_time.lower()
        if "live" in lowered or "today" in lowered:
            return "live"
        if "tomorrow" in lowered:
            return "upcoming"
        parsed = parse_datetime(scheduled_time)
        if parsed is not None:
            return "upcoming" if local_date(parsed, tz) > today else "live"

    if created_at is not None:
        return "live" if local_date(created_at, tz) == today else "upcoming"

    return "upcoming"


def _clean_player_name(raw: str) -> str:
    name = raw
    for pattern in _NAME_SUFFIXES:
        name = pattern.sub(" ", name)
    return " ".join(name.split())


def extract_tennis_players(sport: str | None, event: str | None) -> TennisMatchup | None:
    """Pull both player names and a tour hint out of a pick's event text."""

    if (sport or "").lower() != "tennis" or not event:
        return None

    league = None
    if _WTA_HINT.search(event):
        league = "WTA"
    elif _ATP_HINT.search(event):
        league = "ATP"

    parts = _VS_SEPARATOR.split(event, maxsplit=1)
    if len(parts) != 2:
        return None
    before, after = parts
    prefix = _EVENT_PREFIX.match(before)
    if prefix:
        before = prefix.group(1)

    player1 = _clean_player_name(before)
    player2 = _clean_player_name(after)
    if len(player1) < 2 or len(player2) < 2:
        return None
    return TennisMatchup(player1=player1, player2=player2, league=league)
