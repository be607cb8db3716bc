"""API-Tennis client and player resolution for tennis insights."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

import httpx
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from pickledger.cache import TTLCache
from pickledger.config import get_api_tennis_key, get_settings
from pickledger.data.normalization import detect_surface
from pickledger.errors import UnresolvedEntityError
from pickledger.matching.names import names_match
from pickledger.matching.normalize import normalize_name

logger = logging.getLogger(__name__)

TOURS = ("ATP", "WTA")
RECENT_MATCH_LIMIT = 10
RECENT_WINDOW_DAYS = 60


def _retry_log(retry_state: RetryCallState) -> None:  # pragma: no cover - logging helper
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning("API-Tennis retry attempt %s due to %s", retry_state.attempt_number, exception)


class ApiTennisClient:
    """Thin wrapper around the api-tennis.com query-string API."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None) -> None:
        settings = get_settings()
        self.api_key = api_key or get_api_tennis_key()
        self.base_url = base_url or settings.api_tennis_base_url
        self._client = httpx.Client(timeout=30.0)

    def __enter__(self) -> "ApiTennisClient":  # pragma: no cover - context sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.HTTPError),
        after=_retry_log,
        reraise=True,
    )
    def _request(self, method: str, **params: Any) -> Any:
        response = self._client.get(self.base_url, params={"method": method, "APIkey": self.api_key, **params})
        response.raise_for_status()
        payload = response.json()
        if not payload.get("success"):
            return None
        return payload.get("result")

    def get_standings(self, tour: str) -> Iterable[Dict[str, Any]]:
        return self._request("get_standings", event_type=tour) or []

    def get_h2h(self, first_player_key: int, second_player_key: int) -> Dict[str, Any]:
        return self._request(
            "get_H2H",
            first_player_key=first_player_key,
            second_player_key=second_player_key,
        ) or {}


@dataclass
class PlayerRef:
    key: int
    name: str
    country: str | None = None


@dataclass
class RecentMatch:
    date: str
    opponent: str
    result: str
    score: str
    tournament: str
    surface: str


@dataclass
class PlayerForm:
    name: str
    country: str | None
    last10: List[RecentMatch] = field(default_factory=list)
    recent_wins: int = 0
    recent_losses: int = 0


@dataclass
class HeadToHeadMatch:
    date: str
    winner: str
    tournament: str
    score: str
    surface: str


@dataclass
class HeadToHead:
    player1_name: str
    player2_name: str
    player1_wins: int
    player2_wins: int
    matches: List[HeadToHeadMatch] = field(default_factory=list)


def tour_order(preferred_tour: str | None) -> tuple[str, ...]:
    """Search the preferred tour first; ATP leads when there is no hint."""

    if preferred_tour and preferred_tour.upper() == "WTA":
        return ("WTA", "ATP")
    return TOURS


def _parse_event_date(raw: str | None) -> date | None:
    try:
        return date.fromisoformat((raw or "")[:10])
    except ValueError:
        return None


class TennisPlayerResolver:
    """Resolves free-text player names to API-Tennis keys and builds form/H2H summaries.

    Caches are injected so tests can drive expiry with a fake clock.
    """

    def __init__(
        self,
        client: ApiTennisClient,
        results_cache: TTLCache | None = None,
        keys_cache: TTLCache | None = None,
        today_fn: Callable[[], date] = lambda: datetime.now(timezone.utc).date(),
    ) -> None:
        ttl = get_settings().lookup_cache_ttl_seconds
        self.client = client
        self.results_cache = results_cache if results_cache is not None else TTLCache(ttl)
        self.keys_cache = keys_cache if keys_cache is not None else TTLCache(ttl * 2)
        self._today = today_fn

    @staticmethod
    def _cache_key(*names: str, preferred_tour: str | None) -> tuple[str, ...]:
        return (*(normalize_name(name) for name in names), preferred_tour or "any")

    def find_player(self, name: str, preferred_tour: str | None = None) -> PlayerRef:
        cache_key = self._cache_key(name, preferred_tour=preferred_tour)
        cached = self.keys_cache.get(cache_key)
        if cached is not None:
            return cached

        for tour in tour_order(preferred_tour):
            try:
                standings = self.client.get_standings(tour)
            except httpx.HTTPError as exc:
                logger.warning("Could not load %s standings: %s", tour, exc)
                continue
            for row in standings:
                if names_match(row.get("player", ""), name):
                    ref = PlayerRef(key=row["player_key"], name=row["player"], country=row.get("country"))
                    self.keys_cache.set(cache_key, ref)
                    logger.info("Resolved %s to %s (key %s) in %s", name, ref.name, ref.key, tour)
                    return ref

        logger.info("Player not found in standings: %s", name)
        raise UnresolvedEntityError(name, kind="player")

    def player_form(self, name: str, preferred_tour: str | None = None) -> PlayerForm:
        cache_key = ("form", *self._cache_key(name, preferred_tour=preferred_tour))
        cached = self.results_cache.get(cache_key)
        if cached is not None:
            return cached

        player = self.find_player(name, preferred_tour)
        payload = self.client.get_h2h(player.key, player.key)
        cutoff = self._today() - timedelta(days=RECENT_WINDOW_DAYS)

        finished = []
        for row in payload.get("firstPlayerResults", []):
            played_on = _parse_event_date(row.get("event_date"))
            if played_on is None or played_on < cutoff:
                continue
            if row.get("event_status") != "Finished":
                continue
            if "double" in (row.get("event_type_type") or "").lower():
                continue
            finished.append((played_on, row))
        finished.sort(key=lambda item: item[0], reverse=True)

        last10 = []
        for _, row in finished[:RECENT_MATCH_LIMIT]:
            is_first = row.get("first_player_key") == player.key
            winner = row.get("event_winner")
            won = (winner == "First Player" and is_first) or (winner == "Second Player" and not is_first)
            last10.append(
                RecentMatch(
                    date=row["event_date"],
                    opponent=row.get("event_second_player" if is_first else "event_first_player", ""),
                    result="W" if won else "L",
                    score=row.get("event_final_result") or "",
                    tournament=row.get("tournament_name", ""),
                    surface=detect_surface(row.get("tournament_name")),
                )
            )

        form = PlayerForm(
            name=player.name,
            country=player.country,
            last10=last10,
            recent_wins=sum(1 for match in last10 if match.result == "W"),
            recent_losses=sum(1 for match in last10 if match.result == "L"),
        )
        self.results_cache.set(cache_key, form)
        return form

    def head_to_head(self, player1: str, player2: str, preferred_tour: str | None = None) -> HeadToHead:
        cache_key = ("h2h", *self._cache_key(player1, player2, preferred_tour=preferred_tour))
        cached = self.results_cache.get(cache_key)
        if cached is not None:
            return cached

        first = self.find_player(player1, preferred_tour)
        second = self.find_player(player2, preferred_tour)
        payload = self.client.get_h2h(first.key, second.key)

        first_wins = second_wins = 0
        matches = []
        for row in payload.get("H2H", [])[:RECENT_MATCH_LIMIT]:
            first_listed_first = row.get("first_player_key") == first.key
            first_player_won = row.get("event_winner") == "First Player"
            if first_player_won == first_listed_first:
                winner = first.name
                first_wins += 1
            else:
                winner = second.name
                second_wins += 1
            matches.append(
                HeadToHeadMatch(
                    date=row.get("event_date", ""),
                    winner=winner,
                    tournament=row.get("tournament_name", ""),
                    score=row.get("event_final_result") or "",
                    surface=detect_surface(row.get("tournament_name")),
                )
            )

        summary = HeadToHead(
            player1_name=first.name,
            player2_name=second.name,
            player1_wins=first_wins,
            player2_wins=second_wins,
            matches=matches,
        )
        self.results_cache.set(cache_key, summary)
        return summary
