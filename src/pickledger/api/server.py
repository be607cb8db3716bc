"""FastAPI backend for PickLedger."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any

import httpx
from fastapi import Depends, FastAPI, Header, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from pickledger.agents.pick_generator import generate_picks
from pickledger.api.schemas import (
    CombinedResultOut,
    GeneratePicksRequest,
    HeadToHeadOut,
    ParlayCalculateRequest,
    ParlayCreateRequest,
    ParlayLegOut,
    ParlayOut,
    PerformanceResponse,
    PerformanceSummary,
    PickOut,
    PlayerFormOut,
    SettlementOut,
    StatusUpdate,
    StrategyUpdate,
    TeamFlagsResponse,
    TeamListing,
    TeamPerformanceOut,
    TeamStatusOut,
    TennisMatchupOut,
    UserOut,
)
from pickledger.config import get_api_access_key, get_settings
from pickledger.data.normalization import classify_pick_time, extract_tennis_players, parse_datetime
from pickledger.data.tennis_client import ApiTennisClient, TennisPlayerResolver
from pickledger.db import repository
from pickledger.db.database import get_session, init_db
from pickledger.db.models import Pick, User
from pickledger.errors import (
    InsufficientLegsError,
    InvalidStatusTransition,
    PickGenerationError,
    UnresolvedEntityError,
)
from pickledger.log import configure_logging
from pickledger.matching.teams import extract_team_code, is_pick_team_hot, team_name
from pickledger.parlays.engine import build_parlay, combine_legs
from pickledger.picks.sizing import calculate_payout, pick_stake, unit_percent
from pickledger.tracking.performance import TeamPerformance, hot_team_terms, team_performance

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    init_db()
    yield


app = FastAPI(
    title="PickLedger API",
    version="0.1.0",
    description="Pick tracking, parlay pricing and team/player insights.",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db() -> Iterator[Session]:
    with get_session() as db:
        yield db


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    expected = get_api_access_key()
    if not x_api_key or x_api_key != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def has_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> bool:
    try:
        expected = get_api_access_key()
    except RuntimeError:
        return False
    return bool(x_api_key) and x_api_key == expected


@lru_cache(maxsize=1)
def get_tennis_resolver() -> TennisPlayerResolver:
    try:
        client = ApiTennisClient()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return TennisPlayerResolver(client)


SessionDep = Annotated[Session, Depends(get_db)]
APIKeyDep = Annotated[None, Depends(require_api_key)]
AuthorizedDep = Annotated[bool, Depends(has_api_key)]
ResolverDep = Annotated[TennisPlayerResolver, Depends(get_tennis_resolver)]


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/user", response_model=UserOut)
def get_user(session: SessionDep, authorized: AuthorizedDep) -> UserOut:
    user = repository.get_or_create_demo_user(session)
    out = UserOut.model_validate(user)
    if not authorized:
        out.betting_strategy = None
    return out


@app.post("/api/user/strategy", response_model=UserOut)
def update_strategy(payload: StrategyUpdate, _: APIKeyDep, session: SessionDep) -> UserOut:
    user = repository.get_or_create_demo_user(session)
    repository.update_user_strategy(session, user, payload.strategy)
    return UserOut.model_validate(user)


@app.get("/api/picks", response_model=list[PickOut])
def list_picks(session: SessionDep) -> list[PickOut]:
    user = repository.get_or_create_demo_user(session)
    hot_terms = hot_team_terms(team_performance(repository.settled_picks(session)))
    return [_pick_to_response(pick, user, hot_terms) for pick in repository.list_picks(session, user.id)]


@app.post("/api/picks/generate", response_model=list[PickOut])
def api_generate_picks(payload: GeneratePicksRequest, _: APIKeyDep, session: SessionDep) -> list[PickOut]:
    user = repository.get_or_create_demo_user(session)
    performance = team_performance(repository.settled_picks(session))
    avoided = _avoided_team_codes(session, performance)

    try:
        proposed = generate_picks(
            user.betting_strategy or settings.default_strategy,
            payload.sport,
            payload.context,
            _schedule_context(performance, avoided),
        )
    except PickGenerationError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    saved: dict[int, Pick] = {}
    for generated in proposed:
        backed = extract_team_code(generated.prediction) if generated.sport == "NHL" else None
        if backed and backed in avoided:
            logger.info("Skipping pick on avoided team %s: %s", backed, generated.prediction)
            continue
        pick, _created = repository.create_pick(
            session,
            user.id,
            sport=generated.sport,
            event=generated.event,
            prediction=generated.prediction,
            confidence=generated.confidence,
            reasoning=generated.reasoning,
            odds=generated.odds,
            edge=generated.edge,
            stake=pick_stake(user.bankroll, generated.confidence),
            scheduled_time=generated.scheduled_time,
            scheduled_at=_scheduled_at(generated.scheduled_time),
        )
        saved[pick.id] = pick

    hot_terms = hot_team_terms(performance)
    return [_pick_to_response(pick, user, hot_terms) for pick in saved.values()]


@app.patch("/api/picks/{pick_id}/status", response_model=SettlementOut)
def update_pick_status(pick_id: int, payload: StatusUpdate, _: APIKeyDep, session: SessionDep) -> SettlementOut:
    pick = repository.get_pick(session, pick_id)
    if pick is None:
        raise HTTPException(status_code=404, detail="Pick not found")
    user = session.get(User, pick.user_id)
    try:
        settlement = repository.settle_pick(session, pick, user, payload.status)
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return SettlementOut(
        message=f"Pick marked as {payload.status}",
        status=payload.status,
        bet_size=settlement.bet_size,
        new_bankroll=settlement.new_bankroll,
    )


@app.delete("/api/picks/clear")
def clear_picks(_: APIKeyDep, session: SessionDep) -> dict[str, Any]:
    user = repository.get_or_create_demo_user(session)
    removed = repository.clear_picks(session, user.id)
    return {"message": "All picks cleared", "removed": removed}


@app.post("/api/parlays/calculate", response_model=CombinedResultOut)
def calculate_parlay(payload: ParlayCalculateRequest, session: SessionDep) -> CombinedResultOut:
    user = repository.get_or_create_demo_user(session)
    try:
        result = combine_legs([leg.to_leg() for leg in payload.legs], user.bankroll)
    except InsufficientLegsError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return CombinedResultOut.model_validate(result)


@app.post("/api/parlays", response_model=ParlayOut)
def create_parlay(payload: ParlayCreateRequest, session: SessionDep) -> ParlayOut:
    user = repository.get_or_create_demo_user(session)
    try:
        draft = build_parlay(
            [leg.to_leg() for leg in payload.legs],
            user.bankroll,
            stake=payload.stake,
            name=payload.name,
        )
    except InsufficientLegsError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    parlay = repository.create_parlay(session, user.id, draft)
    return ParlayOut.model_validate(parlay)


@app.get("/api/parlays", response_model=list[ParlayOut])
def list_parlays(session: SessionDep) -> list[ParlayOut]:
    user = repository.get_or_create_demo_user(session)
    return [ParlayOut.model_validate(row) for row in repository.list_parlays(session, user.id)]


@app.post("/api/parlays/{parlay_id}/status", response_model=ParlayOut)
def update_parlay_status(parlay_id: int, payload: StatusUpdate, session: SessionDep) -> ParlayOut:
    try:
        parlay = repository.update_parlay_status(session, parlay_id, payload.status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if parlay is None:
        raise HTTPException(status_code=404, detail="Parlay not found")
    return ParlayOut.model_validate(parlay)


@app.post("/api/parlays/legs/{leg_id}/status", response_model=ParlayLegOut)
def update_leg_status(leg_id: int, payload: StatusUpdate, session: SessionDep) -> ParlayLegOut:
    try:
        leg = repository.update_leg_status(session, leg_id, payload.status)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if leg is None:
        raise HTTPException(status_code=404, detail="Parlay leg not found")
    return ParlayLegOut.model_validate(leg)


@app.get("/api/teams/flags", response_model=TeamFlagsResponse)
def team_flags(session: SessionDep) -> TeamFlagsResponse:
    rows = [TeamStatusOut.model_validate(row) for row in repository.list_team_statuses(session)]
    return TeamFlagsResponse(
        blacklisted=[row for row in rows if row.status == "blacklisted"],
        warned=[row for row in rows if row.status == "warn"],
        permanently_banned=[
            TeamListing(team_code=code, team_name=team_name(code), status="banned")
            for code in settings.banned_team_codes
        ],
        weak_teams=[
            TeamListing(team_code=code, team_name=team_name(code), status="weak")
            for code in settings.weak_team_codes
        ],
        all=rows,
    )


@app.get("/api/teams/performance", response_model=PerformanceResponse)
def teams_performance(session: SessionDep) -> PerformanceResponse:
    rows = [TeamPerformanceOut.model_validate(row) for row in team_performance(repository.settled_picks(session))]
    hot = [row for row in rows if row.is_hot]
    cold = [row for row in rows if row.is_cold]
    return PerformanceResponse(
        all=rows,
        hot_teams=hot,
        cold_teams=cold,
        summary=PerformanceSummary(
            total_teams_tracked=len(rows),
            hot_teams_count=len(hot),
            cold_teams_count=len(cold),
        ),
    )


@app.get("/api/tennis/player/{name}", response_model=PlayerFormOut)
def tennis_player(name: str, resolver: ResolverDep, tour: str | None = None) -> PlayerFormOut:
    try:
        form = resolver.player_form(name, tour)
    except UnresolvedEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"Tennis data unavailable: {exc}") from exc
    return PlayerFormOut.model_validate(form)


@app.get("/api/tennis/h2h/{player1}/{player2}", response_model=HeadToHeadOut)
def tennis_h2h(player1: str, player2: str, resolver: ResolverDep, tour: str | None = None) -> HeadToHeadOut:
    try:
        summary = resolver.head_to_head(player1, player2, tour)
    except UnresolvedEntityError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=502, detail=f"Tennis data unavailable: {exc}") from exc
    return HeadToHeadOut.model_validate(summary)


def _pick_to_response(pick: Pick, user: User, hot_terms: list[str]) -> PickOut:
    out = PickOut.model_validate(pick)
    bet_size = pick_stake(user.bankroll, pick.confidence, pick.stake)
    matchup = extract_tennis_players(pick.sport, pick.event)
    return out.model_copy(
        update={
            "unit_percent": unit_percent(pick.confidence),
            "bet_size": bet_size,
            "payout": calculate_payout(bet_size, pick.odds),
            "hot": is_pick_team_hot(pick.sport, pick.prediction, pick.event, hot_terms),
            "timing": classify_pick_time(pick.scheduled_time, pick.created_at, pick.scheduled_at),
            "insights": TennisMatchupOut.model_validate(matchup) if matchup else None,
        }
    )


def _avoided_team_codes(session: Session, performance: list[TeamPerformance]) -> set[str]:
    avoided = set(settings.banned_team_codes)
    avoided.update(row.team_code for row in repository.list_team_statuses(session) if row.status == "blacklisted")
    avoided.update(row.team_code for row in performance if row.is_cold)
    return avoided


def _schedule_context(performance: list[TeamPerformance], avoided: set[str]) -> str:
    lines = []
    hot = [f"{row.team_name} ({row.win_rate}% over {row.total_picks})" for row in performance if row.is_hot]
    if hot:
        lines.append("HOT teams: " + ", ".join(hot))
    if avoided:
        lines.append("AVOID teams: " + ", ".join(sorted(avoided)))
    if settings.weak_team_codes:
        lines.append("Weak teams, fade or avoid backing: " + ", ".join(settings.weak_team_codes))
    return "\n".join(lines)


def _scheduled_at(scheduled_time: str | None) -> datetime | None:
    if not scheduled_time:
        return None
    parsed = parse_datetime(scheduled_time)
    if parsed is None or parsed.tzinfo is None:
        return parsed
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)
