"""Persistence operations for users, picks, parlays and team flags."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from pickledger.config import get_settings
from pickledger.db.models import Parlay, ParlayLeg, Pick, TeamStatus, User, utcnow
from pickledger.matching.teams import event_key, extract_team_code, team_name
from pickledger.parlays.odds import format_decimal
from pickledger.parlays.types import ParlayDraft
from pickledger.picks.sizing import check_transition, pick_stake, settle_bankroll
from pickledger.tracking.flags import TeamFlag, next_team_status

logger = logging.getLogger(__name__)

PARLAY_STATUSES = ("pending", "won", "lost", "partial")
LEG_STATUSES = ("pending", "won", "lost")


def get_or_create_demo_user(session: Session) -> User:
    settings = get_settings()
    user = session.scalars(select(User).where(User.username == settings.demo_username)).first()
    if user is None:
        user = User(
            username=settings.demo_username,
            betting_strategy=settings.default_strategy,
            bankroll=settings.default_bankroll,
        )
        session.add(user)
        session.flush()
    return user


def update_user_strategy(session: Session, user: User, strategy: str) -> User:
    user.betting_strategy = strategy
    session.flush()
    return user


def list_picks(session: Session, user_id: int) -> Sequence[Pick]:
    stmt = select(Pick).where(Pick.user_id == user_id).order_by(Pick.created_at.desc(), Pick.id.desc())
    return session.scalars(stmt).all()


def get_pick(session: Session, pick_id: int) -> Pick | None:
    return session.get(Pick, pick_id)


def create_pick(
    session: Session,
    user_id: int,
    *,
    sport: str,
    event: str,
    prediction: str,
    confidence: int,
    reasoning: str = "",
    odds: str | None = None,
    edge: str | None = None,
    stake: int | None = None,
    scheduled_time: str | None = None,
    scheduled_at: datetime | None = None,
) -> tuple[Pick, bool]:
    """Insert a pick unless a pending pick already covers the same game.

    Returns ``(pick, created)``. A duplicate with lower confidence is upgraded
    in place rather than stored twice.
    """

    key = event_key(event)
    pending = session.scalars(
        select(Pick).where(Pick.user_id == user_id, Pick.sport == sport, Pick.status == "pending")
    ).all()
    duplicate = next((p for p in pending if event_key(p.event) == key), None)
    if duplicate is not None:
        logger.info("Duplicate pick %r matches existing %r", event, duplicate.event)
        if confidence > (duplicate.confidence or 0):
            logger.info("Upgrading confidence for %s: %s -> %s", duplicate.event, duplicate.confidence, confidence)
            duplicate.confidence = confidence
            duplicate.stake = stake
            duplicate.edge = edge
            session.flush()
        return duplicate, False

    pick = Pick(
        user_id=user_id,
        sport=sport,
        event=event,
        prediction=prediction,
        reasoning=reasoning,
        confidence=confidence,
        status="pending",
        odds=odds,
        edge=edge,
        stake=stake,
        scheduled_time=scheduled_time,
        scheduled_at=scheduled_at,
    )
    session.add(pick)
    session.flush()
    return pick, True


def clear_picks(session: Session, user_id: int) -> int:
    result = session.execute(delete(Pick).where(Pick.user_id == user_id))
    return result.rowcount or 0


@dataclass
class Settlement:
    pick: Pick
    bet_size: int
    new_bankroll: int
    team_status: TeamStatus | None = None


def settle_pick(session: Session, pick: Pick, user: User, new_status: str) -> Settlement:
    """Move a pending pick to won/lost/void and carry the result into the bankroll."""

    check_transition(pick.status, new_status)
    bet_size = pick_stake(user.bankroll, pick.confidence, pick.stake)
    user.bankroll = settle_bankroll(user.bankroll, bet_size, pick.odds, new_status)
    pick.status = new_status

    team_status = None
    if (pick.sport or "").upper() == "NHL" and new_status in ("won", "lost"):
        code = extract_team_code(pick.prediction)
        if code:
            team_status = record_team_result(session, code, new_status)
    session.flush()
    return Settlement(pick=pick, bet_size=bet_size, new_bankroll=user.bankroll, team_status=team_status)


def settled_picks(session: Session, sport: str = "NHL") -> Sequence[Pick]:
    stmt = select(Pick).where(Pick.sport == sport, Pick.status.in_(("won", "lost")))
    return session.scalars(stmt).all()


def create_parlay(session: Session, user_id: int, draft: ParlayDraft) -> Parlay:
    parlay = Parlay(
        user_id=user_id,
        name=draft.name,
        combined_odds=draft.combined_odds,
        combined_decimal_odds=draft.combined_decimal_odds,
        stake=draft.stake,
        suggested_stake=draft.suggested_stake,
        potential_payout=draft.potential_payout,
        status="pending",
    )
    for order, priced in enumerate(draft.legs):
        leg = priced.leg
        parlay.legs.append(
            ParlayLeg(
                pick_id=leg.pick_id,
                leg_order=order,
                sport=leg.sport,
                event=leg.event,
                prediction=leg.prediction,
                odds=leg.odds,
                decimal_odds=format_decimal(priced.decimal_odds),
                confidence=leg.confidence,
                status="pending",
            )
        )
    session.add(parlay)
    session.flush()
    return parlay


def list_parlays(session: Session, user_id: int) -> Sequence[Parlay]:
    stmt = (
        select(Parlay)
        .where(Parlay.user_id == user_id)
        .options(selectinload(Parlay.legs))
        .order_by(Parlay.created_at.desc(), Parlay.id.desc())
    )
    return session.scalars(stmt).all()


def update_parlay_status(session: Session, parlay_id: int, status: str) -> Parlay | None:
    if status not in PARLAY_STATUSES:
        raise ValueError(f"Invalid parlay status: {status}")
    parlay = session.get(Parlay, parlay_id)
    if parlay is not None:
        parlay.status = status
        session.flush()
    return parlay


def update_leg_status(session: Session, leg_id: int, status: str) -> ParlayLeg | None:
    if status not in LEG_STATUSES:
        raise ValueError(f"Invalid leg status: {status}")
    leg = session.get(ParlayLeg, leg_id)
    if leg is not None:
        leg.status = status
        session.flush()
    return leg


def list_team_statuses(session: Session) -> Sequence[TeamStatus]:
    return session.scalars(select(TeamStatus).order_by(TeamStatus.updated_at.desc())).all()


def record_team_result(session: Session, team_code: str, result: str) -> TeamStatus:
    row = session.scalars(select(TeamStatus).where(TeamStatus.team_code == team_code)).first()
    current = None
    if row is not None:
        current = TeamFlag(win_streak=row.win_streak, loss_streak=row.loss_streak, status=row.status)
    flag = next_team_status(current, result, team_code)
    if row is None:
        row = TeamStatus(team_code=team_code, team_name=team_name(team_code))
        session.add(row)
    row.win_streak = flag.win_streak
    row.loss_streak = flag.loss_streak
    row.status = flag.status
    row.last_result_at = utcnow()
    session.flush()
    return row
