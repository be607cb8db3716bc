"""ORM models for PickLedger."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Naive UTC timestamp; the database stores UTC without an offset."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base declarative class."""


class User(Base):
    """Bettor profile: strategy text fed to pick generation and the virtual bankroll."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    betting_strategy: Mapped[str] = mapped_column(Text, default="")
    bankroll: Mapped[int] = mapped_column(Integer, default=1000)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    picks: Mapped[list[Pick]] = relationship(back_populates="user", cascade="all, delete-orphan")
    parlays: Mapped[list[Parlay]] = relationship(back_populates="user", cascade="all, delete-orphan")


class Pick(Base):
    """A single recommended wager."""

    __tablename__ = "picks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    sport: Mapped[str] = mapped_column(String(32), nullable=False)
    event: Mapped[str] = mapped_column(String(512), nullable=False)
    prediction: Mapped[str] = mapped_column(String(512), nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, default="")
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="pending")
    edge: Mapped[str | None] = mapped_column(String(128))
    odds: Mapped[str | None] = mapped_column(String(32))
    scheduled_time: Mapped[str | None] = mapped_column(String(128))
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime)
    stake: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped[User] = relationship(back_populates="picks")


class Parlay(Base):
    """Parlay ticket with its combined price."""

    __tablename__ = "parlays"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    combined_odds: Mapped[str] = mapped_column(String(32), nullable=False)
    combined_decimal_odds: Mapped[str] = mapped_column(String(32), nullable=False)
    stake: Mapped[int] = mapped_column(Integer, nullable=False)
    suggested_stake: Mapped[int] = mapped_column(Integer, nullable=False)
    potential_payout: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default="pending")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    user: Mapped[User] = relationship(back_populates="parlays")
    legs: Mapped[list[ParlayLeg]] = relationship(
        back_populates="parlay",
        cascade="all, delete-orphan",
        order_by="ParlayLeg.leg_order",
    )


class ParlayLeg(Base):
    """One selection on a parlay ticket; ``pick_id`` is set when it came from a stored pick."""

    __tablename__ = "parlay_legs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parlay_id: Mapped[int] = mapped_column(ForeignKey("parlays.id"), nullable=False)
    pick_id: Mapped[int | None] = mapped_column(Integer)
    leg_order: Mapped[int] = mapped_column(Integer, default=0)
    sport: Mapped[str] = mapped_column(String(32), nullable=False)
    event: Mapped[str] = mapped_column(String(512), nullable=False)
    prediction: Mapped[str] = mapped_column(String(512), nullable=False)
    odds: Mapped[str] = mapped_column(String(32), nullable=False)
    decimal_odds: Mapped[str] = mapped_column(String(32), nullable=False)
    confidence: Mapped[int] = mapped_column(Integer, default=5)
    status: Mapped[str] = mapped_column(String(16), default="pending")

    parlay: Mapped[Parlay] = relationship(back_populates="legs")


class TeamStatus(Base):
    """Consecutive win/loss tracking used to warn about or blacklist NHL teams."""

    __tablename__ = "team_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    team_code: Mapped[str] = mapped_column(String(8), nullable=False, unique=True)
    team_name: Mapped[str] = mapped_column(String(128), nullable=False)
    win_streak: Mapped[int] = mapped_column(Integer, default=0)
    loss_streak: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(16), default="clear")
    last_result_at: Mapped[datetime | None] = mapped_column(DateTime)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
