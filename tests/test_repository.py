"""Repository tests against an in-memory SQLite database."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pickledger.api import server
from pickledger.db import database, repository
from pickledger.db.database import init_db
from pickledger.errors import InvalidStatusTransition


@pytest.fixture()
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    return engine


@pytest.fixture()
def session(engine):
    with Session(engine) as db:
        yield db


def _create(session, user, **overrides):
    fields = {
        "sport": "NHL",
        "event": "Wild @ Kraken",
        "prediction": "Kraken +1.5",
        "confidence": 6,
        "odds": "-200",
        "stake": 20,
    }
    fields.update(overrides)
    return repository.create_pick(session, user.id, **fields)


def test_demo_user_is_created_once(session) -> None:
    first = repository.get_or_create_demo_user(session)
    second = repository.get_or_create_demo_user(session)
    assert first.id == second.id
    assert first.bankroll == 1000


def test_duplicate_pick_upgrades_confidence(session) -> None:
    user = repository.get_or_create_demo_user(session)
    pick, created = _create(session, user)
    assert created

    same, created = _create(session, user, event="Seattle Kraken vs Minnesota Wild", confidence=8, stake=40)
    assert not created
    assert same.id == pick.id
    assert (same.confidence, same.stake) == (8, 40)

    lower, created = _create(session, user, event="Kraken @ Wild", confidence=5, stake=10)
    assert not created
    assert lower.confidence == 8
    assert len(repository.list_picks(session, user.id)) == 1


def test_settle_pick_moves_bankroll_and_team_flag(session) -> None:
    user = repository.get_or_create_demo_user(session)
    pick, _ = _create(session, user, stake=None, confidence=7)

    settlement = repository.settle_pick(session, pick, user, "lost")
    assert settlement.bet_size == 30
    assert settlement.new_bankroll == 970
    assert settlement.team_status.team_code == "SEA"
    assert settlement.team_status.loss_streak == 1

    with pytest.raises(InvalidStatusTransition):
        repository.settle_pick(session, pick, user, "won")


def test_void_leaves_bankroll_and_flags_alone(session) -> None:
    user = repository.get_or_create_demo_user(session)
    pick, _ = _create(session, user)
    settlement = repository.settle_pick(session, pick, user, "void")
    assert settlement.new_bankroll == 1000
    assert settlement.team_status is None
    assert repository.list_team_statuses(session) == []


def test_team_result_streaks(session) -> None:
    for _ in range(3):
        row = repository.record_team_result(session, "MIN", "lost")
    assert row.status == "blacklisted"
    assert row.team_name == "Minnesota Wild"


def test_request_session_commits_on_success(engine, monkeypatch) -> None:
    monkeypatch.setattr(database, "SessionLocal", sessionmaker(bind=engine, expire_on_commit=False))
    request = server.get_db()
    db = next(request)
    repository.get_or_create_demo_user(db)
    with pytest.raises(StopIteration):
        next(request)

    with database.get_session() as db:
        assert repository.get_or_create_demo_user(db).id == 1


def test_session_rolls_back_on_error(engine, monkeypatch) -> None:
    monkeypatch.setattr(database, "SessionLocal", sessionmaker(bind=engine, expire_on_commit=False))
    with pytest.raises(RuntimeError):
        with database.get_session() as db:
            repository.record_team_result(db, "MIN", "lost")
            raise RuntimeError("settlement failed")

    with database.get_session() as db:
        assert repository.list_team_statuses(db) == []
