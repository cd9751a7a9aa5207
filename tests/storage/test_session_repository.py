import pytest
from sqlalchemy.exc import IntegrityError

from app.domain import BANK, FundingSource, Player, ValidationError
from app.service import DuplicateRecordError, SessionNotFoundError, SessionService
from app.storage.repository import SessionRepository


def test_snapshot_preserves_insertion_order_and_funding(db) -> None:
    repo = SessionRepository(db)
    session_id = repo.create_session("Friday game", big_blind_cents=1000)
    repo.add_player(session_id, Player("x", "Xavier"))
    repo.add_player(session_id, Player("a", "Avi"))
    repo.add_buyin(session_id, "x", 10000, FundingSource.CASH, buyin_id="first")
    repo.add_buyin(session_id, "a", 5000, FundingSource.BANK, buyin_id="second")
    repo.add_cashout(session_id, "a", 0)

    snapshot = repo.load_snapshot(session_id)

    assert snapshot is not None
    assert snapshot.name == "Friday game"
    assert snapshot.big_blind_cents == 1000
    assert [p.id for p in snapshot.players] == ["x", "a"]
    assert [(b.id, b.funding_source) for b in snapshot.buyins] == [
        ("first", FundingSource.CASH),
        ("second", FundingSource.BANK),
    ]
    assert snapshot.buyins[0].timestamp is not None
    assert [(c.player_id, c.amount_cents, c.stack_value) for c in snapshot.cashouts] == [("a", 0, 0)]


def test_unknown_session_snapshot_is_none(db) -> None:
    assert SessionRepository(db).load_snapshot(999) is None


def test_second_cashout_violates_constraint(db) -> None:
    repo = SessionRepository(db)
    session_id = repo.create_session("dup")
    repo.add_player(session_id, Player("x", "Xavier"))
    repo.add_cashout(session_id, "x", 100)

    with pytest.raises(IntegrityError):
        repo.add_cashout(session_id, "x", 200)
    db.rollback()


def test_service_settles_stored_session(db) -> None:
    service = SessionService(SessionRepository(db))
    session_id = service.start_session("  Home game  ")
    for player in (Player("a", "Avi"), Player("b", "Ben"), Player("c", "Carmel")):
        service.add_player(session_id, player)
    service.add_buyin(session_id, "a", 10000, FundingSource.BANK)
    service.add_buyin(session_id, "b", 10000)
    service.add_buyin(session_id, "c", 0)

    service.add_cashout(session_id, "a", 0)
    service.add_cashout(session_id, "b", 0)
    assert service.get_settlement(session_id).waiting_for == ("c",)

    service.add_cashout(session_id, "c", 20000)
    result = service.get_settlement(session_id)

    assert service.snapshot(session_id).name == "Home game"
    assert [(t.sender, t.recipient, t.amount_cents) for t in result.transactions] == [
        ("b", "c", 10000),
        (BANK, "c", 10000),
    ]


def test_service_rejects_bad_records(db) -> None:
    service = SessionService(SessionRepository(db))
    session_id = service.start_session("strict")
    service.add_player(session_id, Player("a", "Avi"))

    with pytest.raises(DuplicateRecordError):
        service.add_player(session_id, Player("a", "Avi again"))
    with pytest.raises(ValidationError):
        service.add_buyin(session_id, "ghost", 100)
    with pytest.raises(ValidationError):
        service.add_cashout(session_id, "a", -1)

    service.add_cashout(session_id, "a", 100)
    with pytest.raises(DuplicateRecordError):
        service.add_cashout(session_id, "a", 100)
    with pytest.raises(DuplicateRecordError):
        service.add_buyin(session_id, "a", 100)
    with pytest.raises(SessionNotFoundError):
        service.get_settlement(session_id + 1)
