from __future__ import annotations

import logging
from uuid import uuid4

from app.domain import (
    BankPolicy,
    BuyIn,
    CashOut,
    DomainValidationError,
    FundingSource,
    Player,
    PlayerSummary,
    SettlementResult,
    compute_settlement,
    summarize_session,
    validate_snapshot,
)
from app.storage.repository import SessionRepository, SessionSnapshot

logger = logging.getLogger(__name__)


class SessionNotFoundError(DomainValidationError):
    """Raised when a session id is unknown to the store."""


class DuplicateRecordError(DomainValidationError):
    """Raised when a record would duplicate one the session already has."""


class SessionService:
    def __init__(self, repo: SessionRepository, bank_policy: BankPolicy = BankPolicy.OVERPAY) -> None:
        self.repo = repo
        self.bank_policy = bank_policy

    def start_session(self, name: str, big_blind_cents: int | None = None) -> int:
        if big_blind_cents is not None and big_blind_cents <= 0:
            raise DomainValidationError("big blind must be positive")
        session_id = self.repo.create_session(name.strip(), big_blind_cents)
        logger.info("session %d started", session_id)
        return session_id

    def snapshot(self, session_id: int) -> SessionSnapshot:
        snapshot = self.repo.load_snapshot(session_id)
        if snapshot is None:
            raise SessionNotFoundError(f"session {session_id} not found")
        return snapshot

    def add_player(self, session_id: int, player: Player) -> None:
        snapshot = self.snapshot(session_id)
        if any(existing.id == player.id for existing in snapshot.players):
            raise DuplicateRecordError(f"player already in session: {player.id}")
        validate_snapshot([*snapshot.players, player], [], [])
        self.repo.add_player(session_id, player)

    def add_buyin(
        self,
        session_id: int,
        player_id: str,
        amount_cents: int,
        funding_source: FundingSource = FundingSource.CASH,
    ) -> BuyIn:
        snapshot = self.snapshot(session_id)
        candidate = BuyIn(id=str(uuid4()), player_id=player_id, amount_cents=amount_cents, funding_source=funding_source)
        if any(cashout.player_id == candidate.player_id for cashout in snapshot.cashouts):
            raise DuplicateRecordError(f"player {candidate.player_id} already cashed out")
        validate_snapshot(snapshot.players, [candidate], [])
        return self.repo.add_buyin(session_id, candidate.player_id, amount_cents, funding_source, buyin_id=candidate.id)

    def add_cashout(
        self,
        session_id: int,
        player_id: str,
        amount_cents: int,
        stack_value_cents: int | None = None,
    ) -> CashOut:
        snapshot = self.snapshot(session_id)
        candidate = CashOut(player_id=player_id, amount_cents=amount_cents, stack_value_cents=stack_value_cents)
        if any(cashout.player_id == candidate.player_id for cashout in snapshot.cashouts):
            raise DuplicateRecordError(f"player {candidate.player_id} already cashed out")
        validate_snapshot(snapshot.players, [], [candidate])
        return self.repo.add_cashout(session_id, candidate.player_id, amount_cents, stack_value_cents)

    def get_settlement(self, session_id: int) -> SettlementResult:
        snapshot = self.snapshot(session_id)
        return compute_settlement(
            snapshot.players,
            snapshot.buyins,
            snapshot.cashouts,
            bank_policy=self.bank_policy,
        )

    def get_summary(self, session_id: int) -> list[PlayerSummary]:
        snapshot = self.snapshot(session_id)
        return summarize_session(
            snapshot.players,
            snapshot.buyins,
            snapshot.cashouts,
            big_blind_cents=snapshot.big_blind_cents,
        )
