from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain import BuyIn, CashOut, FundingSource, Player
from app.storage.models import BuyInRecord, CashOutRecord, PokerSession, SessionPlayer


@dataclass(slots=True)
class SessionSnapshot:
    id: int
    name: str
    big_blind_cents: int | None
    started_at: datetime
    players: list[Player]
    buyins: list[BuyIn]
    cashouts: list[CashOut]


class SessionRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create_session(self, name: str, big_blind_cents: int | None = None) -> int:
        session = PokerSession(name=name, big_blind_cents=big_blind_cents)
        self.db.add(session)
        self.db.commit()
        return session.id

    def exists(self, session_id: int) -> bool:
        return self.db.get(PokerSession, session_id) is not None

    def add_player(self, session_id: int, player: Player) -> None:
        self.db.add(SessionPlayer(session_id=session_id, player_id=player.id, name=player.name))
        self.db.commit()

    def add_buyin(
        self,
        session_id: int,
        player_id: str,
        amount_cents: int,
        funding_source: FundingSource,
        buyin_id: str | None = None,
    ) -> BuyIn:
        record = BuyInRecord(
            buyin_id=buyin_id or str(uuid4()),
            session_id=session_id,
            player_id=player_id,
            amount_cents=amount_cents,
            funding_source=funding_source.value,
        )
        self.db.add(record)
        self.db.commit()
        return _to_buyin(record)

    def add_cashout(
        self,
        session_id: int,
        player_id: str,
        amount_cents: int,
        stack_value_cents: int | None = None,
    ) -> CashOut:
        record = CashOutRecord(
            session_id=session_id,
            player_id=player_id,
            amount_cents=amount_cents,
            stack_value_cents=stack_value_cents,
        )
        self.db.add(record)
        self.db.commit()
        return _to_cashout(record)

    def load_snapshot(self, session_id: int) -> SessionSnapshot | None:
        session = self.db.get(PokerSession, session_id)
        if session is None:
            return None

        players = self.db.scalars(
            select(SessionPlayer).where(SessionPlayer.session_id == session_id).order_by(SessionPlayer.id)
        ).all()
        buyins = self.db.scalars(
            select(BuyInRecord).where(BuyInRecord.session_id == session_id).order_by(BuyInRecord.id)
        ).all()
        cashouts = self.db.scalars(
            select(CashOutRecord).where(CashOutRecord.session_id == session_id).order_by(CashOutRecord.id)
        ).all()

        return SessionSnapshot(
            id=session.id,
            name=session.name,
            big_blind_cents=session.big_blind_cents,
            started_at=session.started_at,
            players=[Player(id=row.player_id, name=row.name) for row in players],
            buyins=[_to_buyin(row) for row in buyins],
            cashouts=[_to_cashout(row) for row in cashouts],
        )


def _to_buyin(row: BuyInRecord) -> BuyIn:
    return BuyIn(
        id=row.buyin_id,
        player_id=row.player_id,
        amount_cents=row.amount_cents,
        timestamp=row.created_at,
        funding_source=FundingSource(row.funding_source),
    )


def _to_cashout(row: CashOutRecord) -> CashOut:
    return CashOut(
        player_id=row.player_id,
        amount_cents=row.amount_cents,
        stack_value_cents=row.stack_value_cents,
        timestamp=row.created_at,
    )
