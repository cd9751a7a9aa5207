from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.storage.database import Base


class PokerSession(Base):
    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    big_blind_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    players: Mapped[list["SessionPlayer"]] = relationship(back_populates="session", cascade="all, delete-orphan")
    buyins: Mapped[list["BuyInRecord"]] = relationship(back_populates="session", cascade="all, delete-orphan")
    cashouts: Mapped[list["CashOutRecord"]] = relationship(back_populates="session", cascade="all, delete-orphan")


class SessionPlayer(Base):
    __tablename__ = "session_players"
    __table_args__ = (UniqueConstraint("session_id", "player_id", name="uq_session_players_session_player"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("sessions.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    session: Mapped[PokerSession] = relationship(back_populates="players")


class BuyInRecord(Base):
    __tablename__ = "buyins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    buyin_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("sessions.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    funding_source: Mapped[str] = mapped_column(String(16), nullable=False, default="cash")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    session: Mapped[PokerSession] = relationship(back_populates="buyins")


class CashOutRecord(Base):
    __tablename__ = "cashouts"
    __table_args__ = (UniqueConstraint("session_id", "player_id", name="uq_cashouts_session_player"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    session_id: Mapped[int] = mapped_column(ForeignKey("sessions.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    stack_value_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    session: Mapped[PokerSession] = relationship(back_populates="cashouts")
