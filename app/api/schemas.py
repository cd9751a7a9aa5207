from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain import (
    BankPolicy,
    BuyIn,
    CashOut,
    FundingSource,
    NetPosition,
    Player,
    PlayerSummary,
    SettlementResult,
    Transaction,
    format_hands,
    format_money,
    from_minor_units,
    to_minor_units,
)


class PlayerIn(BaseModel):
    id: str = Field(..., min_length=1, examples=["alice"])
    name: str = Field(..., examples=["Alice"])

    def to_domain(self) -> Player:
        return Player(id=self.id, name=self.name)


class BuyInIn(BaseModel):
    id: str = Field(..., min_length=1)
    player_id: str
    amount: Decimal = Field(..., ge=0, description="Amount in major currency units")
    timestamp: datetime | None = None
    funding_source: FundingSource = FundingSource.CASH

    def to_domain(self) -> BuyIn:
        return BuyIn(
            id=self.id,
            player_id=self.player_id,
            amount_cents=to_minor_units(self.amount),
            timestamp=self.timestamp,
            funding_source=self.funding_source,
        )


class CashOutIn(BaseModel):
    player_id: str
    amount: Decimal = Field(..., ge=0)
    stack_value: Decimal | None = Field(default=None, ge=0)
    timestamp: datetime | None = None

    def to_domain(self) -> CashOut:
        return CashOut(
            player_id=self.player_id,
            amount_cents=to_minor_units(self.amount),
            stack_value_cents=None if self.stack_value is None else to_minor_units(self.stack_value),
            timestamp=self.timestamp,
        )


class SettlementRequest(BaseModel):
    players: list[PlayerIn]
    buyins: list[BuyInIn] = Field(default_factory=list)
    cashouts: list[CashOutIn] = Field(default_factory=list)
    bank_policy: BankPolicy | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "players": [{"id": "x", "name": "Xavier"}, {"id": "y", "name": "Yael"}],
                    "buyins": [
                        {"id": "b1", "player_id": "x", "amount": 100, "funding_source": "cash"},
                        {"id": "b2", "player_id": "y", "amount": 100, "funding_source": "cash"},
                    ],
                    "cashouts": [
                        {"player_id": "x", "amount": 150},
                        {"player_id": "y", "amount": 50},
                    ],
                }
            ]
        }
    }


class TransactionOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(..., alias="from")
    recipient: str = Field(..., alias="to")
    amount_cents: int
    amount: Decimal
    display: str

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionOut":
        return cls(
            sender=transaction.sender,
            recipient=transaction.recipient,
            amount_cents=transaction.amount_cents,
            amount=from_minor_units(transaction.amount_cents),
            display=format_money(transaction.amount_cents),
        )


class PositionOut(BaseModel):
    player_id: str
    cash_contribution_cents: int
    bank_contribution_cents: int
    cash_out_cents: int
    net_cents: int

    @classmethod
    def from_domain(cls, position: NetPosition) -> "PositionOut":
        return cls(
            player_id=position.player_id,
            cash_contribution_cents=position.cash_contribution_cents,
            bank_contribution_cents=position.bank_contribution_cents,
            cash_out_cents=position.cash_out_cents,
            net_cents=position.net_cents,
        )


class SettlementResponse(BaseModel):
    status: str
    message: str | None = None
    transactions: list[TransactionOut]
    positions: list[PositionOut]
    waiting_for: list[str]
    bank_pool_cents: int
    bank_remaining_cents: int
    residual_debts: dict[str, int]
    unpaid_credits: dict[str, int]

    @classmethod
    def from_domain(cls, result: SettlementResult) -> "SettlementResponse":
        return cls(
            status=result.status.value,
            message=result.message,
            transactions=[TransactionOut.from_domain(t) for t in result.transactions],
            positions=[PositionOut.from_domain(p) for p in result.positions],
            waiting_for=list(result.waiting_for),
            bank_pool_cents=result.bank_pool_cents,
            bank_remaining_cents=result.bank_remaining_cents,
            residual_debts=dict(result.residual_debts),
            unpaid_credits=dict(result.unpaid_credits),
        )


class CreateSessionRequest(BaseModel):
    name: str = Field(default="", max_length=128)
    big_blind: Decimal | None = Field(default=None, gt=0, examples=[10])


class CreateSessionResponse(BaseModel):
    session_id: int


class AddBuyInRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, examples=[100])
    funding_source: FundingSource = FundingSource.CASH


class AddCashOutRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, examples=[150])
    stack_value: Decimal | None = Field(default=None, ge=0)


class PlayerSummaryOut(BaseModel):
    player_id: str
    name: str
    rank: int
    buyins_count: int
    buyins_total_cents: int
    stack_value_cents: int
    profit_cents: int
    cashed_out: bool
    duration_minutes: int | None = None
    approximate_hands: int | None = None
    hands_display: str
    profit_bb: Decimal | None = None

    @classmethod
    def from_domain(cls, summary: PlayerSummary) -> "PlayerSummaryOut":
        return cls(
            player_id=summary.player_id,
            name=summary.name,
            rank=summary.rank,
            buyins_count=summary.buyins_count,
            buyins_total_cents=summary.buyins_total_cents,
            stack_value_cents=summary.stack_value_cents,
            profit_cents=summary.profit_cents,
            cashed_out=summary.cashed_out,
            duration_minutes=summary.duration_minutes,
            approximate_hands=summary.approximate_hands,
            hands_display=format_hands(summary.approximate_hands),
            profit_bb=summary.profit_bb,
        )


class SessionSnapshotResponse(BaseModel):
    session_id: int
    name: str
    big_blind_cents: int | None = None
    players: list[PlayerIn]
    buyins: list[dict[str, Any]]
    cashouts: list[dict[str, Any]]
