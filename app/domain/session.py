from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

BANK = "Bank"


class DomainValidationError(ValueError):
    """Raised when session input breaks a bookkeeping rule."""


class ValidationError(DomainValidationError):
    """Raised for a malformed record; ``record`` holds the offending input."""

    def __init__(self, message: str, *, record: Any | None = None) -> None:
        super().__init__(message)
        self.record = record


class FundingSource(str, Enum):
    CASH = "cash"
    BANK = "bank"


@dataclass(frozen=True)
class Player:
    id: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", normalize_id(self.id))


@dataclass(frozen=True)
class BuyIn:
    id: str
    player_id: str
    amount_cents: int
    timestamp: datetime | None = None
    funding_source: FundingSource = FundingSource.CASH

    def __post_init__(self) -> None:
        object.__setattr__(self, "player_id", normalize_id(self.player_id))

    @property
    def is_bank(self) -> bool:
        return self.funding_source == FundingSource.BANK


@dataclass(frozen=True)
class CashOut:
    player_id: str
    amount_cents: int
    stack_value_cents: int | None = None
    timestamp: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "player_id", normalize_id(self.player_id))

    @property
    def stack_value(self) -> int:
        if self.stack_value_cents is None:
            return self.amount_cents
        return self.stack_value_cents


def normalize_id(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise DomainValidationError("player id must be non-empty")
    return normalized


def validate_snapshot(
    players: Iterable[Player],
    buyins: Iterable[BuyIn],
    cashouts: Iterable[CashOut],
) -> None:
    """Reject malformed records, naming the first offender.

    Conservation of money (total cash-outs against total buy-ins) is not
    checked here.
    """
    player_ids: set[str] = set()
    for player in players:
        if player.id in player_ids:
            raise ValidationError(f"duplicate player id: {player.id}", record=player)
        if player.id == BANK:
            raise ValidationError(f"player id is reserved: {BANK}", record=player)
        player_ids.add(player.id)

    buyin_ids: set[str] = set()
    for buyin in buyins:
        if buyin.id in buyin_ids:
            raise ValidationError(f"duplicate buy-in id: {buyin.id}", record=buyin)
        if buyin.amount_cents < 0:
            raise ValidationError(f"buy-in {buyin.id} has negative amount", record=buyin)
        if buyin.player_id not in player_ids:
            raise ValidationError(f"buy-in {buyin.id} references unknown player: {buyin.player_id}", record=buyin)
        buyin_ids.add(buyin.id)

    cashed_out: set[str] = set()
    for cashout in cashouts:
        if cashout.player_id not in player_ids:
            raise ValidationError(f"cash-out references unknown player: {cashout.player_id}", record=cashout)
        if cashout.player_id in cashed_out:
            raise ValidationError(f"player {cashout.player_id} has more than one cash-out", record=cashout)
        if cashout.amount_cents < 0:
            raise ValidationError(f"cash-out for {cashout.player_id} has negative amount", record=cashout)
        if cashout.stack_value_cents is not None and cashout.stack_value_cents < 0:
            raise ValidationError(f"cash-out for {cashout.player_id} has negative stack value", record=cashout)
        cashed_out.add(cashout.player_id)


@dataclass(frozen=True)
class Transaction:
    sender: str
    recipient: str
    amount_cents: int

    def __post_init__(self) -> None:
        if self.amount_cents <= 0:
            raise DomainValidationError("transaction amount must be positive")
        if self.sender == self.recipient:
            raise DomainValidationError("transaction sender and recipient must differ")

    @property
    def from_bank(self) -> bool:
        return self.sender == BANK

    def as_dict(self) -> dict[str, int | str]:
        return {"from": self.sender, "to": self.recipient, "amount_cents": self.amount_cents}
