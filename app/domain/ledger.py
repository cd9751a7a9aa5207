"""Per-player aggregation of buy-ins and cash-outs into net balances."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .session import BuyIn, CashOut, Player, validate_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpenPlayer:
    """A player holding buy-ins without a cash-out yet."""

    player_id: str
    cash_contribution_cents: int
    bank_contribution_cents: int


@dataclass(frozen=True)
class ClosedPlayer:
    player_id: str
    cash_contribution_cents: int
    bank_contribution_cents: int
    cash_out_cents: int


@dataclass(frozen=True)
class NetPosition:
    player_id: str
    cash_contribution_cents: int
    bank_contribution_cents: int
    cash_out_cents: int

    @property
    def net_cents(self) -> int:
        # Bank-advanced chips are owed to the bank, not to other players.
        return self.cash_out_cents - self.cash_contribution_cents


@dataclass(frozen=True)
class Ledger:
    players: tuple[OpenPlayer | ClosedPlayer, ...]

    @property
    def open_players(self) -> tuple[OpenPlayer, ...]:
        return tuple(state for state in self.players if isinstance(state, OpenPlayer))

    @property
    def is_complete(self) -> bool:
        return not self.open_players

    @property
    def positions(self) -> tuple[NetPosition, ...]:
        return tuple(
            NetPosition(
                player_id=state.player_id,
                cash_contribution_cents=state.cash_contribution_cents,
                bank_contribution_cents=state.bank_contribution_cents,
                cash_out_cents=state.cash_out_cents,
            )
            for state in self.players
            if isinstance(state, ClosedPlayer)
        )

    @property
    def bank_pool_cents(self) -> int:
        return sum(state.bank_contribution_cents for state in self.players)


def build_ledger(
    players: Sequence[Player],
    buyins: Sequence[BuyIn],
    cashouts: Sequence[CashOut],
) -> Ledger:
    """Aggregate one session's records, keeping the roster order.

    Players without a buy-in are left out of the ledger entirely.
    """
    validate_snapshot(players, buyins, cashouts)

    cash: dict[str, int] = {}
    bank: dict[str, int] = {}
    for buyin in buyins:
        totals = bank if buyin.is_bank else cash
        totals[buyin.player_id] = totals.get(buyin.player_id, 0) + buyin.amount_cents

    cash_out_by_player = {cashout.player_id: cashout.amount_cents for cashout in cashouts}

    states: list[OpenPlayer | ClosedPlayer] = []
    for player in players:
        if player.id not in cash and player.id not in bank:
            continue
        cash_total = cash.get(player.id, 0)
        bank_total = bank.get(player.id, 0)
        cash_out = cash_out_by_player.get(player.id)
        if cash_out is None:
            states.append(OpenPlayer(player.id, cash_total, bank_total))
        else:
            states.append(ClosedPlayer(player.id, cash_total, bank_total, cash_out))

    ledger = Ledger(players=tuple(states))
    if not ledger.is_complete:
        waiting = ", ".join(state.player_id for state in ledger.open_players)
        logger.debug("ledger incomplete, waiting for cash-out from: %s", waiting)
    return ledger
