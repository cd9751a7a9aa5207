"""Settlement of a finished poker session into money transfers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .bank import BankPolicy, reconcile_bank
from .ledger import NetPosition, build_ledger
from .netting import net_debts
from .session import BuyIn, CashOut, Player, Transaction

logger = logging.getLogger(__name__)

WAITING_MESSAGE = "Waiting for all players to cash out"
NO_TRANSACTIONS_MESSAGE = "No transactions needed"


class SettlementStatus(str, Enum):
    INCOMPLETE = "incomplete"
    SETTLED = "settled"


@dataclass(frozen=True)
class SettlementResult:
    status: SettlementStatus
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    positions: tuple[NetPosition, ...] = field(default_factory=tuple)
    waiting_for: tuple[str, ...] = field(default_factory=tuple)
    bank_pool_cents: int = 0
    bank_remaining_cents: int = 0
    residual_debts: tuple[tuple[str, int], ...] = field(default_factory=tuple)
    unpaid_credits: tuple[tuple[str, int], ...] = field(default_factory=tuple)

    @property
    def is_settled(self) -> bool:
        return self.status == SettlementStatus.SETTLED

    @property
    def peer_transactions(self) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if not t.from_bank)

    @property
    def bank_transactions(self) -> tuple[Transaction, ...]:
        return tuple(t for t in self.transactions if t.from_bank)

    @property
    def message(self) -> str | None:
        if not self.is_settled:
            return WAITING_MESSAGE
        if not self.transactions:
            return NO_TRANSACTIONS_MESSAGE
        return None

    def received_by(self, player_id: str) -> int:
        return sum(t.amount_cents for t in self.transactions if t.recipient == player_id)

    def paid_by(self, player_id: str) -> int:
        return sum(t.amount_cents for t in self.transactions if t.sender == player_id)


def compute_settlement(
    players: Sequence[Player],
    buyins: Sequence[BuyIn],
    cashouts: Sequence[CashOut],
    *,
    bank_policy: BankPolicy = BankPolicy.OVERPAY,
) -> SettlementResult:
    """Turn one session snapshot into an ordered list of transfers.

    Peer transfers come first, then payouts from the bank pool. If anyone
    holding a buy-in has not cashed out, nothing is computed and the result
    is ``INCOMPLETE``. Repeated calls on the same input return the same
    transfers in the same order.
    """
    ledger = build_ledger(players, buyins, cashouts)
    if not ledger.is_complete:
        return SettlementResult(
            status=SettlementStatus.INCOMPLETE,
            waiting_for=tuple(state.player_id for state in ledger.open_players),
        )

    positions = ledger.positions
    netting = net_debts(positions)
    bank = reconcile_bank(netting.creditors, ledger.bank_pool_cents, bank_policy)

    result = SettlementResult(
        status=SettlementStatus.SETTLED,
        transactions=netting.transactions + bank.transactions,
        positions=positions,
        bank_pool_cents=ledger.bank_pool_cents,
        bank_remaining_cents=bank.pool_remaining_cents,
        residual_debts=tuple((b.player_id, b.amount_cents) for b in netting.debtors),
        unpaid_credits=tuple((b.player_id, b.amount_cents) for b in bank.unpaid),
    )
    logger.info(
        "settled %d players with %d peer and %d bank transfers",
        len(positions),
        len(netting.transactions),
        len(bank.transactions),
    )
    return result
