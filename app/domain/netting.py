"""Greedy peer-to-peer netting of creditors against debtors.

Each step pairs the current largest debtor with the current largest creditor
and moves ``min(debt, credit)`` between them. The maximum is re-evaluated
after every transfer; ties go to whoever appears first in the roster. This
does not always find the smallest possible number of transfers.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from .ledger import NetPosition
from .session import Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Balance:
    player_id: str
    amount_cents: int


@dataclass(frozen=True)
class NettingResult:
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    creditors: tuple[Balance, ...] = field(default_factory=tuple)
    debtors: tuple[Balance, ...] = field(default_factory=tuple)

    @property
    def done(self) -> bool:
        return not self.creditors or not self.debtors


def split_balances(positions: Sequence[NetPosition]) -> tuple[tuple[Balance, ...], tuple[Balance, ...]]:
    creditors = tuple(Balance(p.player_id, p.net_cents) for p in positions if p.net_cents > 0)
    debtors = tuple(Balance(p.player_id, -p.net_cents) for p in positions if p.net_cents < 0)
    return creditors, debtors


def largest(balances: Sequence[Balance]) -> Balance:
    # max() keeps the first of equal candidates
    return max(balances, key=lambda balance: balance.amount_cents)


def reduce_balance(balances: tuple[Balance, ...], target: Balance, amount_cents: int) -> tuple[Balance, ...]:
    """Return ``balances`` with ``target`` lowered by ``amount_cents``; settled entries are dropped."""
    updated: list[Balance] = []
    for balance in balances:
        if balance.player_id == target.player_id:
            balance = replace(balance, amount_cents=balance.amount_cents - amount_cents)
        if balance.amount_cents > 0:
            updated.append(balance)
    return tuple(updated)


def net_step(state: NettingResult) -> NettingResult:
    debtor = largest(state.debtors)
    creditor = largest(state.creditors)
    amount = min(debtor.amount_cents, creditor.amount_cents)

    transaction = Transaction(sender=debtor.player_id, recipient=creditor.player_id, amount_cents=amount)
    logger.debug("peer transfer %s -> %s: %d", transaction.sender, transaction.recipient, amount)

    return NettingResult(
        transactions=state.transactions + (transaction,),
        creditors=reduce_balance(state.creditors, creditor, amount),
        debtors=reduce_balance(state.debtors, debtor, amount),
    )


def net_debts(positions: Sequence[NetPosition]) -> NettingResult:
    creditors, debtors = split_balances(positions)
    state = NettingResult(creditors=creditors, debtors=debtors)
    while not state.done:
        state = net_step(state)

    if state.debtors:
        owed = ", ".join(f"{b.player_id}={b.amount_cents}" for b in state.debtors)
        logger.warning("debts left after peer netting: %s", owed)
    return state
