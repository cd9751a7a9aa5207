from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .netting import Balance, largest, reduce_balance
from .session import BANK, DomainValidationError, Transaction

logger = logging.getLogger(__name__)


class BankPolicy(str, Enum):
    """How a creditor is paid when the bank pool is smaller than the amount owed.

    ``OVERPAY`` pays the full amount and lets the pool go negative.
    ``CLAMP`` pays at most what is left in the pool.
    """

    OVERPAY = "overpay"
    CLAMP = "clamp"


@dataclass(frozen=True)
class BankResult:
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
    unpaid: tuple[Balance, ...] = field(default_factory=tuple)
    pool_remaining_cents: int = 0


def parse_policy(value: str | BankPolicy) -> BankPolicy:
    try:
        return BankPolicy(value.lower() if isinstance(value, str) else value)
    except ValueError as exc:
        raise DomainValidationError(f"unsupported bank policy: {value}") from exc


def reconcile_bank(
    creditors: Sequence[Balance],
    bank_pool_cents: int,
    policy: BankPolicy = BankPolicy.OVERPAY,
) -> BankResult:
    """Pay creditors left over after peer netting out of the pooled bank advances."""
    remaining = tuple(creditors)
    pool = bank_pool_cents
    transactions: tuple[Transaction, ...] = ()

    while remaining and pool > 0:
        creditor = largest(remaining)
        amount = creditor.amount_cents
        if policy == BankPolicy.CLAMP:
            amount = min(amount, pool)

        transactions += (Transaction(sender=BANK, recipient=creditor.player_id, amount_cents=amount),)
        logger.debug("bank transfer -> %s: %d (pool %d)", creditor.player_id, amount, pool)
        remaining = reduce_balance(remaining, creditor, amount)
        pool -= amount

    if pool < 0:
        logger.warning("bank pool overdrawn by %d", -pool)
    if remaining:
        owed = ", ".join(f"{b.player_id}={b.amount_cents}" for b in remaining)
        logger.warning("credits left unpaid after bank reconciliation: %s", owed)

    return BankResult(transactions=transactions, unpaid=remaining, pool_remaining_cents=pool)
