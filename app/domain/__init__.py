from .bank import BankPolicy, BankResult, parse_policy, reconcile_bank
from .ledger import ClosedPlayer, Ledger, NetPosition, OpenPlayer, build_ledger
from .money import format_money, from_minor_units, to_minor_units
from .netting import Balance, NettingResult, net_debts
from .session import (
    BANK,
    BuyIn,
    CashOut,
    DomainValidationError,
    FundingSource,
    Player,
    Transaction,
    ValidationError,
    validate_snapshot,
)
from .settlement import SettlementResult, SettlementStatus, compute_settlement
from .summary import PlayerSummary, approximate_hands, format_hands, summarize_session

__all__ = [
    "BANK",
    "Balance",
    "BankPolicy",
    "BankResult",
    "BuyIn",
    "CashOut",
    "ClosedPlayer",
    "DomainValidationError",
    "FundingSource",
    "Ledger",
    "NetPosition",
    "NettingResult",
    "OpenPlayer",
    "Player",
    "PlayerSummary",
    "SettlementResult",
    "SettlementStatus",
    "Transaction",
    "ValidationError",
    "approximate_hands",
    "build_ledger",
    "compute_settlement",
    "format_hands",
    "format_money",
    "from_minor_units",
    "net_debts",
    "parse_policy",
    "reconcile_bank",
    "summarize_session",
    "to_minor_units",
    "validate_snapshot",
]
