from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.domain import BankPolicy, parse_policy


@dataclass(frozen=True)
class Settings:
    database_url: str
    bank_policy: BankPolicy
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./poker_ledger.db"),
        bank_policy=parse_policy(os.getenv("SETTLEMENT_BANK_POLICY", BankPolicy.OVERPAY.value)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
