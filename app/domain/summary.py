"""Per-player session figures shown on the session summary screen."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from .session import BuyIn, CashOut, Player, validate_snapshot

HANDS_PER_HOUR_PER_TABLE = 30 * 10


@dataclass(frozen=True)
class PlayerSummary:
    player_id: str
    name: str
    buyins_count: int
    buyins_total_cents: int
    stack_value_cents: int
    profit_cents: int
    cashed_out: bool
    rank: int = 0
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_minutes: int | None = None
    approximate_hands: int | None = None
    profit_bb: Decimal | None = None


def approximate_hands(players_count: int, duration_minutes: int) -> int:
    """FLOOR(duration_hours * 30 * 10 / players_count)."""
    if players_count <= 0:
        raise ValueError("players_count must be positive")
    return (duration_minutes * HANDS_PER_HOUR_PER_TABLE) // (60 * players_count)


def format_hands(hands: int | None) -> str:
    if hands is None:
        return "-"
    if hands < 1000:
        return f"~{hands} hands"
    in_thousands = f"{hands / 1000:.1f}"
    if in_thousands.endswith(".0"):
        in_thousands = in_thousands[:-2]
    return f"~{in_thousands}K hands"


def rank_by_profit(summaries: Sequence[PlayerSummary]) -> list[PlayerSummary]:
    """Sort by profit, best first; equal profits share a rank."""
    ordered = sorted(summaries, key=lambda summary: summary.profit_cents, reverse=True)
    ranked: list[PlayerSummary] = []
    rank = 1
    for index, summary in enumerate(ordered):
        if index and summary.profit_cents < ordered[index - 1].profit_cents:
            rank = index + 1
        ranked.append(replace(summary, rank=rank))
    return ranked


def summarize_session(
    players: Sequence[Player],
    buyins: Sequence[BuyIn],
    cashouts: Sequence[CashOut],
    *,
    big_blind_cents: int | None = None,
) -> list[PlayerSummary]:
    validate_snapshot(players, buyins, cashouts)
    cashout_by_player = {cashout.player_id: cashout for cashout in cashouts}
    roster_size = len(players)

    summaries: list[PlayerSummary] = []
    for player in players:
        player_buyins = [buyin for buyin in buyins if buyin.player_id == player.id]
        if not player_buyins:
            continue

        total = sum(buyin.amount_cents for buyin in player_buyins)
        cashout = cashout_by_player.get(player.id)
        stack_value = cashout.stack_value if cashout else 0
        profit = stack_value - total

        times = [buyin.timestamp for buyin in player_buyins if buyin.timestamp is not None]
        started_at = min(times) if times else None
        ended_at = cashout.timestamp if cashout else None

        duration = None
        hands = None
        if started_at is not None and ended_at is not None:
            duration = int((ended_at - started_at).total_seconds() // 60)
            hands = approximate_hands(roster_size, duration)

        profit_bb = None
        if big_blind_cents:
            profit_bb = (Decimal(profit) / Decimal(big_blind_cents)).quantize(Decimal("0.1"))

        summaries.append(
            PlayerSummary(
                player_id=player.id,
                name=player.name,
                buyins_count=len(player_buyins),
                buyins_total_cents=total,
                stack_value_cents=stack_value,
                profit_cents=profit,
                cashed_out=cashout is not None,
                started_at=started_at,
                ended_at=ended_at,
                duration_minutes=duration,
                approximate_hands=hands,
                profit_bb=profit_bb,
            )
        )

    return rank_by_profit(summaries)
