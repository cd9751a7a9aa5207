import pytest

from app.domain import (
    BANK,
    BankPolicy,
    BuyIn,
    CashOut,
    FundingSource,
    Player,
    SettlementStatus,
    ValidationError,
    compute_settlement,
)

BANK_FUNDED = FundingSource.BANK


def as_tuples(result) -> list[tuple[str, str, int]]:
    return [(t.sender, t.recipient, t.amount_cents) for t in result.transactions]


def test_pure_peer_netting() -> None:
    players = [Player("x", "Xavier"), Player("y", "Yael")]
    buyins = [BuyIn("b1", "x", 10000), BuyIn("b2", "y", 10000)]
    cashouts = [CashOut("x", 15000), CashOut("y", 5000)]

    result = compute_settlement(players, buyins, cashouts)

    assert result.status == SettlementStatus.SETTLED
    assert as_tuples(result) == [("y", "x", 5000)]
    assert result.message is None


def test_bank_funded_shortfall_is_paid_from_pool() -> None:
    players = [Player("a", "Avi"), Player("b", "Ben"), Player("c", "Carmel")]
    buyins = [
        BuyIn("b1", "a", 10000, funding_source=BANK_FUNDED),
        BuyIn("b2", "b", 10000),
        BuyIn("b3", "c", 0),
    ]
    cashouts = [CashOut("a", 0), CashOut("b", 0), CashOut("c", 20000)]

    result = compute_settlement(players, buyins, cashouts)

    assert {p.player_id: p.net_cents for p in result.positions} == {"a": 0, "b": -10000, "c": 20000}
    assert as_tuples(result) == [("b", "c", 10000), (BANK, "c", 10000)]
    assert [t.sender for t in result.peer_transactions] == ["b"]
    assert [t.sender for t in result.bank_transactions] == [BANK]
    assert result.received_by("c") == 20000
    assert result.bank_pool_cents == 10000
    assert result.bank_remaining_cents == 0


def test_matching_buyins_and_cashouts_need_no_transactions() -> None:
    players = [Player(pid, pid.upper()) for pid in ("a", "b", "c")]
    buyins = [BuyIn(f"b-{pid}", pid, 5000) for pid in ("a", "b", "c")]
    cashouts = [CashOut(pid, 5000) for pid in ("a", "b", "c")]

    result = compute_settlement(players, buyins, cashouts)

    assert result.status == SettlementStatus.SETTLED
    assert result.transactions == ()
    assert result.message == "No transactions needed"


def test_missing_cashout_blocks_whole_settlement() -> None:
    players = [Player("x", "Xavier"), Player("y", "Yael"), Player("z", "Zohar")]
    buyins = [BuyIn("b1", "x", 10000), BuyIn("b2", "y", 10000), BuyIn("b3", "z", 10000)]
    cashouts = [CashOut("x", 30000), CashOut("y", 0)]

    result = compute_settlement(players, buyins, cashouts)

    assert result.status == SettlementStatus.INCOMPLETE
    assert result.transactions == ()
    assert result.waiting_for == ("z",)
    assert result.message == "Waiting for all players to cash out"


def test_every_creditor_and_debtor_is_squared() -> None:
    players = [Player(pid, pid) for pid in ("p1", "p2", "p3", "p4")]
    buyins = [
        BuyIn("b1", "p1", 10000),
        BuyIn("b2", "p2", 10000),
        BuyIn("b3", "p2", 10000, funding_source=BANK_FUNDED),
        BuyIn("b4", "p3", 20000, funding_source=BANK_FUNDED),
        BuyIn("b5", "p4", 5000),
    ]
    cashouts = [CashOut("p1", 25000), CashOut("p2", 0), CashOut("p3", 15000), CashOut("p4", 15000)]

    result = compute_settlement(players, buyins, cashouts)

    assert as_tuples(result) == [
        ("p2", "p1", 10000),
        (BANK, "p3", 15000),
        (BANK, "p4", 10000),
        (BANK, "p1", 5000),
    ]
    for pos in result.positions:
        if pos.net_cents > 0:
            assert result.received_by(pos.player_id) == pos.net_cents
        elif pos.net_cents < 0:
            assert result.paid_by(pos.player_id) == -pos.net_cents
    assert all(t.amount_cents > 0 and t.sender != t.recipient for t in result.transactions)
    assert result.bank_remaining_cents == 0
    assert result.unpaid_credits == ()
    assert result.residual_debts == ()


def test_repeated_calls_are_identical() -> None:
    players = [Player(pid, pid) for pid in ("a", "b", "c", "d")]
    buyins = [BuyIn(f"b-{pid}", pid, 10000) for pid in ("a", "b", "c", "d")]
    cashouts = [CashOut("a", 20000), CashOut("b", 20000), CashOut("c", 0), CashOut("d", 0)]

    first = compute_settlement(players, buyins, cashouts)
    second = compute_settlement(players, buyins, cashouts)

    assert first == second
    assert as_tuples(first) == [("c", "a", 10000), ("d", "b", 10000)]


@pytest.mark.parametrize(
    "policy, expected_transactions, remaining, unpaid",
    [
        (BankPolicy.OVERPAY, [(BANK, "y", 30000)], -20000, {}),
        (BankPolicy.CLAMP, [(BANK, "y", 10000)], 0, {"y": 20000}),
    ],
    ids=["overpay", "clamp"],
)
def test_pool_smaller_than_credit(policy, expected_transactions, remaining, unpaid) -> None:
    players = [Player("x", "Xavier"), Player("y", "Yael")]
    buyins = [BuyIn("b1", "x", 10000, funding_source=BANK_FUNDED), BuyIn("b2", "y", 0)]
    cashouts = [CashOut("x", 0), CashOut("y", 30000)]

    result = compute_settlement(players, buyins, cashouts, bank_policy=policy)

    assert as_tuples(result) == expected_transactions
    assert result.bank_remaining_cents == remaining
    assert dict(result.unpaid_credits) == unpaid


def test_residual_debt_is_reported() -> None:
    players = [Player("x", "Xavier"), Player("y", "Yael")]
    buyins = [BuyIn("b1", "x", 10000), BuyIn("b2", "y", 10000)]
    cashouts = [CashOut("x", 0), CashOut("y", 15000)]

    result = compute_settlement(players, buyins, cashouts)

    assert as_tuples(result) == [("x", "y", 5000)]
    assert result.residual_debts == (("x", 5000),)


def test_invalid_input_raises_instead_of_reporting() -> None:
    players = [Player("x", "Xavier")]

    with pytest.raises(ValidationError, match="unknown player"):
        compute_settlement(players, [BuyIn("b1", "x", 100)], [CashOut("ghost", 100)])


def test_padded_player_references_match_the_roster() -> None:
    players = [Player(" x ", "Xavier"), Player("y", "Yael")]
    buyins = [BuyIn("b1", " x ", 10000), BuyIn("b2", "y\t", 10000)]
    cashouts = [CashOut(" x", 15000), CashOut("y ", 5000)]

    result = compute_settlement(players, buyins, cashouts)

    assert as_tuples(result) == [("y", "x", 5000)]


def test_settlement_result_is_hashable() -> None:
    players = [Player("x", "Xavier"), Player("y", "Yael")]
    buyins = [BuyIn("b1", "x", 10000), BuyIn("b2", "y", 10000)]
    cashouts = [CashOut("x", 0), CashOut("y", 15000)]

    first = compute_settlement(players, buyins, cashouts)
    second = compute_settlement(players, buyins, cashouts)

    assert hash(first) == hash(second)
    assert len({first, second}) == 1
