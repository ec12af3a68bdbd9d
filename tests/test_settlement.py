import logging
from decimal import Decimal

import pytest

from tabsplit.balances import compute_balances
from tabsplit.exceptions import UnbalancedLedgerError
from tabsplit.models import Equal, Expense, Payment, Percentage, Settlement, Unequal
from tabsplit.settlement import apply_settlements, calculate_settlements, settle_group


def _assert_all_settled(balances, settlements):
    after = apply_settlements(balances, settlements)
    assert all(abs(v) < Decimal("0.01") for v in after.values()), after


def test_two_people_one_expense():
    settlements = calculate_settlements({"A": 50, "B": -50})
    assert settlements == [Settlement("B", "A", Decimal("50.00"))]


def test_tied_debtors_are_ordered_by_id():
    settlements = calculate_settlements({"A": 60, "C": -30, "B": -30})
    assert settlements == [
        Settlement("B", "A", Decimal("30")),
        Settlement("C", "A", Decimal("30")),
    ]


def test_nothing_to_settle():
    assert calculate_settlements({"A": 0, "B": 0}) == []


def test_largest_debtor_pays_largest_creditor_first():
    balances = {"A": 70, "B": 30, "C": -80, "D": -20}
    settlements = calculate_settlements(balances)
    assert settlements == [
        Settlement("C", "A", Decimal("70")),
        Settlement("C", "B", Decimal("10")),
        Settlement("D", "B", Decimal("20")),
    ]
    _assert_all_settled(balances, settlements)


def test_float_drift_is_absorbed():
    balances = {"A": 0.1 + 0.2, "B": -0.3, "C": 1e-9}
    assert calculate_settlements(balances) == [Settlement("B", "A", Decimal("0.30"))]


def test_amounts_are_rounded_to_cents_and_positive():
    balances = {"A": 66.666666, "B": -33.333333, "C": -33.333333}
    settlements = calculate_settlements(balances)
    assert [s.amount for s in settlements] == [Decimal("33.33"), Decimal("33.33")]
    for s in settlements:
        assert s.amount > 0
        assert s.amount == s.amount.quantize(Decimal("0.01"))


def test_unbalanced_ledger_is_rejected():
    with pytest.raises(UnbalancedLedgerError) as exc:
        calculate_settlements({"A": 100, "B": -40})
    assert exc.value.total == Decimal("60")


def test_unbalanced_ledger_is_partially_settled_when_lenient(caplog):
    with caplog.at_level(logging.WARNING, logger="tabsplit"):
        settlements = calculate_settlements({"A": 100, "B": -40}, strict=False)
    assert settlements == [Settlement("B", "A", Decimal("40"))]
    assert "unsettled" in caplog.text


def test_input_balances_are_not_mutated():
    balances = {"A": Decimal("10"), "B": Decimal("-10")}
    calculate_settlements(balances)
    assert balances == {"A": Decimal("10"), "B": Decimal("-10")}


def test_output_is_deterministic():
    balances = {"E": -12.5, "D": 40, "C": -12.5, "B": -15, "A": 0}
    assert calculate_settlements(balances) == calculate_settlements(dict(balances))


def test_larger_tolerance_ignores_small_balances():
    settlements = calculate_settlements({"A": "0.04", "B": "-0.04"}, tolerance="0.05")
    assert settlements == []


def test_scenario_with_mixed_split_policies():
    members = ["A", "B", "C", "D"]
    expenses = [
        Expense("120.00", "A"),
        Expense("75.50", "B", Unequal({"A": "20.50", "C": 25, "D": 30})),
        Expense("200", "C", Percentage({"A": 10, "B": 20, "C": 30, "D": 40})),
        Expense("33.33", "D", Equal(["B", "C", "D"])),
    ]
    result = settle_group(members, expenses)
    assert abs(sum(result.balances.values())) < Decimal("1e-6")
    assert all(s.amount > 0 for s in result.settlements)
    assert len(result.settlements) <= len(members) - 1
    _assert_all_settled(result.balances, result.settlements)


def test_settle_group_with_recorded_payment_shrinks_plan():
    members = ["A", "B", "C"]
    before = settle_group(members, [Expense(90, "A")])
    after = settle_group(members, [Expense(90, "A")], [Payment("B", "A", 30)])
    assert len(before.settlements) == 2
    assert after.settlements == [Settlement("C", "A", Decimal("30"))]


def test_apply_settlements_returns_new_map():
    balances = {"A": Decimal("50"), "B": Decimal("-50")}
    after = apply_settlements(balances, [Settlement("B", "A", Decimal("50"))])
    assert after == {"A": 0, "B": 0}
    assert balances["A"] == Decimal("50")


def test_cent_split_settlement_round_trip():
    members = ["A", "B", "C"]
    expense = Expense("10.00", "A", Unequal({"A": "3.33", "B": "3.33", "C": "3.34"}))
    balances = compute_balances(members, [expense])
    settlements = calculate_settlements(balances)
    assert settlements == [
        Settlement("C", "A", Decimal("3.34")),
        Settlement("B", "A", Decimal("3.33")),
    ]
    _assert_all_settled(balances, settlements)
