"""Tests for the expense ledger."""

from decimal import Decimal

import pytest

from budget_analyzer import ExpenseEntry, ExpenseLedger
from budget_analyzer.ledger import DEFAULT_EXPENSE_NAME


class TestLedgerLifecycle:
    """Tests for add / remove / update."""

    def test_new_ledger_has_default_entry(self):
        """A fresh ledger starts with one empty rent line."""
        ledger = ExpenseLedger()

        assert len(ledger) == 1
        assert ledger.entries[0].name == DEFAULT_EXPENSE_NAME
        assert ledger.entries[0].amount == ""

    def test_explicit_empty_ledger(self):
        ledger = ExpenseLedger(entries=[])
        assert len(ledger) == 0
        assert ledger.compute_total() == Decimal("0")

    def test_add_appends_blank_entry_with_unique_id(self):
        ledger = ExpenseLedger()
        first = ledger.add()
        second = ledger.add()

        assert len(ledger) == 3
        assert first.id != second.id
        assert ledger.entries[-1] is second
        assert second.name == ""
        assert second.amount == ""

    def test_add_does_not_change_total(self):
        ledger = ExpenseLedger(entries=[ExpenseEntry(name="Rent", amount="1200")])
        ledger.add()
        assert ledger.compute_total() == Decimal("1200")

    def test_remove_deletes_matching_entry(self):
        ledger = ExpenseLedger()
        entry = ledger.add()
        ledger.remove(entry.id)

        assert ledger.get(entry.id) is None
        assert len(ledger) == 1

    def test_remove_unknown_id_is_noop(self):
        ledger = ExpenseLedger()
        ledger.remove("does-not-exist")
        ledger.remove("does-not-exist")
        assert len(ledger) == 1

    def test_update_name_and_amount(self):
        ledger = ExpenseLedger()
        entry_id = ledger.entries[0].id

        ledger.update(entry_id, "amount", "1750.50")
        ledger.update(entry_id, "name", "Mortgage")

        entry = ledger.get(entry_id)
        assert entry.name == "Mortgage"
        assert entry.amount == "1750.50"
        assert ledger.compute_total() == Decimal("1750.50")

    def test_update_unknown_id_is_noop(self):
        ledger = ExpenseLedger()
        ledger.update("missing", "name", "Groceries")
        assert ledger.entries[0].name == DEFAULT_EXPENSE_NAME

    def test_update_rejects_other_fields(self):
        ledger = ExpenseLedger()
        with pytest.raises(ValueError):
            ledger.update(ledger.entries[0].id, "id", "new-id")

    def test_entries_is_a_copy(self):
        ledger = ExpenseLedger()
        entries = ledger.entries
        ledger.add()
        assert len(entries) == 1


class TestComputeTotal:
    """Tests for the numeric total."""

    def test_excludes_unnamed_blank_and_non_numeric(self):
        ledger = ExpenseLedger(
            entries=[
                ExpenseEntry(name="Rent", amount="1500"),
                ExpenseEntry(name="", amount="200"),
                ExpenseEntry(name="Gym", amount=""),
                ExpenseEntry(name="Misc", amount="abc"),
                ExpenseEntry(name="   ", amount="75"),
                ExpenseEntry(name="Food", amount="412.35"),
            ]
        )
        assert ledger.compute_total() == Decimal("1912.35")

    def test_order_independent(self):
        entries = [
            ExpenseEntry(name="Rent", amount="1500"),
            ExpenseEntry(name="Food", amount="400.10"),
            ExpenseEntry(name="Bad", amount="n/a"),
            ExpenseEntry(name="Phone", amount="55.90"),
        ]
        forward = ExpenseLedger(entries=entries)
        backward = ExpenseLedger(entries=list(reversed(entries)))

        assert forward.compute_total() == backward.compute_total() == Decimal("1956.00")

    def test_numeric_prefix_counts(self):
        """Amounts are read up to the first non-numeric character."""
        ledger = ExpenseLedger(entries=[ExpenseEntry(name="Car", amount="300/mo")])
        assert ledger.compute_total() == Decimal("300")

    def test_out_of_range_amount_counts_as_zero(self):
        """Amounts too large for a double are ignored instead of overflowing."""
        ledger = ExpenseLedger(
            entries=[
                ExpenseEntry(name="Rent", amount="1500"),
                ExpenseEntry(name="Typo", amount="1e1000000"),
                ExpenseEntry(name="Also typo", amount="-9e999999"),
            ]
        )

        assert ledger.compute_total() == Decimal("1500")
        assert [e.name for e in ledger.valid_entries()] == ["Rent"]

    def test_invalid_entries_remain_visible(self):
        ledger = ExpenseLedger(entries=[ExpenseEntry(name="Misc", amount="lots")])
        assert ledger.compute_total() == Decimal("0")
        assert len(ledger) == 1

    def test_named_entries_are_looser_than_valid_entries(self):
        ledger = ExpenseLedger(
            entries=[
                ExpenseEntry(name="Rent", amount="1500"),
                ExpenseEntry(name="Misc", amount="lots"),
                ExpenseEntry(name="", amount="10"),
            ]
        )

        assert [e.name for e in ledger.valid_entries()] == ["Rent"]
        assert [e.name for e in ledger.named_entries()] == ["Rent", "Misc"]
