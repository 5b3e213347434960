"""In-memory expense ledger backing the budget form.

Entries keep the raw text the user typed. Totals only count entries whose
name is filled in and whose amount reads as a finite number; anything else
stays in the ledger and contributes nothing.
"""

from decimal import Decimal
from typing import Iterable, Iterator, Optional

import structlog

from .models import ExpenseEntry
from .validation import parse_amount

logger = structlog.get_logger()

DEFAULT_EXPENSE_NAME = "Rent/Mortgage"
EDITABLE_FIELDS = frozenset({"name", "amount"})


class ExpenseLedger:
    """
    Ordered, mutable collection of expense entries.

    A fresh ledger starts with one empty "Rent/Mortgage" line, matching the
    form a user first sees. Pass ``entries`` to start from a known list
    instead (an empty iterable gives an empty ledger).
    """

    def __init__(self, entries: Optional[Iterable[ExpenseEntry]] = None):
        if entries is None:
            self._entries: list[ExpenseEntry] = [ExpenseEntry(name=DEFAULT_EXPENSE_NAME)]
        else:
            self._entries = list(entries)
        logger.debug("ledger_initialised", entries=len(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ExpenseEntry]:
        return iter(tuple(self._entries))

    @property
    def entries(self) -> tuple[ExpenseEntry, ...]:
        """Entries in display order."""
        return tuple(self._entries)

    def get(self, entry_id: str) -> Optional[ExpenseEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self) -> ExpenseEntry:
        """Append a blank entry with a fresh id."""
        entry = ExpenseEntry()
        self._entries.append(entry)
        logger.debug("expense_added", entry_id=entry.id, entries=len(self._entries))
        return entry

    def remove(self, entry_id: str) -> None:
        """Delete the entry with ``entry_id``; unknown ids are ignored."""
        before = len(self._entries)
        self._entries = [entry for entry in self._entries if entry.id != entry_id]
        if len(self._entries) != before:
            logger.debug("expense_removed", entry_id=entry_id, entries=len(self._entries))

    def update(self, entry_id: str, field: str, value: str) -> None:
        """Replace ``name`` or ``amount`` on the matching entry.

        Unknown ids are ignored. Any other field name is a programming error.
        """
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' is not editable. Must be one of: {sorted(EDITABLE_FIELDS)}")

        entry = self.get(entry_id)
        if entry is None:
            return
        setattr(entry, field, value)
        logger.debug("expense_updated", entry_id=entry_id, field=field)

    def valid_entries(self) -> list[ExpenseEntry]:
        """Entries that count toward the total (named, with a numeric amount)."""
        return [
            entry for entry in self._entries
            if entry.name.strip() and entry.amount.strip() and parse_amount(entry.amount) is not None
        ]

    def named_entries(self) -> list[ExpenseEntry]:
        """Entries with a non-empty name and amount, numeric or not.

        This is looser than ``valid_entries``; it is the list itemised in the
        budget analysis.
        """
        return [entry for entry in self._entries if entry.name.strip() and entry.amount.strip()]

    def compute_total(self) -> Decimal:
        """Sum the amounts of valid entries. An empty ledger totals zero."""
        total = Decimal("0")
        for entry in self.valid_entries():
            total += parse_amount(entry.amount)
        return total
