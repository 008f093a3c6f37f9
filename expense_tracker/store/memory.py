"""
In-Memory Store Implementation

DESIGN DECISION: Every expense is stored exactly once, in an append-only
list (the arena). All other views hold the expense's positional index,
never a copy of the expense:

- category index: category -> [index, ...] in insertion order
- category totals: category -> running sum, updated on insert
- amount heap: (-amount, index) min-heap, i.e. a max-heap by amount
- date index: sorted [(date, index), ...], kept sorted on insert

Deleting flips one flag in the arena and every view sees it, because
every view resolves through the arena.

TRADEOFFS:
- Tombstones are never compacted (fine for a process-lifetime store)
- Inserting into the date index is O(n) in the worst case; queries by
  date are O(log n + k) and never reorder the arena
"""

import heapq
import threading
from bisect import bisect_left, bisect_right, insort
from typing import Optional
from uuid import UUID

from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import Expense, TotalsPolicy
from expense_tracker.store.interface import (
    AuditStorageInterface,
    ExpenseStoreInterface,
    IndexOutOfRangeError,
)


class ExpenseStore(ExpenseStoreInterface):
    """
    Multi-index in-memory expense store.

    All views are guarded by one lock: they must move together, so a
    query can never observe an expense in the arena but not yet in the
    heap.

    Returned expenses are snapshots; mutating them does not touch the
    store.
    """

    def __init__(self, totals_policy: TotalsPolicy = TotalsPolicy.CUMULATIVE):
        self._totals_policy = totals_policy
        self._records: list[Expense] = []
        self._by_category: dict[str, list[int]] = {}
        self._totals: dict[str, float] = {}
        self._amount_heap: list[tuple[float, int]] = []
        self._date_index: list[tuple[str, int]] = []
        self._lock = threading.RLock()

    @property
    def totals_policy(self) -> TotalsPolicy:
        return self._totals_policy

    def __len__(self) -> int:
        """Number of expenses ever added, deleted ones included."""
        with self._lock:
            return len(self._records)

    def visible_count(self) -> int:
        with self._lock:
            return sum(1 for record in self._records if not record.is_deleted)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, amount: float, category: str, date: str) -> int:
        with self._lock:
            index = len(self._records)
            self._records.append(
                Expense(index=index, amount=amount, category=category, date=date)
            )

            self._by_category.setdefault(category, []).append(index)
            self._totals[category] = self._totals.get(category, 0.0) + amount
            heapq.heappush(self._amount_heap, (-amount, index))
            insort(self._date_index, (date, index))

            return index

    def delete(self, index: int) -> bool:
        with self._lock:
            record = self._record_at(index)
            if record.is_deleted:
                return False

            record.is_deleted = True

            if self._totals_policy is TotalsPolicy.RECOMPUTE:
                self._totals[record.category] = self._visible_sum(record.category)

            return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, index: int) -> Expense:
        """Return one expense by index, deleted or not."""
        with self._lock:
            return self._record_at(index).model_copy()

    def list_all(self) -> list[Expense]:
        with self._lock:
            return [
                record.model_copy()
                for record in self._records
                if not record.is_deleted
            ]

    def list_by_category(self, category: str) -> list[Expense]:
        with self._lock:
            return self._visible(self._by_category.get(category, []))

    def category_totals(self) -> dict[str, float]:
        with self._lock:
            return dict(self._totals)

    def list_by_date(self, date: str) -> list[Expense]:
        with self._lock:
            # Every stored index lies in [0, len), so these keys bracket
            # all (date, index) entries for the target date.
            lo = bisect_left(self._date_index, (date, -1))
            hi = bisect_right(self._date_index, (date, len(self._records)))
            return self._visible(index for _, index in self._date_index[lo:hi])

    def top_n(self, n: int) -> list[Expense]:
        with self._lock:
            # Pop from a copy so the stored heap is untouched.
            heap = list(self._amount_heap)
            top: list[Expense] = []

            while heap and len(top) < n:
                _, index = heapq.heappop(heap)
                record = self._records[index]
                if not record.is_deleted:
                    top.append(record.model_copy())

            return top

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record_at(self, index: int) -> Expense:
        if not 0 <= index < len(self._records):
            raise IndexOutOfRangeError(index, len(self._records))
        return self._records[index]

    def _visible(self, indices) -> list[Expense]:
        records = (self._records[index] for index in indices)
        return [record.model_copy() for record in records if not record.is_deleted]

    def _visible_sum(self, category: str) -> float:
        return sum(
            self._records[index].amount
            for index in self._by_category.get(category, [])
            if not self._records[index].is_deleted
        )


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Process-scoped audit log.

    Events are kept in arrival order; nothing is ever removed.
    """

    def __init__(self):
        self._events: list[AuditEvent] = []
        self._lock = threading.Lock()

    def append_event(self, event: AuditEvent) -> bool:
        with self._lock:
            self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        with self._lock:
            return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        with self._lock:
            return [
                e for e in self._events
                if e.entity_type == entity_type and e.entity_id == entity_id
            ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        with self._lock:
            return list(reversed(self._events[-limit:])) if limit > 0 else []

    def count(self, event_type: Optional[str] = None) -> int:
        """Count stored events, optionally of one type."""
        with self._lock:
            if event_type is None:
                return len(self._events)
            return sum(1 for e in self._events if e.event_type.value == event_type)
