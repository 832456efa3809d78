from __future__ import annotations

from bisect import bisect_right
from typing import Callable, Iterator, List

from .errors import EmptyContainerError
from .models import ProcessRecord

SortKey = Callable[[ProcessRecord], int]


def by_remaining_burst(record: ProcessRecord) -> int:
    return record.remaining_burst_time


def by_original_burst(record: ProcessRecord) -> int:
    return record.original_burst_time


def by_finish_time(record: ProcessRecord) -> int:
    if record.finish_time is None:
        raise ValueError(f"Process {record.id} has no finish time yet")
    return record.finish_time


class OrderedSequence:
    """
    Ordered container of process records.

    Backed by a plain list. ``append`` keeps insertion order (arrival pool);
    ``insert_sorted`` keeps the list non-decreasing by a key, placing a new
    record after every existing record with an equal key so ties keep their
    insertion order. A sequence must only ever be sorted with one key.
    """

    def __init__(self) -> None:
        self._items: List[ProcessRecord] = []

    def append(self, record: ProcessRecord) -> None:
        self._items.append(record)

    def insert_sorted(self, record: ProcessRecord, key: SortKey) -> None:
        # First index whose key is strictly greater than the new record's.
        index = bisect_right(self._items, key(record), key=key)
        self._items.insert(index, record)

    def remove_head(self) -> ProcessRecord:
        if not self._items:
            raise EmptyContainerError("remove_head on an empty sequence")
        return self._items.pop(0)

    def peek_head(self) -> ProcessRecord:
        if not self._items:
            raise EmptyContainerError("peek_head on an empty sequence")
        return self._items[0]

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[ProcessRecord]:
        return iter(self._items)

    def __repr__(self) -> str:
        ids = ", ".join(str(r.id) for r in self._items)
        return f"OrderedSequence([{ids}])"
