"""Paired method/target index over call records."""

from __future__ import annotations

import heapq
import logging
from operator import attrgetter
from typing import TYPE_CHECKING, Any, NamedTuple

from index.predicates import AnyOf, Exact

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable

    from index.predicates import MatchPredicate
    from records.models import CallRecord

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    ordinal: int
    record: CallRecord


_Buckets = dict[Any, list[_Entry]]

_by_ordinal = attrgetter("ordinal")


class DualIndex:
    """Calls indexed by method name and by target.

    Both maps share one record set. Records with an expression target live in
    the method map only. After ``build`` the maps change only through
    ``remove_where``, which updates both of them.
    """

    def __init__(self) -> None:
        self._by_method: _Buckets = {}
        self._by_target: _Buckets = {}
        self._count = 0
        self._next_ordinal = 0

    def build(self, records: Iterable[CallRecord]) -> None:
        for record in records:
            entry = _Entry(self._next_ordinal, record)
            self._next_ordinal += 1
            self._count += 1

            self._by_method.setdefault(record.method, []).append(entry)
            if not record.has_expression_target:
                self._by_target.setdefault(record.target, []).append(entry)

        logger.debug(
            "Indexed %d calls (%d methods, %d targets)",
            self._count,
            len(self._by_method),
            len(self._by_target),
        )

    def __len__(self) -> int:
        return self._count

    def lookup_by_method(self, method: Hashable) -> list[CallRecord]:
        return [entry.record for entry in self._by_method.get(method, ())]

    def lookup_by_target(self, target: Hashable | None) -> list[CallRecord]:
        return [entry.record for entry in self._by_target.get(target, ())]

    def lookup_methods(self, predicate: MatchPredicate) -> list[CallRecord]:
        """Union of method buckets whose key satisfies ``predicate``."""
        return _union(self._by_method, predicate)

    def lookup_targets(self, predicate: MatchPredicate) -> list[CallRecord]:
        """Union of target buckets whose key satisfies ``predicate``."""
        return _union(self._by_target, predicate)

    def remove_where(self, predicate: Callable[[CallRecord], bool]) -> int:
        """Remove matching records from both maps; return how many were removed."""
        removed = _prune(self._by_method, predicate)
        _prune(self._by_target, predicate)
        self._count -= removed
        return removed


def _select_buckets(buckets: _Buckets, predicate: MatchPredicate) -> list[list[_Entry]]:
    if isinstance(predicate, Exact):
        keys: Iterable[Any] = (predicate.value,)
    elif isinstance(predicate, AnyOf):
        keys = predicate.values
    else:
        keys = [key for key in buckets if predicate.matches(key)]
    return [buckets[key] for key in keys if key in buckets]


def _union(buckets: _Buckets, predicate: MatchPredicate) -> list[CallRecord]:
    selected = _select_buckets(buckets, predicate)
    if len(selected) == 1:
        return [entry.record for entry in selected[0]]
    # Each bucket is in ingestion order, so a k-way merge keeps global order.
    return [entry.record for entry in heapq.merge(*selected, key=_by_ordinal)]


def _prune(buckets: _Buckets, predicate: Callable[[CallRecord], bool]) -> int:
    removed = 0
    for key in list(buckets):
        entries = buckets[key]
        kept = [entry for entry in entries if not predicate(entry.record)]
        removed += len(entries) - len(kept)
        if kept:
            buckets[key] = kept
        else:
            del buckets[key]
    return removed


__all__ = ["DualIndex"]
