"""Chain resolution helpers for chained call queries."""

from __future__ import annotations

import re
import string
from typing import TYPE_CHECKING, Any

from index.predicates import COLLECTION_TYPES, text_of

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from records.models import CallRecord

CHAIN_SEPARATOR = "."

_UPPERCASE = frozenset(string.ascii_uppercase)


def is_chain_query(target: Any) -> bool:
    """Return True if a target query denotes a call chain.

    ``"User.connection"`` and ``"connection"`` are chain queries; ``"User"``
    is a plain receiver. Names that contain a separator, or that do not start
    with an uppercase letter, are not treated as class/module names. This is a
    naming heuristic and can misclassify unusual identifiers.
    """
    if not isinstance(target, str):
        return False
    return CHAIN_SEPARATOR in target or target[:1] not in _UPPERCASE


def stringify_chain(chain: Sequence[str | None]) -> str:
    """Join the target part of a chain (all but the method).

    Eg. ("Foo", "bar", "baz") -> "Foo.bar"
    Eg. ("bar", "baz")        -> "bar"

    ``None`` segments are skipped.
    """
    return CHAIN_SEPARATOR.join(
        str(segment) for segment in chain[:-1] if segment is not None
    )


def chain_head(record: CallRecord) -> str | None:
    return record.chain[0] if record.chain else None


def chain_filter(target: Any) -> Callable[[CallRecord], bool]:
    """Build the record filter for a chained query on ``target``."""
    if isinstance(target, COLLECTION_TYPES):
        chained = frozenset(t for t in target if is_chain_query(t))
        plain = frozenset(t for t in target if not is_chain_query(t))

        def _matches_any(record: CallRecord) -> bool:
            return chain_head(record) in plain or (
                bool(chained) and stringify_chain(record.chain) in chained
            )

        return _matches_any

    if isinstance(target, re.Pattern):
        regex = target

        def _matches_pattern(record: CallRecord) -> bool:
            return regex.search(text_of(chain_head(record))) is not None

        return _matches_pattern

    if is_chain_query(target):

        def _matches_chain(record: CallRecord) -> bool:
            return stringify_chain(record.chain) == target

        return _matches_chain

    def _matches_head(record: CallRecord) -> bool:
        return chain_head(record) == target

    return _matches_head


__all__ = [
    "CHAIN_SEPARATOR",
    "chain_filter",
    "chain_head",
    "is_chain_query",
    "stringify_chain",
]
