"""Match predicates shared by every query path.

A predicate is built once from a raw query value and then applied either to
index keys (to choose buckets) or to a record field (to filter results).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Final


class _NotGiven:
    """Marker for a query option that was not supplied at all."""

    _instance: _NotGiven | None = None

    def __new__(cls) -> _NotGiven:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_GIVEN"

    def __bool__(self) -> bool:
        return False


NOT_GIVEN: Final = _NotGiven()

COLLECTION_TYPES = (list, tuple, set, frozenset)


def text_of(value: Any) -> str:
    """Textual form of a field value for pattern matching."""
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class Exact:
    """Field equals ``value``. ``Exact(None)`` means "no explicit target"."""

    value: Any

    def matches(self, field: Any) -> bool:
        return field == self.value


@dataclass(frozen=True)
class AnyOf:
    """Field is a member of ``values``."""

    values: frozenset[Any]

    def matches(self, field: Any) -> bool:
        return field in self.values

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class Pattern:
    """Textual form of the field matches ``regex`` anywhere."""

    regex: re.Pattern[str]

    def matches(self, field: Any) -> bool:
        return self.regex.search(text_of(field)) is not None


MatchPredicate = Exact | AnyOf | Pattern


def is_collection(value: Any) -> bool:
    return isinstance(value, COLLECTION_TYPES)


def raw_value(value: Any) -> Any:
    """Query value carried by a predicate object; other values pass through."""
    if isinstance(value, Exact):
        return value.value
    if isinstance(value, AnyOf):
        return value.values
    if isinstance(value, Pattern):
        return value.regex
    return value


def as_predicate(value: Any) -> MatchPredicate:
    """Build the predicate for a raw query value."""
    if isinstance(value, (Exact, AnyOf, Pattern)):
        return value
    if isinstance(value, re.Pattern):
        return Pattern(value)
    if is_collection(value):
        return AnyOf(frozenset(value))
    return Exact(value)


__all__ = [
    "NOT_GIVEN",
    "AnyOf",
    "Exact",
    "MatchPredicate",
    "Pattern",
    "as_predicate",
    "is_collection",
    "raw_value",
    "text_of",
]
