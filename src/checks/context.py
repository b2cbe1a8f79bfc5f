"""Shared state handed to checks while they run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from checks.warnings import InputMatch
    from index.call_index import CallIndex


class ArgumentClassifier(Protocol):
    """Taint analysis hooks used to grade call arguments."""

    def immediate_user_input(self, arg: Any) -> InputMatch | None: ...

    def immediate_model(self, arg: Any) -> InputMatch | None: ...

    def includes_user_input(self, arg: Any) -> InputMatch | None: ...


class NullClassifier:
    """Classifier that never finds anything."""

    def immediate_user_input(self, arg: Any) -> InputMatch | None:
        del arg
        return None

    def immediate_model(self, arg: Any) -> InputMatch | None:
        del arg
        return None

    def includes_user_input(self, arg: Any) -> InputMatch | None:
        del arg
        return None


@dataclass
class ScanContext:
    """Call index plus the program facts checks need."""

    call_index: CallIndex
    models: frozenset[str] = field(default_factory=frozenset)
    classifier: ArgumentClassifier = field(default_factory=NullClassifier)


__all__ = ["ArgumentClassifier", "NullClassifier", "ScanContext"]
