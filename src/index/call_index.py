"""Call index: query planning and maintenance over indexed call sites."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from index.chains import chain_filter
from index.predicates import (
    NOT_GIVEN,
    Exact,
    as_predicate,
    is_collection,
    raw_value,
)
from index.store import DualIndex

if TYPE_CHECKING:
    from collections.abc import Iterable

    from index.predicates import MatchPredicate
    from records.models import CallRecord

logger = logging.getLogger(__name__)


class CallIndex:
    """Stores call sites to look up later.

    The index is built once from the full record batch. Checks then query it
    read-only. Template and class removals happen between analysis passes.
    """

    def __init__(self, calls: Iterable[CallRecord] = ()) -> None:
        self._index = DualIndex()
        self.index_calls(calls)

    def index_calls(self, calls: Iterable[CallRecord]) -> None:
        self._index.build(calls)

    def __len__(self) -> int:
        return len(self._index)

    @property
    def store(self) -> DualIndex:
        return self._index

    def find_calls(
        self,
        *,
        target: Any = NOT_GIVEN,
        targets: Any = NOT_GIVEN,
        method: Any = NOT_GIVEN,
        methods: Any = NOT_GIVEN,
        chained: bool = False,
        nested: bool = False,
    ) -> list[CallRecord]:
        """Find calls matching the given options.

        Options:

        * ``target``/``targets``: name, collection of names, compiled regex,
          or ``None`` for calls without an explicit receiver
        * ``method``/``methods``: name, collection of names, or compiled regex
        * ``chained``: match ``target`` against the whole call chain
        * ``nested``: include calls that are themselves targets of other calls

        Returns matching records in ingestion order. An unrecognized option
        combination logs a warning and returns an empty list.
        """
        target = raw_value(_pick(target, targets))
        method = raw_value(_pick(method, methods))
        if method is None:
            method = NOT_GIVEN

        if chained:
            return self.find_chain(target=target, method=method)

        # Find by narrowest category
        if is_collection(target) and is_collection(method):
            target_pred = as_predicate(target)
            method_pred = as_predicate(method)
            if len(target_pred) > len(method_pred):
                calls = self._index.lookup_methods(method_pred)
                calls = _filter(calls, "target", target_pred)
            else:
                calls = self._index.lookup_targets(target_pred)
                calls = _filter(calls, "method", method_pred)

        # Find by target, then by methods, if provided
        elif target is not NOT_GIVEN and target is not None:
            calls = self._index.lookup_targets(as_predicate(target))
            if method is not NOT_GIVEN:
                calls = _filter(calls, "method", as_predicate(method))

        # Find calls with no explicit target
        elif target is None and method is not NOT_GIVEN:
            calls = self._index.lookup_methods(as_predicate(method))
            calls = _filter(calls, "target", Exact(None))

        elif method is not NOT_GIVEN:
            calls = self._index.lookup_methods(as_predicate(method))

        else:
            _report_invalid(
                target=target,
                targets=targets,
                method=method,
                methods=methods,
                chained=chained,
                nested=nested,
            )
            return []

        # Calls that are targets of other calls would be reported twice.
        if not nested:
            calls = [call for call in calls if not call.nested]

        return calls

    def find_chain(
        self,
        *,
        target: Any = NOT_GIVEN,
        method: Any = NOT_GIVEN,
    ) -> list[CallRecord]:
        """Find calls by method whose call chain matches ``target``."""
        target = raw_value(target)
        method = raw_value(method)
        if method is NOT_GIVEN or method is None:
            _report_invalid(target=target, method=method, chained=True)
            return []

        if target is NOT_GIVEN:
            target = None

        calls = self._index.lookup_methods(as_predicate(method))
        matches = chain_filter(target)
        return [call for call in calls if matches(call)]

    def remove_by_template(self, template_name: str | None = None) -> int:
        """Drop calls made from templates, or from the named template only."""

        def _from_template(call: CallRecord) -> bool:
            if call.location.type != "template":
                return False
            return template_name is None or call.location.template == template_name

        removed = self._index.remove_where(_from_template)
        logger.debug(
            "Removed %d template calls (template=%r)", removed, template_name
        )
        return removed

    def remove_by_class(self, classes: Iterable[str] | str) -> int:
        """Drop calls made from any of the named classes."""
        names = frozenset([classes] if isinstance(classes, str) else classes)

        def _from_class(call: CallRecord) -> bool:
            return call.location.type == "class" and call.location.class_name in names

        removed = self._index.remove_where(_from_class)
        logger.debug("Removed %d class calls (classes=%s)", removed, sorted(names))
        return removed


def _pick(primary: Any, secondary: Any) -> Any:
    """Resolve an option given in singular and plural spellings.

    Returns the first non-None value, ``None`` if either spelling was given
    as ``None`` explicitly, and NOT_GIVEN otherwise.
    """
    for value in (primary, secondary):
        if value is not NOT_GIVEN and value is not None:
            return value
    if primary is None or secondary is None:
        return None
    return NOT_GIVEN


def _filter(
    calls: list[CallRecord], field: str, predicate: MatchPredicate
) -> list[CallRecord]:
    return [call for call in calls if predicate.matches(getattr(call, field))]


def _report_invalid(**options: Any) -> None:
    given = {key: value for key, value in options.items() if value is not NOT_GIVEN}
    logger.warning("Invalid arguments to CallIndex.find_calls: %r", given)


__all__ = ["CallIndex"]
