"""Call-site index and query planner."""

from index.call_index import CallIndex
from index.chains import is_chain_query, stringify_chain
from index.predicates import NOT_GIVEN, AnyOf, Exact, Pattern, as_predicate
from index.store import DualIndex

__all__ = [
    "NOT_GIVEN",
    "AnyOf",
    "CallIndex",
    "DualIndex",
    "Exact",
    "Pattern",
    "as_predicate",
    "is_chain_query",
    "stringify_chain",
]
