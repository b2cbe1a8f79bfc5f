"""Call record schema and ingestion."""

from records.loader import RecordsError, load_call_records
from records.models import CallRecord, Expr, Location, SourceSpan

__all__ = [
    "CallRecord",
    "Expr",
    "Location",
    "RecordsError",
    "SourceSpan",
    "load_call_records",
]
