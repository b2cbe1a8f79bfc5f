"""Shared utilities for callmap-core."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import IO


def to_dict(obj: object) -> object:
    """Convert object to dict for JSON serialization."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json", by_alias=True)
    return obj


def dumps_sorted(obj: object) -> bytes:
    """Serialize with sorted keys so equal payloads yield equal bytes."""
    return orjson.dumps(to_dict(obj), option=orjson.OPT_SORT_KEYS)


def write_jsonl(handle: IO[bytes], records: Iterable[object]) -> int:
    """Write records as JSONL to a binary handle and return the count."""
    count = 0
    for rec in records:
        handle.write(dumps_sorted(rec))
        handle.write(b"\n")
        count += 1
    return count
