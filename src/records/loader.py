"""Load call records handed over by the extraction pass."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from records.models import CallRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class RecordsError(Exception):
    """Raised when a call records file exists but cannot be loaded."""


def load_call_records(path: Path) -> list[CallRecord]:
    """Load call records from a JSONL file, preserving file order."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read call records from {path}: {exc}"
        raise RecordsError(msg) from exc

    records: list[CallRecord] = []
    for line_no, raw_line in enumerate(raw.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            data = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            msg = f"{path}:{line_no}: invalid JSON: {exc}"
            raise RecordsError(msg) from exc
        try:
            records.append(CallRecord.model_validate(data))
        except ValidationError as exc:
            msg = f"{path}:{line_no}: invalid call record: {exc}"
            raise RecordsError(msg) from exc

    logger.debug("Loaded %d call records from %s", len(records), path)
    return records


__all__ = ["RecordsError", "load_call_records"]
