from __future__ import annotations

from pathlib import Path

import pytest

from records.loader import RecordsError, load_call_records
from records.models import Expr


def _write_jsonl(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_call_records_parses_all_target_shapes(tmp_path: Path) -> None:
    path = _write_jsonl(
        tmp_path / "calls.jsonl",
        [
            '{"method": "find", "target": "User", "chain": ["User", "find"],'
            ' "location": {"type": "class", "class": "UsersController"}}',
            "",
            '{"method": "where", "target": null, "chain": ["where"],'
            ' "location": {"type": "template", "template": "index"}, "args": [1, "x"]}',
            '{"method": "first", "target": {"node_type": "call", "source": "User.where"},'
            ' "chain": ["User", "where", "first"], "nested": false,'
            ' "src_span": {"path": "app/models/user.rb", "line": 3}}',
        ],
    )

    records = load_call_records(path)

    assert [r.method for r in records] == ["find", "where", "first"]
    assert records[0].location.class_name == "UsersController"
    assert records[1].target is None
    assert records[1].location.template == "index"
    assert records[1].args == (1, "x")
    assert isinstance(records[2].target, Expr)
    assert records[2].has_expression_target
    assert records[2].src_span is not None
    assert records[2].src_span.line == 3


def test_load_call_records_reports_bad_line(tmp_path: Path) -> None:
    path = _write_jsonl(
        tmp_path / "calls.jsonl",
        ['{"method": "find"}', "{not json"],
    )

    with pytest.raises(RecordsError, match=":2: invalid JSON"):
        load_call_records(path)


def test_load_call_records_requires_method(tmp_path: Path) -> None:
    path = _write_jsonl(tmp_path / "calls.jsonl", ['{"target": "User"}'])

    with pytest.raises(RecordsError, match="invalid call record"):
        load_call_records(path)


def test_load_call_records_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RecordsError):
        load_call_records(tmp_path / "missing.jsonl")
