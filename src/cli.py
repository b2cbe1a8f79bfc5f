"""Command-line interface for callmap-core."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Any

from checks.config import ConfigError
from checks.context import ScanContext
from checks.errors import CheckError
from checks.registry import CheckRegistry
from index.call_index import CallIndex
from index.predicates import NOT_GIVEN
from records.loader import RecordsError, load_call_records
from utils import write_jsonl


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("calls", help="Call records file (JSONL)")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="callmap")
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser("query", help="Find indexed calls")
    _add_common_paths(query_parser)
    target_group = query_parser.add_mutually_exclusive_group()
    target_group.add_argument(
        "--target",
        action="append",
        default=None,
        help="Target name; repeat for a set, wrap in slashes for a regex",
    )
    target_group.add_argument(
        "--no-target",
        action="store_true",
        help="Only calls without an explicit target",
    )
    query_parser.add_argument(
        "--method",
        action="append",
        default=None,
        help="Method name; repeat for a set, wrap in slashes for a regex",
    )
    query_parser.add_argument(
        "--chained",
        action="store_true",
        help="Match the target against the whole call chain",
    )
    query_parser.add_argument(
        "--nested",
        action="store_true",
        help="Include calls that are targets of other calls",
    )

    check_parser = subparsers.add_parser("check", help="Run custom checks")
    _add_common_paths(check_parser)
    check_parser.add_argument(
        "--checks",
        required=True,
        help="TOML file with [[check]] tables",
    )
    check_parser.add_argument(
        "--model",
        action="append",
        default=[],
        help="Model class name (repeatable)",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _query_value(values: list[str] | None) -> Any:
    if not values:
        return NOT_GIVEN
    parsed: list[Any] = []
    for value in values:
        # /regex/ selects a pattern query
        if len(value) > 1 and value.startswith("/") and value.endswith("/"):
            parsed.append(re.compile(value[1:-1]))
        else:
            parsed.append(value)
    if len(parsed) == 1:
        return parsed[0]
    return parsed


def _load_index(calls_path: Path) -> CallIndex:
    return CallIndex(load_call_records(calls_path))


def _handle_query(args: argparse.Namespace) -> int:
    call_index = _load_index(Path(args.calls))
    target = None if args.no_target else _query_value(args.target)
    calls = call_index.find_calls(
        target=target,
        method=_query_value(args.method),
        chained=args.chained,
        nested=args.nested,
    )
    write_jsonl(sys.stdout.buffer, calls)
    sys.stdout.buffer.flush()
    return 0


def _handle_check(args: argparse.Namespace) -> int:
    registry = CheckRegistry.from_config_file(Path(args.checks))
    context = ScanContext(
        call_index=_load_index(Path(args.calls)),
        models=frozenset(args.model),
    )
    write_jsonl(sys.stdout.buffer, registry.run_all(context))
    sys.stdout.buffer.flush()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "query":
            return _handle_query(args)

        if args.command == "check":
            return _handle_check(args)
    except (RecordsError, ConfigError, CheckError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
