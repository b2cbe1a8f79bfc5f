from __future__ import annotations

from typing import Any

import pytest

from checks.config import CustomCheckConfig, canonical_config_bytes, derive_warning_code
from checks.context import ScanContext
from checks.custom import CustomCheck
from checks.errors import BadCheckAttribute, DuplicateCheckError
from checks.registry import CheckRegistry
from checks.warnings import Confidence, InputMatch
from index.call_index import CallIndex
from records.models import CallRecord, Location


def _config(**overrides: Any) -> dict[str, Any]:
    config: dict[str, Any] = {
        "name": "CheckRawSql",
        "description": "Raw SQL passed to finders",
        "warning_symbol": "raw_sql",
        "targets": ["ANY_MODEL", "ActiveRecord"],
        "methods": ["find_by_sql", "execute"],
    }
    config.update(overrides)
    return config


def _call(method: str, target: str | None, *args: Any) -> CallRecord:
    return CallRecord(
        method=method,
        target=target,
        chain=(target, method) if target else (method,),
        args=args,
        location=Location(type="class", class_name="UsersController"),
    )


class _MarkerClassifier:
    """Treats "params:*" strings as user input and "model:*" as model refs."""

    def immediate_user_input(self, arg: Any) -> InputMatch | None:
        if isinstance(arg, str) and arg.startswith("params:"):
            return InputMatch("params", arg)
        return None

    def immediate_model(self, arg: Any) -> InputMatch | None:
        if isinstance(arg, str) and arg.startswith("model:"):
            return InputMatch("model", arg)
        return None

    def includes_user_input(self, arg: Any) -> InputMatch | None:
        if isinstance(arg, str) and "params:" in arg:
            return InputMatch("params", arg)
        return None


def test_missing_fields_raise_on_access_not_construction() -> None:
    check = CustomCheck({"targets": ["User"], "methods": ["find"]})

    with pytest.raises(BadCheckAttribute, match="name"):
        _ = check.name
    with pytest.raises(BadCheckAttribute, match="description"):
        _ = check.description
    with pytest.raises(BadCheckAttribute, match="warning_symbol"):
        _ = check.warning_symbol


def test_malformed_methods_raise_when_resolved() -> None:
    check = CustomCheck(_config(methods="find_by_sql"))

    assert check.name == "CheckRawSql"
    with pytest.raises(BadCheckAttribute):
        _ = check.methods


def test_methods_from_mapping_and_argument_positions() -> None:
    check = CustomCheck(
        _config(methods={"find_by_sql": 0, "execute": "ALL", "where": [0, 2]})
    )

    assert check.methods == ["find_by_sql", "execute", "where"]
    assert check.arg_indices_for("find_by_sql") == (0,)
    assert check.arg_indices_for("execute") is None
    assert check.arg_indices_for("where") == (0, 2)


def test_bad_argument_positions_raise() -> None:
    check = CustomCheck(_config(methods={"where": "first"}))

    with pytest.raises(BadCheckAttribute):
        check.arg_indices_for("where")


def test_warning_code_prefers_configured_value() -> None:
    assert CustomCheck(_config(warning_code=4242)).warning_code == 4242


def test_derived_warning_code_is_order_independent() -> None:
    first = CustomCheckConfig.model_validate(_config())
    second = CustomCheckConfig.model_validate(
        {
            "methods": ["execute", "find_by_sql"],
            "targets": ["ActiveRecord", "ANY_MODEL"],
            "warning_symbol": "raw_sql",
            "description": "Raw SQL passed to finders",
            "name": "CheckRawSql",
        }
    )

    assert canonical_config_bytes(first) == canonical_config_bytes(second)
    assert derive_warning_code(first) == derive_warning_code(second)
    assert CustomCheck(first).warning_code == derive_warning_code(second)
    assert 0 <= derive_warning_code(first) < 2**63


def test_derived_warning_code_changes_with_config() -> None:
    first = CustomCheckConfig.model_validate(_config())
    other = CustomCheckConfig.model_validate(_config(methods=["execute"]))

    assert derive_warning_code(first) != derive_warning_code(other)


def test_registry_rejects_duplicate_names() -> None:
    registry = CheckRegistry()
    registry.add(CustomCheck(_config()))

    with pytest.raises(DuplicateCheckError):
        registry.add(CustomCheck(_config(description="Another one")))

    assert len(registry) == 1
    assert "CheckRawSql" in registry


def test_registry_requires_a_name() -> None:
    with pytest.raises(BadCheckAttribute):
        CheckRegistry().add(CustomCheck({"methods": ["find"]}))


def test_registry_records_warning_codes() -> None:
    registry = CheckRegistry()
    check = registry.add(CustomCheck(_config(warning_code=7)))

    assert registry.get("CheckRawSql") is check
    assert registry.warning_codes == {"raw_sql": 7}


def test_run_expands_model_wildcard_and_grades_arguments() -> None:
    calls = [
        _call("find_by_sql", "User", "params:id"),
        _call("execute", "ActiveRecord", "literal", "model:User.name"),
        _call("find_by_sql", "Post", "prefix params:q"),
        _call("find_by_sql", "Helper", "params:id"),
        _call("execute", "Account", "literal"),
    ]
    context = ScanContext(
        call_index=CallIndex(calls),
        models=frozenset({"User", "Post", "Account"}),
        classifier=_MarkerClassifier(),
    )

    warnings = CustomCheck(_config()).run(context)

    assert [w.call for w in warnings] == [calls[0], calls[1], calls[2], calls[4]]
    assert [w.confidence for w in warnings] == [
        Confidence.HIGH,
        Confidence.MEDIUM,
        Confidence.MEDIUM,
        Confidence.LOW,
    ]
    assert warnings[0].message == "find_by_sql called on User with immediate parameter value"
    assert warnings[1].message == "execute called on ActiveRecord with model attribute"
    assert warnings[0].user_input == "params:id"
    assert warnings[3].user_input is None
    assert warnings[0].to_dict()["confidence"] == "high"


def test_run_only_inspects_configured_positions() -> None:
    calls = [_call("where", "User", "literal", "params:id")]
    context = ScanContext(
        call_index=CallIndex(calls),
        models=frozenset({"User"}),
        classifier=_MarkerClassifier(),
    )

    first_only = CustomCheck(_config(methods={"where": 0})).run(context)
    second_only = CustomCheck(_config(methods={"where": [1, 5]})).run(context)

    assert first_only[0].confidence is Confidence.LOW
    assert second_only[0].confidence is Confidence.HIGH


def test_run_with_wildcard_and_no_models_finds_nothing() -> None:
    context = ScanContext(call_index=CallIndex([_call("execute", "User", "x")]))

    check = CustomCheck(_config(targets=["ANY_MODEL"]))

    assert check.run(context) == []


def test_run_without_targets_queries_by_method() -> None:
    calls = [_call("system", None, "params:cmd"), _call("system", "Kernel", "ls")]
    context = ScanContext(call_index=CallIndex(calls))

    warnings = CustomCheck(_config(targets=[], methods=["system"])).run(context)

    assert [w.call for w in warnings] == calls
    assert warnings[0].message == "system called on self"
    assert all(w.confidence is Confidence.LOW for w in warnings)
