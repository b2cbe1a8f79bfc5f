"""Configuration-driven checks over the call index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from checks.config import (
    ALL_ARGUMENTS_TOKEN,
    ANY_MODEL_TARGET,
    CustomCheckConfig,
    derive_warning_code,
)
from checks.errors import BadCheckAttribute
from checks.warnings import CheckWarning, Confidence

if TYPE_CHECKING:
    from checks.context import ScanContext
    from checks.warnings import InputMatch
    from records.models import CallRecord

logger = logging.getLogger(__name__)


class CustomCheck:
    """A check described entirely by a :class:`CustomCheckConfig`.

    The check looks up every call of the configured methods on the configured
    targets, then grades each call by the arguments passed to it.
    """

    def __init__(self, config: CustomCheckConfig | dict[str, Any]) -> None:
        if isinstance(config, dict):
            config = CustomCheckConfig.model_validate(config)
        self.config = config
        self._warning_code: int | None = None
        self._methods: list[str] | None = None

    def __repr__(self) -> str:
        return f"CustomCheck(name={self.config.name!r})"

    @property
    def name(self) -> str:
        return self._required("name")

    @property
    def description(self) -> str:
        return self._required("description")

    @property
    def warning_symbol(self) -> str:
        return self._required("warning_symbol")

    def _required(self, field: str) -> str:
        value = getattr(self.config, field)
        if not value:
            msg = f"custom check is missing a {field}"
            raise BadCheckAttribute(msg)
        return value

    @property
    def warning_code(self) -> int:
        """Configured warning code, or one derived from the configuration."""
        if self._warning_code is None:
            configured = self.config.warning_code
            if configured is None:
                configured = derive_warning_code(self.config)
            self._warning_code = configured
        return self._warning_code

    @property
    def methods(self) -> list[str]:
        """Method names to look for."""
        if self._methods is None:
            methods = self.config.methods
            if isinstance(methods, (list, tuple, dict)):
                self._methods = [str(name) for name in methods]
            else:
                msg = (
                    f"custom check {self.config.name!r} has malformed methods: "
                    f"{methods!r}"
                )
                raise BadCheckAttribute(msg)
        return self._methods

    def arg_indices_for(self, method: str) -> tuple[int, ...] | None:
        """Argument positions to inspect for ``method``; ``None`` means all."""
        methods = self.config.methods
        if isinstance(methods, (list, tuple)):
            return None
        if not isinstance(methods, dict):
            msg = (
                f"custom check {self.config.name!r} has malformed methods: "
                f"{methods!r}"
            )
            raise BadCheckAttribute(msg)

        positions = methods.get(method, ALL_ARGUMENTS_TOKEN)
        if positions == ALL_ARGUMENTS_TOKEN:
            return None
        if isinstance(positions, int) and not isinstance(positions, bool):
            return (positions,)
        if isinstance(positions, (list, tuple)) and all(
            isinstance(p, int) and not isinstance(p, bool) for p in positions
        ):
            return tuple(positions)
        msg = (
            f"custom check {self.config.name!r} has malformed argument positions "
            f"for {method!r}: {positions!r}"
        )
        raise BadCheckAttribute(msg)

    def targets_for(self, models: frozenset[str]) -> list[str]:
        """Configured targets with the model wildcard expanded."""
        targets = [t for t in self.config.targets if t != ANY_MODEL_TARGET]
        if len(targets) != len(self.config.targets):
            targets.extend(sorted(models - set(targets)))
        return targets

    def run(self, context: ScanContext) -> list[CheckWarning]:
        logger.debug("Finding calls for %s", self.name)

        if self.config.targets:
            calls = context.call_index.find_calls(
                targets=self.targets_for(context.models), methods=self.methods
            )
        else:
            calls = context.call_index.find_calls(methods=self.methods)

        logger.debug("Processing %d results for %s", len(calls), self.name)
        warnings: list[CheckWarning] = []
        seen: set[int] = set()
        for call in calls:
            if id(call) in seen:
                continue
            seen.add(id(call))
            warnings.append(self.process_result(call, context))
        return warnings

    def process_result(self, call: CallRecord, context: ScanContext) -> CheckWarning:
        receiver = call.target if call.target is not None else "self"
        message = f"{call.method} called on {receiver}"
        confidence = Confidence.LOW
        match: InputMatch | None = None

        classifier = context.classifier
        for arg in self.relevant_args(call):
            if (match := classifier.immediate_user_input(arg)) is not None:
                message += f" with immediate {match.friendly_type}"
                confidence = Confidence.HIGH
                break
            if (match := classifier.immediate_model(arg)) is not None:
                message += f" with {match.friendly_type}"
                confidence = Confidence.MEDIUM
                break
            if (match := classifier.includes_user_input(arg)) is not None:
                message += f" with {match.friendly_type}"
                confidence = Confidence.MEDIUM
                break

        return CheckWarning(
            check_name=self.name,
            warning_symbol=self.warning_symbol,
            warning_code=self.warning_code,
            message=message,
            confidence=confidence,
            call=call,
            user_input=match.value if match is not None else None,
        )

    def relevant_args(self, call: CallRecord) -> list[Any]:
        """Arguments at the configured positions, deduplicated, in order."""
        indices = self.arg_indices_for(call.method)
        if indices is None:
            candidates = list(call.args)
        else:
            count = len(call.args)
            candidates = [call.args[i] for i in indices if -count <= i < count]

        args: list[Any] = []
        for arg in candidates:
            if arg is None or arg in args:
                continue
            args.append(arg)
        return args


__all__ = ["CustomCheck"]
