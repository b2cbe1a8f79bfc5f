"""Registry of checks available to a scan."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from checks.config import load_check_configs
from checks.custom import CustomCheck
from checks.errors import DuplicateCheckError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from checks.context import ScanContext
    from checks.warnings import CheckWarning

logger = logging.getLogger(__name__)


class CheckRegistry:
    """Checks keyed by name, in registration order.

    Names are identities: registering a second check under a taken name
    raises instead of replacing the first one.
    """

    def __init__(self) -> None:
        self._checks: dict[str, CustomCheck] = {}

    @classmethod
    def from_config_file(cls, path: Path) -> CheckRegistry:
        registry = cls()
        for config in load_check_configs(path):
            registry.add(CustomCheck(config))
        return registry

    def add(self, check: CustomCheck) -> CustomCheck:
        name = check.name
        if name in self._checks:
            msg = f"check named {name} already exists"
            raise DuplicateCheckError(msg)

        self._checks[name] = check
        logger.debug("Registered check %s", name)
        return check

    @property
    def warning_codes(self) -> dict[str, int]:
        """Warning symbol -> warning code for every registered check."""
        return {check.warning_symbol: check.warning_code for check in self}

    def get(self, name: str) -> CustomCheck | None:
        return self._checks.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._checks

    def __iter__(self) -> Iterator[CustomCheck]:
        return iter(self._checks.values())

    def __len__(self) -> int:
        return len(self._checks)

    def run_all(self, context: ScanContext) -> list[CheckWarning]:
        warnings: list[CheckWarning] = []
        for check in self:
            warnings.extend(check.run(context))
        return warnings


__all__ = ["CheckRegistry"]
