"""Configuration for custom call checks."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from utils import dumps_sorted

logger = logging.getLogger(__name__)

CHECKS_TABLE = "check"

ANY_MODEL_TARGET = "ANY_MODEL"
ALL_ARGUMENTS_TOKEN = "ALL"


class ConfigError(Exception):
    """Raised when a checks file exists but cannot be parsed."""


class CustomCheckConfig(BaseModel):
    """Configuration for a single custom check.

    Required attributes (``name``, ``description``, ``warning_symbol``) are
    optional here and checked when the check first reads them, so an
    incomplete configuration can still be loaded and fixed up.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(
        default=None,
        description="CamelCase check name; must be unique in a registry",
    )
    description: str | None = Field(
        default=None,
        description="Human readable description of the check",
    )
    warning_symbol: str | None = Field(
        default=None,
        description="Warning classification symbol",
    )
    warning_code: int | None = Field(
        default=None,
        description="Numeric warning code (derived from the config if omitted)",
    )
    targets: list[str] = Field(
        default_factory=list,
        description=f"Call targets to look for; '{ANY_MODEL_TARGET}' means every model",
    )
    methods: Any = Field(
        default=None,
        description=(
            "List of method names, or mapping of method name -> argument "
            f"positions (or '{ALL_ARGUMENTS_TOKEN}')"
        ),
    )


def _canonical_methods(methods: Any) -> Any:
    if isinstance(methods, (list, tuple, set, frozenset)):
        return sorted(str(name) for name in methods)
    if isinstance(methods, dict):
        return {str(name): positions for name, positions in methods.items()}
    return methods


def canonical_config_bytes(config: CustomCheckConfig) -> bytes:
    """Serialize a config so that equivalent configs give identical bytes.

    Keys are sorted at every level. Targets and method-name lists are sets,
    so they are sorted as well. ``warning_code`` is left out because it is
    what gets derived from these bytes.
    """
    payload = config.model_dump(mode="json", exclude={"warning_code"})
    payload["targets"] = sorted(payload["targets"])
    payload["methods"] = _canonical_methods(config.methods)
    return dumps_sorted(payload)


def derive_warning_code(config: CustomCheckConfig) -> int:
    """Stable numeric code from the MD5 of the canonical config.

    The digest is cut to 63 bits so the code stays a JSON-safe integer.
    """
    digest = hashlib.md5(canonical_config_bytes(config)).digest()
    return int.from_bytes(digest[:8], "big") & 0x7FFF_FFFF_FFFF_FFFF


def load_check_configs(path: Path) -> list[CustomCheckConfig]:
    """Load ``[[check]]`` tables from a TOML file if it exists."""
    config_path = Path(path)

    if not config_path.is_file():
        logger.debug("No checks file at %s", config_path)
        return []

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    tables = data.get(CHECKS_TABLE, [])
    if not isinstance(tables, list):
        msg = (
            f"Invalid checks file {config_path}: "
            f"'{CHECKS_TABLE}' must be an array of tables"
        )
        raise ConfigError(msg)

    configs: list[CustomCheckConfig] = []
    for position, table in enumerate(tables):
        try:
            configs.append(CustomCheckConfig.model_validate(table))
        except ValidationError as e:
            msg = f"Invalid check #{position + 1} in {config_path}: {e}"
            raise ConfigError(msg) from e

    logger.debug("Loaded %d check configs from %s", len(configs), config_path)
    return configs


__all__ = [
    "ALL_ARGUMENTS_TOKEN",
    "ANY_MODEL_TARGET",
    "ConfigError",
    "CustomCheckConfig",
    "canonical_config_bytes",
    "derive_warning_code",
    "load_check_configs",
]
