"""Configuration-driven checks that consume the call index."""

from checks.config import (
    ALL_ARGUMENTS_TOKEN,
    ANY_MODEL_TARGET,
    ConfigError,
    CustomCheckConfig,
    canonical_config_bytes,
    derive_warning_code,
    load_check_configs,
)
from checks.context import ArgumentClassifier, NullClassifier, ScanContext
from checks.custom import CustomCheck
from checks.errors import BadCheckAttribute, CheckError, DuplicateCheckError
from checks.registry import CheckRegistry
from checks.warnings import CheckWarning, Confidence, InputMatch

__all__ = [
    "ALL_ARGUMENTS_TOKEN",
    "ANY_MODEL_TARGET",
    "ArgumentClassifier",
    "BadCheckAttribute",
    "CheckError",
    "CheckRegistry",
    "CheckWarning",
    "Confidence",
    "ConfigError",
    "CustomCheck",
    "CustomCheckConfig",
    "DuplicateCheckError",
    "InputMatch",
    "NullClassifier",
    "ScanContext",
    "canonical_config_bytes",
    "derive_warning_code",
    "load_check_configs",
]
