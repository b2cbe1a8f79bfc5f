"""Errors raised while defining or registering checks."""

from __future__ import annotations


class CheckError(Exception):
    """Base class for check definition errors."""


class DuplicateCheckError(CheckError):
    """Raised when a check name is already registered."""


class BadCheckAttribute(CheckError):
    """Raised when a check configuration lacks or malforms a required field."""


__all__ = ["BadCheckAttribute", "CheckError", "DuplicateCheckError"]
