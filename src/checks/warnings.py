"""Warning records emitted by checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from records.models import CallRecord


class Confidence(Enum):
    """Confidence in warning accuracy."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


FRIENDLY_INPUT_TYPES = {
    "params": "parameter value",
    "cookies": "cookie value",
    "request": "request value",
    "model": "model attribute",
}


@dataclass(frozen=True)
class InputMatch:
    """A suspicious value found inside a call argument."""

    type: str
    value: Any = None

    @property
    def friendly_type(self) -> str:
        return FRIENDLY_INPUT_TYPES.get(self.type, f"{self.type} value")


@dataclass(frozen=True)
class CheckWarning:
    """One warning for one matched call site."""

    check_name: str
    warning_symbol: str
    warning_code: int
    message: str
    confidence: Confidence
    call: CallRecord
    user_input: Any = None

    def to_dict(self) -> dict[str, Any]:
        location = self.call.location
        result: dict[str, Any] = {
            "check": self.check_name,
            "warning_type": self.check_name,
            "warning_symbol": self.warning_symbol,
            "warning_code": self.warning_code,
            "message": self.message,
            "confidence": self.confidence.value,
            "method": self.call.method,
            "location": location.model_dump(mode="json", by_alias=True),
        }
        if self.call.src_span is not None:
            result["file"] = self.call.src_span.path
            result["line"] = self.call.src_span.line
        if self.user_input is not None:
            result["user_input"] = str(self.user_input)
        return result


__all__ = ["CheckWarning", "Confidence", "InputMatch"]
