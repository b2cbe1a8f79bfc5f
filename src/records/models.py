"""Call record models for indexed method-invocation sites."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

LocationType = Literal["template", "class", "other"]


class Expr(BaseModel):
    """Opaque receiver expression (e.g. a nested call used as a target)."""

    model_config = ConfigDict(frozen=True)

    node_type: str
    source: str = ""

    def __str__(self) -> str:
        return self.source


class Location(BaseModel):
    """Where a call occurs: inside a template, a class, or elsewhere."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: LocationType = "other"
    template: str | None = None
    class_name: str | None = Field(default=None, alias="class")


class SourceSpan(BaseModel):
    """Source position of a call site."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int | None = None


class CallRecord(BaseModel):
    """A single extracted call site.

    ``target`` is a receiver name, ``None`` when there is no explicit
    receiver, or an :class:`Expr` when the receiver is itself an expression.
    ``chain`` is the dotted call path ending with ``method``.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    target: str | Expr | None = None
    chain: tuple[str | None, ...] = ()
    location: Location = Field(default_factory=Location)
    args: tuple[Any, ...] = ()
    nested: bool = False
    src_span: SourceSpan | None = None

    @property
    def has_expression_target(self) -> bool:
        return isinstance(self.target, Expr)


__all__ = ["CallRecord", "Expr", "Location", "LocationType", "SourceSpan"]
