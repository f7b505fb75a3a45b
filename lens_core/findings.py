"""Finding records and result sets reported by the analysis engine."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

FINDING_KIND_EMPTY = "empty"
FINDING_KIND_NUMERIC = "numeric"


@dataclass(frozen=True, slots=True)
class EmptyValueFinding:
    """A field whose value the engine considers empty."""

    object_index: int
    key: str

    @property
    def kind(self) -> str:
        return FINDING_KIND_EMPTY


@dataclass(frozen=True, slots=True)
class InvalidNumericFinding:
    """A numeric-typed field holding a value that is not a number."""

    object_index: int
    key: str
    value: str

    @property
    def kind(self) -> str:
        return FINDING_KIND_NUMERIC


Finding: TypeAlias = EmptyValueFinding | InvalidNumericFinding


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Findings of one completed scan, in engine encounter order."""

    findings: tuple[Finding, ...] = ()
    elapsed_ms: int = 0

    def __len__(self) -> int:
        return len(self.findings)

    def __iter__(self):
        return iter(self.findings)

    def __bool__(self) -> bool:
        return bool(self.findings)

    def first(self) -> Finding | None:
        return self.findings[0] if self.findings else None


EMPTY_RESULT_SET = ResultSet()


def _payload_field(item: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in item:
            return item[name]
    raise KeyError(names[0])


def finding_from_payload(kind: str, item: Mapping[str, Any]) -> Finding:
    """Build one finding from an engine reply item (camelCase or original field names)."""
    object_index = int(_payload_field(item, "objectIndex", "object_index", "index"))
    if object_index < 0:
        raise ValueError(f"objectIndex must be non-negative, got {object_index}")
    key = str(_payload_field(item, "key"))
    match kind:
        case "empty":
            return EmptyValueFinding(object_index, key)
        case "numeric":
            return InvalidNumericFinding(object_index, key, str(_payload_field(item, "value")))
        case _:
            raise ValueError(f"Unknown finding kind: {kind!r}")


def result_set_from_payload(kind: str, payload: Any) -> ResultSet:
    """Normalize an engine reply into a ResultSet.

    Accepts an existing ResultSet, or a mapping carrying the findings under
    ``findings``/``data`` and the timing under ``elapsedMs``/``duration_ms``.
    """
    if isinstance(payload, ResultSet):
        return payload
    if not isinstance(payload, Mapping):
        raise TypeError(f"Unexpected engine reply: {type(payload).__name__}")
    items = _payload_field(payload, "findings", "data")
    elapsed = payload.get("elapsedMs", payload.get("elapsed_ms", payload.get("duration_ms", 0)))
    findings = tuple(finding_from_payload(kind, item) for item in items or ())
    return ResultSet(findings=findings, elapsed_ms=int(elapsed or 0))
