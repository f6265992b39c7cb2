"""
Screen Qualifier Overrides
==========================
Defines the override entries a designer attaches to a dimension so that a
different base value is used on particular screens.

Priority (highest first):
    1. Intersection (UI mode + screen qualifier)
    2. UI mode only
    3. Screen qualifier only
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Tuple

from responsivedimens.model.metrics import ScreenMetrics, UiModeType


class QualifierKind(StrEnum):
    SMALLEST_WIDTH = "smallest_width"
    WIDTH = "width"
    HEIGHT = "height"

    @property
    def priority(self) -> int:
        """Cross-kind rank when several kinds match: smallest width > height > width."""
        return _KIND_PRIORITY[self]

    def dimension_of(self, metrics: ScreenMetrics) -> float:
        """The screen dimension this qualifier is evaluated against."""
        if self == QualifierKind.SMALLEST_WIDTH:
            return metrics.smallest_width
        if self == QualifierKind.WIDTH:
            return metrics.width
        return metrics.height


_KIND_PRIORITY: Dict[QualifierKind, int] = {
    QualifierKind.SMALLEST_WIDTH: 2,
    QualifierKind.HEIGHT: 1,
    QualifierKind.WIDTH: 0,
}


@dataclass(frozen=True)
class QualifierEntry:
    """Use `value` when the `kind` dimension is at least `threshold` dp."""
    kind: QualifierKind
    threshold: float
    value: float

    def __post_init__(self) -> None:
        if self.threshold < 0:
            raise ValueError(
                f"Qualifier threshold must be >= 0, got {self.threshold} for {self.kind}."
            )

    def matches(self, metrics: ScreenMetrics) -> bool:
        return self.kind.dimension_of(metrics) >= self.threshold

    @property
    def specificity(self) -> Tuple[int, float]:
        """Sort key: cross-kind priority first, then the largest threshold."""
        return self.kind.priority, self.threshold

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "threshold": self.threshold, "value": self.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> QualifierEntry:
        return QualifierEntry(
            kind=QualifierKind(data["kind"]),
            threshold=float(data["threshold"]),
            value=float(data["value"]),
        )


@dataclass(frozen=True)
class IntersectionEntry:
    """A qualifier that only applies while the device is in `ui_mode`."""
    ui_mode: UiModeType
    qualifier: QualifierEntry

    @property
    def value(self) -> float:
        return self.qualifier.value

    def matches(self, metrics: ScreenMetrics) -> bool:
        return metrics.ui_mode == self.ui_mode and self.qualifier.matches(metrics)

    def to_dict(self) -> Dict[str, Any]:
        return {"ui_mode": self.ui_mode.value, "qualifier": self.qualifier.to_dict()}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> IntersectionEntry:
        return IntersectionEntry(
            ui_mode=UiModeType(data["ui_mode"]),
            qualifier=QualifierEntry.from_dict(data["qualifier"]),
        )


@dataclass(frozen=True)
class ScreenOverrides:
    """
    The three override collections of a spec.

    `ui_mode` is stored as a tuple of (mode, value) pairs so the container stays
    hashable; use `ui_mode_value()` for lookups.
    """
    intersection: Tuple[IntersectionEntry, ...] = field(default_factory=tuple)
    ui_mode: Tuple[Tuple[UiModeType, float], ...] = field(default_factory=tuple)
    qualifier: Tuple[QualifierEntry, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not (self.intersection or self.ui_mode or self.qualifier)

    def ui_mode_value(self, mode: UiModeType) -> float | None:
        # Later entries replace earlier ones for the same mode
        found = None
        for m, v in self.ui_mode:
            if m == mode:
                found = v
        return found

    def fingerprint(self) -> Tuple:
        return (self.intersection, self.ui_mode, self.qualifier)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intersection": [e.to_dict() for e in self.intersection],
            "ui_mode": {m.value: v for m, v in self.ui_mode},
            "qualifier": [e.to_dict() for e in self.qualifier],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ScreenOverrides:
        return ScreenOverrides(
            intersection=tuple(IntersectionEntry.from_dict(e) for e in data.get("intersection", [])),
            ui_mode=tuple((UiModeType(m), float(v)) for m, v in data.get("ui_mode", {}).items()),
            qualifier=tuple(QualifierEntry.from_dict(e) for e in data.get("qualifier", [])),
        )
