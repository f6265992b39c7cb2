"""
Unit Conversion
===============
Maps a scaled dp value to the unit the host asked for.

    DP -> value
    SP -> value * font_scale
    PX -> value * density
"""
from __future__ import annotations

from enum import StrEnum
import math

from responsivedimens.config import MM_PER_INCH
from responsivedimens.model.metrics import ScreenMetrics


class DimensionUnit(StrEnum):
    DP = "dp"
    SP = "sp"
    PX = "px"


def convert(value: float, unit: DimensionUnit, metrics: ScreenMetrics) -> float:
    if unit == DimensionUnit.DP:
        return value
    if unit == DimensionUnit.SP:
        return value * metrics.font_scale
    if unit == DimensionUnit.PX:
        return value * metrics.density
    raise ValueError(f"Unsupported unit: {unit}")


def round_half_away(value: float) -> int:
    """Round to the nearest int; .5 goes away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def convert_int(value: float, unit: DimensionUnit, metrics: ScreenMetrics) -> int:
    return round_half_away(convert(value, unit, metrics))


def physical_mm_to_dp(mm: float, metrics: ScreenMetrics) -> float:
    """Size in dp of a physical length on this device, using its measured dpi."""
    px = mm / MM_PER_INCH * metrics.xdpi
    return px / metrics.density
