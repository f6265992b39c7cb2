"""
Layout Helpers
==============
Calculations driven by a container size measured by the host layout system
rather than by the screen: item counts and autosize.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np

from responsivedimens.config import (
    AUTOSIZE_DEFAULT_MAX_RATIO,
    AUTOSIZE_DEFAULT_MIN_RATIO,
    AUTOSIZE_REFERENCE,
)
from responsivedimens.model.qualifiers import QualifierKind
from responsivedimens.model.spec import AutoSizeParams

logger = logging.getLogger(__name__)


def calculate_available_item_count(available_size: float, item_size: float, item_padding: float = 0.0) -> int:
    """
    How many items of `item_size` (plus `item_padding` on each side) fit in `available_size`.

    A non-positive total item size is a legitimate transient layout state and yields 0.
    """
    total_item_size = item_size + 2 * item_padding
    if total_item_size <= 0:
        return 0
    return max(0, math.floor(available_size / total_item_size))


def container_dimension(container_size: Tuple[float, float], axis: QualifierKind) -> float:
    """Pick the container side the same way a qualifier picks a screen dimension."""
    width, height = container_size
    if axis == QualifierKind.SMALLEST_WIDTH:
        return min(width, height)
    if axis == QualifierKind.WIDTH:
        return width
    return height


def available_item_count_for_axis(
    container_size: Tuple[float, float],
    axis: QualifierKind,
    item_size: float,
    item_padding: float = 0.0,
) -> int:
    return calculate_available_item_count(container_dimension(container_size, axis), item_size, item_padding)


def _autosize_bounds(x: float, params: Optional[AutoSizeParams]) -> Tuple[float, float]:
    lo = params.min_value if params is not None and params.min_value is not None else x * AUTOSIZE_DEFAULT_MIN_RATIO
    hi = params.max_value if params is not None and params.max_value is not None else x * AUTOSIZE_DEFAULT_MAX_RATIO
    return lo, hi


def find_best_preset(presets: Tuple[float, ...], available: float) -> float:
    """Largest preset that fits in `available`; the smallest preset when none fits."""
    if not presets:
        raise ValueError("Autosize preset list must not be empty.")
    index = int(np.searchsorted(presets, available, side="right")) - 1
    return presets[max(index, 0)]


def autosize(
    x: float,
    params: Optional[AutoSizeParams],
    container_size: Optional[Tuple[float, float]],
) -> float:
    """
    Fit `x` to a measured container.

    Uniform mode scales `x` by `min(cw, ch) / 100` and clamps to [min, max].
    Preset mode picks a preset. Before the first measure pass (no container)
    the base value is returned clamped to [min, max].
    """
    if params is not None and params.uses_presets:
        if container_size is None:
            return find_best_preset(params.presets, x)
        return find_best_preset(params.presets, min(container_size))

    lo, hi = _autosize_bounds(x, params)
    if container_size is None:
        logger.debug("Autosize requested without a measured container; using base value")
        return float(np.clip(x, lo, hi))

    available = min(container_size)
    return float(np.clip(x * available / AUTOSIZE_REFERENCE, lo, hi))
