"""
Adjustment Factors
==================
Per-screen scale factors used by the DEFAULT strategy.

The factors depend only on (width, height), never on a spec, so every spec
evaluated against the same screen shares one computation.

    adjustment(dim)    = max(0, (dim - BASE_REF) / STEP)
    ar_adjustment      = k * ln((max(W, H) / min(W, H)) / REFERENCE_AR)
    factor_with_ar     = 1 + adjustment(dim) * (BASE_INCREMENT + ar_adjustment)
    factor_without_ar  = 1 + adjustment(dim) * BASE_INCREMENT
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import logging
from typing import Tuple

import numpy as np

from responsivedimens.config import EngineConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdjustmentFactors:
    """
    Attributes:
        with_ar_lowest: Factor with aspect-ratio correction for min(W, H).
        with_ar_highest: Factor with aspect-ratio correction for max(W, H).
        without_ar: Factor without aspect-ratio correction for min(W, H).
        base_factor_lowest: Raw adjustment steps for min(W, H).
        base_factor_highest: Raw adjustment steps for max(W, H).
        without_ar_highest: Factor without aspect-ratio correction for max(W, H).
    """
    with_ar_lowest: float
    with_ar_highest: float
    without_ar: float
    base_factor_lowest: float
    base_factor_highest: float
    without_ar_highest: float


class AdjustmentFactorCalculator:
    """
    Computes and memoizes `AdjustmentFactors` per (width, height).

    The memo is bounded (oldest entry evicted first) and cleared together with
    the engine cache.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config
        self._memo: OrderedDict[Tuple[float, float], AdjustmentFactors] = OrderedDict()
        self.computations = 0

    def adjustment_factor(self, dim: float) -> float:
        return max(0.0, (dim - self.config.base_ref) / self.config.step)

    def ar_adjustment(self, width: float, height: float, sensitivity: float | None = None) -> float:
        k = self.config.ar_sensitivity if sensitivity is None else sensitivity
        normalized_ar = max(width, height) / min(width, height)
        return float(k * np.log(normalized_ar / self.config.reference_ar))

    def factor_with_ar(self, dim: float, width: float, height: float, sensitivity: float | None = None) -> float:
        """With-AR factor; used directly (unmemoized) when a spec carries its own AR sensitivity."""
        return 1.0 + self.adjustment_factor(dim) * (
            self.config.base_increment + self.ar_adjustment(width, height, sensitivity)
        )

    def factor_without_ar(self, dim: float) -> float:
        return 1.0 + self.adjustment_factor(dim) * self.config.base_increment

    def factors(self, width: float, height: float) -> AdjustmentFactors:
        key = (width, height)
        cached = self._memo.get(key)
        if cached is not None:
            self._memo.move_to_end(key)
            return cached

        lowest, highest = min(width, height), max(width, height)
        result = AdjustmentFactors(
            with_ar_lowest=self.factor_with_ar(lowest, width, height),
            with_ar_highest=self.factor_with_ar(highest, width, height),
            without_ar=self.factor_without_ar(lowest),
            base_factor_lowest=self.adjustment_factor(lowest),
            base_factor_highest=self.adjustment_factor(highest),
            without_ar_highest=self.factor_without_ar(highest),
        )
        self.computations += 1

        self._memo[key] = result
        if len(self._memo) > self.config.factor_memo_size:
            self._memo.popitem(last=False)
        logger.debug(f"Adjustment factors for {width}x{height}: {result}")
        return result

    def clear(self) -> None:
        self._memo.clear()

    def __len__(self) -> int:
        return len(self._memo)
