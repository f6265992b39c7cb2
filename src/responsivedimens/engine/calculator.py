"""
Scaling Engine
==============
The entry point hosts use to turn a `ScalingSpec` into a size.

Why is this file needed?
------------------------
1. Pipeline: resolve overrides -> pick strategy -> apply formula ->
   apply constraints -> convert unit, with both cache tiers consulted along
   the way.
2. Explicit context: All configuration and cache state belong to an engine
   instance. Independent engines (different reference screens, caches on or
   off) can coexist, and tests construct a fresh one each time.

Example:
    engine = ScalingEngine()
    metrics = ScreenMetrics(width=411, height=891, density=2.625)
    spec = ScalingSpec.builder(16).strategy(ScalingStrategy.BALANCED).build()
    engine.calculate(spec, metrics)
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

from responsivedimens.config import EngineConfig
from responsivedimens.engine.adjustment_factors import AdjustmentFactorCalculator
from responsivedimens.engine.cache import CacheStats, DimensionCache, ThreadSafeDimensionCache
from responsivedimens.engine.inference import infer_strategy
from responsivedimens.engine.layout import available_item_count_for_axis, calculate_available_item_count
from responsivedimens.engine.qualifier_resolver import resolve_base_value as resolve_overrides
from responsivedimens.engine.strategies import (
    StrategyContext,
    apply_constraints,
    compute_strategy,
    driving_dimension,
    resolve_screen_type,
)
from responsivedimens.engine.units import DimensionUnit, convert, convert_int
from responsivedimens.model.metrics import ScreenMetrics
from responsivedimens.model.qualifiers import QualifierKind
from responsivedimens.model.spec import ScalingSpec, ScalingStrategy, ScreenType

logger = logging.getLogger(__name__)


class ScalingEngine:
    """
    Evaluates scaling specs against screen metrics.

    Args:
        config: Calibration constants and cache toggles.
        thread_safe: Use a lock-guarded cache (for background pre-warming).
    """

    def __init__(self, config: Optional[EngineConfig] = None, thread_safe: bool = False) -> None:
        self.config = config if config is not None else EngineConfig()
        cache_cls = ThreadSafeDimensionCache if thread_safe else DimensionCache
        self.cache = cache_cls(
            base_enabled=self.config.base_cache_enabled,
            final_enabled=self.config.final_cache_enabled,
        )
        self.factors = AdjustmentFactorCalculator(self.config)
        logger.info(
            f"ScalingEngine created (reference {self.config.reference_width}x{self.config.reference_height}, "
            f"thread_safe={thread_safe})"
        )

    # --- Lifecycle ---

    def update_metrics(self, metrics: ScreenMetrics) -> bool:
        """Tell the engine about the current screen; returns True if the cache was invalidated."""
        return self.cache.observe_screen(metrics.width, metrics.height)

    def clear_cache(self) -> None:
        self.cache.clear()
        self.factors.clear()
        logger.info("Dimension cache cleared.")

    def set_cache_enabled(self, base: Optional[bool] = None, final: Optional[bool] = None) -> None:
        if base is not None:
            self.cache.set_base_enabled(base)
        if final is not None:
            self.cache.set_final_enabled(final)

    @property
    def stats(self) -> CacheStats:
        return self.cache.stats

    # --- Resolution ---

    def resolve_base_value(self, spec: ScalingSpec, metrics: ScreenMetrics) -> float:
        """Effective base value after intersection, UI-mode and qualifier overrides."""
        if spec.overrides.is_empty:
            return spec.base_value

        key = (
            metrics.device_type,
            metrics.ui_mode,
            metrics.width,
            metrics.height,
            metrics.smallest_width,
            spec.base_value,
            spec.overrides.fingerprint(),
        )
        cached = self.cache.get_base(key)
        if cached is not None:
            return cached

        value = resolve_overrides(spec.overrides, spec.base_value, metrics)
        self.cache.put_base(key, value)
        return value

    def calculate(
        self,
        spec: ScalingSpec,
        metrics: ScreenMetrics,
        container_size: Optional[Tuple[float, float]] = None,
        unit: DimensionUnit = DimensionUnit.DP,
    ) -> float:
        """
        Compute the final size for `spec` on the screen described by `metrics`.

        Args:
            spec: The dimension to compute.
            metrics: Current screen snapshot.
            container_size: Measured (width, height) of the container, used by AUTOSIZE.
            unit: Output unit.

        Returns:
            The scaled value in `unit`.
        """
        self.update_metrics(metrics)
        return convert(self._calculate_dp(spec, metrics, container_size), unit, metrics)

    def _calculate_dp(
        self,
        spec: ScalingSpec,
        metrics: ScreenMetrics,
        container_size: Optional[Tuple[float, float]],
    ) -> float:
        if container_size is not None:
            container_size = (float(container_size[0]), float(container_size[1]))
        base = self.resolve_base_value(spec, metrics)
        strategy = infer_strategy(spec, metrics.device_type)

        if spec.ignore_multi_window and metrics.is_multi_window:
            logger.debug("Multi-window mode: skipping geometry scaling")
            return apply_constraints(base, spec.constraints, metrics)

        screen_type = resolve_screen_type(spec.screen_type, spec.base_orientation, metrics.orientation)
        key = (
            strategy,
            screen_type,
            spec.base_orientation,
            metrics.width,
            metrics.height,
            metrics.orientation,
            metrics.device_type,
            base,
            spec.params_fingerprint(),
            metrics.density,
            metrics.xdpi,
            metrics.is_multi_window,
            container_size,
        )
        cached = self.cache.get_final(key)
        if cached is not None:
            return cached

        ctx = StrategyContext(
            spec=spec,
            metrics=metrics,
            config=self.config,
            factors=self.factors,
            screen_type=screen_type,
            container_size=container_size,
        )
        raw = compute_strategy(strategy, base, ctx)
        value = apply_constraints(raw, spec.constraints, metrics)
        self.cache.put_final(key, value)
        return value

    # --- Convenience ---

    def to_dp(self, spec: ScalingSpec, metrics: ScreenMetrics, container_size=None) -> float:
        return self.calculate(spec, metrics, container_size, DimensionUnit.DP)

    def to_sp(self, spec: ScalingSpec, metrics: ScreenMetrics, container_size=None) -> float:
        return self.calculate(spec, metrics, container_size, DimensionUnit.SP)

    def to_px(self, spec: ScalingSpec, metrics: ScreenMetrics, container_size=None) -> float:
        return self.calculate(spec, metrics, container_size, DimensionUnit.PX)

    def calculate_int(
        self,
        spec: ScalingSpec,
        metrics: ScreenMetrics,
        container_size: Optional[Tuple[float, float]] = None,
        unit: DimensionUnit = DimensionUnit.PX,
    ) -> int:
        """Same as `calculate`, rounded half away from zero."""
        self.update_metrics(metrics)
        return convert_int(self._calculate_dp(spec, metrics, container_size), unit, metrics)

    def scale(
        self,
        value: float,
        metrics: ScreenMetrics,
        strategy: ScalingStrategy = ScalingStrategy.DEFAULT,
        unit: DimensionUnit = DimensionUnit.DP,
    ) -> float:
        """Shortcut for a spec with no overrides or constraints."""
        return self.calculate(ScalingSpec(base_value=value, strategy=strategy), metrics, unit=unit)

    def percentage_of_screen(
        self,
        percentage: float,
        metrics: ScreenMetrics,
        screen_type: ScreenType = ScreenType.LOWEST,
    ) -> float:
        """`percentage` (0..1) of the lowest or highest screen dimension, in dp."""
        if not 0.0 <= percentage <= 1.0:
            raise ValueError(f"Percentage must be between 0.0 and 1.0, got {percentage}.")
        return percentage * driving_dimension(metrics, screen_type)

    @staticmethod
    def available_item_count(available_size: float, item_size: float, item_padding: float = 0.0) -> int:
        return calculate_available_item_count(available_size, item_size, item_padding)

    @staticmethod
    def available_item_count_for_axis(
        container_size: Tuple[float, float],
        axis: QualifierKind,
        item_size: float,
        item_padding: float = 0.0,
    ) -> int:
        return available_item_count_for_axis(container_size, axis, item_size, item_padding)
