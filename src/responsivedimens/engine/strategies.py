"""
Scaling Strategies
==================
The thirteen formulas that turn an effective base value into a raw size.

Why is this file needed?
------------------------
1. Dispatch: Formulas are registered by `ScalingStrategy` in
   `STRATEGY_FORMULAS` and looked up at call time, so the calculator stays a
   thin pipeline and a formula can be swapped (e.g. wrapped in tests).
2. Geometry: Screen-type resolution (Lowest/Highest with orientation
   inversion) and the reference-dimension lookup live in one place.
3. Constraints: Min/max clamps and the physical-size cap are applied after
   every formula.

All values are in dp. Reference screen defaults to 300 x 533 (portrait phone).
HIGHEST divides by the reference height (533) and LOWEST by the reference
width (300). Values tuned against libraries that divide by the reference
width for both screen types differ by a factor of 533/300 for HIGHEST.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from responsivedimens.config import (
    EngineConfig,
    FLUID_DEFAULT_MAX_RATIO,
    FLUID_DEFAULT_MIN_RATIO,
    INTERPOLATION_WEIGHT,
)
from responsivedimens.engine.adjustment_factors import AdjustmentFactorCalculator
from responsivedimens.engine.layout import autosize
from responsivedimens.engine.units import physical_mm_to_dp
from responsivedimens.model.metrics import Orientation, ScreenMetrics
from responsivedimens.model.spec import (
    BaseOrientation,
    Constraints,
    FluidRange,
    ScalingSpec,
    ScalingStrategy,
    ScreenType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyContext:
    """Everything a formula may read besides the base value."""
    spec: ScalingSpec
    metrics: ScreenMetrics
    config: EngineConfig
    factors: AdjustmentFactorCalculator
    screen_type: ScreenType
    container_size: Optional[Tuple[float, float]] = None

    @property
    def dim(self) -> float:
        return driving_dimension(self.metrics, self.screen_type)

    @property
    def dim0(self) -> float:
        return reference_dimension(self.config, self.screen_type)

    @property
    def ratio(self) -> float:
        return safe_ratio(self.dim, self.dim0)


StrategyFormula = Callable[[float, StrategyContext], float]

STRATEGY_FORMULAS: Dict[ScalingStrategy, StrategyFormula] = {}


def register_strategy(strategy: ScalingStrategy) -> Callable[[StrategyFormula], StrategyFormula]:
    """Decorator registering a formula under `strategy`."""
    def decorator(func: StrategyFormula) -> StrategyFormula:
        if strategy in STRATEGY_FORMULAS:
            raise ValueError(f"Strategy {strategy} is already registered.")
        STRATEGY_FORMULAS[strategy] = func
        return func
    return decorator


# --- Geometry helpers ---

def resolve_screen_type(
    screen_type: ScreenType,
    base_orientation: BaseOrientation,
    orientation: Orientation,
) -> ScreenType:
    """Invert Lowest/Highest when the design orientation contradicts the live one. AUTO never inverts."""
    if base_orientation == BaseOrientation.AUTO:
        return screen_type
    if base_orientation == BaseOrientation.PORTRAIT and orientation == Orientation.LANDSCAPE:
        return screen_type.inverted()
    if base_orientation == BaseOrientation.LANDSCAPE and orientation == Orientation.PORTRAIT:
        return screen_type.inverted()
    return screen_type


def driving_dimension(metrics: ScreenMetrics, screen_type: ScreenType) -> float:
    return metrics.highest if screen_type == ScreenType.HIGHEST else metrics.lowest


def reference_dimension(config: EngineConfig, screen_type: ScreenType) -> float:
    return config.reference_height if screen_type == ScreenType.HIGHEST else config.reference_width


def safe_ratio(value: float, reference: float) -> float:
    if reference == 0:
        raise ZeroDivisionError(f"Reference dimension is zero; cannot scale {value}.")
    return value / reference


# --- Formulas ---

@register_strategy(ScalingStrategy.NONE)
def scale_none(x: float, ctx: StrategyContext) -> float:
    return x


@register_strategy(ScalingStrategy.DEFAULT)
def scale_default(x: float, ctx: StrategyContext) -> float:
    params = ctx.spec.params
    metrics = ctx.metrics
    highest = ctx.screen_type == ScreenType.HIGHEST

    if not params.apply_aspect_ratio:
        factors = ctx.factors.factors(metrics.width, metrics.height)
        return x * (factors.without_ar_highest if highest else factors.without_ar)

    if params.ar_sensitivity is not None:
        # Custom sensitivity is spec-specific and bypasses the per-screen memo
        return x * ctx.factors.factor_with_ar(ctx.dim, metrics.width, metrics.height, params.ar_sensitivity)

    factors = ctx.factors.factors(metrics.width, metrics.height)
    return x * (factors.with_ar_highest if highest else factors.with_ar_lowest)


@register_strategy(ScalingStrategy.PERCENTAGE)
def scale_percentage(x: float, ctx: StrategyContext) -> float:
    return x * ctx.ratio


@register_strategy(ScalingStrategy.BALANCED)
def scale_balanced(x: float, ctx: StrategyContext) -> float:
    """
    Linear below the transition point, logarithmic above it.

    Both branches equal `x * T / dim0` at `dim == T`, so the curve is continuous.
    """
    params = ctx.spec.params
    transition = params.transition_point if params.transition_point is not None else ctx.config.default_transition_point
    sensitivity = params.sensitivity if params.sensitivity is not None else ctx.config.default_sensitivity
    dim, dim0 = ctx.dim, ctx.dim0

    if dim < transition:
        return x * safe_ratio(dim, dim0)

    linear_part = safe_ratio(transition, dim0)
    excess = safe_ratio(dim - transition, dim0)
    return float(x * (linear_part + sensitivity * np.log1p(excess)))


@register_strategy(ScalingStrategy.LOGARITHMIC)
def scale_logarithmic(x: float, ctx: StrategyContext) -> float:
    params = ctx.spec.params
    sensitivity = params.sensitivity if params.sensitivity is not None else ctx.config.default_sensitivity
    return float(x * (1.0 + sensitivity * np.log(ctx.ratio)))


@register_strategy(ScalingStrategy.POWER)
def scale_power(x: float, ctx: StrategyContext) -> float:
    params = ctx.spec.params
    exponent = params.exponent if params.exponent is not None else ctx.config.default_power_exponent
    return float(x * np.power(ctx.ratio, exponent))


def default_fluid_range(x: float) -> FluidRange:
    return FluidRange(min_value=x * FLUID_DEFAULT_MIN_RATIO, max_value=x * FLUID_DEFAULT_MAX_RATIO)


@register_strategy(ScalingStrategy.FLUID)
def scale_fluid(x: float, ctx: StrategyContext) -> float:
    """Clamped linear interpolation between [min_value, max_value] over [min_width, max_width]."""
    dim = ctx.dim
    if ctx.spec.fluid is None:
        fluid_range = default_fluid_range(x)
    else:
        fluid_range = ctx.spec.fluid.resolve(dim, ctx.metrics.device_type)

    # np.interp clamps to the end values outside [min_width, max_width]
    return float(np.interp(
        dim,
        [fluid_range.min_width, fluid_range.max_width],
        [fluid_range.min_value, fluid_range.max_value],
    ))


@register_strategy(ScalingStrategy.INTERPOLATED)
def scale_interpolated(x: float, ctx: StrategyContext) -> float:
    linear = x * ctx.ratio
    return x + (linear - x) * INTERPOLATION_WEIGHT


@register_strategy(ScalingStrategy.DIAGONAL)
def scale_diagonal(x: float, ctx: StrategyContext) -> float:
    diagonal = np.hypot(ctx.metrics.width, ctx.metrics.height)
    reference = np.hypot(ctx.config.reference_width, ctx.config.reference_height)
    return float(x * safe_ratio(diagonal, reference))


@register_strategy(ScalingStrategy.PERIMETER)
def scale_perimeter(x: float, ctx: StrategyContext) -> float:
    perimeter = ctx.metrics.width + ctx.metrics.height
    reference = ctx.config.reference_width + ctx.config.reference_height
    return x * safe_ratio(perimeter, reference)


def _axis_ratios(ctx: StrategyContext) -> Tuple[float, float]:
    # Reference is portrait: compare short side with W0, long side with H0
    return (
        safe_ratio(ctx.metrics.lowest, ctx.config.reference_width),
        safe_ratio(ctx.metrics.highest, ctx.config.reference_height),
    )


@register_strategy(ScalingStrategy.FIT)
def scale_fit(x: float, ctx: StrategyContext) -> float:
    return x * min(_axis_ratios(ctx))


@register_strategy(ScalingStrategy.FILL)
def scale_fill(x: float, ctx: StrategyContext) -> float:
    return x * max(_axis_ratios(ctx))


@register_strategy(ScalingStrategy.AUTOSIZE)
def scale_autosize(x: float, ctx: StrategyContext) -> float:
    return autosize(x, ctx.spec.autosize, ctx.container_size)


def compute_strategy(strategy: ScalingStrategy, x: float, ctx: StrategyContext) -> float:
    """Look up and apply the formula registered for `strategy`."""
    formula = STRATEGY_FORMULAS.get(strategy)
    if formula is None:
        raise KeyError(f"No formula registered for strategy '{strategy}'")
    return formula(x, ctx)


def apply_constraints(value: float, constraints: Constraints, metrics: ScreenMetrics) -> float:
    """Clamp to [min, max] and cap at the dp size of `max_physical_mm` on this device."""
    if constraints.min_value is not None:
        value = max(value, constraints.min_value)
    if constraints.max_value is not None:
        value = min(value, constraints.max_value)
    if constraints.max_physical_mm is not None:
        cap = physical_mm_to_dp(constraints.max_physical_mm, metrics)
        if value > cap:
            logger.debug(f"Capping {value:.2f}dp to {constraints.max_physical_mm}mm ({cap:.2f}dp)")
            value = cap
    return value
