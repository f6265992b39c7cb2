"""
Strategy Curves
===============
Samples scaling strategies across a range of screen sizes so designers can
compare how a base value grows from phones to TVs.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np

from responsivedimens.engine.calculator import ScalingEngine
from responsivedimens.model.metrics import ScreenMetrics
from responsivedimens.model.spec import ScalingSpec, ScalingStrategy

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

# AUTOSIZE depends on a container, not the screen
CURVE_STRATEGIES = tuple(s for s in ScalingStrategy if s != ScalingStrategy.AUTOSIZE)


def strategy_curve(
    engine: ScalingEngine,
    base_value: float,
    strategy: ScalingStrategy,
    widths: npt.NDArray[np.float64],
    aspect_ratio: float = 16 / 9,
) -> npt.NDArray[np.float64]:
    """
    Evaluate `strategy` for portrait screens of the given widths.

    Args:
        engine: Engine to evaluate with.
        base_value: Designer base value in dp.
        strategy: Strategy to sample.
        widths: Screen widths (short side) in dp.
        aspect_ratio: Long side / short side of every sampled screen.

    Returns:
        Array of values, one per width.
    """
    spec = ScalingSpec(base_value=base_value, strategy=strategy)
    values = np.empty_like(widths, dtype=np.float64)
    for i, width in enumerate(widths):
        metrics = ScreenMetrics(width=float(width), height=float(width * aspect_ratio))
        values[i] = engine.calculate(spec, metrics)
    return values


def strategy_table(
    engine: ScalingEngine,
    base_value: float,
    metrics: ScreenMetrics,
    strategies: Iterable[ScalingStrategy] = CURVE_STRATEGIES,
) -> Dict[ScalingStrategy, float]:
    """Value of `base_value` under each strategy on one screen."""
    return {
        strategy: engine.calculate(ScalingSpec(base_value=base_value, strategy=strategy), metrics)
        for strategy in strategies
    }


def plot_strategy_curves(
    base_value: float,
    engine: Optional[ScalingEngine] = None,
    strategies: Iterable[ScalingStrategy] = CURVE_STRATEGIES,
    min_width: float = 240.0,
    max_width: float = 1280.0,
    show: bool = True,
) -> plt.Figure:
    """
    Plot the selected strategies for widths in [min_width, max_width].
    """
    engine = engine if engine is not None else ScalingEngine()
    widths = np.linspace(min_width, max_width, 200)

    plt.rcParams["figure.constrained_layout.use"] = True
    fig = plt.figure(figsize=(9, 6))

    for strategy in strategies:
        plt.plot(widths, strategy_curve(engine, base_value, strategy, widths), lw=1.5, label=str(strategy))

    plt.axvline(engine.config.reference_width, color='k', linestyle='--', lw=0.8)

    plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
    plt.minorticks_on()
    plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

    plt.title(f"Scaling strategies for base value {base_value:g} dp")
    plt.xlabel("Screen width (dp)")
    plt.ylabel("Scaled value (dp)")
    plt.legend(loc="upper left", fontsize="small")

    logger.info(f"Plotted {len(fig.axes[0].lines) - 1} strategy curves")
    if show:
        plt.show()
    return fig
