"""
Strategy Inference
==================
Chooses a scaling strategy for a spec that names an element type but no
explicit strategy.

Votes are collected from three sources and the heaviest vote wins (the first
vote is kept on ties):
    1. Element type preference.
    2. Configuration hints (fluid range, min+max bounds).
    3. Device class.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional

from responsivedimens.model.metrics import DeviceType
from responsivedimens.model.spec import ElementType, ScalingSpec, ScalingStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyWeight:
    strategy: ScalingStrategy
    weight: float
    reason: str


# (strategy, weight) per element type; entries with a tablet variant are handled in code
_ELEMENT_PREFERENCES = {
    ElementType.TEXT: (ScalingStrategy.FLUID, 0.8),
    ElementType.ICON: (ScalingStrategy.DEFAULT, 0.7),
    ElementType.CONTAINER: (ScalingStrategy.PERCENTAGE, 0.7),
    ElementType.CARD: (ScalingStrategy.PERCENTAGE, 0.7),
    ElementType.DIALOG: (ScalingStrategy.BALANCED, 0.7),
    ElementType.TOOLBAR: (ScalingStrategy.DEFAULT, 0.6),
    ElementType.FAB: (ScalingStrategy.DEFAULT, 0.7),
    ElementType.CHIP: (ScalingStrategy.FLUID, 0.6),
    ElementType.LIST_ITEM: (ScalingStrategy.PERCENTAGE, 0.6),
    ElementType.IMAGE: (ScalingStrategy.PERCENTAGE, 0.7),
    ElementType.BADGE: (ScalingStrategy.DEFAULT, 0.6),
    ElementType.DIVIDER: (ScalingStrategy.NONE, 0.7),
    ElementType.NAVIGATION: (ScalingStrategy.DEFAULT, 0.6),
    ElementType.INPUT: (ScalingStrategy.FLUID, 0.7),
    ElementType.HEADER: (ScalingStrategy.BALANCED, 0.6),
}

_DEVICE_PREFERENCES = {
    DeviceType.TABLET_LARGE: (ScalingStrategy.BALANCED, 0.5),
    DeviceType.TV: (ScalingStrategy.BALANCED, 0.5),
    DeviceType.TABLET_SMALL: (ScalingStrategy.BALANCED, 0.4),
    DeviceType.PHONE_LARGE: (ScalingStrategy.BALANCED, 0.3),
    DeviceType.PHONE_SMALL: (ScalingStrategy.DEFAULT, 0.4),
}


def element_weights(element_type: Optional[ElementType], device_type: DeviceType) -> List[StrategyWeight]:
    if element_type is None or element_type == ElementType.GENERIC:
        return []

    large = device_type.is_tablet_or_larger
    if element_type == ElementType.BUTTON:
        if large:
            return [StrategyWeight(ScalingStrategy.BALANCED, 0.7, "Button on tablet+")]
        return [StrategyWeight(ScalingStrategy.DEFAULT, 0.6, "Button on phone")]
    if element_type == ElementType.SPACING:
        if large:
            return [StrategyWeight(ScalingStrategy.BALANCED, 0.6, "Spacing on tablet+")]
        return [StrategyWeight(ScalingStrategy.DEFAULT, 0.5, "Spacing on phone")]

    strategy, weight = _ELEMENT_PREFERENCES[element_type]
    return [StrategyWeight(strategy, weight, f"{element_type} element")]


def strategy_weights(
    element_type: Optional[ElementType],
    device_type: DeviceType,
    has_fluid_config: bool,
    has_bounds: bool,
) -> List[StrategyWeight]:
    weights = element_weights(element_type, device_type)

    if has_fluid_config:
        weights.append(StrategyWeight(ScalingStrategy.FLUID, 0.9, "Has fluid config"))
    if has_bounds:
        weights.append(StrategyWeight(ScalingStrategy.FLUID, 0.6, "Has bounds"))

    strategy, weight = _DEVICE_PREFERENCES.get(device_type, (ScalingStrategy.DEFAULT, 0.3))
    weights.append(StrategyWeight(strategy, weight, f"Device {device_type}"))
    return weights


def infer_strategy(spec: ScalingSpec, device_type: DeviceType) -> ScalingStrategy:
    """Return the explicit strategy of `spec`, or infer one from its element type and configuration."""
    if spec.strategy is not None:
        return spec.strategy

    weights = strategy_weights(
        spec.element_type,
        device_type,
        has_fluid_config=spec.fluid is not None,
        has_bounds=spec.constraints.has_bounds,
    )
    best = weights[0]
    for candidate in weights[1:]:
        if candidate.weight > best.weight:
            best = candidate
    logger.debug(f"Inferred {best.strategy} for {spec.element_type} on {device_type} ({best.reason})")
    return best.strategy
