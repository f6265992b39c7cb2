"""
Scaling Specification
=====================
The immutable description of a single responsive dimension: its base value,
the scaling strategy, strategy parameters, constraints, and screen overrides.

A spec is assembled with `ScalingSpecBuilder` at the call site, evaluated once
per layout pass, and discarded. Invalid combinations fail in `build()`.

Classes:
    ScalingStrategy, ScreenType, BaseOrientation, ElementType: Enumerations.
    StrategyParams, FluidRange, FluidParams, AutoSizeParams, Constraints: Parameter blocks.
    ScalingSpec: The frozen specification.
    ScalingSpecBuilder: Fluent builder producing a `ScalingSpec`.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from responsivedimens.config import DEFAULT_FLUID_MIN_WIDTH, DEFAULT_FLUID_MAX_WIDTH
from responsivedimens.model.metrics import DeviceType, UiModeType
from responsivedimens.model.qualifiers import (
    IntersectionEntry,
    QualifierEntry,
    QualifierKind,
    ScreenOverrides,
)

logger = logging.getLogger(__name__)


class ScalingStrategy(StrEnum):
    NONE = "none"
    DEFAULT = "default"
    PERCENTAGE = "percentage"
    BALANCED = "balanced"
    LOGARITHMIC = "logarithmic"
    POWER = "power"
    FLUID = "fluid"
    INTERPOLATED = "interpolated"
    DIAGONAL = "diagonal"
    PERIMETER = "perimeter"
    FIT = "fit"
    FILL = "fill"
    AUTOSIZE = "autosize"


class ScreenType(StrEnum):
    LOWEST = "lowest"
    HIGHEST = "highest"

    def inverted(self) -> ScreenType:
        return ScreenType.HIGHEST if self == ScreenType.LOWEST else ScreenType.LOWEST


class BaseOrientation(StrEnum):
    AUTO = "auto"
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class ElementType(StrEnum):
    GENERIC = "generic"
    BUTTON = "button"
    TEXT = "text"
    ICON = "icon"
    CONTAINER = "container"
    SPACING = "spacing"
    CARD = "card"
    DIALOG = "dialog"
    TOOLBAR = "toolbar"
    FAB = "fab"
    CHIP = "chip"
    LIST_ITEM = "list_item"
    IMAGE = "image"
    BADGE = "badge"
    DIVIDER = "divider"
    NAVIGATION = "navigation"
    INPUT = "input"
    HEADER = "header"


@dataclass(frozen=True)
class StrategyParams:
    """
    Tuning for the perceptual and DEFAULT strategies.
    `None` means "use the engine configuration default".
    """
    sensitivity: Optional[float] = None
    exponent: Optional[float] = None
    transition_point: Optional[float] = None
    apply_aspect_ratio: bool = True
    ar_sensitivity: Optional[float] = None

    def __post_init__(self) -> None:
        if self.transition_point is not None and self.transition_point <= 0:
            raise ValueError(f"Transition point must be positive, got {self.transition_point}.")


@dataclass(frozen=True)
class FluidRange:
    """Bounded linear interpolation from `min_value` at `min_width` to `max_value` at `max_width`."""
    min_value: float
    max_value: float
    min_width: float = DEFAULT_FLUID_MIN_WIDTH
    max_width: float = DEFAULT_FLUID_MAX_WIDTH

    def __post_init__(self) -> None:
        if self.min_width >= self.max_width:
            raise ValueError(
                f"Fluid min_width ({self.min_width}) must be smaller than max_width ({self.max_width})."
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_value": self.min_value,
            "max_value": self.max_value,
            "min_width": self.min_width,
            "max_width": self.max_width,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> FluidRange:
        return FluidRange(
            min_value=float(data["min_value"]),
            max_value=float(data["max_value"]),
            min_width=float(data.get("min_width", DEFAULT_FLUID_MIN_WIDTH)),
            max_width=float(data.get("max_width", DEFAULT_FLUID_MAX_WIDTH)),
        )


@dataclass(frozen=True)
class FluidParams:
    """
    Fluid range with optional overrides.

    Resolution order: width override (largest matching threshold) >
    device-type override > base range.
    """
    base: FluidRange
    device_overrides: Tuple[Tuple[DeviceType, FluidRange], ...] = field(default_factory=tuple)
    width_overrides: Tuple[Tuple[float, FluidRange], ...] = field(default_factory=tuple)

    def resolve(self, dimension: float, device_type: DeviceType) -> FluidRange:
        matching = [(t, r) for t, r in self.width_overrides if dimension >= t]
        if matching:
            return max(matching, key=lambda item: item[0])[1]

        for device, fluid_range in self.device_overrides:
            if device == device_type:
                return fluid_range

        return self.base

    def to_dict(self) -> Dict[str, Any]:
        """Base range fields at the top level, overrides as lists of flattened ranges."""
        d = self.base.to_dict()
        d["device_overrides"] = [
            {"device_type": device.value, **fluid_range.to_dict()}
            for device, fluid_range in self.device_overrides
        ]
        d["width_overrides"] = [
            {"threshold": threshold, **fluid_range.to_dict()}
            for threshold, fluid_range in self.width_overrides
        ]
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> FluidParams:
        return FluidParams(
            base=FluidRange.from_dict(data),
            device_overrides=tuple(
                (DeviceType(entry["device_type"]), FluidRange.from_dict(entry))
                for entry in data.get("device_overrides", [])
            ),
            width_overrides=tuple(
                (float(entry["threshold"]), FluidRange.from_dict(entry))
                for entry in data.get("width_overrides", [])
            ),
        )


@dataclass(frozen=True)
class AutoSizeParams:
    """
    Container-driven sizing. Either a [min, max] range (uniform mode) or a
    sorted list of preset sizes (preset mode).
    """
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    presets: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError(f"Autosize min ({self.min_value}) is greater than max ({self.max_value}).")
        object.__setattr__(self, "presets", tuple(sorted(float(p) for p in self.presets)))

    @property
    def uses_presets(self) -> bool:
        return bool(self.presets)


@dataclass(frozen=True)
class Constraints:
    """Clamps applied after the strategy formula."""
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    max_physical_mm: Optional[float] = None

    def __post_init__(self) -> None:
        if self.min_value is not None and self.max_value is not None and self.min_value > self.max_value:
            raise ValueError(f"Constraint min ({self.min_value}) is greater than max ({self.max_value}).")
        if self.max_physical_mm is not None and self.max_physical_mm <= 0:
            raise ValueError(f"max_physical_mm must be positive, got {self.max_physical_mm}.")

    @property
    def has_bounds(self) -> bool:
        return self.min_value is not None and self.max_value is not None


@dataclass(frozen=True)
class ScalingSpec:
    """
    Frozen description of one responsive dimension.

    `strategy=None` together with an `element_type` asks the engine to infer
    the strategy for the current device.
    """
    base_value: float
    strategy: Optional[ScalingStrategy] = ScalingStrategy.DEFAULT
    screen_type: ScreenType = ScreenType.LOWEST
    base_orientation: BaseOrientation = BaseOrientation.AUTO
    params: StrategyParams = field(default_factory=StrategyParams)
    fluid: Optional[FluidParams] = None
    autosize: Optional[AutoSizeParams] = None
    constraints: Constraints = field(default_factory=Constraints)
    overrides: ScreenOverrides = field(default_factory=ScreenOverrides)
    element_type: Optional[ElementType] = None
    ignore_multi_window: bool = False

    def params_fingerprint(self) -> Tuple:
        """Everything besides the resolved base value and screen that affects the result."""
        return (
            self.params,
            self.fluid,
            self.autosize,
            self.constraints,
            self.element_type,
            self.ignore_multi_window,
        )

    @staticmethod
    def builder(base_value: float) -> ScalingSpecBuilder:
        return ScalingSpecBuilder(base_value)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        d: Dict[str, Any] = {
            "base_value": self.base_value,
            "strategy": self.strategy.value if self.strategy else None,
            "screen_type": self.screen_type.value,
            "base_orientation": self.base_orientation.value,
            "params": {
                "sensitivity": self.params.sensitivity,
                "exponent": self.params.exponent,
                "transition_point": self.params.transition_point,
                "apply_aspect_ratio": self.params.apply_aspect_ratio,
                "ar_sensitivity": self.params.ar_sensitivity,
            },
            "constraints": {
                "min_value": self.constraints.min_value,
                "max_value": self.constraints.max_value,
                "max_physical_mm": self.constraints.max_physical_mm,
            },
            "overrides": self.overrides.to_dict(),
            "element_type": self.element_type.value if self.element_type else None,
            "ignore_multi_window": self.ignore_multi_window,
        }
        if self.fluid is not None:
            d["fluid"] = self.fluid.to_dict()
        if self.autosize is not None:
            d["autosize"] = {"min_value": self.autosize.min_value, "max_value": self.autosize.max_value,
                             "presets": list(self.autosize.presets)}
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ScalingSpec:
        strategy = data.get("strategy", ScalingStrategy.DEFAULT)
        element_type = data.get("element_type")
        fluid_data = data.get("fluid")
        autosize_data = data.get("autosize")
        return ScalingSpec(
            base_value=float(data["base_value"]),
            strategy=ScalingStrategy(strategy) if strategy is not None else None,
            screen_type=ScreenType(data.get("screen_type", ScreenType.LOWEST)),
            base_orientation=BaseOrientation(data.get("base_orientation", BaseOrientation.AUTO)),
            params=StrategyParams(**data.get("params", {})),
            fluid=FluidParams.from_dict(fluid_data) if fluid_data else None,
            autosize=AutoSizeParams(
                min_value=autosize_data.get("min_value"),
                max_value=autosize_data.get("max_value"),
                presets=tuple(autosize_data.get("presets", ())),
            ) if autosize_data else None,
            constraints=Constraints(**data.get("constraints", {})),
            overrides=ScreenOverrides.from_dict(data.get("overrides", {})),
            element_type=ElementType(element_type) if element_type else None,
            ignore_multi_window=bool(data.get("ignore_multi_window", False)),
        )


class ScalingSpecBuilder:
    """
    Fluent builder for `ScalingSpec`.

    Each override kind has its own explicitly named method, so no call is
    dispatched on argument types or counts.

    Example:
        spec = (ScalingSpec.builder(100)
                .strategy(ScalingStrategy.PERCENTAGE)
                .with_qualifier_override(QualifierKind.SMALLEST_WIDTH, 600, 150)
                .with_ui_mode_override(UiModeType.TELEVISION, 200)
                .max_value(180)
                .build())
    """

    def __init__(self, base_value: float) -> None:
        self._base_value = float(base_value)
        self._strategy: Optional[ScalingStrategy] = ScalingStrategy.DEFAULT
        self._screen_type = ScreenType.LOWEST
        self._base_orientation = BaseOrientation.AUTO
        self._params = StrategyParams()
        self._fluid_range: Optional[FluidRange] = None
        self._fluid_device: List[Tuple[DeviceType, FluidRange]] = []
        self._fluid_width: List[Tuple[float, FluidRange]] = []
        self._autosize: Optional[AutoSizeParams] = None
        self._min_value: Optional[float] = None
        self._max_value: Optional[float] = None
        self._max_physical_mm: Optional[float] = None
        self._intersection: List[IntersectionEntry] = []
        self._ui_mode: Dict[UiModeType, float] = {}
        self._qualifier: List[QualifierEntry] = []
        self._element_type: Optional[ElementType] = None
        self._ignore_multi_window = False

    # --- Strategy selection ---

    def strategy(self, strategy: ScalingStrategy) -> ScalingSpecBuilder:
        self._strategy = strategy
        return self

    def infer_strategy_for(self, element_type: ElementType) -> ScalingSpecBuilder:
        """Let the engine pick a strategy for this kind of element on the current device."""
        self._strategy = None
        self._element_type = element_type
        return self

    def screen_type(self, screen_type: ScreenType) -> ScalingSpecBuilder:
        self._screen_type = screen_type
        return self

    def base_orientation(self, orientation: BaseOrientation) -> ScalingSpecBuilder:
        self._base_orientation = orientation
        return self

    # --- Strategy parameters ---

    def sensitivity(self, value: float) -> ScalingSpecBuilder:
        self._params = replace(self._params, sensitivity=value)
        return self

    def exponent(self, value: float) -> ScalingSpecBuilder:
        self._params = replace(self._params, exponent=value)
        return self

    def transition_point(self, value: float) -> ScalingSpecBuilder:
        self._params = replace(self._params, transition_point=value)
        return self

    def aspect_ratio(self, enabled: bool = True, sensitivity: Optional[float] = None) -> ScalingSpecBuilder:
        self._params = replace(self._params, apply_aspect_ratio=enabled, ar_sensitivity=sensitivity)
        return self

    def fluid(
        self,
        min_value: float,
        max_value: float,
        min_width: float = DEFAULT_FLUID_MIN_WIDTH,
        max_width: float = DEFAULT_FLUID_MAX_WIDTH,
    ) -> ScalingSpecBuilder:
        self._fluid_range = FluidRange(min_value, max_value, min_width, max_width)
        return self

    def fluid_device_override(
        self,
        device_type: DeviceType,
        min_value: float,
        max_value: float,
        min_width: float = DEFAULT_FLUID_MIN_WIDTH,
        max_width: float = DEFAULT_FLUID_MAX_WIDTH,
    ) -> ScalingSpecBuilder:
        self._fluid_device.append((device_type, FluidRange(min_value, max_value, min_width, max_width)))
        return self

    def fluid_width_override(
        self,
        threshold: float,
        min_value: float,
        max_value: float,
        min_width: float = DEFAULT_FLUID_MIN_WIDTH,
        max_width: float = DEFAULT_FLUID_MAX_WIDTH,
    ) -> ScalingSpecBuilder:
        if threshold < 0:
            raise ValueError(f"Fluid width override threshold must be >= 0, got {threshold}.")
        self._fluid_width.append((float(threshold), FluidRange(min_value, max_value, min_width, max_width)))
        return self

    def autosize(self, min_value: Optional[float] = None, max_value: Optional[float] = None) -> ScalingSpecBuilder:
        self._autosize = AutoSizeParams(min_value=min_value, max_value=max_value)
        return self

    def autosize_presets(self, presets: Iterable[float]) -> ScalingSpecBuilder:
        presets = tuple(presets)
        if not presets:
            raise ValueError("Autosize preset list must not be empty.")
        self._autosize = AutoSizeParams(presets=presets)
        return self

    # --- Constraints ---

    def min_value(self, value: float) -> ScalingSpecBuilder:
        self._min_value = value
        return self

    def max_value(self, value: float) -> ScalingSpecBuilder:
        self._max_value = value
        return self

    def max_physical_mm(self, value: float) -> ScalingSpecBuilder:
        self._max_physical_mm = value
        return self

    def ignore_multi_window(self, ignore: bool = True) -> ScalingSpecBuilder:
        self._ignore_multi_window = ignore
        return self

    # --- Overrides ---

    def with_intersection_override(
        self,
        ui_mode: UiModeType,
        kind: QualifierKind,
        threshold: float,
        value: float,
    ) -> ScalingSpecBuilder:
        self._intersection.append(IntersectionEntry(ui_mode, QualifierEntry(kind, threshold, value)))
        return self

    def with_ui_mode_override(self, ui_mode: UiModeType, value: float) -> ScalingSpecBuilder:
        self._ui_mode[ui_mode] = value
        return self

    def with_qualifier_override(self, kind: QualifierKind, threshold: float, value: float) -> ScalingSpecBuilder:
        self._qualifier.append(QualifierEntry(kind, threshold, value))
        return self

    def build(self) -> ScalingSpec:
        fluid = None
        if self._fluid_range is not None:
            fluid = FluidParams(
                base=self._fluid_range,
                device_overrides=tuple(self._fluid_device),
                width_overrides=tuple(self._fluid_width),
            )
        elif self._fluid_device or self._fluid_width:
            raise ValueError("Fluid overrides require a base fluid range; call fluid() first.")

        if self._strategy is None and self._element_type is None:
            raise ValueError("Strategy inference requires an element type.")

        spec = ScalingSpec(
            base_value=self._base_value,
            strategy=self._strategy,
            screen_type=self._screen_type,
            base_orientation=self._base_orientation,
            params=self._params,
            fluid=fluid,
            autosize=self._autosize,
            constraints=Constraints(self._min_value, self._max_value, self._max_physical_mm),
            overrides=ScreenOverrides(
                intersection=tuple(self._intersection),
                ui_mode=tuple(self._ui_mode.items()),
                qualifier=tuple(self._qualifier),
            ),
            element_type=self._element_type,
            ignore_multi_window=self._ignore_multi_window,
        )
        logger.debug(f"Built spec: base={spec.base_value}, strategy={spec.strategy}")
        return spec
