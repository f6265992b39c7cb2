"""
responsivedimens
Device-responsive UI dimension calculation: qualifier overrides plus a family
of scaling strategies, evaluated against host-supplied screen metrics.
"""
from responsivedimens.config import EngineConfig
from responsivedimens.engine.calculator import ScalingEngine
from responsivedimens.engine.units import DimensionUnit
from responsivedimens.model.metrics import DeviceType, Orientation, ScreenMetrics, UiModeType
from responsivedimens.model.qualifiers import QualifierKind
from responsivedimens.model.spec import (
    BaseOrientation,
    ElementType,
    ScalingSpec,
    ScalingStrategy,
    ScreenType,
)

__version__ = "0.1.0"

__all__ = [
    "BaseOrientation",
    "DeviceType",
    "DimensionUnit",
    "ElementType",
    "EngineConfig",
    "Orientation",
    "QualifierKind",
    "ScalingEngine",
    "ScalingSpec",
    "ScalingStrategy",
    "ScreenMetrics",
    "ScreenType",
    "UiModeType",
]
