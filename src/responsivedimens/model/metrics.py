"""
Screen Metrics (Host Input)
===========================
Immutable snapshot of the screen geometry the host UI framework reports at the
start of a layout pass.

Classes:
    UiModeType: Device UI mode (normal, television, car, ...).
    Orientation: Live device orientation.
    DeviceType: Coarse device class derived from smallest width and UI mode.
    ScreenMetrics: The snapshot itself.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from responsivedimens.config import DP_PER_INCH


class UiModeType(StrEnum):
    NORMAL = "normal"
    TELEVISION = "television"
    CAR = "car"
    WATCH = "watch"
    DESK = "desk"
    APPLIANCE = "appliance"
    VR_HEADSET = "vr_headset"


class Orientation(StrEnum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class DeviceType(StrEnum):
    PHONE_SMALL = "phone_small"
    PHONE_NORMAL = "phone_normal"
    PHONE_LARGE = "phone_large"
    TABLET_SMALL = "tablet_small"
    TABLET_LARGE = "tablet_large"
    TV = "tv"
    WATCH = "watch"
    CAR = "car"

    @staticmethod
    def classify(smallest_width: float, ui_mode: UiModeType) -> DeviceType:
        """Classify a device by UI mode first, then by smallest width in dp."""
        if ui_mode == UiModeType.TELEVISION:
            return DeviceType.TV
        if ui_mode == UiModeType.WATCH:
            return DeviceType.WATCH
        if ui_mode == UiModeType.CAR:
            return DeviceType.CAR

        if smallest_width < 360:
            return DeviceType.PHONE_SMALL
        if smallest_width < 600:
            return DeviceType.PHONE_NORMAL
        if smallest_width < 720:
            return DeviceType.PHONE_LARGE
        if smallest_width < 960:
            return DeviceType.TABLET_SMALL
        return DeviceType.TABLET_LARGE

    @property
    def is_tablet_or_larger(self) -> bool:
        return self in (DeviceType.TABLET_SMALL, DeviceType.TABLET_LARGE, DeviceType.TV)


@dataclass(frozen=True)
class ScreenMetrics:
    """
    Screen geometry in density-independent units (dp).

    Attributes:
        width: Current window width.
        height: Current window height.
        smallest_width: Smallest width regardless of orientation. Defaults to min(width, height).
        density: Pixels per dp (1.0 at 160 dpi).
        font_scale: User text scale preference.
        ui_mode: Device UI mode.
        orientation: Live orientation. Derived from width/height when omitted.
        xdpi: Measured physical dpi. Defaults to density * 160.
        is_multi_window: Whether the host runs in split-screen / multi-window mode.
    """
    width: float
    height: float
    smallest_width: Optional[float] = None
    density: float = 1.0
    font_scale: float = 1.0
    ui_mode: UiModeType = UiModeType.NORMAL
    orientation: Optional[Orientation] = None
    xdpi: Optional[float] = None
    is_multi_window: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Screen dimensions must be positive, got {self.width} x {self.height}.")
        if self.density <= 0:
            raise ValueError(f"Density must be positive, got {self.density}.")
        if self.font_scale <= 0:
            raise ValueError(f"Font scale must be positive, got {self.font_scale}.")

        # Frozen dataclass: fill derived defaults via object.__setattr__
        if self.smallest_width is None:
            object.__setattr__(self, "smallest_width", min(self.width, self.height))
        if self.orientation is None:
            orientation = Orientation.PORTRAIT if self.height > self.width else Orientation.LANDSCAPE
            object.__setattr__(self, "orientation", orientation)
        if self.xdpi is None:
            object.__setattr__(self, "xdpi", self.density * DP_PER_INCH)

    @property
    def lowest(self) -> float:
        return min(self.width, self.height)

    @property
    def highest(self) -> float:
        return max(self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        """Normalized aspect ratio (always >= 1)."""
        return self.highest / self.lowest

    @property
    def is_portrait(self) -> bool:
        return self.orientation == Orientation.PORTRAIT

    @property
    def device_type(self) -> DeviceType:
        return DeviceType.classify(self.smallest_width, self.ui_mode)
