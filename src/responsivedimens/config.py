"""
Engine Configuration & Constants
================================
This module serves as the central registry for the calibration constants used
by every scaling formula.

Why is this file needed?
------------------------
1. Calibration: All strategies are measured against a fixed reference screen
   (300 x 533 dp portrait phone). Changing the baseline in one place keeps the
   formulas consistent.
2. Explicit context: Instead of a process-wide singleton, an `EngineConfig`
   instance is passed to each `ScalingEngine`, so several independently
   configured engines can live side by side (and tests stay deterministic).
3. Persistence: A configuration can be loaded from a JSON file shipped with a
   design system.

Exports:
    REFERENCE_WIDTH (float): Reference short side in dp.
    REFERENCE_HEIGHT (float): Reference long side in dp.
    EngineConfig: Frozen configuration container.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

# Reference screen (portrait phone baseline)
REFERENCE_WIDTH: float = 300.0
REFERENCE_HEIGHT: float = 533.0

# Adjustment factors (DEFAULT strategy)
BASE_REF: float = 300.0
STEP: float = 30.0
BASE_INCREMENT: float = 0.10
AR_SENSITIVITY: float = 0.08
REFERENCE_AR: float = 1.78

# Perceptual strategies
DEFAULT_SENSITIVITY: float = 0.40
DEFAULT_POWER_EXPONENT: float = 0.75
DEFAULT_TRANSITION_POINT: float = 480.0
INTERPOLATION_WEIGHT: float = 0.5

# Fluid defaults
DEFAULT_FLUID_MIN_WIDTH: float = 320.0
DEFAULT_FLUID_MAX_WIDTH: float = 768.0
FLUID_DEFAULT_MIN_RATIO: float = 0.8
FLUID_DEFAULT_MAX_RATIO: float = 1.2

# Autosize
AUTOSIZE_REFERENCE: float = 100.0
AUTOSIZE_DEFAULT_MIN_RATIO: float = 0.5
AUTOSIZE_DEFAULT_MAX_RATIO: float = 2.0

# Physical units
MM_PER_INCH: float = 25.4
DP_PER_INCH: float = 160.0

# Memo sizes
FACTOR_MEMO_SIZE: int = 64


@dataclass(frozen=True)
class EngineConfig:
    """
    Calibration and cache settings for a `ScalingEngine`.

    All dimensional values are in density-independent units (dp).
    """
    reference_width: float = REFERENCE_WIDTH
    reference_height: float = REFERENCE_HEIGHT

    base_ref: float = BASE_REF
    step: float = STEP
    base_increment: float = BASE_INCREMENT
    ar_sensitivity: float = AR_SENSITIVITY
    reference_ar: float = REFERENCE_AR

    default_sensitivity: float = DEFAULT_SENSITIVITY
    default_power_exponent: float = DEFAULT_POWER_EXPONENT
    default_transition_point: float = DEFAULT_TRANSITION_POINT

    base_cache_enabled: bool = True
    final_cache_enabled: bool = True
    factor_memo_size: int = FACTOR_MEMO_SIZE

    def __post_init__(self) -> None:
        if self.reference_width <= 0 or self.reference_height <= 0:
            raise ValueError(
                f"Reference dimensions must be positive, got "
                f"{self.reference_width} x {self.reference_height}."
            )
        if self.step <= 0:
            raise ValueError(f"Adjustment step must be positive, got {self.step}.")
        if self.reference_ar <= 0:
            raise ValueError(f"Reference aspect ratio must be positive, got {self.reference_ar}.")
        if self.factor_memo_size < 1:
            raise ValueError(f"factor_memo_size must be at least 1, got {self.factor_memo_size}.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> EngineConfig:
        """Build a config from a (possibly partial) dict. Unknown keys are rejected."""
        known = {f.name for f in fields(EngineConfig)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return EngineConfig(**data)

    @staticmethod
    def from_json_file(path: Union[str, Path]) -> EngineConfig:
        logger.info(f"Loading engine configuration from: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return EngineConfig.from_dict(data)
