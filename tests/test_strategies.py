import math
import unittest
from unittest.mock import patch

from responsivedimens.config import EngineConfig
from responsivedimens.engine.calculator import ScalingEngine
from responsivedimens.engine.strategies import (
    STRATEGY_FORMULAS,
    resolve_screen_type,
    safe_ratio,
)
from responsivedimens.model.metrics import DeviceType, Orientation, ScreenMetrics
from responsivedimens.model.spec import BaseOrientation, ScalingSpec, ScalingStrategy, ScreenType

REFERENCE = ScreenMetrics(width=300, height=533)


def spec_for(strategy, base=10.0, **kwargs):
    return ScalingSpec(base_value=base, strategy=strategy, **kwargs)


class TestIdentities(unittest.TestCase):
    def setUp(self):
        self.engine = ScalingEngine()

    def test_none_returns_base_everywhere(self):
        for width, height in [(240, 320), (300, 533), (411, 891), (1080, 1920), (1920, 1080)]:
            metrics = ScreenMetrics(width=width, height=height)
            self.assertEqual(self.engine.calculate(spec_for(ScalingStrategy.NONE, 17), metrics), 17)

    def test_percentage_equals_base_at_reference(self):
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.PERCENTAGE), REFERENCE), 10.0)

    def test_default_equals_base_at_reference(self):
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.DEFAULT), REFERENCE), 10.0)

    def test_percentage_highest_uses_reference_height(self):
        spec = spec_for(ScalingStrategy.PERCENTAGE, screen_type=ScreenType.HIGHEST)
        self.assertAlmostEqual(self.engine.calculate(spec, REFERENCE), 10.0)

    def test_diagonal_and_perimeter_equal_base_at_reference(self):
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.DIAGONAL), REFERENCE), 10.0)
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.PERIMETER), REFERENCE), 10.0)


class TestFormulas(unittest.TestCase):
    def setUp(self):
        self.engine = ScalingEngine()
        self.metrics = ScreenMetrics(width=600, height=1000)

    def test_percentage(self):
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.PERCENTAGE), self.metrics), 20.0)

    def test_logarithmic(self):
        expected = 10 * (1 + 0.4 * math.log(2))
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.LOGARITHMIC), self.metrics), expected)

    def test_power(self):
        expected = 10 * 2 ** 0.75
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.POWER), self.metrics), expected)

    def test_power_custom_exponent(self):
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.POWER).exponent(1.0).build()
        self.assertAlmostEqual(self.engine.calculate(spec, self.metrics), 20.0)

    def test_interpolated_is_halfway_to_linear(self):
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.INTERPOLATED), self.metrics), 15.0)

    def test_diagonal(self):
        expected = 10 * math.hypot(600, 1000) / math.hypot(300, 533)
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.DIAGONAL), self.metrics), expected)

    def test_perimeter(self):
        expected = 10 * 1600 / 833
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.PERIMETER), self.metrics), expected)

    def test_default_on_common_phone(self):
        metrics = ScreenMetrics(width=360, height=640)
        adjustment = (360 - 300) / 30
        ar = 0.08 * math.log((640 / 360) / 1.78)
        expected = 10 * (1 + adjustment * (0.10 + ar))
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.DEFAULT), metrics), expected)

    def test_default_without_aspect_ratio(self):
        metrics = ScreenMetrics(width=360, height=640)
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.DEFAULT).aspect_ratio(False).build()
        self.assertAlmostEqual(self.engine.calculate(spec, metrics), 10 * (1 + 2 * 0.10))

    def test_default_custom_ar_sensitivity(self):
        metrics = ScreenMetrics(width=360, height=900)
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.DEFAULT).aspect_ratio(True, 0.2).build()
        expected = 10 * (1 + 2 * (0.10 + 0.2 * math.log((900 / 360) / 1.78)))
        self.assertAlmostEqual(self.engine.calculate(spec, metrics), expected)

    def test_default_below_reference_is_not_shrunk(self):
        metrics = ScreenMetrics(width=240, height=320)
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.DEFAULT), metrics), 10.0)


class TestBalanced(unittest.TestCase):
    def setUp(self):
        self.engine = ScalingEngine()

    def test_linear_below_transition(self):
        metrics = ScreenMetrics(width=450, height=900)
        self.assertAlmostEqual(self.engine.calculate(spec_for(ScalingStrategy.BALANCED), metrics), 15.0)

    def test_continuous_at_transition_point(self):
        below = self.engine.calculate(spec_for(ScalingStrategy.BALANCED), ScreenMetrics(width=479.999, height=1000))
        above = self.engine.calculate(spec_for(ScalingStrategy.BALANCED), ScreenMetrics(width=480.001, height=1000))
        self.assertAlmostEqual(below, above, places=3)

    def test_continuous_at_custom_transition_point(self):
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.BALANCED).transition_point(600).sensitivity(0.6).build()
        below = self.engine.calculate(spec, ScreenMetrics(width=599.999, height=1200))
        above = self.engine.calculate(spec, ScreenMetrics(width=600.001, height=1200))
        self.assertAlmostEqual(below, above, places=3)

    def test_grows_slower_than_linear_on_tablets(self):
        metrics = ScreenMetrics(width=900, height=1400)
        balanced = self.engine.calculate(spec_for(ScalingStrategy.BALANCED), metrics)
        linear = self.engine.calculate(spec_for(ScalingStrategy.PERCENTAGE), metrics)
        self.assertLess(balanced, linear)
        expected = 10 * (480 / 300 + 0.4 * math.log(1 + 420 / 300))
        self.assertAlmostEqual(balanced, expected)


class TestFitFill(unittest.TestCase):
    def test_fit_never_exceeds_fill(self):
        engine = ScalingEngine()
        for width in (200, 300, 411, 720, 1080, 2560):
            for height in (300, 533, 900, 1920):
                metrics = ScreenMetrics(width=width, height=height)
                fit = engine.calculate(spec_for(ScalingStrategy.FIT), metrics)
                fill = engine.calculate(spec_for(ScalingStrategy.FILL), metrics)
                self.assertLessEqual(fit, fill)

    def test_fit_does_not_flip_with_rotation(self):
        engine = ScalingEngine()
        portrait = engine.calculate(spec_for(ScalingStrategy.FIT), ScreenMetrics(width=600, height=800))
        landscape = engine.calculate(spec_for(ScalingStrategy.FIT), ScreenMetrics(width=800, height=600))
        self.assertAlmostEqual(portrait, landscape)
        self.assertAlmostEqual(portrait, 10 * 800 / 533)


class TestFluid(unittest.TestCase):
    def setUp(self):
        self.engine = ScalingEngine()
        self.spec = ScalingSpec.builder(16).strategy(ScalingStrategy.FLUID).fluid(16, 24, 320, 768).build()

    def test_lower_bound(self):
        self.assertAlmostEqual(self.engine.calculate(self.spec, ScreenMetrics(width=320, height=640)), 16.0)

    def test_upper_bound(self):
        self.assertAlmostEqual(self.engine.calculate(self.spec, ScreenMetrics(width=768, height=1024)), 24.0)

    def test_midpoint(self):
        self.assertAlmostEqual(self.engine.calculate(self.spec, ScreenMetrics(width=544, height=900)), 20.0)

    def test_clamped_outside_range(self):
        self.assertAlmostEqual(self.engine.calculate(self.spec, ScreenMetrics(width=240, height=320)), 16.0)
        self.assertAlmostEqual(self.engine.calculate(self.spec, ScreenMetrics(width=1200, height=1900)), 24.0)

    def test_default_range_without_fluid_params(self):
        spec = spec_for(ScalingStrategy.FLUID, base=20)
        self.assertAlmostEqual(self.engine.calculate(spec, ScreenMetrics(width=320, height=640)), 16.0)
        self.assertAlmostEqual(self.engine.calculate(spec, ScreenMetrics(width=800, height=1280)), 24.0)

    def test_width_override_beats_device_override(self):
        spec = (ScalingSpec.builder(16)
                .strategy(ScalingStrategy.FLUID)
                .fluid(16, 24)
                .fluid_device_override(DeviceType.TABLET_LARGE, 30, 40)
                .fluid_width_override(900, 50, 60)
                .build())
        tablet = ScreenMetrics(width=1000, height=1400)
        self.assertEqual(tablet.device_type, DeviceType.TABLET_LARGE)
        self.assertAlmostEqual(self.engine.calculate(spec, tablet), 60.0)

    def test_device_override(self):
        spec = (ScalingSpec.builder(16)
                .strategy(ScalingStrategy.FLUID)
                .fluid(16, 24)
                .fluid_device_override(DeviceType.TABLET_SMALL, 30, 40)
                .build())
        self.assertAlmostEqual(self.engine.calculate(spec, ScreenMetrics(width=800, height=1280)), 40.0)
        self.assertAlmostEqual(self.engine.calculate(spec, ScreenMetrics(width=320, height=640)), 16.0)


class TestScreenType(unittest.TestCase):
    def test_auto_never_inverts(self):
        self.assertEqual(
            resolve_screen_type(ScreenType.LOWEST, BaseOrientation.AUTO, Orientation.LANDSCAPE),
            ScreenType.LOWEST,
        )

    def test_portrait_design_on_landscape_device_inverts(self):
        self.assertEqual(
            resolve_screen_type(ScreenType.LOWEST, BaseOrientation.PORTRAIT, Orientation.LANDSCAPE),
            ScreenType.HIGHEST,
        )

    def test_landscape_design_on_portrait_device_inverts(self):
        self.assertEqual(
            resolve_screen_type(ScreenType.HIGHEST, BaseOrientation.LANDSCAPE, Orientation.PORTRAIT),
            ScreenType.LOWEST,
        )

    def test_matching_orientation_keeps_screen_type(self):
        self.assertEqual(
            resolve_screen_type(ScreenType.LOWEST, BaseOrientation.PORTRAIT, Orientation.PORTRAIT),
            ScreenType.LOWEST,
        )

    def test_inversion_changes_result(self):
        engine = ScalingEngine()
        spec = (ScalingSpec.builder(100)
                .strategy(ScalingStrategy.PERCENTAGE)
                .base_orientation(BaseOrientation.PORTRAIT)
                .build())
        metrics = ScreenMetrics(width=800, height=400)
        self.assertAlmostEqual(engine.calculate(spec, metrics), 100 * 800 / 533)


class TestConstraints(unittest.TestCase):
    def setUp(self):
        self.engine = ScalingEngine()
        self.metrics = ScreenMetrics(width=600, height=1000, density=2.0)

    def test_max_clamp(self):
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.PERCENTAGE).max_value(15).build()
        self.assertAlmostEqual(self.engine.calculate(spec, self.metrics), 15.0)

    def test_min_clamp(self):
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.PERCENTAGE).min_value(12).build()
        self.assertAlmostEqual(self.engine.calculate(spec, ScreenMetrics(width=240, height=400)), 12.0)

    def test_max_physical_mm(self):
        spec = ScalingSpec.builder(100).strategy(ScalingStrategy.PERCENTAGE).max_physical_mm(10).build()
        expected = 10 / 25.4 * 320 / 2.0
        self.assertAlmostEqual(self.engine.calculate(spec, self.metrics), expected)

    def test_max_physical_mm_uses_measured_dpi(self):
        metrics = ScreenMetrics(width=600, height=1000, density=2.0, xdpi=400)
        spec = ScalingSpec.builder(100).strategy(ScalingStrategy.PERCENTAGE).max_physical_mm(10).build()
        self.assertAlmostEqual(self.engine.calculate(spec, metrics), 10 / 25.4 * 400 / 2.0)


class TestMultiWindow(unittest.TestCase):
    def test_ignore_multi_window_returns_base(self):
        engine = ScalingEngine()
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.PERCENTAGE).ignore_multi_window().build()
        metrics = ScreenMetrics(width=600, height=1000, is_multi_window=True)
        self.assertEqual(engine.calculate(spec, metrics), 10)

    def test_multi_window_without_opt_in_scales(self):
        engine = ScalingEngine()
        spec = spec_for(ScalingStrategy.PERCENTAGE)
        metrics = ScreenMetrics(width=600, height=1000, is_multi_window=True)
        self.assertAlmostEqual(engine.calculate(spec, metrics), 20.0)

    def test_constraints_still_apply(self):
        engine = ScalingEngine()
        spec = (ScalingSpec.builder(10)
                .strategy(ScalingStrategy.PERCENTAGE)
                .ignore_multi_window()
                .min_value(12)
                .build())
        metrics = ScreenMetrics(width=600, height=1000, is_multi_window=True)
        self.assertEqual(engine.calculate(spec, metrics), 12)


class TestBrokenReference(unittest.TestCase):
    def test_zero_reference_raises(self):
        with self.assertRaises(ZeroDivisionError):
            safe_ratio(10, 0)

    def test_config_rejects_zero_reference(self):
        with self.assertRaises(ValueError):
            EngineConfig(reference_width=0)


class TestCaching(unittest.TestCase):
    def test_formula_runs_once_per_screen(self):
        calls = []
        original = STRATEGY_FORMULAS[ScalingStrategy.PERCENTAGE]

        def counting(x, ctx):
            calls.append(x)
            return original(x, ctx)

        engine = ScalingEngine()
        spec = spec_for(ScalingStrategy.PERCENTAGE)
        with patch.dict(STRATEGY_FORMULAS, {ScalingStrategy.PERCENTAGE: counting}):
            first = engine.calculate(spec, ScreenMetrics(width=600, height=1000))
            second = engine.calculate(spec, ScreenMetrics(width=600, height=1000))
            self.assertEqual(first, second)
            self.assertEqual(len(calls), 1)

            changed = engine.calculate(spec, ScreenMetrics(width=900, height=1000))
            self.assertEqual(len(calls), 2)
            self.assertAlmostEqual(changed, 30.0)

    def test_disabled_final_cache_recomputes(self):
        calls = []
        original = STRATEGY_FORMULAS[ScalingStrategy.POWER]

        def counting(x, ctx):
            calls.append(x)
            return original(x, ctx)

        engine = ScalingEngine()
        engine.set_cache_enabled(final=False)
        spec = spec_for(ScalingStrategy.POWER)
        with patch.dict(STRATEGY_FORMULAS, {ScalingStrategy.POWER: counting}):
            engine.calculate(spec, ScreenMetrics(width=600, height=1000))
            engine.calculate(spec, ScreenMetrics(width=600, height=1000))
        self.assertEqual(len(calls), 2)


if __name__ == "__main__":
    unittest.main()
