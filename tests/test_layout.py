import unittest

from responsivedimens.engine.calculator import ScalingEngine
from responsivedimens.engine.layout import (
    autosize,
    available_item_count_for_axis,
    calculate_available_item_count,
    find_best_preset,
)
from responsivedimens.model.metrics import ScreenMetrics
from responsivedimens.model.qualifiers import QualifierKind
from responsivedimens.model.spec import AutoSizeParams, ScalingSpec, ScalingStrategy


class TestItemCount(unittest.TestCase):
    def test_item_count(self):
        self.assertEqual(calculate_available_item_count(200, 80, 4), 2)

    def test_non_positive_item_size_is_zero(self):
        self.assertEqual(calculate_available_item_count(200, 0, 0), 0)
        self.assertEqual(calculate_available_item_count(200, -10, 2), 0)

    def test_axis_selection(self):
        container = (300, 500)
        self.assertEqual(available_item_count_for_axis(container, QualifierKind.SMALLEST_WIDTH, 100), 3)
        self.assertEqual(available_item_count_for_axis(container, QualifierKind.WIDTH, 100), 3)
        self.assertEqual(available_item_count_for_axis(container, QualifierKind.HEIGHT, 100), 5)

    def test_engine_shortcut(self):
        self.assertEqual(ScalingEngine.available_item_count(200, 80, 4), 2)


class TestAutosize(unittest.TestCase):
    def test_uniform_scales_with_container(self):
        self.assertAlmostEqual(autosize(10, AutoSizeParams(), (200, 300)), 20.0)

    def test_uniform_clamps_to_default_bounds(self):
        self.assertAlmostEqual(autosize(10, None, (1000, 1000)), 20.0)
        self.assertAlmostEqual(autosize(10, None, (10, 10)), 5.0)

    def test_uniform_explicit_bounds(self):
        params = AutoSizeParams(min_value=8, max_value=14)
        self.assertAlmostEqual(autosize(10, params, (200, 200)), 14.0)

    def test_without_container_returns_clamped_base(self):
        self.assertAlmostEqual(autosize(10, None, None), 10.0)
        self.assertAlmostEqual(autosize(10, AutoSizeParams(min_value=12, max_value=20), None), 12.0)

    def test_preset_picks_largest_fitting(self):
        presets = (24.0, 12.0, 16.0)
        params = AutoSizeParams(presets=presets)
        self.assertEqual(params.presets, (12.0, 16.0, 24.0))
        self.assertEqual(autosize(10, params, (20, 40)), 16.0)
        self.assertEqual(autosize(10, params, (16, 40)), 16.0)
        self.assertEqual(autosize(10, params, (100, 100)), 24.0)

    def test_preset_falls_back_to_smallest(self):
        self.assertEqual(find_best_preset((12.0, 16.0), 5), 12.0)

    def test_empty_presets_raise(self):
        with self.assertRaises(ValueError):
            find_best_preset((), 10)

    def test_engine_autosize_uses_container(self):
        engine = ScalingEngine()
        spec = ScalingSpec.builder(10).strategy(ScalingStrategy.AUTOSIZE).autosize(5, 30).build()
        metrics = ScreenMetrics(width=400, height=800)
        self.assertAlmostEqual(engine.calculate(spec, metrics, container_size=(150, 200)), 15.0)
        self.assertAlmostEqual(engine.calculate(spec, metrics, container_size=(250, 200)), 20.0)
        self.assertAlmostEqual(engine.calculate(spec, metrics), 10.0)


if __name__ == "__main__":
    unittest.main()
