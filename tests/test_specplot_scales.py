from __future__ import annotations

import unittest

import numpy as np

from specplot.scales import (
    BandScale,
    LinearScale,
    LogScale,
    build_scale,
    format_log_tick_label,
    format_tick_label,
    nice_domain,
    nice_step,
)


class LinearScaleTests(unittest.TestCase):
    def test_maps_domain_onto_range(self) -> None:
        scale = LinearScale(0, 100, 0, 200)
        self.assertEqual(scale.map(50), 100)
        self.assertEqual(scale.map(0), 0)
        self.assertEqual(scale.map(100), 200)

    def test_map_is_monotonic_and_invert_round_trips(self) -> None:
        cases = [(0.0, 100.0, 0.0, 200.0), (-5.0, 5.0, 10.0, 30.0), (1e3, 2e6, 0.0, 1.0), (0.1, 0.2, 340.0, 0.0)]
        for a, b, p, q in cases:
            scale = LinearScale(a, b, p, q)
            xs = np.linspace(a, b, 25)
            mapped = np.asarray([scale.map(float(x)) for x in xs])
            diffs = np.diff(mapped)
            if q > p:
                self.assertTrue(np.all(diffs > 0))
            else:
                self.assertTrue(np.all(diffs < 0))
            for x in xs:
                self.assertAlmostEqual(scale.invert(scale.map(float(x))), float(x), delta=abs(b - a) * 1e-9)

    def test_degenerate_domain_maps_to_range_midpoint(self) -> None:
        scale = LinearScale(7, 7, 0, 300)
        self.assertEqual(scale.map(7), 150)
        self.assertEqual(scale.map(1000), 150)

    def test_degenerate_range_inverts_to_domain_midpoint(self) -> None:
        scale = LinearScale(0, 10, 42, 42)
        self.assertEqual(scale.map(3), 42)
        self.assertEqual(scale.invert(42), 5)

    def test_from_values_nice_and_zero(self) -> None:
        nice = LinearScale.from_values([3, 97], 0, 100)
        self.assertEqual(nice.domain, (0.0, 100.0))

        zeroed = LinearScale.from_values([20, 80], 0, 100, zero=True, nice=False)
        self.assertEqual(zeroed.domain, (0.0, 80.0))

        raw = LinearScale.from_values([20, None, "x", float("nan"), 80], 0, 100, nice=False)
        self.assertEqual(raw.domain, (20.0, 80.0))

    def test_from_values_without_numbers_uses_unit_domain(self) -> None:
        scale = LinearScale.from_values(["a", None], 0, 10, nice=False)
        self.assertEqual(scale.domain, (0.0, 1.0))

    def test_clamp_keeps_output_inside_range(self) -> None:
        loose = LinearScale(10, 20, 0, 100)
        clamped = LinearScale(10, 20, 0, 100, clamp=True)
        self.assertEqual(loose.map(0), -100)
        self.assertEqual(clamped.map(0), 0)
        self.assertEqual(clamped.map(30), 100)

    def test_temporal_scale_accepts_iso_strings(self) -> None:
        scale = LinearScale.from_values(["2024-01-01", "2024-01-11"], 0, 100, nice=False, temporal=True)
        self.assertAlmostEqual(scale.map("2024-01-06"), 50.0)

    def test_ticks_cover_domain_with_nice_step(self) -> None:
        scale = LinearScale(0, 100, 0, 200)
        ticks = list(scale.generate_ticks(5))
        self.assertEqual([t.value for t in ticks], [0, 20, 40, 60, 80, 100])
        self.assertEqual([t.label for t in ticks], ["0", "20", "40", "60", "80", "100"])
        for tick, expected in zip(ticks, [0, 40, 80, 120, 160, 200]):
            self.assertAlmostEqual(tick.position, expected)

    def test_ticks_never_leave_domain(self) -> None:
        for lo, hi in ((3.0, 97.0), (-0.37, 0.91), (12.5, 12.75), (-1234.0, 98765.0)):
            scale = LinearScale(lo, hi, 0, 1)
            ticks = list(scale.generate_ticks(5))
            self.assertGreater(len(ticks), 0)
            for tick in ticks:
                self.assertGreaterEqual(tick.value, lo)
                self.assertLessEqual(tick.value, hi)

    def test_ticks_are_restartable(self) -> None:
        scale = LinearScale(0, 1, 0, 10)
        first = list(scale.generate_ticks(4))
        second = list(scale.generate_ticks(4))
        self.assertEqual(first, second)

    def test_sub_resolution_span_yields_distinct_ticks(self) -> None:
        scale = LinearScale(97597522.77630593, 97597522.77630594, 0, 100)
        values = [t.value for t in scale.generate_ticks(5)]
        self.assertTrue(values)
        self.assertEqual(len(values), len(set(values)))

    def test_fractional_ticks_snap_near_zero(self) -> None:
        scale = LinearScale(-0.3, 0.3, 0, 1)
        values = [t.value for t in scale.generate_ticks(6)]
        self.assertIn(0.0, values)
        self.assertIn("0", [t.label for t in scale.generate_ticks(6)])


class NiceNumberTests(unittest.TestCase):
    def test_nice_step_brackets(self) -> None:
        self.assertEqual(nice_step(37), 50)
        self.assertEqual(nice_step(4), 5)
        self.assertEqual(nice_step(1), 1)
        self.assertEqual(nice_step(11), 20)
        self.assertEqual(nice_step(70), 100)
        self.assertAlmostEqual(nice_step(0.2), 0.2)
        self.assertEqual(nice_step(0), 1)

    def test_nice_domain_snaps_outward(self) -> None:
        self.assertEqual(nice_domain(0, 55), (0.0, 60.0))
        self.assertEqual(nice_domain(0, 130), (0.0, 150.0))
        lo, hi = nice_domain(0.3, 0.9)
        self.assertAlmostEqual(lo, 0.2)
        self.assertAlmostEqual(hi, 1.0)

    def test_tick_labels(self) -> None:
        self.assertEqual(format_tick_label(0), "0")
        self.assertEqual(format_tick_label(20), "20")
        self.assertEqual(format_tick_label(12.34), "12.3")
        self.assertEqual(format_tick_label(0.25), "0.25")
        self.assertEqual(format_tick_label(1000), "1K")
        self.assertEqual(format_tick_label(2500), "2.5K")
        self.assertEqual(format_tick_label(-2500), "-2.5K")
        self.assertEqual(format_tick_label(1_500_000), "1.5M")
        self.assertEqual(format_log_tick_label(0.001), "0.001")
        self.assertEqual(format_log_tick_label(100), "100")


class LogScaleTests(unittest.TestCase):
    def test_non_positive_values_are_dropped(self) -> None:
        scale = LogScale.from_values([0, -5, 10, 1000], 0, 200)
        self.assertEqual(scale.domain, (10.0, 1000.0))
        self.assertEqual(scale.map(100), 100)

    def test_map_clamps_below_floor(self) -> None:
        scale = LogScale(10, 1000, 0, 200)
        self.assertEqual(scale.map(1), 0)
        self.assertEqual(scale.map(-3), 0)

    def test_degenerate_domains(self) -> None:
        fixed = LogScale(0, 0, 0, 1)
        self.assertAlmostEqual(fixed.domain_min, 0.1)
        self.assertAlmostEqual(fixed.domain_max, 1.0)

        empty = LogScale.from_values([], 0, 1)
        self.assertEqual(empty.domain, (1.0, 10.0))

        inverted = LogScale(5, 2, 0, 1)
        self.assertEqual(inverted.domain, (5.0, 50.0))

    def test_invert_round_trips(self) -> None:
        scale = LogScale(1, 10000, 0, 400)
        for value in (1.0, 3.0, 42.0, 999.0, 10000.0):
            self.assertAlmostEqual(scale.invert(scale.map(value)), value, delta=value * 1e-9)

    def test_ticks_at_powers_of_base(self) -> None:
        scale = LogScale(1, 1000, 0, 300)
        ticks = list(scale.generate_ticks())
        self.assertEqual([t.value for t in ticks], [1, 10, 100, 1000])
        self.assertEqual([t.label for t in ticks], ["1", "10", "100", "1K"])
        for tick in ticks:
            self.assertGreaterEqual(tick.value, scale.domain_min)
            self.assertLessEqual(tick.value, scale.domain_max)

    def test_ticks_skip_powers_outside_domain(self) -> None:
        scale = LogScale(5, 500, 0, 1)
        self.assertEqual([t.value for t in scale.generate_ticks()], [10, 100])

    def test_custom_base(self) -> None:
        scale = LogScale(1, 8, 0, 3, base=2)
        self.assertEqual([t.value for t in scale.generate_ticks()], [1, 2, 4, 8])
        self.assertAlmostEqual(scale.map(2), 1.0)


class BandScaleTests(unittest.TestCase):
    def test_band_geometry(self) -> None:
        scale = BandScale(["A", "B", "C"], 0, 300, padding_inner=0.1, padding_outer=0.05)
        self.assertAlmostEqual(scale.outer_padding, 13.636363, places=5)
        self.assertAlmostEqual(scale.step, 90.909090, places=5)
        self.assertAlmostEqual(scale.bandwidth, 81.818181, places=5)
        self.assertAlmostEqual(scale.map("A"), 54.545454, places=5)
        self.assertAlmostEqual(scale.map_band_start("B"), 104.545454, places=5)

    def test_domain_is_distinct_in_first_seen_order(self) -> None:
        scale = BandScale(["B", "A", "B", 1, 1.0], 0, 100)
        self.assertEqual(scale.domain, ("B", "A", "1"))

    def test_unknown_category_maps_to_first_band(self) -> None:
        scale = BandScale(["A", "B"], 0, 100)
        self.assertEqual(scale.map("zzz"), scale.map("A"))
        self.assertEqual(scale.map_band_start(None), scale.map_band_start("A"))

    def test_single_category_fills_available_range(self) -> None:
        scale = BandScale(["only"], 0, 110, padding_outer=0.05)
        self.assertAlmostEqual(scale.bandwidth, 100.0)
        self.assertEqual(scale.step, scale.bandwidth)

    def test_empty_domain(self) -> None:
        scale = BandScale([], 0, 100)
        self.assertEqual(scale.bandwidth, 0)
        self.assertEqual(scale.invert(50), "")
        self.assertEqual(list(scale.generate_ticks()), [])

    def test_invert_clamps_index(self) -> None:
        scale = BandScale(["A", "B", "C"], 0, 300)
        self.assertEqual(scale.invert(scale.map("B")), "B")
        self.assertEqual(scale.invert(-500), "A")
        self.assertEqual(scale.invert(5000), "C")

    def test_ticks_per_category(self) -> None:
        scale = BandScale(["x", "y"], 0, 100)
        ticks = list(scale.generate_ticks())
        self.assertEqual([t.label for t in ticks], ["x", "y"])
        self.assertEqual([t.position for t in ticks], [scale.map("x"), scale.map("y")])


class BuildScaleTests(unittest.TestCase):
    def test_dispatches_on_kind(self) -> None:
        self.assertIsInstance(build_scale("linear", [1, 2], 0, 1), LinearScale)
        self.assertIsInstance(build_scale("log", [1, 2], 0, 1), LogScale)
        self.assertIsInstance(build_scale("band", ["a"], 0, 1), BandScale)

    def test_point_scale_has_zero_width_bands(self) -> None:
        scale = build_scale("point", ["a", "b", "c"], 0, 100)
        self.assertIsInstance(scale, BandScale)
        self.assertEqual(scale.bandwidth, 0)
        self.assertEqual(scale.map("b"), scale.map_band_start("b"))

    def test_unknown_kind_raises(self) -> None:
        with self.assertRaises(ValueError):
            build_scale("sqrt", [1], 0, 1)


if __name__ == "__main__":
    unittest.main()
