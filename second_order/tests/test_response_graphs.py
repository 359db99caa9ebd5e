import unittest
import os
import tempfile

import numpy as np

from second_order import response_graphs
from second_order.profiles import CRITICAL_PROFILE, DynamicsProfile
from second_order.response_graphs import response_summary, simulate_step_response


class TestStepResponse(unittest.TestCase):
    """Step-response simulation used by the graph tool."""

    def test_shapes_and_start(self):
        times, outputs = simulate_step_response(DynamicsProfile(), ticks=120)
        self.assertEqual(times.shape, (121,))
        self.assertEqual(outputs.shape, (121,))
        self.assertEqual(outputs[0], 0.0)
        self.assertAlmostEqual(times[-1], 2.0, places=12)

    def test_default_profile_summary(self):
        times, outputs = simulate_step_response(DynamicsProfile())
        summary = response_summary(times, outputs, 1.0)
        self.assertGreater(summary["overshoot"], 0.1)
        self.assertLess(summary["overshoot"], 0.35)
        self.assertAlmostEqual(summary["settled_value"], 1.0, places=3)
        self.assertIsNotNone(summary["settling_time"])
        self.assertLess(summary["settling_time"], 5.0)

    def test_critical_profile_has_no_overshoot(self):
        times, outputs = simulate_step_response(CRITICAL_PROFILE, ticks=600)
        summary = response_summary(times, outputs, 1.0)
        self.assertEqual(summary["overshoot"], 0.0)

    def test_unsettled_response(self):
        times, outputs = simulate_step_response(DynamicsProfile(period=0.1, damping=0.05), ticks=10)
        self.assertIsNone(response_summary(times, outputs, 1.0)["settling_time"])

    def test_rejects_bad_arguments(self):
        with self.assertRaises(ValueError):
            simulate_step_response(DynamicsProfile(), dt=0.0)
        with self.assertRaises(ValueError):
            response_summary(np.zeros(3), np.zeros(3), target=0.0, start=0.0)


@unittest.skipIf(response_graphs.plt is None, "matplotlib not installed")
class TestPlotStepResponses(unittest.TestCase):

    def test_writes_png_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            paths = response_graphs.plot_step_responses(
                {"default": DynamicsProfile(), "critical/fast": CRITICAL_PROFILE}, output_dir=tmp, ticks=60
            )
            self.assertEqual(len(paths), 3)
            for path in paths:
                self.assertTrue(os.path.isfile(path), f"missing {path}")
            self.assertIn("step_response_critical_fast.png", [os.path.basename(p) for p in paths])

    def test_empty_input(self):
        self.assertEqual(response_graphs.plot_step_responses({}), [])


if __name__ == "__main__":
    unittest.main()
