import unittest
import math

import numpy as np

from second_order.dynamics.quat_math import (
    IDENTITY, dot4, fix_quat_hemisphere, neg4, quat_exp, quat_log, quat_normalize
)
from second_order.dynamics.quaternion_system import SecondOrderSystemQuaternion
from second_order.dynamics.systems import SecondOrderSystemFloat
from second_order.tests.quat_helpers import angle_between, quat_angle, quat_from_axis_angle

DT = 1.0 / 60.0
Z_AXIS = [0.0, 0.0, 1.0]


def z_angle(q):
    """Signed rotation angle of a quaternion known to rotate about +Z."""
    return 2.0 * math.atan2(q[3], q[0])


class TestQuatMath(unittest.TestCase):
    """Quaternion helpers backing the rotation filter."""

    def test_log_of_quarter_turn(self):
        q = quat_from_axis_angle(Z_AXIS, math.pi / 2)
        np.testing.assert_allclose(quat_log(q), [0.0, 0.0, math.pi / 2], atol=1e-12)

    def test_log_takes_shortest_arc(self):
        q = quat_from_axis_angle(Z_AXIS, 0.3)
        np.testing.assert_allclose(quat_log(neg4(q)), quat_log(q), atol=1e-12)

    def test_exp_inverts_log(self):
        q = quat_normalize([0.8, 0.1, -0.4, 0.3])
        np.testing.assert_allclose(quat_exp(quat_log(q)), q, atol=1e-12)

    def test_tiny_angles_are_not_dropped(self):
        v = [1e-8, 0.0, 0.0]
        np.testing.assert_allclose(quat_log(quat_exp(v)), v, rtol=1e-6, atol=0)

    def test_exp_of_zero_is_identity(self):
        self.assertEqual(quat_exp([0.0, 0.0, 0.0]), IDENTITY)

    def test_normalize_degenerate_returns_identity(self):
        self.assertEqual(quat_normalize([0.0, 0.0, 0.0, 0.0]), IDENTITY)

    def test_fix_hemisphere(self):
        q = quat_from_axis_angle([1.0, 1.0, 0.0], 1.0)
        flipped = fix_quat_hemisphere(neg4(q), IDENTITY)
        self.assertGreaterEqual(dot4(flipped, IDENTITY), 0.0)
        np.testing.assert_allclose(flipped, q, atol=1e-15)


class TestQuaternionSystem(unittest.TestCase):
    """Rotation filter integrating in the tangent space."""

    def test_construction_identity_state(self):
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        self.assertEqual(system.output, IDENTITY)
        self.assertEqual(system.previous_input, IDENTITY)
        np.testing.assert_array_equal(system.output_rate, np.zeros(3))

    def test_converges_to_target(self):
        target = quat_from_axis_angle([1.0, 2.0, -0.5], 2.0)
        system = SecondOrderSystemQuaternion(1.0, 1.0, 0.0)
        system.update_initial_values(IDENTITY, IDENTITY, [0.0, 0.0, 0.0])
        for _ in range(600):
            out = system.update(target, DT)
        self.assertLess(angle_between(target, out), 1e-3,
                        f"Rotation should converge, remaining angle {angle_between(target, out)}")
        self.assertAlmostEqual(dot4(out, out), 1.0, places=12)

    def test_single_axis_matches_scalar_filter(self):
        """Rotations about one axis commute, so the angle follows the scalar filter."""
        rotation = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        scalar = SecondOrderSystemFloat(1.0, 0.5, 2.0)
        target_angle = 1.0
        target = quat_from_axis_angle(Z_AXIS, target_angle)

        for tick in range(300):
            out = rotation.update(target, DT)
            expected = scalar.update(target_angle, DT)
            self.assertAlmostEqual(z_angle(out), expected, places=9,
                                   msg=f"Angle mismatch at tick {tick}")

    def test_double_cover_invariance(self):
        """Feeding q or -q every tick yields identical outputs."""
        a = SecondOrderSystemQuaternion(1.2, 0.6, 1.5)
        b = SecondOrderSystemQuaternion(1.2, 0.6, 1.5)

        for tick in range(240):
            t = tick * DT
            q = quat_from_axis_angle([math.sin(t), 1.0, math.cos(2.0 * t)], 3.0 * math.sin(0.7 * t) + 0.4 * t)
            out_a = a.update(q, DT)
            out_b = b.update(neg4(q), DT)
            self.assertEqual(out_a, out_b, f"Outputs diverged at tick {tick}")

    def test_no_long_way_around(self):
        """A target on the far hemisphere is reached along the short arc."""
        target = neg4(quat_from_axis_angle(Z_AXIS, 0.2))
        system = SecondOrderSystemQuaternion(1.0, 1.0, 0.0)
        for tick in range(600):
            out = system.update(target, DT)
            self.assertLessEqual(quat_angle(out), 0.2 + 1e-9,
                                 f"Output swung past the target at tick {tick}: {quat_angle(out)}")
        self.assertLess(angle_between(target, out), 1e-4)

    def test_output_components_are_plain_floats(self):
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        target = quat_from_axis_angle([0.2, 1.0, 0.0], 1.0)
        for tick in range(5):
            out = system.update(target, DT)
            self.assertTrue(all(type(c) is float for c in out),
                            f"Non-float component at tick {tick}: {[type(c).__name__ for c in out]}")

    def test_seeded_at_target_has_no_startup_transient(self):
        target = quat_from_axis_angle([0.0, 1.0, 0.0], 0.75)
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        system.update_initial_values(target, target)
        np.testing.assert_allclose(system.update(target, DT), target, atol=1e-12)

    def test_large_delta_stays_finite(self):
        target = quat_from_axis_angle([0.3, 0.2, 1.0], 2.5)
        system = SecondOrderSystemQuaternion(1.0, 1.0, 0.0)
        for tick in range(200):
            out = system.update(target, 10.0)
            self.assertTrue(all(math.isfinite(c) for c in out), f"Non-finite rotation at tick {tick}")
            self.assertAlmostEqual(dot4(out, out), 1.0, places=9)
            self.assertTrue(np.all(np.isfinite(system.output_rate)))

    def test_drifted_input_is_tolerated(self):
        """Slightly non-unit targets do not corrupt the output."""
        target = [c * 1.001 for c in quat_from_axis_angle([1.0, 0.0, 0.0], 1.0)]
        system = SecondOrderSystemQuaternion(2.0, 1.0, 0.0)
        for _ in range(600):
            out = system.update(target, DT)
        self.assertAlmostEqual(dot4(out, out), 1.0, places=12)
        self.assertLess(angle_between(quat_normalize(target), out), 1e-3)

    def test_zero_delta_is_noop(self):
        start = quat_from_axis_angle(Z_AXIS, 0.5)
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        system.update_initial_values(start, start, [0.0, 0.0, 1.0])
        self.assertEqual(system.update(IDENTITY, 0.0), start)
        np.testing.assert_array_equal(system.output_rate, [0.0, 0.0, 1.0])

    def test_setters_keep_running_state(self):
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        target = quat_from_axis_angle(Z_AXIS, 1.0)
        for _ in range(10):
            system.update(target, DT)
        before = (system.output, system.output_rate.tolist())
        system.update_period(3.0)
        system.update_damping(0.9)
        system.update_response(0.0)
        self.assertEqual((system.output, system.output_rate.tolist()), before)
        self.assertEqual((system.period, system.damping, system.response), (3.0, 0.9, 0.0))

    def test_rejects_malformed_values(self):
        system = SecondOrderSystemQuaternion(1.0, 0.5, 2.0)
        with self.assertRaises(ValueError):
            system.update([1.0, 0.0, 0.0], DT)
        with self.assertRaises(ValueError):
            system.update_initial_values(IDENTITY, IDENTITY, [0.0, 0.0, 0.0, 1.0])


if __name__ == "__main__":
    unittest.main()
