"""
Second-order dynamics for 3D rotations.

Rotations cannot be subtracted or scaled directly, so differences are taken
through the logarithmic map (rotation -> angular velocity vector) and the
output is advanced through the exponential map. The output rate is an
angular velocity in radians per second, composed on the left (world frame).
"""
import numpy as np

from second_order.dynamics.coefficients import stable_k1
from second_order.dynamics.quat_math import (
    IDENTITY, fix_quat_hemisphere, quat_exp, quat_inv, quat_log, quat_mul, quat_normalize
)
from second_order.dynamics.systems import SecondOrderBase


def _as_quat(value):
    q = [float(c) for c in value]
    if len(q) != 4:
        raise ValueError(f"Expected a quaternion [w, x, y, z], got {len(q)} components")
    return q


def _as_rate(value):
    arr = np.array(value, dtype=float).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"Expected an angular velocity vector of 3 components, got shape {np.shape(value)}")
    return arr


class SecondOrderSystemQuaternion(SecondOrderBase):
    """
    Rotation filter over unit quaternions [w, x, y, z].

    State: previous target `xp`, output rotation `y` and angular rate `yd`
    (3-vector). Unseeded filters start at the identity with zero rate.
    """

    def __init__(self, period: float, damping: float, response: float):
        super().__init__(period, damping, response)
        self.xp = list(IDENTITY)
        self.y = list(IDENTITY)
        self.yd = np.zeros(3)

    @property
    def previous_input(self):
        return list(self.xp)

    @property
    def output(self):
        return list(self.y)

    @property
    def output_rate(self):
        return self.yd.copy()

    def update_initial_values(self, previous, current, current_derivative=None) -> None:
        """Seed with the observed previous target, current output and angular rate."""
        if current_derivative is None:
            current_derivative = np.zeros(3)
        self.xp, self.y, self.yd = _as_quat(previous), _as_quat(current), _as_rate(current_derivative)

    def _interpolation_step(self, x, d: float) -> None:
        # q and -q are the same orientation; stay on the output's side
        x = fix_quat_hemisphere(x, self.y)

        xd = np.array(quat_log(quat_normalize(quat_mul(x, quat_inv(self.xp))))) / d
        k0, k1, k2 = self._k

        k1_stable = stable_k1(k0, k1, d)

        self.xp = x
        self.y = [float(c) for c in quat_normalize(quat_mul(quat_exp(d * self.yd), self.y))]
        error = np.array(quat_log(quat_normalize(quat_mul(x, quat_inv(self.y)))))
        self.yd = self.yd + d * (error + k2 * xd - k0 * self.yd) / k1_stable

    def update(self, input, delta: float):
        """
        Advance the rotation filter by `delta` seconds toward `input` and
        return the new output quaternion. A non-positive delta is a no-op.
        """
        d = float(delta)
        if d <= 0.0:
            return self.output
        self._interpolation_step(_as_quat(input), d)
        return self.output
