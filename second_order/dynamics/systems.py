"""
Second-order dynamics filters for scalars and vectors.

One filter follows one channel: it is constructed with (period, damping,
response), seeded once from observed values, then stepped every tick with
the latest target and the elapsed time.
"""
from typing import Any, Callable, Optional

import numpy as np

from second_order.dynamics.coefficients import calculate_k, stable_k1


class SecondOrderBase:
    """
    Tuning parameters and cached coefficients shared by every filter.

    Coefficients are re-derived immediately whenever a parameter changes;
    running state is left untouched. Not a filter on its own: subclasses
    supply update_initial_values() and update().
    """

    def __init__(self, period: float, damping: float, response: float):
        self._period = float(period)
        self._damping = float(damping)
        self._response = float(response)
        self._k = calculate_k(self._period, self._damping, self._response)

    @property
    def period(self) -> float:
        return self._period

    @property
    def damping(self) -> float:
        return self._damping

    @property
    def response(self) -> float:
        return self._response

    @property
    def k(self):
        """Cached (k0, k1, k2)."""
        return self._k

    def update_period(self, period: float) -> None:
        self._period = float(period)
        self._update_k()

    def update_damping(self, damping: float) -> None:
        self._damping = float(damping)
        self._update_k()

    def update_response(self, response: float) -> None:
        self._response = float(response)
        self._update_k()

    def _update_k(self) -> None:
        self._k = calculate_k(self._period, self._damping, self._response)

    def seed(self, previous, current, current_derivative=None) -> None:
        """Shorthand for update_initial_values()."""
        self.update_initial_values(previous, current, current_derivative)

    def update_initial_values(self, previous, current, current_derivative=None) -> None:
        raise NotImplementedError

    def update(self, input, delta: float):
        raise NotImplementedError

    def __repr__(self):
        return (f"{type(self).__name__}(period={self._period!r}, "
                f"damping={self._damping!r}, response={self._response!r})")


class SecondOrderSystem(SecondOrderBase):
    """
    Filter over any value type supporting +, - and multiplication by a float.

    `zero` is the zero value of the type and `coerce` converts caller input
    into it (float(), numpy.asarray(), ...). Until seeded, the state is all
    zeros, so the first update jumps from zero toward the target.
    """

    def __init__(
        self,
        period: float,
        damping: float,
        response: float,
        zero: Any = 0.0,
        coerce: Optional[Callable[[Any], Any]] = None,
    ):
        super().__init__(period, damping, response)
        self._coerce = coerce or self._copy
        self._zero = self._coerce(zero)
        self.xp = self._copy(self._zero)
        self.y = self._copy(self._zero)
        self.yd = self._copy(self._zero)

    @staticmethod
    def _copy(value):
        return value.copy() if hasattr(value, "copy") else value

    @property
    def previous_input(self):
        return self._copy(self.xp)

    @property
    def output(self):
        return self._copy(self.y)

    @property
    def output_rate(self):
        return self._copy(self.yd)

    def update_initial_values(self, previous, current, current_derivative=None) -> None:
        """
        Overwrite the running state. Call once before the first update with
        the observed previous target and current output to avoid a startup jump.
        """
        if current_derivative is None:
            current_derivative = self._zero
        self.xp, self.y, self.yd = (
            self._coerce(previous), self._coerce(current), self._coerce(current_derivative)
        )

    def _interpolation_step(self, x, d: float) -> None:
        xd = (x - self.xp) / d
        k0, k1, k2 = self._k

        k1_stable = stable_k1(k0, k1, d)

        self.xp = x
        self.y = self.y + d * self.yd
        self.yd = self.yd + d * (x + k2 * xd - self.y - k0 * self.yd) / k1_stable

    def update(self, input, delta: float):
        """
        Advance the filter by `delta` seconds toward `input` and return the new output.
        A non-positive delta leaves the state untouched.
        """
        d = float(delta)
        if d <= 0.0:
            return self.output
        self._interpolation_step(self._coerce(input), d)
        return self.output


def _as_vector(size: int) -> Callable[[Any], np.ndarray]:
    def coerce(value) -> np.ndarray:
        arr = np.array(value, dtype=float).reshape(-1)
        if arr.shape != (size,):
            raise ValueError(f"Expected a {size}D vector, got shape {np.shape(value)}")
        return arr
    return coerce


class SecondOrderSystemFloat(SecondOrderSystem):
    """Scalar filter (rotation angle, skew, any single float)."""

    def __init__(self, period: float, damping: float, response: float):
        super().__init__(period, damping, response, zero=0.0, coerce=float)


class SecondOrderSystemVector2(SecondOrderSystem):
    """2D vector filter; values are numpy arrays of shape (2,)."""

    def __init__(self, period: float, damping: float, response: float):
        super().__init__(period, damping, response, zero=np.zeros(2), coerce=_as_vector(2))


class SecondOrderSystemVector3(SecondOrderSystem):
    """3D vector filter; values are numpy arrays of shape (3,)."""

    def __init__(self, period: float, damping: float, response: float):
        super().__init__(period, damping, response, zero=np.zeros(3), coerce=_as_vector(3))
