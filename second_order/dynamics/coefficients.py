"""
Coefficient solver for second-order dynamics.

The filter integrates

    y + k0 * y' + k1 * y'' = x + k2 * x'

where the coefficients come from three intuitive tuning parameters:

    period   (f): natural frequency in cycles per second
    damping  (z): damping ratio, 0 never settles, 1 is critical, >1 is sluggish
    response (r): reaction to the rate of change of the input; >1 overshoots,
                  <0 anticipates
"""
import math
from typing import Tuple

Coefficients = Tuple[float, float, float]


def calculate_k(period: float, damping: float, response: float) -> Coefficients:
    """
    Derive (k0, k1, k2) from the tuning parameters.

    period must be > 0; period == 0 raises ZeroDivisionError.
    """
    f, z, r = float(period), float(damping), float(response)

    k0 = z / (math.pi * f)
    k1 = 1.0 / ((2.0 * math.pi * f) * (2.0 * math.pi * f))
    k2 = r * z / (2.0 * math.pi * f)

    return k0, k1, k2


def stable_k1(k0: float, k1: float, delta: float) -> float:
    """
    Clamp k1 so a step of `delta` seconds cannot make the integration blow up.
    Trades accuracy for stability when delta is large compared to the period.
    """
    return max(k1, 1.1 * (delta * delta + 0.5 * delta * k0))
