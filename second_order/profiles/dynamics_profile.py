import math
import numbers
from dataclasses import dataclass, asdict

from second_order.dynamics.coefficients import calculate_k
from second_order.dynamics.systems import (
    SecondOrderSystemFloat, SecondOrderSystemVector2, SecondOrderSystemVector3
)
from second_order.dynamics.quaternion_system import SecondOrderSystemQuaternion

SYSTEM_TYPES = {
    "float": SecondOrderSystemFloat,
    "vector2": SecondOrderSystemVector2,
    "vector3": SecondOrderSystemVector3,
    "quaternion": SecondOrderSystemQuaternion,
}


def check_parameter(name: str, value) -> float:
    """
    Validate one tuning parameter and return it as a float.
    Raises TypeError for non-numbers, ValueError for out-of-range values.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    if name == "period" and value <= 0:
        raise ValueError(f"period must be > 0, got {value}")
    if name == "damping" and value < 0:
        raise ValueError(f"damping must be >= 0, got {value}")
    return float(value)


@dataclass
class DynamicsProfile:
    """
    Tuning for one second-order filter.
    """
    period: float = 1.0    # natural frequency, cycles / sec
    damping: float = 0.5   # 0 = undamped, 1 = critical, >1 = overdamped
    response: float = 2.0  # >1 overshoots, <0 anticipates

    def __post_init__(self):
        for name in ("period", "damping", "response"):
            setattr(self, name, check_parameter(name, getattr(self, name)))

    def coefficients(self):
        return calculate_k(self.period, self.damping, self.response)

    def build(self, kind: str = "float"):
        """Construct a filter of the given value kind with this tuning."""
        try:
            system_type = SYSTEM_TYPES[kind]
        except KeyError:
            raise ValueError(f"Unknown system kind '{kind}', expected one of {sorted(SYSTEM_TYPES)}")
        return system_type(self.period, self.damping, self.response)

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        unknown = set(data) - {"period", "damping", "response"}
        if unknown:
            raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
        return cls(**data)
