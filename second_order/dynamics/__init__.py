from second_order.dynamics.coefficients import calculate_k, stable_k1
from second_order.dynamics.systems import (
    SecondOrderBase,
    SecondOrderSystem,
    SecondOrderSystemFloat,
    SecondOrderSystemVector2,
    SecondOrderSystemVector3,
)
from second_order.dynamics.quaternion_system import SecondOrderSystemQuaternion
