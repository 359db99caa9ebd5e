VERSION = "0.1.0"

from second_order.dynamics import (  # noqa: E402
    calculate_k,
    SecondOrderSystem,
    SecondOrderSystemFloat,
    SecondOrderSystemVector2,
    SecondOrderSystemVector3,
    SecondOrderSystemQuaternion,
)
