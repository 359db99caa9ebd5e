from second_order.profiles.dynamics_profile import DynamicsProfile

CRITICAL_PROFILE = DynamicsProfile( # fastest approach without overshoot
    period=1.0,
    damping=1.0,
    response=0.0,
)
