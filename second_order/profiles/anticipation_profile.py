from second_order.profiles.dynamics_profile import DynamicsProfile

ANTICIPATION_PROFILE = DynamicsProfile( # winds up in the opposite direction before moving
    period=1.5,
    damping=0.8,
    response=-1.0,
)
