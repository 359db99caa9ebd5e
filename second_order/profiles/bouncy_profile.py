from second_order.profiles.dynamics_profile import DynamicsProfile

BOUNCY_PROFILE = DynamicsProfile( # springy, rings a few times before settling
    period=2.0,
    damping=0.25,
    response=1.0,
)
