from second_order.profiles.dynamics_profile import DynamicsProfile
from second_order.profiles.critical_profile import CRITICAL_PROFILE
from second_order.profiles.bouncy_profile import BOUNCY_PROFILE
from second_order.profiles.anticipation_profile import ANTICIPATION_PROFILE

PROFILES = {
    "default": DynamicsProfile(),
    "critical": CRITICAL_PROFILE,
    "bouncy": BOUNCY_PROFILE,
    "anticipation": ANTICIPATION_PROFILE,
}
