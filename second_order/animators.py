"""
Animators bind a second-order filter between two observed objects.

Every tick the animator reads a value from `target`, runs it through its
filter and writes the result onto `depend`. Which tick drives it (per-frame
`process` or fixed-step `physics_process`) is chosen by `interpolation_mode`;
the host loop calls both hooks and the animator ignores the one not armed.
"""
from enum import Enum
from typing import Any, Callable, Optional

import numpy as np

from second_order.dynamics.systems import (
    SecondOrderBase, SecondOrderSystemFloat, SecondOrderSystemVector2, SecondOrderSystemVector3
)
from second_order.dynamics.quaternion_system import SecondOrderSystemQuaternion
from second_order.profiles.dynamics_profile import DynamicsProfile, check_parameter


class InterpolationMode(Enum):
    PROCESS = "Process"
    PHYSICS = "Physics"


class Animator:
    """
    Drives `depend` toward `target` through a second-order filter.

    getter(obj) reads the animated value, setter(obj, value) writes it.
    Nothing runs until ready() has seeded the filter and `active` is True.
    """

    def __init__(
        self,
        system: SecondOrderBase,
        getter: Callable[[Any], Any],
        setter: Callable[[Any, Any], None],
        depend: Any = None,
        target: Any = None,
        default_rate: Any = 0.0,
        name: str = "Animator",
    ):
        self.system = system
        self.getter = getter
        self.setter = setter
        self.depend = depend
        self.target = target
        self.default_rate = default_rate
        self.name = name

        self._active = False
        self._interpolation_mode = InterpolationMode.PHYSICS
        self._processing = False
        self._physics_processing = False
        self._ready = False

    # ---- Tuning ----

    @property
    def period(self) -> float:
        return self.system.period

    @period.setter
    def period(self, value: float) -> None:
        self.system.update_period(self._checked("period", value))

    @property
    def damping(self) -> float:
        return self.system.damping

    @damping.setter
    def damping(self, value: float) -> None:
        self.system.update_damping(self._checked("damping", value))

    @property
    def response(self) -> float:
        return self.system.response

    @response.setter
    def response(self, value: float) -> None:
        self.system.update_response(self._checked("response", value))

    def _checked(self, name: str, value) -> float:
        try:
            return check_parameter(name, value)
        except (TypeError, ValueError) as e:
            raise type(e)(f"{self.name}: {e}") from e

    def apply_profile(self, profile: DynamicsProfile) -> None:
        self.period = profile.period
        self.damping = profile.damping
        self.response = profile.response

    # ---- Scheduling ----

    @property
    def active(self) -> bool:
        return self._active

    @active.setter
    def active(self, value: bool) -> None:
        if self._active != value:
            self._active = bool(value)
            self._update_interpolation_process()

    @property
    def interpolation_mode(self) -> InterpolationMode:
        return self._interpolation_mode

    @interpolation_mode.setter
    def interpolation_mode(self, value) -> None:
        value = InterpolationMode(value)
        if self._interpolation_mode != value:
            self._interpolation_mode = value
            self._update_interpolation_process()

    def is_processing(self) -> bool:
        return self._processing

    def is_physics_processing(self) -> bool:
        return self._physics_processing

    def _update_interpolation_process(self) -> None:
        armed = self._active and self._ready
        if self._interpolation_mode == InterpolationMode.PROCESS:
            self._processing = armed
            self._physics_processing = False
        else:
            self._processing = False
            self._physics_processing = armed

    # ---- Lifecycle ----

    def _has_references(self) -> bool:
        missing = [label for label, obj in (("target", self.target), ("depend", self.depend)) if obj is None]
        if missing:
            print(f"Warning: {self.name} has no {' and '.join(missing)} set; it will stay idle.")
            return False
        return True

    def ready(self) -> bool:
        """
        Seed the filter from the current target and depend values and arm
        the tick hook. Returns False (and stays idle) if a reference is unset.
        """
        if not self._has_references():
            self._ready = False
            self._update_interpolation_process()
            return False

        self.system.update_initial_values(
            self.getter(self.target),
            self.getter(self.depend),
            self.default_rate,
        )
        self._ready = True
        self._update_interpolation_process()
        return True

    def _update(self, delta: float):
        value = self.system.update(self.getter(self.target), delta)
        self.setter(self.depend, value)
        return value

    def process(self, delta: float) -> Optional[Any]:
        if self._processing:
            return self._update(delta)
        return None

    def physics_process(self, delta: float) -> Optional[Any]:
        if self._physics_processing:
            return self._update(delta)
        return None


# ============================================================================
# Factories for common node properties
# ============================================================================

def _attribute_animator(system_type, attribute, default_rate, name, depend, target, profile):
    profile = profile or DynamicsProfile()
    system = system_type(profile.period, profile.damping, profile.response)

    def getter(obj):
        return getattr(obj, attribute)

    def setter(obj, value):
        setattr(obj, attribute, value)

    return Animator(system, getter, setter, depend=depend, target=target,
                    default_rate=default_rate, name=name)


def position_3d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemVector3, "position", np.zeros(3),
                               "AnimatorPosition3D", depend, target, profile)


def rotation_3d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemQuaternion, "quaternion", np.zeros(3),
                               "AnimatorRotation3D", depend, target, profile)


def scale_3d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemVector3, "scale", np.zeros(3),
                               "AnimatorScale3D", depend, target, profile)


def position_2d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemVector2, "position", np.zeros(2),
                               "AnimatorPosition2D", depend, target, profile)


def rotation_2d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemFloat, "rotation", 0.0,
                               "AnimatorRotation2D", depend, target, profile)


def scale_2d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemVector2, "scale", np.zeros(2),
                               "AnimatorScale2D", depend, target, profile)


def skew_2d(depend=None, target=None, profile: Optional[DynamicsProfile] = None) -> Animator:
    return _attribute_animator(SecondOrderSystemFloat, "skew", 0.0,
                               "AnimatorSkew2D", depend, target, profile)
