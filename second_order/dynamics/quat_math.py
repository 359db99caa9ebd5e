"""
Unit quaternion helpers used by the rotation filter.

Quaternions are plain lists in [w, x, y, z] order. Tangent vectors
(angular velocities, rotation vectors) are 3-element sequences.
"""
import math

IDENTITY = [1.0, 0.0, 0.0, 0.0]


def norm(v):
    """Compute L2 norm of a 3D vector."""
    return math.sqrt(v[0]*v[0] + v[1]*v[1] + v[2]*v[2])


def dot4(q1, q2):
    """Dot product of two quaternions."""
    return q1[0]*q2[0] + q1[1]*q2[1] + q1[2]*q2[2] + q1[3]*q2[3]


def neg4(q):
    """Negate a quaternion."""
    return [-q[0], -q[1], -q[2], -q[3]]


def quat_normalize(q):
    """Normalize a quaternion."""
    n = math.sqrt(q[0]*q[0] + q[1]*q[1] + q[2]*q[2] + q[3]*q[3])
    if n > 1e-10:
        return [q[0]/n, q[1]/n, q[2]/n, q[3]/n]
    return list(IDENTITY)


def quat_mul(q1, q2):
    """Multiply two quaternions: q1 * q2."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return [
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2
    ]


def quat_inv(q):
    """Inverse of a quaternion (conjugate for unit quaternions)."""
    w, x, y, z = q
    n = w*w + x*x + y*y + z*z
    if n > 1e-10:
        return [w/n, -x/n, -y/n, -z/n]
    return list(IDENTITY)


def quat_log(q):
    """
    Logarithm map: quaternion -> tangent space (axis-angle representation).
    Returns: [x, y, z] rotation vector (angle * axis), shortest arc.
    """
    w = q[0]
    x, y, z = q[1], q[2], q[3]

    # Clamp w for numerical stability
    w = max(-1.0, min(1.0, w))

    angle = math.acos(abs(w))
    if angle < 1e-6:
        # small-angle limit of 2*angle/sin(angle)
        scale = -2.0 if w < 0 else 2.0
        return [scale * x, scale * y, scale * z]

    sin_angle = math.sin(angle)
    scale = 2.0 * angle / sin_angle
    if w < 0:
        scale = -scale

    return [scale * x, scale * y, scale * z]


def quat_exp(v):
    """
    Exponential map: tangent space -> quaternion (axis-angle -> quaternion).
    v: [x, y, z] rotation vector
    Returns: [w, x, y, z]
    """
    angle = norm(v)
    if angle < 1e-6:
        # first-order expansion keeps tiny increments from being dropped
        return quat_normalize([1.0, 0.5 * v[0], 0.5 * v[1], 0.5 * v[2]])

    half_angle = 0.5 * angle
    scale = math.sin(half_angle) / angle
    return [math.cos(half_angle), scale * v[0], scale * v[1], scale * v[2]]


def fix_quat_hemisphere(q, reference):
    """Return q or -q, whichever lies in the same hemisphere as `reference`."""
    return neg4(q) if dot4(q, reference) < 0 else list(q)
