# QPerceptron: Quaternion Rotation Perceptron
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Immutable quaternion value type.

Quaternions ``q = w + xi + yj + zk`` with the Hamilton product
(``i^2 = j^2 = k^2 = ijk = -1``). Unit quaternions form the group
Spin(3) ~ SU(2), the double cover of SO(3); pure vector quaternions form its
Lie algebra. The pair ``exp``/``log`` moves between the two, which is what the
perceptron uses to turn rotation errors into updates.

Every operation returns a new :class:`Quaternion`; instances are hashable
and safe to share.
"""

import math
from typing import Iterable, Tuple, Union

Number = Union[int, float]
Vector3 = Tuple[float, float, float]

# |norm - 1| below this counts as unit length
UNIT_TOLERANCE = 1e-10

# Below this a rotation is treated as the identity
STABILITY_THRESHOLD = 1e-10

# |dot| above this is treated as zero geodesic distance
GEODESIC_IDENTITY_DOT = 0.9999

# dot above this makes slerp fall back to normalized lerp
SLERP_LINEAR_DOT = 0.9995


class QuaternionDomainError(ArithmeticError):
    """Raised when an operation is undefined for its operand (zero norm or divisor)."""


def _as_vector3(values, name: str) -> Vector3:
    """Coerce *values* to a tuple of three finite floats or raise ``ValueError``."""
    if values is None:
        raise ValueError(f"{name} cannot be None")
    try:
        vec = tuple(float(c) for c in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a sequence of 3 numbers") from exc
    if len(vec) != 3:
        raise ValueError(f"{name} must have exactly 3 components, got {len(vec)}")
    if not all(math.isfinite(c) for c in vec):
        raise ValueError(f"{name} must contain finite numbers, got {vec}")
    return vec


def _same_float(a: float, b: float) -> bool:
    """Bitwise-style float equality: 0.0 and -0.0 differ."""
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


class Quaternion:
    """Immutable quaternion ``w + xi + yj + zk``.

    Supports Python operators: ``q1 * q2`` is the Hamilton product,
    ``q * 2.0`` / ``2.0 * q`` / ``q / 2.0`` scale, ``+``/``-`` are
    component-wise and ``abs(q)`` is the norm.

    Attributes:
        w (float): Scalar part.
        x (float): i component.
        y (float): j component.
        z (float): k component.
    """

    __slots__ = ("_w", "_x", "_y", "_z")

    ZERO: "Quaternion"
    ONE: "Quaternion"
    I: "Quaternion"
    J: "Quaternion"
    K: "Quaternion"

    def __init__(self, w: Number = 0.0, x: Number = 0.0, y: Number = 0.0, z: Number = 0.0):
        """Initializes a quaternion.

        Args:
            w (float): Scalar component.
            x (float): i component.
            y (float): j component.
            z (float): k component.

        Raises:
            ValueError: If any component is NaN or infinite.
        """
        comps = (float(w), float(x), float(y), float(z))
        if not all(math.isfinite(c) for c in comps):
            raise ValueError(f"All quaternion components must be finite numbers, got {comps}")
        object.__setattr__(self, "_w", comps[0])
        object.__setattr__(self, "_x", comps[1])
        object.__setattr__(self, "_y", comps[2])
        object.__setattr__(self, "_z", comps[3])

    def __setattr__(self, name, value):
        raise AttributeError("Quaternion is immutable")

    def __delattr__(self, name):
        raise AttributeError("Quaternion is immutable")

    @classmethod
    def from_scalar_vector(cls, w: Number, vector: Iterable[Number]) -> "Quaternion":
        """Builds ``w + v`` from a scalar and a 3-vector."""
        vx, vy, vz = _as_vector3(vector, "Vector")
        return cls(w, vx, vy, vz)

    # ------------------------------------------------------------------
    # Components and predicates
    # ------------------------------------------------------------------

    @property
    def w(self) -> float:
        return self._w

    @property
    def x(self) -> float:
        return self._x

    @property
    def y(self) -> float:
        return self._y

    @property
    def z(self) -> float:
        return self._z

    @property
    def scalar(self) -> float:
        """Scalar part (same as ``w``)."""
        return self._w

    @property
    def vector(self) -> Vector3:
        """Vector part ``(x, y, z)``."""
        return (self._x, self._y, self._z)

    @property
    def components(self) -> Tuple[float, float, float, float]:
        """All four components ``(w, x, y, z)``."""
        return (self._w, self._x, self._y, self._z)

    def __iter__(self):
        return iter(self.components)

    def is_scalar(self) -> bool:
        return self._x == 0.0 and self._y == 0.0 and self._z == 0.0

    def is_vector(self) -> bool:
        return self._w == 0.0

    def is_unit(self) -> bool:
        return abs(self.norm() - 1.0) < UNIT_TOLERANCE

    def is_zero(self) -> bool:
        return self._w == 0.0 and self.is_scalar()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, other: "Quaternion") -> "Quaternion":
        other = _require(other, "Other quaternion")
        return Quaternion(self._w + other._w, self._x + other._x,
                          self._y + other._y, self._z + other._z)

    def subtract(self, other: "Quaternion") -> "Quaternion":
        other = _require(other, "Other quaternion")
        return Quaternion(self._w - other._w, self._x - other._x,
                          self._y - other._y, self._z - other._z)

    def negate(self) -> "Quaternion":
        return Quaternion(-self._w, -self._x, -self._y, -self._z)

    def multiply(self, other: Union["Quaternion", Number]) -> "Quaternion":
        """Hamilton product with a quaternion, or scaling by a real number.

        The Hamilton product is non-commutative: ``ij = k`` but ``ji = -k``.
        """
        if isinstance(other, Quaternion):
            w1, x1, y1, z1 = self.components
            w2, x2, y2, z2 = other.components
            return Quaternion(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            )
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return Quaternion(self._w * other, self._x * other,
                              self._y * other, self._z * other)
        raise ValueError(f"Cannot multiply a quaternion by {type(other).__name__}")

    def divide(self, scalar: Number) -> "Quaternion":
        """Divides every component by *scalar*.

        Raises:
            QuaternionDomainError: If *scalar* is zero.
        """
        if scalar == 0.0:
            raise QuaternionDomainError("Division by zero")
        return Quaternion(self._w / scalar, self._x / scalar,
                          self._y / scalar, self._z / scalar)

    def conjugate(self) -> "Quaternion":
        return Quaternion(self._w, -self._x, -self._y, -self._z)

    def norm_squared(self) -> float:
        return self._w * self._w + self._x * self._x + self._y * self._y + self._z * self._z

    def norm(self) -> float:
        return math.sqrt(self.norm_squared())

    def normalize(self) -> "Quaternion":
        """Returns the unit quaternion in the same direction.

        Raises:
            QuaternionDomainError: If this is the zero quaternion.
        """
        n = self.norm()
        if n == 0.0:
            raise QuaternionDomainError("Cannot normalize zero quaternion")
        return self.divide(n)

    def inverse(self) -> "Quaternion":
        """Multiplicative inverse ``conj(q) / |q|^2``.

        Raises:
            QuaternionDomainError: If this is the zero quaternion.
        """
        n2 = self.norm_squared()
        if n2 == 0.0:
            raise QuaternionDomainError("Cannot invert zero quaternion")
        return self.conjugate().divide(n2)

    def dot(self, other: "Quaternion") -> float:
        """Euclidean inner product of the two 4-tuples."""
        other = _require(other, "Other quaternion")
        return (self._w * other._w + self._x * other._x
                + self._y * other._y + self._z * other._z)

    def cross(self, other: "Quaternion") -> "Quaternion":
        """3D cross product of two vector quaternions, as a vector quaternion.

        Raises:
            ValueError: If either operand has a non-zero scalar part.
        """
        other = _require(other, "Other quaternion")
        if not self.is_vector() or not other.is_vector():
            raise ValueError("Cross product is only defined for vector quaternions (w = 0)")
        x1, y1, z1 = self.vector
        x2, y2, z2 = other.vector
        return Quaternion(0.0, y1 * z2 - z1 * y2, z1 * x2 - x1 * z2, x1 * y2 - y1 * x2)

    # ------------------------------------------------------------------
    # Lie group / algebra maps
    # ------------------------------------------------------------------

    def exp(self) -> "Quaternion":
        """Exponential ``e^w (cos|v| + v/|v| sin|v|)``.

        For a pure vector quaternion this maps a tangent vector (Lie algebra)
        to a unit quaternion (Lie group).
        """
        v_norm = math.sqrt(self._x * self._x + self._y * self._y + self._z * self._z)
        exp_w = math.exp(self._w)
        if v_norm == 0.0:
            return Quaternion(exp_w, 0.0, 0.0, 0.0)
        s = exp_w * math.sin(v_norm) / v_norm
        return Quaternion(exp_w * math.cos(v_norm), s * self._x, s * self._y, s * self._z)

    def log(self) -> "Quaternion":
        """Natural logarithm ``ln|q| + v/|v| acos(w/|q|)``.

        For a unit quaternion the scalar part is zero and the vector part is
        the tangent-space representation (half the rotation angle times the
        axis).

        Raises:
            QuaternionDomainError: If this is the zero quaternion.
        """
        q_norm = self.norm()
        if q_norm == 0.0:
            raise QuaternionDomainError("Cannot take log of zero quaternion")
        v_norm = math.sqrt(self._x * self._x + self._y * self._y + self._z * self._z)
        log_norm = math.log(q_norm)
        if v_norm == 0.0:
            return Quaternion(log_norm, 0.0, 0.0, 0.0)
        # w / |q| can leave [-1, 1] by an ulp
        angle = math.acos(max(-1.0, min(1.0, self._w / q_norm)))
        s = angle / v_norm
        return Quaternion(log_norm, s * self._x, s * self._y, s * self._z)

    def pow(self, exponent: Union["Quaternion", Number]) -> "Quaternion":
        """Real power ``q^a = exp(a log q)``.

        A scalar quaternion exponent is accepted and treated as its ``w``.

        Raises:
            NotImplementedError: For a non-scalar quaternion exponent.
        """
        if isinstance(exponent, Quaternion):
            if not exponent.is_scalar():
                raise NotImplementedError("Non-scalar quaternion exponents are not supported")
            exponent = exponent.w
        if exponent == 0.0:
            return ONE
        if exponent == 1.0:
            return self
        if exponent == -1.0:
            return self.inverse()
        return self.log().multiply(float(exponent)).exp()

    def to_rotation_vector(self) -> Vector3:
        """Axis scaled by the rotation angle ``2 acos(w)``.

        Note this is twice ``log().vector``: the rotation vector measures the
        3D rotation angle, the log measures the arc on S^3.

        Raises:
            ValueError: If the quaternion is not unit.
        """
        if not self.is_unit():
            raise ValueError("Quaternion must be normalized for rotation vector conversion")
        if abs(self._w - 1.0) < STABILITY_THRESHOLD:
            return (0.0, 0.0, 0.0)
        angle = 2.0 * math.acos(max(-1.0, min(1.0, self._w)))
        v_norm = math.sqrt(self._x * self._x + self._y * self._y + self._z * self._z)
        if v_norm < STABILITY_THRESHOLD:
            return (0.0, 0.0, 0.0)
        s = angle / v_norm
        return (s * self._x, s * self._y, s * self._z)

    @classmethod
    def from_rotation_vector(cls, rotation_vector: Iterable[Number]) -> "Quaternion":
        """Inverse of :meth:`to_rotation_vector`; tiny angles collapse to ``ONE``."""
        vec = _as_vector3(rotation_vector, "Rotation vector")
        angle = math.sqrt(vec[0] * vec[0] + vec[1] * vec[1] + vec[2] * vec[2])
        if angle < STABILITY_THRESHOLD:
            return ONE
        return cls.from_axis_angle(angle, vec)

    @classmethod
    def from_axis_angle(cls, angle: Number, axis: Iterable[Number]) -> "Quaternion":
        """Rotation by *angle* radians about *axis* (normalized here).

        Raises:
            ValueError: If *axis* is not three numbers or is the zero vector.
        """
        ax, ay, az = _as_vector3(axis, "Axis")
        norm = math.sqrt(ax * ax + ay * ay + az * az)
        if norm == 0.0:
            raise ValueError("Axis cannot be zero vector")
        half = float(angle) / 2.0
        s = math.sin(half) / norm
        return cls(math.cos(half), ax * s, ay * s, az * s)

    # ------------------------------------------------------------------
    # Geodesics
    # ------------------------------------------------------------------

    def geodesic_distance(self, other: "Quaternion") -> float:
        """Shortest-arc rotation angle ``2 acos(|q1 . q2|)`` in ``[0, pi]``.

        ``q`` and ``-q`` are the same rotation, hence the absolute value.

        Raises:
            ValueError: If either quaternion is not unit.
        """
        other = _require(other, "Other quaternion")
        if not self.is_unit() or not other.is_unit():
            raise ValueError("Both quaternions must be normalized (unit quaternions)")
        d = max(0.0, min(1.0, abs(self.dot(other))))
        if d > GEODESIC_IDENTITY_DOT:
            return 0.0
        return 2.0 * math.acos(d)

    def geodesic_rotation(self, target: "Quaternion") -> "Quaternion":
        """Rotation ``r = self^-1 * target`` so that ``self * r == target``.

        Raises:
            ValueError: If either quaternion is not unit.
        """
        target = _require(target, "Target quaternion")
        if not self.is_unit() or not target.is_unit():
            raise ValueError("Both quaternions must be normalized (unit quaternions)")
        return self.inverse().multiply(target)

    @staticmethod
    def slerp(q1: "Quaternion", q2: "Quaternion", t: Number) -> "Quaternion":
        """Spherical linear interpolation along the shortest arc.

        Args:
            q1 (Quaternion): Start (``t = 0``).
            q2 (Quaternion): End (``t = 1``).
            t (float): Interpolation parameter in ``[0, 1]``.

        Returns:
            Quaternion: Interpolated quaternion.

        Raises:
            ValueError: If *t* is outside ``[0, 1]``.
        """
        q1 = _require(q1, "Start quaternion")
        q2 = _require(q2, "End quaternion")
        if not 0.0 <= t <= 1.0:
            raise ValueError(f"Interpolation parameter must be in [0, 1], got {t}")

        d = q1.dot(q2)
        if d < 0.0:
            q2 = q2.negate()
            d = -d

        if d > SLERP_LINEAR_DOT:
            return q1.add(q2.subtract(q1).multiply(float(t))).normalize()

        theta = math.acos(d)
        sin_theta = math.sin(theta)
        return q1.multiply(math.sin((1.0 - t) * theta) / sin_theta).add(
            q2.multiply(math.sin(t * theta) / sin_theta)
        )

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        if isinstance(other, Quaternion):
            return self.add(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Quaternion):
            return self.subtract(other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, (Quaternion, int, float)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other):
        # Only scalars reach here; scaling commutes
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, (int, float)) and not isinstance(other, bool):
            return self.divide(other)
        return NotImplemented

    def __neg__(self):
        return self.negate()

    def __abs__(self):
        return self.norm()

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Quaternion):
            return NotImplemented
        return all(_same_float(a, b) for a, b in zip(self.components, other.components))

    def __hash__(self):
        return hash(self.components)

    def __repr__(self):
        return f"Quaternion({self._w:.6f}, {self._x:.6f}, {self._y:.6f}, {self._z:.6f})"


def _require(q, name: str) -> Quaternion:
    """Rejects ``None`` and non-quaternions with ``ValueError``."""
    if q is None:
        raise ValueError(f"{name} cannot be None")
    if not isinstance(q, Quaternion):
        raise ValueError(f"{name} must be a Quaternion, got {type(q).__name__}")
    return q


ZERO = Quaternion(0.0, 0.0, 0.0, 0.0)
ONE = Quaternion(1.0, 0.0, 0.0, 0.0)
I = Quaternion(0.0, 1.0, 0.0, 0.0)
J = Quaternion(0.0, 0.0, 1.0, 0.0)
K = Quaternion(0.0, 0.0, 0.0, 1.0)

Quaternion.ZERO = ZERO
Quaternion.ONE = ONE
Quaternion.I = I
Quaternion.J = J
Quaternion.K = K
