"""Unit quaternion helpers for orientations and route slerp."""
from __future__ import annotations

from dataclasses import dataclass
from math import atan2, sin, sqrt

from pygame.math import Vector3

_EPSILON = 1e-9


@dataclass(frozen=True)
class Quaternion:
    """Rotation stored as ``(x, y, z, w)``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls) -> "Quaternion":
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_unit_vectors(cls, v_from: Vector3, v_to: Vector3) -> "Quaternion":
        """Shortest rotation taking unit vector ``v_from`` onto ``v_to``."""

        r = v_from.dot(v_to) + 1.0
        if r < _EPSILON:
            # Opposite vectors: rotate half a turn about any perpendicular axis.
            if abs(v_from.x) > abs(v_from.z):
                return cls(-v_from.y, v_from.x, 0.0, 0.0).normalized()
            return cls(0.0, -v_from.z, v_from.y, 0.0).normalized()
        axis = v_from.cross(v_to)
        return cls(axis.x, axis.y, axis.z, r).normalized()

    @classmethod
    def from_basis(cls, right: Vector3, up: Vector3, forward: Vector3) -> "Quaternion":
        """Rotation whose matrix columns are ``right``, ``up`` and ``forward``."""

        m11, m12, m13 = right.x, up.x, forward.x
        m21, m22, m23 = right.y, up.y, forward.y
        m31, m32, m33 = right.z, up.z, forward.z
        trace = m11 + m22 + m33
        if trace > 0.0:
            s = 0.5 / sqrt(trace + 1.0)
            return cls((m32 - m23) * s, (m13 - m31) * s, (m21 - m12) * s, 0.25 / s).normalized()
        if m11 > m22 and m11 > m33:
            s = 2.0 * sqrt(1.0 + m11 - m22 - m33)
            return cls(0.25 * s, (m12 + m21) / s, (m13 + m31) / s, (m32 - m23) / s).normalized()
        if m22 > m33:
            s = 2.0 * sqrt(1.0 + m22 - m11 - m33)
            return cls((m12 + m21) / s, 0.25 * s, (m23 + m32) / s, (m13 - m31) / s).normalized()
        s = 2.0 * sqrt(1.0 + m33 - m11 - m22)
        return cls((m13 + m31) / s, (m23 + m32) / s, 0.25 * s, (m21 - m12) / s).normalized()

    def length(self) -> float:
        return sqrt(self.x * self.x + self.y * self.y + self.z * self.z + self.w * self.w)

    def normalized(self) -> "Quaternion":
        length = self.length()
        if length < _EPSILON:
            return Quaternion.identity()
        inv = 1.0 / length
        return Quaternion(self.x * inv, self.y * inv, self.z * inv, self.w * inv)

    def dot(self, other: "Quaternion") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def slerp(self, other: "Quaternion", t: float) -> "Quaternion":
        """Constant angular velocity blend along the shorter arc."""

        if t <= 0.0:
            return self
        if t >= 1.0:
            return other
        cos_half = self.dot(other)
        ox, oy, oz, ow = other.x, other.y, other.z, other.w
        if cos_half < 0.0:
            ox, oy, oz, ow = -ox, -oy, -oz, -ow
            cos_half = -cos_half
        if cos_half >= 1.0:
            return self
        sqr_sin_half = 1.0 - cos_half * cos_half
        if sqr_sin_half <= _EPSILON:
            s = 1.0 - t
            return Quaternion(
                s * self.x + t * ox,
                s * self.y + t * oy,
                s * self.z + t * oz,
                s * self.w + t * ow,
            ).normalized()
        sin_half = sqrt(sqr_sin_half)
        half_theta = atan2(sin_half, cos_half)
        ratio_a = sin((1.0 - t) * half_theta) / sin_half
        ratio_b = sin(t * half_theta) / sin_half
        return Quaternion(
            self.x * ratio_a + ox * ratio_b,
            self.y * ratio_a + oy * ratio_b,
            self.z * ratio_a + oz * ratio_b,
            self.w * ratio_a + ow * ratio_b,
        )

    def rotate(self, vector: Vector3) -> Vector3:
        q = Vector3(self.x, self.y, self.z)
        uv = q.cross(vector)
        uuv = q.cross(uv)
        return vector + (uv * self.w + uuv) * 2.0

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)


__all__ = ["Quaternion"]
