from __future__ import annotations

import sys
from math import isclose
from pathlib import Path

from pygame.math import Vector3

sys.path.append(str(Path(__file__).resolve().parents[1]))

from globe.math.quaternion import Quaternion


def test_from_unit_vectors_rotates_onto_target() -> None:
    source = Vector3(0.0, 1.0, 0.0)
    target = Vector3(1.0, 2.0, -0.5).normalize()
    rotation = Quaternion.from_unit_vectors(source, target)
    assert rotation.rotate(source).distance_to(target) < 1e-12
    assert isclose(rotation.length(), 1.0, rel_tol=1e-12)


def test_from_unit_vectors_handles_opposites() -> None:
    source = Vector3(0.0, 1.0, 0.0)
    rotation = Quaternion.from_unit_vectors(source, -source)
    assert rotation.rotate(source).distance_to(-source) < 1e-12


def test_from_basis_maps_axes() -> None:
    right = Vector3(0.0, 0.0, -1.0)
    up = Vector3(0.0, 1.0, 0.0)
    forward = right.cross(up)
    rotation = Quaternion.from_basis(right, up, forward)
    assert rotation.rotate(Vector3(1.0, 0.0, 0.0)).distance_to(right) < 1e-12
    assert rotation.rotate(Vector3(0.0, 1.0, 0.0)).distance_to(up) < 1e-12
    assert rotation.rotate(Vector3(0.0, 0.0, 1.0)).distance_to(forward) < 1e-12


def test_slerp_endpoints_and_midpoint() -> None:
    axis = Vector3(0.0, 1.0, 0.0)
    start = Quaternion.from_unit_vectors(axis, Vector3(1.0, 0.0, 0.0))
    end = Quaternion.from_unit_vectors(axis, Vector3(0.0, 0.0, 1.0))
    assert start.slerp(end, 0.0) == start
    assert end == start.slerp(end, 1.0)
    middle = start.slerp(end, 0.5).rotate(axis)
    assert isclose(middle.length(), 1.0, rel_tol=1e-12)
    # Halfway rotation stays equidistant from both endpoints.
    assert isclose(
        middle.distance_to(Vector3(1.0, 0.0, 0.0)),
        middle.distance_to(Vector3(0.0, 0.0, 1.0)),
        rel_tol=1e-9,
    )


def test_identity_rotation() -> None:
    vector = Vector3(0.3, -0.2, 0.9)
    assert Quaternion.identity().rotate(vector).distance_to(vector) < 1e-15
