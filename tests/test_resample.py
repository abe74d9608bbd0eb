from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from globe.geo.resample import RingError, normalize_ring, resample_edge, resample_ring


def test_resample_edge_uses_at_least_two_steps() -> None:
    points = resample_edge((0.0, 0.0), (0.5, 0.0), 1.0)
    assert points == [(0.0, 0.0), (0.25, 0.0), (0.5, 0.0)]


def test_resample_edge_bounds_angular_step() -> None:
    points = resample_edge((10.0, 5.0), (13.0, 4.0), 1.0)
    assert len(points) == 4
    assert points[0] == (10.0, 5.0)
    assert points[-1] == (13.0, 4.0)
    for (lon_a, lat_a), (lon_b, lat_b) in zip(points, points[1:]):
        assert abs(lon_b - lon_a) <= 1.0 + 1e-12
        assert abs(lat_b - lat_a) <= 1.0 + 1e-12


def test_resample_edge_rejects_non_positive_step() -> None:
    with pytest.raises(ValueError):
        resample_edge((0.0, 0.0), (1.0, 1.0), 0.0)


def test_resample_ring_drops_joint_duplicates() -> None:
    ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]
    resampled = resample_ring(ring, 1.0)
    assert len(resampled) == 9
    assert resampled[0] == resampled[-1] == (0.0, 0.0)
    assert len(set(resampled[:-1])) == 8
    for vertex in ring:
        assert vertex in resampled


def test_resample_ring_requires_two_points() -> None:
    with pytest.raises(ValueError):
        resample_ring([(0.0, 0.0)], 1.0)


def test_normalize_ring_closes_and_dedupes() -> None:
    ring = normalize_ring([[0, 0], [1, 0], [1, 0], [1, 1], [0, 1]])
    assert ring == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]


def test_normalize_ring_keeps_closed_ring() -> None:
    ring = normalize_ring([(0, 0), (2, 0), (0, 2), (0, 0)])
    assert ring == [(0.0, 0.0), (2.0, 0.0), (0.0, 2.0), (0.0, 0.0)]


def test_normalize_ring_rejects_too_few_points() -> None:
    with pytest.raises(RingError):
        normalize_ring([(0, 0), (1, 1), (0, 0)])
    with pytest.raises(ValueError):
        normalize_ring([(0, 0), (0, 0), (0, 0)])
