"""Miscellaneous helpers for usernames, chunk views and geometry."""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass

Vec3 = tuple[float, float, float]

EXTRA_RADIUS = 3

_USERNAME = re.compile(r"[a-zA-Z0-9_]{3,16}")


@dataclass(frozen=True, order=True)
class ChunkPos:
    """The position of a chunk column."""

    x: int
    z: int


@dataclass(frozen=True)
class Aabb:
    """An axis-aligned bounding box given by its minimum and maximum corners."""

    min: Vec3
    max: Vec3


def valid_username(s: str) -> bool:
    """Return True if ``s`` matches ``^[a-zA-Z0-9_]{3,16}$``."""
    return _USERNAME.fullmatch(s) is not None


def _check_distance(distance: int) -> None:
    if not 0 <= distance <= 255:
        raise ValueError(f"view distance must be between 0 and 255, got {distance}")


def chunks_in_view_distance(center: ChunkPos, distance: int) -> Iterator[ChunkPos]:
    """Yield every chunk within ``distance`` of ``center``, row by row along z."""
    _check_distance(distance)
    dist = distance + EXTRA_RADIUS
    for z in range(center.z - dist, center.z + dist + 1):
        for x in range(center.x - dist, center.x + dist + 1):
            pos = ChunkPos(x, z)
            if is_chunk_in_view_distance(center, pos, distance):
                yield pos


def is_chunk_in_view_distance(p0: ChunkPos, p1: ChunkPos, distance: int) -> bool:
    """Return True if a client in one chunk can see the other."""
    _check_distance(distance)
    dx = float(p0.x) - float(p1.x)
    dz = float(p0.z) - float(p1.z)
    return dx**2 + dz**2 <= (float(distance) + EXTRA_RADIUS) ** 2


def aabb_from_bottom_and_size(bottom: Vec3, size: Vec3) -> Aabb:
    """Build a box centred horizontally on ``bottom`` and rising ``size[1]`` above it."""
    bx, by, bz = bottom
    sx, sy, sz = size
    aabb = Aabb(
        min=(bx - sx / 2.0, by, bz - sz / 2.0),
        max=(bx + sx / 2.0, by + sy, bz + sz / 2.0),
    )
    assert all(lo <= hi for lo, hi in zip(aabb.min, aabb.max)), "size must not be negative"
    return aabb


def to_yaw_and_pitch(d: Vec3) -> tuple[float, float]:
    """Convert a normalized direction vector to ``(yaw, pitch)`` in degrees."""
    x, y, z = d
    yaw = math.degrees(math.atan2(z, x)) - 90.0
    pitch = -math.degrees(math.asin(max(-1.0, min(1.0, y))))
    return yaw, pitch


def from_yaw_and_pitch(yaw: float, pitch: float) -> Vec3:
    """Convert yaw and pitch in degrees to a normalized direction vector."""
    yaw_rad = math.radians(yaw + 90.0)
    pitch_rad = math.radians(-pitch)
    xz_len = math.cos(pitch_rad)
    return (
        math.cos(yaw_rad) * xz_len,
        math.sin(pitch_rad),
        math.sin(yaw_rad) * xz_len,
    )


def _divide(a: float, b: float) -> float:
    """IEEE division: dividing by zero gives an infinity or NaN."""
    if b != 0.0:
        return a / b
    if a == 0.0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return min(a, b)


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return max(a, b)


def ray_box_intersect(ro: Vec3, rd: Vec3, bb: Aabb) -> tuple[float, float] | None:
    """Intersect the ray from ``ro`` along ``rd`` with ``bb``.

    Return the distances ``(near, far)`` to the entry and exit points, with
    ``near`` zero when the origin is inside the box, or None on a miss.
    """
    near = -math.inf
    far = math.inf
    for lo, hi, origin, direction in zip(bb.min, bb.max, ro, rd):
        t0 = _divide(lo - origin, direction)
        t1 = _divide(hi - origin, direction)
        near = _fmax(near, _fmin(t0, t1))
        far = _fmin(far, _fmax(t0, t1))

    if near <= far and far >= 0.0:
        return max(near, 0.0), far
    return None


def log2_ceil(n: int) -> int:
    """Return the base-2 logarithm of ``n`` rounded up."""
    if n <= 0:
        raise ValueError("log2_ceil requires a positive integer")
    if n > 1 << 63:
        return 64
    return (n - 1).bit_length()