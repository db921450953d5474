import math
import random

import pytest

from cubekit.util import (
    Aabb,
    ChunkPos,
    aabb_from_bottom_and_size,
    chunks_in_view_distance,
    from_yaw_and_pitch,
    is_chunk_in_view_distance,
    log2_ceil,
    ray_box_intersect,
    to_yaw_and_pitch,
    valid_username,
)


@pytest.mark.parametrize("name", ["00a", "jeb_", "ABC", "a_b_c_d_e_f_g_h1"])
def test_valid_usernames(name):
    assert valid_username(name) is True


@pytest.mark.parametrize(
    "name", ["notavalidusername", "NotValid!", "ab", "", "abc\n", "héllo", "with space"]
)
def test_invalid_usernames(name):
    assert valid_username(name) is False


def test_yaw_pitch_round_trip():
    rng = random.Random(1234)
    for _ in range(101):
        v = [rng.random() * 2.0 - 1.0 for _ in range(3)]
        length = math.sqrt(sum(c * c for c in v))
        d = tuple(c / length for c in v)

        yaw, pitch = to_yaw_and_pitch(d)
        d_new = from_yaw_and_pitch(yaw, pitch)

        for a, b in zip(d, d_new):
            assert math.isclose(a, b, abs_tol=1e-12)


def test_from_yaw_and_pitch_known_directions():
    x, y, z = from_yaw_and_pitch(0.0, 0.0)
    assert math.isclose(x, 0.0, abs_tol=1e-12)
    assert math.isclose(y, 0.0, abs_tol=1e-12)
    assert math.isclose(z, 1.0)

    x, y, z = from_yaw_and_pitch(0.0, -90.0)
    assert math.isclose(y, 1.0)


def test_ray_box_edge_cases():
    bb = Aabb(min=(0.0, 0.0, 0.0), max=(1.0, 1.0, 1.0))

    ros = [
        (0.0, 0.0, 0.0),
        (-0.5, 0.5, -0.5),
        (0.5, 0.5, 0.5),
        (0.0, 0.5, 0.0),
        (0.0, 0.5, 0.5),
        (-2.0, -2.0, -2.0),
    ]
    rds = [
        (1.0, 0.0, 0.0),
        (-1.0, 0.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, -1.0, 0.0),
        (0.0, 0.0, 1.0),
        (0.0, 0.0, -1.0),
    ]

    hits = 0
    for ro in ros:
        for rd in rds:
            result = ray_box_intersect(ro, rd, bb)
            if result is not None:
                near, far = result
                hits += 1
                assert math.isfinite(near)
                assert math.isfinite(far)
                assert near <= far
                assert near >= 0.0
                assert far >= 0.0
    assert hits > 0


def test_ray_box_hit_from_outside():
    bb = Aabb(min=(0.0, 0.0, 0.0), max=(1.0, 1.0, 1.0))
    assert ray_box_intersect((-1.0, 0.5, 0.5), (1.0, 0.0, 0.0), bb) == (1.0, 2.0)


def test_ray_box_hit_from_inside():
    bb = Aabb(min=(0.0, 0.0, 0.0), max=(1.0, 1.0, 1.0))
    assert ray_box_intersect((0.5, 0.5, 0.5), (1.0, 0.0, 0.0), bb) == (0.0, 0.5)


def test_ray_box_miss():
    bb = Aabb(min=(0.0, 0.0, 0.0), max=(1.0, 1.0, 1.0))
    assert ray_box_intersect((-1.0, 0.5, 0.5), (-1.0, 0.0, 0.0), bb) is None
    assert ray_box_intersect((-2.0, -2.0, -2.0), (1.0, 0.0, 0.0), bb) is None


def test_aabb_from_bottom_and_size():
    aabb = aabb_from_bottom_and_size((0.0, 0.0, 0.0), (1.0, 2.0, 1.0))
    assert aabb == Aabb(min=(-0.5, 0.0, -0.5), max=(0.5, 2.0, 0.5))


def test_chunks_in_view_distance_zero():
    center = ChunkPos(0, 0)
    chunks = list(chunks_in_view_distance(center, 0))
    assert len(chunks) == 29
    assert center in chunks
    assert ChunkPos(3, 0) in chunks
    assert ChunkPos(3, 1) not in chunks


def test_chunks_in_view_distance_invariants():
    center = ChunkPos(5, -7)
    chunks = list(chunks_in_view_distance(center, 2))
    assert len(chunks) == len(set(chunks))
    assert all(is_chunk_in_view_distance(center, p, 2) for p in chunks)
    assert [(p.z, p.x) for p in chunks] == sorted((p.z, p.x) for p in chunks)


def test_is_chunk_in_view_distance():
    assert is_chunk_in_view_distance(ChunkPos(0, 0), ChunkPos(0, 5), 2) is True
    assert is_chunk_in_view_distance(ChunkPos(0, 0), ChunkPos(0, 6), 2) is False


def test_view_distance_out_of_range():
    with pytest.raises(ValueError):
        is_chunk_in_view_distance(ChunkPos(0, 0), ChunkPos(0, 0), 256)


@pytest.mark.parametrize(
    "n, expected",
    [(1, 0), (2, 1), (3, 2), (4, 2), (5, 3), (1024, 10), (1025, 11), ((1 << 63) + 1, 64)],
)
def test_log2_ceil(n, expected):
    assert log2_ceil(n) == expected


def test_log2_ceil_zero():
    with pytest.raises(ValueError):
        log2_ceil(0)