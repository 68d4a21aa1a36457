import random

import pytest

from shaperun.engine.obstacles import (
    GROUND_LEVEL,
    MIN_SPACING,
    ObstacleLayoutError,
    WALL_WIDTH,
    generate_batch,
    generate_cluster,
    generate_single,
    make_spike,
    make_wall,
    next_interval,
    spawn_x,
    validate_batch,
)
from shaperun.engine.state import CANVAS_WIDTH, ObstacleKind


def _walls(batch):
    return [o for o in batch if o.kind is not ObstacleKind.SPIKE]


def _spike_indices(batch):
    walls = _walls(batch)
    return [next(i for i, w in enumerate(walls) if w.x == s.x)
            for s in batch if s.kind is ObstacleKind.SPIKE]


def test_batches_never_overlap_in_x():
    rng = random.Random(1234)
    obstacles = []
    for _ in range(300):
        start = spawn_x(obstacles)
        previous_edge = max((o.right for o in obstacles), default=None)
        batch = generate_batch(start, rng)
        if previous_edge is not None:
            assert min(o.x for o in batch) >= previous_edge + MIN_SPACING
        obstacles.extend(batch)

    grounded = sorted((o for o in obstacles if o.bottom == GROUND_LEVEL), key=lambda o: o.x)
    for left, right in zip(grounded, grounded[1:]):
        assert right.x >= left.right


@pytest.mark.parametrize('seed', range(40))
def test_cluster_spike_rules(seed):
    rng = random.Random(seed)
    for size in range(5, 24):
        batch = generate_cluster(1000, rng, size=size)
        walls = _walls(batch)
        assert len(walls) == size
        indices = _spike_indices(batch)
        assert len(indices) <= size // 10
        for i, index in enumerate(indices):
            assert index >= 7
            assert index <= size - 3
            if i:
                assert index - indices[i - 1] >= 5
        validate_batch(batch)


def test_cluster_walls_are_contiguous_and_grounded():
    batch = generate_cluster(900, random.Random(7), size=12)
    walls = _walls(batch)
    assert [w.x for w in walls] == [900 + i * WALL_WIDTH for i in range(12)]
    assert all(w.bottom == GROUND_LEVEL for w in walls)


def test_cluster_keeps_height_runs_of_five():
    rng = random.Random(99)
    for _ in range(50):
        walls = _walls(generate_cluster(0, rng, size=23))
        run = 1
        for previous, current in zip(walls, walls[1:]):
            if current.kind is previous.kind:
                run += 1
            else:
                assert run >= 5
                run = 1


def test_cluster_spikes_sit_on_their_wall():
    rng = random.Random(3)
    found = False
    for _ in range(200):
        batch = generate_cluster(0, rng, size=23)
        for spike in (o for o in batch if o.kind is ObstacleKind.SPIKE):
            wall = next(w for w in _walls(batch) if w.x == spike.x)
            assert spike.bottom == wall.y
            found = True
    assert found


def test_single_spike_batch_is_grounded():
    class Rolls(random.Random):
        def random(self):
            return 0.95

        def randint(self, a, b):
            return 2

    batch = generate_single(500, Rolls())
    assert [o.kind for o in batch] == [ObstacleKind.SPIKE, ObstacleKind.SPIKE]
    assert [o.x for o in batch] == [500, 520]
    assert all(o.bottom == GROUND_LEVEL for o in batch)


def test_spawn_x_defaults_offscreen():
    assert spawn_x([]) == CANVAS_WIDTH + 40
    far = make_wall(ObstacleKind.WALL_TALL, 1000)
    assert spawn_x([far]) == far.right + MIN_SPACING
    near = make_wall(ObstacleKind.WALL_TALL, 100)
    assert spawn_x([near]) == CANVAS_WIDTH + 40


def test_next_interval_bounds():
    rng = random.Random(5)
    values = {next_interval(rng) for _ in range(2000)}
    assert min(values) >= 90
    assert max(values) <= 150


def test_validate_rejects_overlapping_walls():
    with pytest.raises(ObstacleLayoutError):
        validate_batch([make_wall(ObstacleKind.WALL_TALL, 0), make_wall(ObstacleKind.WALL_SHORT, 20)])


def test_validate_rejects_spike_too_early():
    walls = [make_wall(ObstacleKind.WALL_SHORT, i * WALL_WIDTH) for i in range(20)]
    spike = make_spike(walls[3].x, walls[3].y)
    with pytest.raises(ObstacleLayoutError):
        validate_batch(walls + [spike])


def test_validate_rejects_too_many_spikes():
    walls = [make_wall(ObstacleKind.WALL_SHORT, i * WALL_WIDTH) for i in range(15)]
    spikes = [make_spike(walls[i].x, walls[i].y) for i in (7, 12)]
    with pytest.raises(ObstacleLayoutError):
        validate_batch(walls + spikes)
