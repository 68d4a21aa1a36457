"""Procedural obstacle generation.

A spawn event produces one batch: either a cluster (a contiguous run of
walls, optionally topped with spikes) or a single obstacle. Every batch is
checked by ``validate_batch`` before it is returned, so the layout rules
hold by construction rather than by chance.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Sequence

from .state import (
    CANVAS_WIDTH,
    GROUND_LEVEL,
    MAX_OBSTACLE_INTERVAL,
    MIN_OBSTACLE_INTERVAL,
    Obstacle,
    ObstacleKind,
)

WALL_WIDTH = 40
WALL_HEIGHTS = {
    ObstacleKind.WALL_TALL: 100,
    ObstacleKind.WALL_MEDIUM: 80,
    ObstacleKind.WALL_SHORT: 60,
}
WALL_KINDS = (ObstacleKind.WALL_TALL, ObstacleKind.WALL_MEDIUM, ObstacleKind.WALL_SHORT)

SPIKE_WIDTH = 20
SPIKE_HEIGHT = 30

SPAWN_OFFSET = 40
MIN_SPACING = 80

CLUSTER_CHANCE = 0.7
MIN_CLUSTER_SIZE = 5
MAX_CLUSTER_SIZE = 23
MIN_RUN_LENGTH = 5

SPIKE_FIRST_INDEX = 7
SPIKE_TAIL_GAP = 2
SPIKE_MIN_DISTANCE = 5
SPIKES_PER_WALLS = 10
SPIKE_CHANCE = 0.5


class ObstacleLayoutError(ValueError):
    """A generated batch broke a placement rule."""


def next_interval(rng: random.Random) -> int:
    return rng.randint(MIN_OBSTACLE_INTERVAL, MAX_OBSTACLE_INTERVAL)


def rightmost_edge(obstacles: Iterable[Obstacle]):
    edges = [o.right for o in obstacles]
    return max(edges) if edges else None


def spawn_x(obstacles: Sequence[Obstacle], canvas_width: float = CANVAS_WIDTH) -> float:
    """Left edge for the next batch: off-screen and clear of the previous batch."""
    start = canvas_width + SPAWN_OFFSET
    edge = rightmost_edge(obstacles)
    if edge is None:
        return start
    return max(start, edge + MIN_SPACING)


def make_wall(kind: ObstacleKind, x: float) -> Obstacle:
    height = WALL_HEIGHTS[kind]
    return Obstacle(kind=kind, x=x, y=GROUND_LEVEL - height, width=WALL_WIDTH, height=height)


def make_spike(x: float, base_y: float = GROUND_LEVEL) -> Obstacle:
    return Obstacle(kind=ObstacleKind.SPIKE, x=x, y=base_y - SPIKE_HEIGHT,
                    width=SPIKE_WIDTH, height=SPIKE_HEIGHT)


def spike_slot_allowed(index: int, cluster_size: int, last_spike: float, spikes_added: int) -> bool:
    return (
        index >= SPIKE_FIRST_INDEX
        and index <= cluster_size - 1 - SPIKE_TAIL_GAP
        and index - last_spike >= SPIKE_MIN_DISTANCE
        and spikes_added < cluster_size // SPIKES_PER_WALLS
    )


def generate_cluster(start_x: float, rng: random.Random, size: Optional[int] = None) -> List[Obstacle]:
    """Contiguous wall run; each height class holds for at least MIN_RUN_LENGTH walls."""
    if size is None:
        size = rng.randint(MIN_CLUSTER_SIZE, MAX_CLUSTER_SIZE)
    batch: List[Obstacle] = []
    last_kind = None
    same_count = 0
    last_spike = float('-inf')
    spikes_added = 0
    x = start_x
    for i in range(size):
        if same_count < MIN_RUN_LENGTH and last_kind is not None:
            kind = last_kind
        else:
            kind = rng.choice(WALL_KINDS)
        same_count = same_count + 1 if kind is last_kind else 1
        last_kind = kind

        wall = make_wall(kind, x)
        batch.append(wall)

        if spike_slot_allowed(i, size, last_spike, spikes_added) and rng.random() < SPIKE_CHANCE:
            batch.append(make_spike(x, wall.y))
            last_spike = i
            spikes_added += 1
        x += WALL_WIDTH
    return batch


def generate_single(start_x: float, rng: random.Random) -> List[Obstacle]:
    """One wall of a random height, or a ground run of one or two spikes."""
    roll = rng.random()
    if roll < 0.3:
        return [make_wall(ObstacleKind.WALL_TALL, start_x)]
    if roll < 0.6:
        return [make_wall(ObstacleKind.WALL_MEDIUM, start_x)]
    if roll < 0.9:
        return [make_wall(ObstacleKind.WALL_SHORT, start_x)]
    count = rng.randint(1, 2)
    return [make_spike(start_x + i * SPIKE_WIDTH) for i in range(count)]


def generate_batch(start_x: float, rng: random.Random) -> List[Obstacle]:
    if rng.random() < CLUSTER_CHANCE:
        batch = generate_cluster(start_x, rng)
    else:
        batch = generate_single(start_x, rng)
    validate_batch(batch)
    return batch


def _overlaps(a: Obstacle, b: Obstacle) -> bool:
    return a.x < b.right and b.x < a.right and a.y < b.bottom and b.y < a.bottom


def validate_batch(batch: Sequence[Obstacle]) -> None:
    """Raise ObstacleLayoutError unless the batch obeys every placement rule.

    - grounded pieces (walls and ground spikes) never share x
    - a spike never intersects a wall; cluster spikes sit on top of a wall
    - cluster spikes respect the index window, spacing and per-cluster cap
    """
    walls = [o for o in batch if not o.kind.lethal]
    grounded = sorted((o for o in batch if o.bottom == GROUND_LEVEL), key=lambda o: o.x)
    for left, right in zip(grounded, grounded[1:]):
        if right.x < left.right:
            raise ObstacleLayoutError(f'obstacles overlap at x={right.x}')

    for spike in (o for o in batch if o.kind.lethal):
        for wall in walls:
            if _overlaps(spike, wall):
                raise ObstacleLayoutError(f'spike at x={spike.x} intersects a wall')

    if len(walls) < 2:
        return
    size = len(walls)
    previous = float('-inf')
    count = 0
    for spike in (o for o in batch if o.kind.lethal):
        index = next((i for i, w in enumerate(walls) if w.x == spike.x and w.y == spike.bottom), None)
        if index is None:
            raise ObstacleLayoutError(f'cluster spike at x={spike.x} is not mounted on a wall')
        if not spike_slot_allowed(index, size, previous, count):
            raise ObstacleLayoutError(f'spike at wall index {index} breaks cluster spacing')
        previous = index
        count += 1
