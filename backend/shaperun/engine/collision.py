"""Axis-aligned collision tests and wall push-out.

Resolution is a pure function of the player and obstacle geometry plus the
player's vertical velocity. It never reads the clock or the RNG.
"""

from __future__ import annotations

import enum
from typing import Iterable, Optional

from .state import GameState, Obstacle, Player


class CollisionOutcome(enum.Enum):
    NONE = 'none'
    LANDED = 'landed'
    HIT_UNDERSIDE = 'hit_underside'
    PUSHED = 'pushed'
    PASSED = 'passed'
    LETHAL = 'lethal'
    SQUEEZED = 'squeezed'

    @property
    def terminal(self) -> bool:
        return self in (CollisionOutcome.LETHAL, CollisionOutcome.SQUEEZED)


def is_colliding(player: Player, obstacle: Obstacle) -> bool:
    return (
        player.x < obstacle.right
        and player.x + player.width > obstacle.x
        and player.y < obstacle.bottom
        and player.y + player.height > obstacle.y
    )


def overlap_depths(player: Player, obstacle: Obstacle):
    overlap_x = min(player.x + player.width - obstacle.x, obstacle.right - player.x)
    overlap_y = min(player.y + player.height - obstacle.y, obstacle.bottom - player.y)
    return overlap_x, overlap_y


def resolve_collision(player: Player, obstacle: Obstacle) -> CollisionOutcome:
    """Push the player out of ``obstacle`` along the shallower axis."""
    if not is_colliding(player, obstacle):
        return CollisionOutcome.NONE

    if obstacle.kind.lethal:
        return CollisionOutcome.LETHAL

    overlap_x, overlap_y = overlap_depths(player, obstacle)

    if overlap_y < overlap_x:
        if player.center_y < obstacle.center_y:
            player.y = obstacle.y - player.height
            player.velocity_y = 0
            player.is_jumping = False
            outcome = CollisionOutcome.LANDED
        else:
            player.y = obstacle.bottom
            player.velocity_y = 0
            outcome = CollisionOutcome.HIT_UNDERSIDE
    else:
        # rising players slip past the side they are jumping over
        if player.velocity_y < 0:
            return CollisionOutcome.PASSED
        if player.center_x < obstacle.center_x:
            player.x = obstacle.x - player.width
        else:
            player.x = obstacle.right
        player.velocity_y = 0
        outcome = CollisionOutcome.PUSHED

    if player.x <= 0:
        return CollisionOutcome.SQUEEZED
    return outcome


def resolve_collisions(state: GameState, obstacles: Optional[Iterable[Obstacle]] = None) -> CollisionOutcome:
    """Resolve against every obstacle in spawn order, stopping at the first terminal hit."""
    player = state.player
    for obstacle in state.obstacles if obstacles is None else obstacles:
        outcome = resolve_collision(player, obstacle)
        if outcome.terminal:
            return outcome
    return CollisionOutcome.NONE
