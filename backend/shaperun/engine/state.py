"""Entity and state model for the Shape Run side-scroller."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from typing import List, Optional

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 400

# Obstacles stand on GROUND_LEVEL; the player's floor is PLAYER_FLOOR_Y (top edge).
GROUND_LEVEL = 350
PLAYER_FLOOR_Y = 300
PLAYER_START_X = 300
PLAYER_SIZE = 50

SCROLL_SPEED = 4
NORMAL_GRAVITY = 1.0
REDUCED_GRAVITY = 0.3
JUMP_FORCE = -10
MAX_FLOAT_MS = 200

OBSTACLE_INTERVAL = 120
MIN_OBSTACLE_INTERVAL = 90
MAX_OBSTACLE_INTERVAL = 150

SPEED_UP_INTERVAL_MS = 4950
SPEED_UP_FACTOR = 1.05

# 10 points per frame at 60fps
SCORE_PER_SECOND = 600

ACCELERATION_STEP = 5
MAX_RIGHT_X = PLAYER_START_X


class ObstacleKind(str, enum.Enum):
    WALL_TALL = 'wall-tall'
    WALL_MEDIUM = 'wall-medium'
    WALL_SHORT = 'wall-short'
    SPIKE = 'spike'

    @property
    def lethal(self) -> bool:
        return self is ObstacleKind.SPIKE


class GameStatus(str, enum.Enum):
    RUNNING = 'running'
    PAUSED = 'paused'
    GAME_OVER = 'game_over'


@dataclass
class Player:
    x: float = PLAYER_START_X
    y: float = PLAYER_FLOOR_Y
    width: float = PLAYER_SIZE
    height: float = PLAYER_SIZE
    velocity_y: float = 0.0
    is_jumping: bool = False
    jump_start_time: Optional[float] = None
    is_holding_jump: bool = False
    is_accelerating_right: bool = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass
class Obstacle:
    kind: ObstacleKind
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass
class GameState:
    scroll_speed: float = SCROLL_SPEED
    background_x: float = 0.0
    player: Player = field(default_factory=Player)
    normal_gravity: float = NORMAL_GRAVITY
    reduced_gravity: float = REDUCED_GRAVITY
    current_gravity: float = NORMAL_GRAVITY
    jump_force: float = JUMP_FORCE
    max_float_time: float = MAX_FLOAT_MS
    obstacles: List[Obstacle] = field(default_factory=list)
    obstacle_timer: int = 0
    obstacle_interval: int = OBSTACLE_INTERVAL
    status: GameStatus = GameStatus.RUNNING
    start_time: Optional[float] = None
    elapsed_time: float = 0.0
    pause_start: Optional[float] = None
    total_pause_time: float = 0.0
    score: float = 0.0
    multiplier: float = 1.0
    last_speed_up: float = 0.0

    @property
    def running(self) -> bool:
        return self.status is GameStatus.RUNNING

    def snapshot(self) -> dict:
        data = asdict(self)
        data['status'] = self.status.value
        for obstacle in data['obstacles']:
            obstacle['kind'] = obstacle['kind'].value
        return data


def create_game_state(start_time: Optional[float] = None) -> GameState:
    return GameState(start_time=start_time)
