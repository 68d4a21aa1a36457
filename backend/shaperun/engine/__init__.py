"""Framework-free Shape Run simulation.

The web layer supplies the scheduler, clock, display surface and sinks;
nothing in this package imports Flask.
"""

from .assets import Asset, AssetLoader, AssetLoadError
from .collision import CollisionOutcome, resolve_collision, resolve_collisions
from .loop import GameController
from .obstacles import ObstacleLayoutError, generate_batch, validate_batch
from .scheduler import FrameScheduler, ManualScheduler, SocketIOScheduler
from .state import GameState, GameStatus, Obstacle, ObstacleKind, Player

__all__ = [
    'Asset', 'AssetLoader', 'AssetLoadError', 'CollisionOutcome', 'FrameScheduler',
    'GameController', 'GameState', 'GameStatus', 'ManualScheduler', 'Obstacle',
    'ObstacleKind', 'ObstacleLayoutError', 'Player', 'SocketIOScheduler',
    'generate_batch', 'resolve_collision', 'resolve_collisions', 'validate_batch',
]
