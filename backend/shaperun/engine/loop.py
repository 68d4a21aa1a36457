"""The Shape Run game loop.

One ``GameController`` owns one ``GameState`` for the lifetime of a play
session. Every frame runs the same fixed sequence: advance the clock,
schedule the next frame, clear, scroll the background, move the player,
move/spawn/prune obstacles, resolve collisions, then draw the player and
the obstacles. Input handlers only flip flags that the next frame reads.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Optional

from .assets import Asset
from .clock import wall_clock_ms
from .collision import CollisionOutcome, resolve_collisions
from .display import DisplaySurface
from .obstacles import generate_batch, next_interval, spawn_x
from .physics import end_jump, set_accelerating, start_jump, update_player
from .scheduler import FrameScheduler
from .state import (
    SCORE_PER_SECOND,
    SPEED_UP_FACTOR,
    SPEED_UP_INTERVAL_MS,
    GameState,
    GameStatus,
    create_game_state,
)

TITLE_PLAYING = 'Play Shape Run'
TITLE_GAME_OVER = 'Game Over'
PAUSE_OVERLAY = 'rgba(0, 0, 0, 0.5)'

GameOverSink = Callable[[float, float], None]


class GameController:
    def __init__(
        self,
        scheduler: FrameScheduler,
        surface: DisplaySurface,
        assets: Dict[str, Asset],
        clock: Callable[[], float] = wall_clock_ms,
        rng: Optional[random.Random] = None,
        on_title: Optional[Callable[[str], None]] = None,
        on_game_over: Optional[GameOverSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.scheduler = scheduler
        self.surface = surface
        self.assets = assets
        self.clock = clock
        self.rng = rng or random.Random()
        self.on_title = on_title
        self.on_game_over = on_game_over
        self.logger = logger or logging.getLogger(__name__)
        self.state: GameState = create_game_state()
        self.frame_handle: Optional[int] = None
        self.frames = 0
        self.started = False
        self.destroyed = False
        self._title_missing_logged = False

    # ---- lifecycle ----

    @property
    def status(self) -> GameStatus:
        return self.state.status

    def start(self) -> None:
        """Begin the first run. Calling it again is a no-op."""
        if self.started or self.destroyed:
            return
        self.started = True
        self._reinitialize()
        self._set_title(TITLE_PLAYING)
        self._schedule_next()

    def restart(self) -> None:
        if self.destroyed:
            return
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.started = True
        self._reinitialize()
        self._set_title(TITLE_PLAYING)
        self._schedule_next()
        self.logger.info('[game-restart] state reinitialized')

    def destroy(self) -> None:
        if self.destroyed:
            return
        self.destroyed = True
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.scheduler.close()

    def _reinitialize(self) -> None:
        self.state = create_game_state(start_time=self.clock())
        self.frames = 0

    # ---- pause control ----
    # Before start() there is no clock origin, so pause and jump wait for the first run.

    def pause(self) -> bool:
        state = self.state
        if not self.started or state.status is not GameStatus.RUNNING:
            return False
        state.status = GameStatus.PAUSED
        state.pause_start = self.clock()
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.surface.fill_rect(PAUSE_OVERLAY, 0, 0, self.surface.width, self.surface.height)
        self.surface.present()
        return True

    def resume(self) -> bool:
        state = self.state
        if not self.started or state.status is not GameStatus.PAUSED:
            return False
        state.total_pause_time += self.clock() - state.pause_start
        state.pause_start = None
        state.status = GameStatus.RUNNING
        self._schedule_next()
        return True

    def toggle_pause(self) -> bool:
        if self.state.status is GameStatus.PAUSED:
            return self.resume()
        return self.pause()

    # ---- input ----

    def jump_start(self) -> bool:
        if not self.started or not self.state.running:
            return False
        return start_jump(self.state, self.clock())

    def jump_end(self) -> None:
        end_jump(self.state)

    def accelerate_start(self) -> None:
        set_accelerating(self.state, True)

    def accelerate_end(self) -> None:
        set_accelerating(self.state, False)

    # ---- frame ----

    def _schedule_next(self) -> None:
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = self.scheduler.schedule(self.tick)

    def tick(self) -> None:
        self.frame_handle = None
        if not self.started or not self.state.running or self.destroyed:
            return

        now = self.advance_clock()
        self._schedule_next()

        self.surface.clear()
        self.draw_background()
        update_player(self.state, now)
        self.update_obstacles()
        outcome = resolve_collisions(self.state)
        if outcome.terminal:
            self.game_over(outcome)
        self.draw_player()
        self.draw_obstacles()
        self.surface.present()
        self.frames += 1

    def advance_clock(self) -> float:
        """Recompute elapsed simulated time, accrue score, apply a due speed-up."""
        state = self.state
        now = self.clock()
        previous = state.elapsed_time
        state.elapsed_time = now - state.start_time - state.total_pause_time
        delta = max(0.0, state.elapsed_time - previous)
        state.score += delta / 1000.0 * SCORE_PER_SECOND * state.multiplier

        if state.elapsed_time - state.last_speed_up >= SPEED_UP_INTERVAL_MS:
            self.speed_up()
            state.last_speed_up = state.elapsed_time
        return now

    def speed_up(self) -> None:
        self.state.scroll_speed *= SPEED_UP_FACTOR
        self.state.multiplier *= SPEED_UP_FACTOR

    def update_obstacles(self) -> None:
        state = self.state
        for obstacle in state.obstacles:
            obstacle.x -= state.scroll_speed
        state.obstacles = [o for o in state.obstacles if o.right > 0]

        state.obstacle_timer += 1
        if state.obstacle_timer >= state.obstacle_interval:
            self.spawn_obstacles()
            state.obstacle_timer = 0

    def spawn_obstacles(self) -> None:
        state = self.state
        start = spawn_x(state.obstacles, self.surface.width)
        state.obstacles.extend(generate_batch(start, self.rng))
        state.obstacle_interval = next_interval(self.rng)

    def game_over(self, cause: Optional[CollisionOutcome] = None) -> None:
        state = self.state
        if state.status is GameStatus.GAME_OVER:
            return
        state.status = GameStatus.GAME_OVER
        self.scheduler.cancel(self.frame_handle)
        self.frame_handle = None
        self.logger.info(
            '[game-over] cause=%s score=%.0f elapsed=%.2fs',
            cause.value if cause else 'manual', state.score, state.elapsed_time / 1000.0,
        )
        self._set_title(TITLE_GAME_OVER)
        self._save_score()

    def _save_score(self) -> None:
        if self.on_game_over is None:
            return
        try:
            self.on_game_over(self.state.score, self.state.elapsed_time / 1000.0)
        except Exception:
            self.logger.exception('[game-over] failed to hand off score')

    def _set_title(self, text: str) -> None:
        if self.on_title is None:
            if not self._title_missing_logged:
                self.logger.error('Title element not found; title updates disabled')
                self._title_missing_logged = True
            return
        self.on_title(text)

    # ---- render ----

    def draw_background(self) -> None:
        state = self.state
        background = self.assets['background']
        state.background_x -= state.scroll_speed
        self.surface.draw_image(background.name, state.background_x, 0, background.width, self.surface.height)
        self.surface.draw_image(background.name, state.background_x + background.width, 0,
                                background.width, self.surface.height)
        if state.background_x <= -background.width:
            state.background_x = 0

    def draw_player(self) -> None:
        player = self.state.player
        self.surface.draw_image(self.assets['player'].name, player.x, player.y, player.width, player.height)

    def draw_obstacles(self) -> None:
        for obstacle in self.state.obstacles:
            self.surface.draw_image(self.assets[obstacle.kind.value].name,
                                    obstacle.x, obstacle.y, obstacle.width, obstacle.height)
