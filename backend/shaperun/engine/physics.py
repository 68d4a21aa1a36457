from .state import ACCELERATION_STEP, MAX_RIGHT_X, PLAYER_FLOOR_Y, GameState


def start_jump(state: GameState, now_ms: float) -> bool:
    """Begin a jump if grounded. Holding starts either way."""
    player = state.player
    started = False
    if not player.is_jumping:
        player.velocity_y = state.jump_force
        player.is_jumping = True
        player.jump_start_time = now_ms
        started = True
    player.is_holding_jump = True
    return started


def end_jump(state: GameState) -> None:
    state.player.is_holding_jump = False
    state.current_gravity = state.normal_gravity


def set_accelerating(state: GameState, active: bool) -> None:
    state.player.is_accelerating_right = active


def select_gravity(state: GameState, now_ms: float) -> float:
    player = state.player
    floating = (
        player.is_jumping
        and player.is_holding_jump
        and player.jump_start_time is not None
        and now_ms - player.jump_start_time <= state.max_float_time
    )
    state.current_gravity = state.reduced_gravity if floating else state.normal_gravity
    return state.current_gravity


def update_player(state: GameState, now_ms: float) -> None:
    player = state.player

    player.velocity_y += select_gravity(state, now_ms)
    player.y += player.velocity_y

    if player.y > PLAYER_FLOOR_Y:
        player.y = PLAYER_FLOOR_Y
        player.velocity_y = 0
        player.is_jumping = False

    # lean forward, capped at the start column
    if player.is_accelerating_right:
        player.x = min(player.x + ACCELERATION_STEP, MAX_RIGHT_X)
