import random
import threading
from typing import Dict, Optional

from flask import current_app, request
from flask_login import current_user
from flask_socketio import join_room, leave_room, emit

from shaperun import socketio
from shaperun.engine import AssetLoader, AssetLoadError, GameController, ManualScheduler, SocketIOScheduler
from shaperun.engine.display import RecordingSurface
from shaperun.services.stats import save_score_for_username

SOCIAL_ROOM = 'social'


class GameSession:
    """One browser tab's game: the controller plus the lock its frames and inputs share."""

    def __init__(self, sid: str, namespace: str, username: Optional[str]):
        self.sid = sid
        self.namespace = namespace
        self.username = username
        self.lock = threading.Lock()
        self.controller: Optional[GameController] = None

    def emit(self, event, payload):
        socketio.emit(event, payload, to=self.sid, namespace=self.namespace)

    def frame_payload(self, commands):
        state = self.controller.state
        return {
            'commands': commands,
            'status': state.status.value,
            'score': int(state.score // 10),
            'elapsed': round(state.elapsed_time / 1000.0, 2),
        }


_sessions: Dict[str, GameSession] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore


def handle_connect(auth=None):
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    _end_game(_get_sid())


def handle_ping(data):
    emit('pong', data or {})


def handle_join_social(data=None):
    join_room(SOCIAL_ROOM)
    emit('joined', {'room': SOCIAL_ROOM})


def handle_leave_social(data=None):
    leave_room(SOCIAL_ROOM)
    emit('left', {'room': SOCIAL_ROOM})


# ---- game sessions ----

def _build_scheduler(app, lock):
    # Frames only advance on demand under test
    if app.config.get('TESTING'):
        return ManualScheduler()
    return SocketIOScheduler(socketio, app.config.get('GAME_FRAME_INTERVAL_MS', 16), lock=lock)


def _score_sink(app, game: GameSession):
    def _save(score, elapsed):
        if not game.username:
            app.logger.info(f"[score-skip] sid={game.sid} anonymous score={score:.0f} not saved")
            return
        if app.config.get('TESTING'):
            save_score_for_username(app, game.username, score, elapsed)
        else:
            socketio.start_background_task(save_score_for_username, app, game.username, score, elapsed)
    return _save


def handle_start_game(data=None):
    sid = _get_sid()
    app = current_app._get_current_object()
    _end_game(sid)

    asset_dir = app.config.get('GAME_ASSET_DIR')
    try:
        assets = AssetLoader(asset_dir).load_all()
    except AssetLoadError as exc:
        app.logger.error(f"[game-start] sid={sid} asset load failed: {exc}")
        emit('error', {'message': 'Game assets failed to load'})
        return

    username = current_user.acct_name if current_user.is_authenticated else None
    game = GameSession(sid, request.namespace, username)
    seed = (data or {}).get('seed') if app.config.get('TESTING') else None
    game.controller = GameController(
        scheduler=_build_scheduler(app, game.lock),
        surface=RecordingSurface(on_present=lambda commands: game.emit('frame', game.frame_payload(commands))),
        assets=assets,
        rng=random.Random(seed),
        on_title=lambda text: game.emit('title', {'text': text}),
        on_game_over=_score_sink(app, game),
        logger=app.logger,
    )
    _sessions[sid] = game

    delay = float(app.config.get('GAME_START_DELAY_SEC', 0) or 0)
    emit('game_started', {
        'assets': {name: asset.url for name, asset in assets.items()},
        'width': game.controller.surface.width,
        'height': game.controller.surface.height,
        'start_delay': delay,
    })
    app.logger.info(f"[game-start] sid={sid} user={username or 'anonymous'} delay={delay}s")

    if app.config.get('TESTING') or delay <= 0:
        with game.lock:
            game.controller.start()
        return

    def _delayed_start(expected: GameSession):
        socketio.sleep(delay)
        if _sessions.get(expected.sid) is not expected:
            return
        with expected.lock:
            expected.controller.start()

    socketio.start_background_task(_delayed_start, game)


_INPUT_ACTIONS = {
    'jump_start': GameController.jump_start,
    'jump_end': GameController.jump_end,
    'pause_toggle': GameController.toggle_pause,
    'accelerate_start': GameController.accelerate_start,
    'accelerate_end': GameController.accelerate_end,
}


def handle_game_input(data):
    action = (data or {}).get('action')
    game = _sessions.get(_get_sid())
    if game is None:
        emit('error', {'message': 'No game in progress'})
        return
    handler = _INPUT_ACTIONS.get(action)
    if handler is None:
        emit('error', {'message': f'Unknown action: {action}'})
        return
    with game.lock:
        handler(game.controller)


def handle_restart_game(data=None):
    game = _sessions.get(_get_sid())
    if game is None:
        emit('error', {'message': 'No game in progress'})
        return
    with game.lock:
        game.controller.restart()


def handle_stop_game(data=None):
    if _end_game(_get_sid()):
        emit('game_stopped', {})


def _end_game(sid: str) -> bool:
    game = _sessions.pop(sid, None)
    if game is None:
        return False
    with game.lock:
        game.controller.destroy()
    return True


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'ping': handle_ping,
        'join_social': handle_join_social,
        'leave_social': handle_leave_social,
        'start_game': handle_start_game,
        'game_input': handle_game_input,
        'restart_game': handle_restart_game,
        'stop_game': handle_stop_game,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
