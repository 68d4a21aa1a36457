from numbers import Real

from shaperun import db, socketio
from shaperun.models import Player, GameStat, LeaderboardEntry


class InvalidStatError(ValueError):
    pass


def _as_number(value, field):
    # bool is an int subclass; a JSON true is not a score
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidStatError(f'{field} must be a number')
    return float(value)


def record_game_stats(player: Player, score, time) -> GameStat:
    """Append a finished run to the player's stats and the leaderboard board.

    Commits the session and notifies the ``social`` room. Raises
    InvalidStatError for non-numeric input; database errors propagate after
    the caller rolls back.
    """
    score = _as_number(score, 'score')
    time = _as_number(time, 'time')
    stat = GameStat(player=player, score=score, time=time)
    db.session.add(stat)
    db.session.add(LeaderboardEntry(username=player.acct_name, score=score, time=time))
    db.session.commit()
    socketio.emit('leaderboard_update', {'username': player.acct_name}, to='social', namespace='/ws')
    return stat


def save_score_for_username(app, username: str, score, time) -> bool:
    """Background-task entry point used by the game loop at game over.

    Returns False (and logs) on any failure; nothing is retried.
    """
    with app.app_context():
        player = Player.query.filter_by(acct_name=username).first()
        if not player:
            app.logger.warning(f"[stats-save] user={username} not found, score={score} discarded")
            return False
        try:
            record_game_stats(player, score, time)
        except Exception:
            db.session.rollback()
            app.logger.exception(f"[stats-save] user={username} failed to save score={score}")
            return False
        app.logger.info(f"[stats-save] user={username} score={score} time={time}")
        return True
