import os

BASEDIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASEDIR, 'shaperun.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Cookie session
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = os.environ.get('SESSION_COOKIE_SECURE', '0') == '1'
    # Game loop pacing (ms between frames, ~60fps)
    GAME_FRAME_INTERVAL_MS = int(os.environ.get('GAME_FRAME_INTERVAL_MS', '16'))
    # Start overlay hold time before the first frame (seconds)
    GAME_START_DELAY_SEC = float(os.environ.get('GAME_START_DELAY_SEC', '5'))
    # Where the sprite images live; defaults to the package static folder
    GAME_ASSET_DIR = os.environ.get('GAME_ASSET_DIR') or os.path.join(BASEDIR, 'shaperun', 'static', 'imgs')
