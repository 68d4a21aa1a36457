from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5000",
    "http://127.0.0.1:5000",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__, static_folder='static', static_url_path='')
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from shaperun.pages import pages
    flask_app.register_blueprint(pages)

    from shaperun.auth import auth
    flask_app.register_blueprint(auth)

    from shaperun.profile import profile
    flask_app.register_blueprint(profile)

    from shaperun.social import social
    flask_app.register_blueprint(social)

    from shaperun.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from shaperun.models import Player

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(Player, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Unauthorized: Please log in'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed players
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                player = Player(acct_name=u, real_name=u.capitalize())
                player.set_password('password')
                db.session.add(player)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
