from flask import Blueprint, request, jsonify, session, current_app
from flask_login import login_user, logout_user, current_user
from shaperun import db
from shaperun.models import Player, DEFAULT_PICTURE

auth = Blueprint('auth', __name__)


@auth.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({'message': 'Username and password are required'}), 400

    if Player.query.filter_by(acct_name=username).first():
        return jsonify({'message': 'Username already exists'}), 400

    player = Player(
        acct_name=username,
        email=data.get('email') or '',
        real_name=data.get('real_name') or '',
        profile_picture=data.get('picture') or DEFAULT_PICTURE,
        bio=data.get('bio') or '',
    )
    player.set_password(password)
    try:
        db.session.add(player)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[register] user={username} failed")
        return jsonify({'message': 'Internal server error'}), 500
    current_app.logger.info(f"[register] user={username}")
    return jsonify({'message': 'User registered successfully'}), 200


@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return jsonify({'message': 'Username and password are required'}), 400

    player = Player.query.filter_by(acct_name=username).first()
    if not player:
        return jsonify({'message': 'User not found'}), 404

    if not player.check_password(password):
        current_app.logger.info(f"[login] user={username} bad password")
        return jsonify({'message': 'Invalid password'}), 401

    login_user(player)
    session['user'] = player.session_dict()
    current_app.logger.info(f"[login] user={username}")
    return jsonify({'message': 'Login successful'}), 200


@auth.route('/logout', methods=['POST'])
def logout():
    username = current_user.acct_name if current_user.is_authenticated else None
    logout_user()
    session.clear()
    if username:
        current_app.logger.info(f"[logout] user={username}")
    return jsonify({'message': 'Logged out successfully'}), 200


@auth.route('/session', methods=['GET'])
def get_session():
    if current_user.is_authenticated and session.get('user'):
        return jsonify(session['user'])
    return jsonify({'message': 'Unauthorized'}), 401


@auth.route('/getUsername', methods=['GET'])
def get_username():
    if current_user.is_authenticated:
        return jsonify({'username': current_user.acct_name})
    return jsonify({'error': 'User not logged in'}), 401
