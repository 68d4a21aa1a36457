from flask import Blueprint, request, jsonify, session, current_app
from flask_login import login_required, current_user
from shaperun import db
from shaperun.services.stats import InvalidStatError, record_game_stats

profile = Blueprint('profile', __name__)


@profile.route('/get-profile', methods=['POST'])
@login_required
def get_profile():
    return jsonify(current_user.to_dict())


@profile.route('/update-profile', methods=['POST'])
@login_required
def update_profile():
    data = request.get_json(silent=True) or {}
    player = current_user._get_current_object()

    # Only overwrite fields that were actually sent
    if data.get('bio'):
        player.bio = data['bio']
    if data.get('picture'):
        player.profile_picture = data['picture']
    if data.get('email'):
        player.email = data['email']
    if data.get('real_name'):
        player.real_name = data['real_name']

    try:
        db.session.add(player)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[profile] user={player.acct_name} update failed")
        return jsonify({'message': 'Error updating profile'}), 500

    session['user'] = player.session_dict()
    return jsonify({'message': 'Profile updated successfully'}), 200


@profile.route('/update-stats', methods=['POST'])
@login_required
def update_stats():
    data = request.get_json(silent=True) or {}
    try:
        record_game_stats(current_user._get_current_object(), data.get('score'), data.get('time'))
    except InvalidStatError as exc:
        return jsonify({'message': str(exc)}), 400
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[stats-save] user={current_user.acct_name} failed")
        return jsonify({'message': 'Error saving stats'}), 500
    return jsonify({'message': 'Stats saved successfully to user and leaderboard'}), 200
