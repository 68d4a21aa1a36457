from flask import Blueprint, request, jsonify, session, current_app
from flask_login import current_user
from sqlalchemy.exc import IntegrityError
from shaperun import db, socketio
from shaperun.models import Comment, CommentLike, Reply, leaderboard_rows

social = Blueprint('social', __name__)

ANONYMOUS = 'Anonymous'


def _author():
    """(username, real name) of the poster; anonymous when logged out."""
    if current_user.is_authenticated:
        user = session.get('user') or current_user.session_dict()
        return user['username'], user.get('realName') or ANONYMOUS
    return ANONYMOUS, ANONYMOUS


def _broadcast(kind, comment_id):
    socketio.emit('social_update', {'kind': kind, 'comment_id': comment_id}, to='social', namespace='/ws')


@social.route('/postComment', methods=['POST'])
def post_comment():
    data = request.get_json(silent=True) or {}
    text = (data.get('comment') or '').strip()
    if not text:
        return jsonify({'error': 'Comment text is required.'}), 400

    username, real_name = _author()
    comment = Comment(username=username, real_name=real_name, text=text)
    db.session.add(comment)
    db.session.commit()
    _broadcast('comment', comment.id)
    return jsonify({'success': True, 'message': 'Successfully posted comment', 'comment': comment.to_dict()}), 201


@social.route('/postReply', methods=['POST'])
def post_reply():
    data = request.get_json(silent=True) or {}
    comment_id = data.get('commentId')
    text = (data.get('text') or '').strip()
    if not comment_id or not text:
        return jsonify({'error': 'Comment ID and text are required.'}), 400

    comment = db.session.get(Comment, comment_id)
    if not comment:
        return jsonify({'error': 'Parent comment not found.'}), 404

    username, real_name = _author()
    reply = Reply(comment=comment, username=username, real_name=real_name, text=text, likes=0)
    try:
        db.session.add(reply)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[reply] comment={comment_id} failed")
        return jsonify({'error': 'Internal server error.'}), 500
    _broadcast('reply', comment.id)
    return jsonify({'success': True, 'reply': {'username': username, 'realName': real_name, 'text': text}}), 200


@social.route('/likeComment', methods=['POST'])
def like_comment():
    if not current_user.is_authenticated:
        return jsonify({'error': 'User not logged in'}), 401
    username = current_user.acct_name
    data = request.get_json(silent=True) or {}

    comment = db.session.get(Comment, data.get('id')) if data.get('id') is not None else None
    if not comment:
        return jsonify({'error': 'Comment not found'}), 404

    if comment.is_liked_by(username):
        return jsonify({'error': 'You have already liked this comment'}), 400

    comment.liked_by.append(CommentLike(username=username))
    comment.likes += 1
    try:
        db.session.commit()
    except IntegrityError:
        # a concurrent like from the same user won the race
        db.session.rollback()
        return jsonify({'error': 'You have already liked this comment'}), 400
    _broadcast('like', comment.id)
    return jsonify({'success': True, 'likes': comment.likes})


@social.route('/getComments', methods=['GET'])
def get_comments():
    sort = request.args.get('sort', 'newest')
    query = Comment.query
    if sort == 'likes':
        query = query.order_by(Comment.likes.desc(), Comment.timestamp.desc(), Comment.id.desc())
    else:
        query = query.order_by(Comment.timestamp.desc(), Comment.id.desc())
    return jsonify([c.to_dict() for c in query.all()])


@social.route('/get-leaderboard', methods=['GET'])
def get_leaderboard():
    try:
        rows = leaderboard_rows()
    except Exception:
        current_app.logger.exception("[leaderboard] query failed")
        return jsonify({'error': 'Error fetching leaderboard'}), 500
    return jsonify(rows)
