from datetime import datetime, timezone
import math

from shaperun import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

DEFAULT_PICTURE = 'imgs/default.png'


def _utcnow():
    return datetime.now(timezone.utc)


class Player(UserMixin, db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    acct_name = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    email = db.Column(db.String(120), default='', nullable=False)
    real_name = db.Column(db.String(120), default='', nullable=False)
    bio = db.Column(db.Text, default='', nullable=False)
    profile_picture = db.Column(db.String(256), default=DEFAULT_PICTURE, nullable=False)
    stats = db.relationship('GameStat', back_populates='player', order_by='GameStat.id',
                            cascade='all, delete-orphan')

    def set_password(self, password):
        # salt$hash with PBKDF2-SHA256, salt generated by werkzeug
        self.password_hash = generate_password_hash(password, method='pbkdf2:sha256')

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def session_dict(self):
        """Public user data kept in the cookie session."""
        return {
            'username': self.acct_name,
            'realName': self.real_name or 'Anonymous',
            'email': self.email or '',
            'bio': self.bio or '',
            'profilePicture': self.profile_picture or DEFAULT_PICTURE,
        }

    def to_dict(self):
        return {
            'username': self.acct_name,
            'email': self.email or '',
            'realName': self.real_name or '',
            'bio': self.bio or '',
            'profilePicture': self.profile_picture or '',
            'stats': [s.to_dict() for s in self.stats],
        }

    def best_stat(self):
        """Highest-scoring stat; the earliest one wins a tie."""
        best = None
        for stat in self.stats:
            if best is None or stat.score > best.score:
                best = stat
        return best


class GameStat(db.Model):
    __tablename__ = 'game_stat'
    id = db.Column(db.Integer, primary_key=True)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id'), nullable=False, index=True)
    score = db.Column(db.Float, nullable=False)
    time = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    player = db.relationship('Player', back_populates='stats')

    def to_dict(self):
        return {'score': self.score, 'time': self.time}


class LeaderboardEntry(db.Model):
    __tablename__ = 'leaderboard_entry'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False, index=True)
    score = db.Column(db.Float, nullable=False)
    time = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self):
        return {'username': self.username, 'score': self.score, 'time': self.time}


class Comment(db.Model):
    __tablename__ = 'comment'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), nullable=False)
    real_name = db.Column(db.String(120), nullable=False)
    text = db.Column(db.Text, nullable=False)
    likes = db.Column(db.Integer, default=0, nullable=False)
    timestamp = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    replies = db.relationship('Reply', back_populates='comment', order_by='Reply.id',
                              cascade='all, delete-orphan')
    liked_by = db.relationship('CommentLike', back_populates='comment', order_by='CommentLike.id',
                               cascade='all, delete-orphan')

    def is_liked_by(self, username):
        return any(like.username == username for like in self.liked_by)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'realName': self.real_name,
            'text': self.text,
            'likes': self.likes,
            'likedBy': [like.username for like in self.liked_by],
            'replies': [r.to_dict() for r in self.replies],
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }


class Reply(db.Model):
    __tablename__ = 'reply'
    id = db.Column(db.Integer, primary_key=True)
    comment_id = db.Column(db.Integer, db.ForeignKey('comment.id'), nullable=False, index=True)
    username = db.Column(db.String(64), nullable=False)
    real_name = db.Column(db.String(120), nullable=False)
    text = db.Column(db.Text, nullable=False)
    likes = db.Column(db.Integer, default=0, nullable=False)
    timestamp = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    comment = db.relationship('Comment', back_populates='replies')

    def to_dict(self):
        return {
            'username': self.username,
            'realName': self.real_name,
            'text': self.text,
            'likes': self.likes,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }


class CommentLike(db.Model):
    __tablename__ = 'comment_like'
    __table_args__ = (db.UniqueConstraint('comment_id', 'username', name='uq_comment_like_user'),)
    id = db.Column(db.Integer, primary_key=True)
    comment_id = db.Column(db.Integer, db.ForeignKey('comment.id'), nullable=False)
    username = db.Column(db.String(64), nullable=False)
    comment = db.relationship('Comment', back_populates='liked_by')


def leaderboard_rows():
    """Best run per player, highest score first and faster time on a tie."""
    rows = []
    for player in Player.query.order_by(Player.id).all():
        best = player.best_stat()
        if best is None:
            continue
        rows.append({
            'username': player.acct_name,
            'score': math.floor(best.score / 10),
            'time': best.time,
        })
    rows.sort(key=lambda r: (-r['score'], r['time']))
    return rows
