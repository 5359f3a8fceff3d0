from datetime import datetime, timezone

from werkzeug.security import generate_password_hash, check_password_hash

from mathsprint import db
from mathsprint.services.scores.base import ScoreRecord


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    """Reserved for future player accounts; no endpoint reads or writes it yet."""
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.Text, unique=True, nullable=False, index=True)
    password = db.Column(db.Text, nullable=False)

    def set_password(self, password):
        self.password = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class GameScore(db.Model):
    """One finished session. Rows are insert-only."""
    __tablename__ = 'game_scores'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.Text, nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    game_mode = db.Column(db.Text, nullable=False, index=True)  # purple, blue, orange, ramp
    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow, server_default=db.func.now())

    def to_record(self):
        return ScoreRecord(
            id=self.id,
            player_name=self.player_name,
            score=self.score,
            game_mode=self.game_mode,
            created_at=self.created_at,
        )

    def to_dict(self):
        return self.to_record().to_dict()
