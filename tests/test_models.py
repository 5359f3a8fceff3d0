import pytest
from sqlalchemy.exc import IntegrityError

from mathsprint import db
from mathsprint.models import GameScore, User


def test_user_password_is_hashed(flask_app):
    user = User(username='coach')
    user.set_password('s3cret')
    db.session.add(user)
    db.session.commit()
    assert user.password != 's3cret'
    assert user.check_password('s3cret')
    assert not user.check_password('wrong')
    assert user.to_dict() == {'id': user.id, 'username': 'coach'}


def test_usernames_are_unique(flask_app):
    for _ in range(2):
        u = User(username='dup')
        u.set_password('x')
        db.session.add(u)
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


def test_game_score_defaults_created_at(flask_app):
    row = GameScore(player_name='Ana', score=3, game_mode='ramp')
    db.session.add(row)
    db.session.commit()
    assert row.created_at is not None
    assert row.to_dict()['gameMode'] == 'ramp'
