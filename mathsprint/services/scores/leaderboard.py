from typing import List, Optional

from sqlalchemy import func

from mathsprint import db
from mathsprint.models import GameScore
from .base import ScoreRecord


def get_leaderboard(game_mode: Optional[str] = None, limit: int = 10) -> List[ScoreRecord]:
    """Top ``limit`` scores, best first; ties go to the earlier submission."""
    query = GameScore.query
    if game_mode:
        query = query.filter_by(game_mode=game_mode)
    rows = query.order_by(GameScore.score.desc(), GameScore.id.asc()).limit(limit).all()
    return [row.to_record() for row in rows]


def get_player_best_score(player_name: str, game_mode: Optional[str] = None, per_mode: bool = False) -> int:
    """Highest score for ``player_name``.

    The mode is only applied when ``per_mode`` is set; by default a player's
    best spans every mode they played.
    """
    query = db.session.query(func.max(GameScore.score)).filter(GameScore.player_name == player_name)
    if per_mode and game_mode:
        query = query.filter(GameScore.game_mode == game_mode)
    best = query.scalar()
    return int(best) if best is not None else 0
