from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from mathsprint import db
from mathsprint.errors import InternalError
from mathsprint.models import GameScore
from mathsprint.schemas import parse_score_submission
from . import leaderboard
from .base import ScoreRecord, ScoreStore


class DatabaseScoreStore(ScoreStore):
    """ScoreStore backed by the ``game_scores`` table.

    Must be used inside an application context. Each save is its own
    transaction, so concurrent submissions from different players never see
    each other half-written.
    """

    def __init__(self, leaderboard_limit: int = 10, best_score_per_mode: bool = False):
        self.leaderboard_limit = leaderboard_limit
        self.best_score_per_mode = best_score_per_mode

    @classmethod
    def from_config(cls, config) -> 'DatabaseScoreStore':
        return cls(
            leaderboard_limit=int(config.get('LEADERBOARD_LIMIT', 10)),
            best_score_per_mode=bool(config.get('BEST_SCORE_PER_MODE', False)),
        )

    def save(self, player_name: str, score: int, game_mode: str) -> ScoreRecord:
        submission = parse_score_submission({
            'player_name': player_name,
            'score': score,
            'game_mode': game_mode,
        })
        row = GameScore(
            player_name=submission.player_name,
            score=submission.score,
            game_mode=submission.game_mode.value,
        )
        try:
            db.session.add(row)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.error(f"[score-save-failed] player={submission.player_name!r} error={exc}")
            raise InternalError() from exc
        current_app.logger.info(
            f"[score-saved] id={row.id} player={row.player_name!r} score={row.score} mode={row.game_mode}"
        )
        return row.to_record()

    def get_leaderboard(self, game_mode: Optional[str] = None) -> List[ScoreRecord]:
        return leaderboard.get_leaderboard(game_mode, limit=self.leaderboard_limit)

    def get_player_best_score(self, player_name: str, game_mode: str) -> int:
        return leaderboard.get_player_best_score(player_name, game_mode, per_mode=self.best_score_per_mode)


def get_score_store() -> DatabaseScoreStore:
    return DatabaseScoreStore.from_config(current_app.config)
