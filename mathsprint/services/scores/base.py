from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ScoreRecord:
    id: int
    player_name: str
    score: int
    game_mode: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'playerName': self.player_name,
            'score': self.score,
            'gameMode': self.game_mode,
            'createdAt': self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScoreRecord':
        return cls(
            id=int(data['id']),
            player_name=data['playerName'],
            score=int(data['score']),
            game_mode=data['gameMode'],
            created_at=datetime.fromisoformat(data['createdAt']),
        )


def rank(records, limit: int) -> List[ScoreRecord]:
    """Score descending; equal scores keep submission order (lowest id first)."""
    return sorted(records, key=lambda r: (-r.score, r.id))[:limit]


class ScoreStore(ABC):
    """Append-only score storage with leaderboard reads.

    Implementations never update or delete a record once ``save`` returns it.
    """

    leaderboard_limit = 10

    @abstractmethod
    def save(self, player_name: str, score: int, game_mode: str) -> ScoreRecord:
        """Validate and persist one finished session.

        Raises ``ValidationError`` for bad input and ``InternalError`` when
        the underlying storage fails.
        """

    @abstractmethod
    def get_leaderboard(self, game_mode: Optional[str] = None) -> List[ScoreRecord]:
        """Top records, optionally restricted to one mode."""

    @abstractmethod
    def get_player_best_score(self, player_name: str, game_mode: str) -> int:
        """Highest score recorded for the player, 0 when there is none."""
