"""Score persistence and leaderboard queries.

Routes and socket handlers go through a ``ScoreStore`` rather than the ORM
directly, so the terminal client can swap in the HTTP or local-file store
behind the same contract.
"""

from .base import ScoreRecord, ScoreStore
