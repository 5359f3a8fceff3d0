"""Terminal client: the game session state machine and the stores it reports to."""

from .session import CLASSIC_RULES, RAMP_RULES, Feedback, FeedbackKind, GameRules, GameSession, SessionState
from .stores import HttpScoreStore, LocalScoreStore
from .timers import ManualScheduler, ThreadingScheduler
