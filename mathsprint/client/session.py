"""Single-player game session: START -> [MODE_SELECTION] -> PLAYING -> ENDED.

The session owns its countdown and feedback timers. Every way out of
PLAYING cancels both, and every timer callback re-checks the epoch it was
armed in, so a tick that was already in flight when the state changed does
nothing.

Store calls never run on the caller's thread: the score submission is fire
and forget, and the leaderboard and best-score reads are issued side by side
when the game ends, then issued again once the save lands. Their failures are logged and otherwise ignored, so the
state machine cannot be knocked over by the network.
"""

import logging
import random
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from mathsprint.errors import ValidationError
from mathsprint.game import GameMode, Problem, generate_problem
from mathsprint.schemas import PLAYER_NAME_MAX_LENGTH
from mathsprint.services.scores.base import ScoreRecord, ScoreStore
from .timers import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    START = 'start'
    MODE_SELECTION = 'mode_selection'
    PLAYING = 'playing'
    ENDED = 'ended'


class FeedbackKind(str, Enum):
    CORRECT = 'correct'
    INCORRECT = 'incorrect'
    INVALID = 'invalid'


@dataclass(frozen=True)
class Feedback:
    kind: FeedbackKind
    message: str
    correct_answer: Optional[int] = None

    def to_dict(self):
        return {'type': self.kind.value, 'message': self.message, 'correctAnswer': self.correct_answer}


@dataclass(frozen=True)
class GameRules:
    mode_selection: bool = True
    duration_sec: int = 180
    feedback_delay_sec: float = 2
    correct_points: int = 20
    incorrect_points: int = 0
    advance_on_incorrect: bool = False
    default_mode: GameMode = GameMode.RAMP


# Pick purple/blue/orange, retry wrong answers for free
CLASSIC_RULES = GameRules()
# No mode choice; difficulty follows the score, a wrong answer still earns a point
RAMP_RULES = GameRules(mode_selection=False, incorrect_points=1, advance_on_incorrect=True)


class GameSession:
    def __init__(self, store: ScoreStore, rules: GameRules = CLASSIC_RULES,
                 scheduler: Optional[Scheduler] = None, executor: Optional[Executor] = None,
                 rng: Optional[random.Random] = None):
        self.store = store
        self.rules = rules
        self.scheduler = scheduler or ThreadingScheduler()
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(max_workers=3, thread_name_prefix='mathsprint-store')
        self.rng = rng or random.Random()
        self._lock = threading.RLock()
        self._epoch = 0
        self._tick_handle: Optional[TimerHandle] = None
        self._advance_handle: Optional[TimerHandle] = None
        self._reads = 0
        self._reset()

    def _reset(self) -> None:
        self.state = SessionState.START
        self.player_name = ''
        self.mode: Optional[GameMode] = None
        self.score = 0
        self.time_remaining = self.rules.duration_sec
        self.current_problem: Optional[Problem] = None
        self.answer_input = ''
        self.feedback: Optional[Feedback] = None
        self.awaiting_advance = False
        self.previous_best = 0
        self.personal_best = 0
        self.is_new_high_score = False
        self.leaderboard: List[ScoreRecord] = []
        self.submission: Optional[Future] = None
        self.saved_record: Optional[ScoreRecord] = None

    # -- transitions ---------------------------------------------------------

    def begin(self, player_name: str) -> SessionState:
        """Leave START with a player name."""
        with self._lock:
            if self.state is not SessionState.START:
                raise ValidationError(f'Cannot begin from {self.state.value}')
            name = (player_name or '').strip()
            if not name or len(name) > PLAYER_NAME_MAX_LENGTH:
                raise ValidationError('Please enter your name!')
            self.player_name = name
            if self.rules.mode_selection:
                self.state = SessionState.MODE_SELECTION
            else:
                self._start_playing(self.rules.default_mode)
            return self.state

    def select_mode(self, mode) -> SessionState:
        with self._lock:
            if self.state is not SessionState.MODE_SELECTION:
                raise ValidationError(f'Cannot select a mode from {self.state.value}')
            mode = GameMode.parse(mode)
            if mode.fixed_tier is None:
                raise ValidationError(f'{mode.value} is not a selectable mode')
            self._start_playing(mode)
            return self.state

    def _start_playing(self, mode: GameMode) -> None:
        self._cancel_timers()
        self._epoch += 1
        self.mode = mode
        self.state = SessionState.PLAYING
        self.score = 0
        self.time_remaining = self.rules.duration_sec
        self.answer_input = ''
        self.feedback = None
        self.awaiting_advance = False
        self.current_problem = None
        self.previous_best = 0
        self._next_problem()
        epoch = self._epoch
        self._tick_handle = self.scheduler.call_every(1, lambda: self._on_tick(epoch))
        self._prefetch_best(epoch)
        logger.info('[session-start] player=%r mode=%s', self.player_name, mode.value)

    def end(self) -> bool:
        """Force the game over. Only the first call out of PLAYING has an effect."""
        with self._lock:
            if self.state is not SessionState.PLAYING:
                return False
            self._cancel_timers()
            self._epoch += 1
            self.state = SessionState.ENDED
            self.feedback = None
            self.awaiting_advance = False
            self.is_new_high_score = self.score > self.previous_best
            self.personal_best = max(self.previous_best, self.score)
            logger.info('[session-end] player=%r mode=%s score=%s', self.player_name, self.mode.value, self.score)
            self._submit_score(self._epoch)
            self._load_results(self._epoch)
            return True

    def restart(self) -> SessionState:
        with self._lock:
            self._cancel_timers()
            self._epoch += 1
            self._reset()
            return self.state

    def close(self) -> None:
        """Stop timers and release the worker threads this session created."""
        with self._lock:
            self._cancel_timers()
            self._epoch += 1
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    # -- playing -------------------------------------------------------------

    def type_answer(self, text: str) -> None:
        with self._lock:
            if self.state is SessionState.PLAYING:
                self.answer_input = text

    def submit_answer(self, text: Optional[str] = None) -> Optional[Feedback]:
        """Check the typed answer against the current problem.

        Returns the feedback shown, or None when the submission was ignored
        (not playing, or the problem is already answered and about to change).
        """
        with self._lock:
            if self.state is not SessionState.PLAYING or self.awaiting_advance:
                return None
            if text is not None:
                self.answer_input = text
            try:
                answer = int(self.answer_input.strip())
            except ValueError:
                return self._set_feedback(Feedback(FeedbackKind.INVALID, 'Please enter a number!'))

            problem = self.current_problem
            if answer == problem.correct_sum:
                self.score += self.rules.correct_points
                self.answer_input = ''
                return self._set_feedback(Feedback(FeedbackKind.CORRECT, 'Excellent! Well done!'), advance=True)

            if not self.rules.advance_on_incorrect:
                # same problem, same input: the player may retry
                return self._set_feedback(Feedback(FeedbackKind.INCORRECT, 'Try that again!'))
            self.score += self.rules.incorrect_points
            self.answer_input = ''
            feedback = Feedback(FeedbackKind.INCORRECT, f'The answer was {problem.correct_sum}.', problem.correct_sum)
            return self._set_feedback(feedback, advance=True)

    def tick(self) -> None:
        with self._lock:
            if self.state is not SessionState.PLAYING:
                return
            self.time_remaining = max(0, self.time_remaining - 1)
            if self.time_remaining == 0:
                self.end()

    def _on_tick(self, epoch: int) -> None:
        with self._lock:
            if epoch == self._epoch:
                self.tick()

    def _set_feedback(self, feedback: Feedback, advance: bool = False) -> Feedback:
        if self._advance_handle is not None:
            self._advance_handle.cancel()
            self._advance_handle = None
        self.feedback = feedback
        self.awaiting_advance = advance
        if advance:
            epoch = self._epoch
            self._advance_handle = self.scheduler.call_later(
                self.rules.feedback_delay_sec, lambda: self._on_advance(epoch, feedback))
        return feedback

    def _on_advance(self, epoch: int, feedback: Feedback) -> None:
        with self._lock:
            if epoch != self._epoch or self.feedback is not feedback or self.state is not SessionState.PLAYING:
                return
            self._advance_handle = None
            self.feedback = None
            self.awaiting_advance = False
            self._next_problem()

    def _next_problem(self) -> None:
        self.current_problem = generate_problem(self.mode.tier_for(self.score), self.rng)

    def _cancel_timers(self) -> None:
        for handle in (self._tick_handle, self._advance_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._advance_handle = None

    # -- store traffic -------------------------------------------------------

    def _prefetch_best(self, epoch: int) -> None:
        name, mode = self.player_name, self.mode.value

        def _done(future: Future) -> None:
            exc = future.exception()
            if exc is not None:
                logger.warning('[best-score] prefetch for %r failed: %s', name, exc)
                return
            with self._lock:
                if epoch == self._epoch:
                    self.previous_best = future.result()

        self.executor.submit(self.store.get_player_best_score, name, mode).add_done_callback(_done)

    def _submit_score(self, epoch: int) -> None:
        name, score, mode = self.player_name, self.score, self.mode.value

        def _done(future: Future) -> None:
            exc = future.exception()
            if exc is not None:
                logger.error('[score-submit] player=%r score=%s failed: %s', name, score, exc)
                return
            with self._lock:
                if epoch != self._epoch:
                    return
                self.saved_record = future.result()
                # the reads issued at game end may have missed this record
                self._load_results(epoch)

        self.submission = self.executor.submit(self.store.save, name, score, mode)
        self.submission.add_done_callback(_done)

    def _load_results(self, epoch: int) -> List[Future]:
        name, mode = self.player_name, self.mode.value
        self._reads += 1
        generation = self._reads

        def _leaderboard_done(future: Future) -> None:
            exc = future.exception()
            if exc is not None:
                logger.warning('[leaderboard] fetch failed: %s', exc)
                return
            with self._lock:
                # an older read finishing late must not replace a newer board
                if epoch == self._epoch and generation == self._reads:
                    self.leaderboard = future.result()

        def _best_done(future: Future) -> None:
            exc = future.exception()
            if exc is not None:
                logger.warning('[best-score] fetch for %r failed: %s', name, exc)
                return
            with self._lock:
                if epoch == self._epoch:
                    self.personal_best = max(self.personal_best, future.result())

        leaderboard_future = self.executor.submit(self.store.get_leaderboard, mode)
        best_future = self.executor.submit(self.store.get_player_best_score, name, mode)
        leaderboard_future.add_done_callback(_leaderboard_done)
        best_future.add_done_callback(_best_done)
        return [leaderboard_future, best_future]

    def refresh_results(self) -> List[Future]:
        """Re-read leaderboard and personal best, e.g. once ``submission`` has landed."""
        with self._lock:
            if self.state is not SessionState.ENDED:
                return []
            return self._load_results(self._epoch)

    # -- presentation --------------------------------------------------------

    def snapshot(self) -> dict:
        with self._lock:
            return {
                'state': self.state.value,
                'playerName': self.player_name,
                'gameMode': self.mode.value if self.mode else None,
                'score': self.score,
                'timeRemaining': self.time_remaining,
                'problem': self.current_problem.to_dict() if self.current_problem else None,
                'answerInput': self.answer_input,
                'feedback': self.feedback.to_dict() if self.feedback else None,
                'isNewHighScore': self.is_new_high_score,
                'personalBest': self.personal_best,
                'leaderboard': [r.to_dict() for r in self.leaderboard],
            }


def format_time(seconds: int) -> str:
    minutes, rest = divmod(max(0, int(seconds)), 60)
    return f'{minutes}:{rest:02d}'
