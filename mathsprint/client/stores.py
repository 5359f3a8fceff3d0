"""Score stores usable from the terminal client.

``HttpScoreStore`` talks to the score server; ``LocalScoreStore`` keeps a
single-device leaderboard in one JSON file for offline play.
"""

import json
import logging
import os
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import httpx

from mathsprint.errors import InternalError, ValidationError
from mathsprint.game import GameMode
from mathsprint.schemas import parse_score_submission, submission_payload
from mathsprint.services.scores.base import ScoreRecord, ScoreStore, rank

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = 'http://127.0.0.1:5000'


class HttpScoreStore(ScoreStore):
    """ScoreStore speaking to ``/api/scores``, ``/api/leaderboard`` and ``/api/best-score``."""

    def __init__(self, base_url: str = DEFAULT_SERVER_URL, client: Optional[httpx.Client] = None,
                 timeout: float = 5.0):
        self.base_url = base_url.rstrip('/')
        self._client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error('[http-store] %s %s failed: %s', method, path, exc)
            raise InternalError(f'Could not reach score server: {exc}') from exc
        if response.status_code == 400:
            body = _json_or_empty(response)
            raise ValidationError(body.get('error'), details=body.get('details'))
        if response.is_error:
            logger.error('[http-store] %s %s returned %s', method, path, response.status_code)
            raise InternalError(_json_or_empty(response).get('error'))
        return response

    def save(self, player_name, score, game_mode) -> ScoreRecord:
        submission = parse_score_submission({'player_name': player_name, 'score': score, 'game_mode': game_mode})
        response = self._request('POST', '/api/scores', json=submission_payload(submission))
        return ScoreRecord.from_dict(response.json())

    def get_leaderboard(self, game_mode=None) -> List[ScoreRecord]:
        # unknown modes go to the server as-is; it answers with an empty board
        params = {'gameMode': getattr(game_mode, 'value', game_mode)} if game_mode else {}
        response = self._request('GET', '/api/leaderboard', params=params)
        return [ScoreRecord.from_dict(item) for item in response.json()]

    def get_player_best_score(self, player_name, game_mode) -> int:
        mode = GameMode.parse(game_mode).value
        response = self._request('GET', '/api/best-score', params={'playerName': player_name, 'gameMode': mode})
        return int(response.json()['bestScore'])


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _parse_date(text: str) -> datetime:
    # browsers write toISOString() dates with a trailing Z
    if isinstance(text, str) and text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return datetime.fromisoformat(text)


class LocalScoreStore(ScoreStore):
    """Single-device leaderboard persisted as a JSON array of ``{name, score, date}``.

    Every record implicitly belongs to ``game_mode``; there is no per-record
    mode tag and no schema version. Appends rewrite the file through a
    temporary sibling and ``os.replace``, so readers never see a partial list.
    """

    leaderboard_limit = 5

    def __init__(self, path, game_mode=GameMode.RAMP, leaderboard_limit: int = 5):
        self.path = Path(path)
        self.game_mode = GameMode.parse(game_mode)
        self.leaderboard_limit = leaderboard_limit
        self._lock = threading.Lock()

    def _read(self) -> list:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as exc:
            logger.error('[local-store] could not read %s: %s', self.path, exc)
            raise InternalError(f'Local leaderboard unreadable: {exc}') from exc
        if not isinstance(data, list):
            raise InternalError(f'Local leaderboard at {self.path} is not a list')
        return data

    def _write(self, entries: list) -> None:
        tmp = self.path.with_suffix(self.path.suffix + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(entries, indent=2) + '\n', encoding='utf-8')
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error('[local-store] could not write %s: %s', self.path, exc)
            raise InternalError(f'Local leaderboard not saved: {exc}') from exc

    def _records(self, entries) -> List[ScoreRecord]:
        try:
            return [
                ScoreRecord(
                    id=index,
                    player_name=entry['name'],
                    score=int(entry['score']),
                    game_mode=self.game_mode.value,
                    created_at=_parse_date(entry['date']),
                )
                for index, entry in enumerate(entries, start=1)
            ]
        except (KeyError, TypeError, ValueError) as exc:
            logger.error('[local-store] malformed entry in %s: %r', self.path, exc)
            raise InternalError(f'Local leaderboard at {self.path} has a malformed entry') from exc

    def save(self, player_name, score, game_mode=None) -> ScoreRecord:
        submission = parse_score_submission({
            'player_name': player_name,
            'score': score,
            'game_mode': game_mode or self.game_mode,
        })
        if submission.game_mode is not self.game_mode:
            raise ValidationError(f'This leaderboard only records {self.game_mode.value} games')
        entry = {'name': submission.player_name, 'score': submission.score, 'date': datetime.now().isoformat()}
        with self._lock:
            entries = self._read()
            entries.append(entry)
            records = self._records(entries)
            self._write(entries)
            return records[-1]

    def get_leaderboard(self, game_mode=None) -> List[ScoreRecord]:
        if game_mode and game_mode != self.game_mode:
            return []
        with self._lock:
            records = self._records(self._read())
        return rank(records, self.leaderboard_limit)

    def get_player_best_score(self, player_name, game_mode=None) -> int:
        with self._lock:
            records = self._records(self._read())
        return max((r.score for r in records if r.player_name == player_name), default=0)
