from typing import Annotated, Any, Dict, Mapping

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from mathsprint.errors import ValidationError
from mathsprint.game import GameMode

PLAYER_NAME_MAX_LENGTH = 20

PlayerName = Annotated[
    str,
    pydantic.StringConstraints(strip_whitespace=True, min_length=1, max_length=PLAYER_NAME_MAX_LENGTH),
]


class ScoreSubmission(BaseModel):
    """Body of POST /api/scores; also guards every ScoreStore.save."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    player_name: PlayerName = Field(alias='playerName')
    score: int = Field(ge=0, strict=True)
    game_mode: GameMode = Field(alias='gameMode')


def _details(exc: pydantic.ValidationError):
    return [
        {'loc': [str(part) for part in err['loc']], 'msg': err['msg'], 'type': err['type']}
        for err in exc.errors()
    ]


def parse_score_submission(data: Mapping[str, Any]) -> ScoreSubmission:
    """Validate a submission given with either camelCase or snake_case keys."""
    if not isinstance(data, Mapping):
        raise ValidationError(details=[{'loc': [], 'msg': 'Expected a JSON object', 'type': 'dict_type'}])
    try:
        return ScoreSubmission.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(details=_details(exc)) from None


def submission_payload(submission: ScoreSubmission) -> Dict[str, Any]:
    return submission.model_dump(by_alias=True, mode='json')
