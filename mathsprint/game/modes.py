from enum import Enum
from typing import Optional, Tuple

from mathsprint.errors import ValidationError

# Cumulative score at which the ramp mode moves up a tier
RAMP_TIER2_SCORE = 40
RAMP_TIER3_SCORE = 100


class Tier(Enum):
    """Difficulty tier: inclusive (low, high) range for each operand."""

    SINGLE_SINGLE = ((1, 9), (1, 9))
    DOUBLE_SINGLE = ((10, 99), (1, 9))
    DOUBLE_DOUBLE = ((10, 99), (10, 99))

    @property
    def first_range(self) -> Tuple[int, int]:
        return self.value[0]

    @property
    def second_range(self) -> Tuple[int, int]:
        return self.value[1]

    @property
    def level(self) -> int:
        return list(Tier).index(self) + 1


def tier_for_score(score: int) -> Tier:
    """Tier used by the ramp mode for the next problem."""
    if score >= RAMP_TIER3_SCORE:
        return Tier.DOUBLE_DOUBLE
    if score >= RAMP_TIER2_SCORE:
        return Tier.DOUBLE_SINGLE
    return Tier.SINGLE_SINGLE


_MODE_INFO = {
    'purple': ('Purple Game', 'Single digit + Single digit', Tier.SINGLE_SINGLE),
    'blue': ('Blue Game', 'Two-digit + Single digit', Tier.DOUBLE_SINGLE),
    'orange': ('Orange Game', 'Two-digit + Two-digit', Tier.DOUBLE_DOUBLE),
    'ramp': ('Ramp Game', 'Gets harder as your score grows', None),
}


class GameMode(str, Enum):
    PURPLE = 'purple'
    BLUE = 'blue'
    ORANGE = 'orange'
    RAMP = 'ramp'

    @property
    def display_name(self) -> str:
        return _MODE_INFO[self.value][0]

    @property
    def description(self) -> str:
        return _MODE_INFO[self.value][1]

    @property
    def fixed_tier(self) -> Optional[Tier]:
        return _MODE_INFO[self.value][2]

    def tier_for(self, score: int) -> Tier:
        return self.fixed_tier or tier_for_score(score)

    @classmethod
    def fixed_modes(cls):
        return [m for m in cls if m.fixed_tier is not None]

    @classmethod
    def parse(cls, value) -> 'GameMode':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f'Unknown game mode: {value!r}') from None

    def to_dict(self):
        tier = self.fixed_tier
        return {
            'id': self.value,
            'name': self.display_name,
            'description': self.description,
            'tier': tier.level if tier else None,
        }
