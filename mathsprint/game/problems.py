import random
from dataclasses import dataclass
from typing import Optional

from .modes import Tier


@dataclass(frozen=True)
class Problem:
    first_operand: int
    second_operand: int
    correct_sum: int

    def __str__(self) -> str:
        return f'{self.first_operand} + {self.second_operand}'

    def to_dict(self):
        return {
            'firstOperand': self.first_operand,
            'secondOperand': self.second_operand,
            'correctSum': self.correct_sum,
        }


def generate_problem(tier: Tier, rng: Optional[random.Random] = None) -> Problem:
    """Draw a fresh addition problem for the given tier."""
    rng = rng or random
    first = rng.randint(*tier.first_range)
    second = rng.randint(*tier.second_range)
    return Problem(first_operand=first, second_operand=second, correct_sum=first + second)
