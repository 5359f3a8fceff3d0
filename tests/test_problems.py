import random

import pytest

from mathsprint.errors import ValidationError
from mathsprint.game import GameMode, Tier, generate_problem, tier_for_score


@pytest.mark.parametrize('tier,first,second', [
    (Tier.SINGLE_SINGLE, (1, 9), (1, 9)),
    (Tier.DOUBLE_SINGLE, (10, 99), (1, 9)),
    (Tier.DOUBLE_DOUBLE, (10, 99), (10, 99)),
])
def test_operands_stay_in_tier_bounds(tier, first, second):
    rng = random.Random(1234)
    seen_first, seen_second = set(), set()
    for _ in range(2000):
        p = generate_problem(tier, rng)
        assert first[0] <= p.first_operand <= first[1]
        assert second[0] <= p.second_operand <= second[1]
        assert p.correct_sum == p.first_operand + p.second_operand
        seen_first.add(p.first_operand)
        seen_second.add(p.second_operand)
    # both ends of every range get drawn
    assert {first[0], first[1]} <= seen_first
    assert {second[0], second[1]} <= seen_second


def test_ramp_thresholds():
    assert tier_for_score(0) is Tier.SINGLE_SINGLE
    assert tier_for_score(39) is Tier.SINGLE_SINGLE
    assert tier_for_score(40) is Tier.DOUBLE_SINGLE
    assert tier_for_score(99) is Tier.DOUBLE_SINGLE
    assert tier_for_score(100) is Tier.DOUBLE_DOUBLE
    assert tier_for_score(5000) is Tier.DOUBLE_DOUBLE


def test_modes_bind_tiers():
    assert GameMode.PURPLE.tier_for(500) is Tier.SINGLE_SINGLE
    assert GameMode.BLUE.tier_for(0) is Tier.DOUBLE_SINGLE
    assert GameMode.ORANGE.tier_for(0) is Tier.DOUBLE_DOUBLE
    assert GameMode.RAMP.tier_for(60) is Tier.DOUBLE_SINGLE
    assert GameMode.fixed_modes() == [GameMode.PURPLE, GameMode.BLUE, GameMode.ORANGE]


def test_parse_mode():
    assert GameMode.parse('Orange ') is GameMode.ORANGE
    assert GameMode.parse(GameMode.BLUE) is GameMode.BLUE
    with pytest.raises(ValidationError):
        GameMode.parse('green')
