import pytest

from draft.errors import InvalidArgument
from draft.progression import (
    PickPosition,
    is_complete,
    next_position,
    picks_made,
    remaining_picks,
    total_rounds,
    total_rounds_for_quotas,
)


def test_total_rounds_is_picks_per_team():
    assert total_rounds(4, 3) == 3
    assert total_rounds(10, 1) == 1


@pytest.mark.parametrize("count, per_team", [(0, 3), (4, 0), (-1, 2)])
def test_total_rounds_rejects_non_positive(count, per_team):
    with pytest.raises(InvalidArgument):
        total_rounds(count, per_team)


def test_quota_rounds_are_sum_of_caps():
    assert total_rounds_for_quotas({'EU': 3, 'NAW': 2}) == 5


def test_no_quotas_uses_default_rounds():
    assert total_rounds_for_quotas(None) == 10
    assert total_rounds_for_quotas({}) == 10


@pytest.mark.parametrize("quotas", [
    {'EU': -1, 'NAW': 2},
    {'EU': 0, 'NAW': 0},
    {'EU': 'three'},
    {'EU': True},
])
def test_bad_quotas_rejected(quotas):
    with pytest.raises(InvalidArgument):
        total_rounds_for_quotas(quotas)


def test_next_position_within_round():
    assert next_position(1, 1, 4) == PickPosition(1, 2)


def test_next_position_wraps_to_next_round():
    assert next_position(1, 4, 4) == PickPosition(2, 1)


def test_walking_every_pick_reaches_completion():
    rounds, count = 10, 4
    position = PickPosition(1, 1)
    for step in range(rounds * count):
        assert not is_complete(position.round, rounds)
        position = next_position(position.round, position.pick, count)
    assert position == PickPosition(rounds + 1, 1)
    assert is_complete(position.round, rounds)


def test_remaining_picks():
    assert remaining_picks(1, 1, 10, 4) == 40
    assert remaining_picks(10, 4, 10, 4) == 1
    assert remaining_picks(3, 2, 10, 4) == 3 + 7 * 4
    assert remaining_picks(11, 1, 10, 4) == 0


def test_picks_made_counts_filled_slots():
    assert picks_made(1, 1, 10, 4) == 0
    assert picks_made(2, 3, 10, 4) == 6
    assert picks_made(11, 1, 10, 4) == 40
