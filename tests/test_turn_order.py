import pytest

from draft.errors import InvalidArgument
from draft.turn_order import draft_order_for_pick, picker_index, round_order


def test_snake_round_one_goes_forward():
    assert round_order(1, 4) == [0, 1, 2, 3]


def test_snake_round_two_goes_backward():
    assert round_order(2, 4) == [3, 2, 1, 0]


def test_snake_alternates_for_later_rounds():
    assert round_order(3, 4) == [0, 1, 2, 3]
    assert round_order(4, 4) == [3, 2, 1, 0]


def test_linear_order_never_reverses():
    for round_number in range(1, 5):
        assert round_order(round_number, 4, snake_enabled=False) == [0, 1, 2, 3]


@pytest.mark.parametrize("participant_count", [1, 2, 3, 7, 12])
def test_picker_index_stays_in_range(participant_count):
    for round_number in range(1, 7):
        for pick in range(1, participant_count + 1):
            index = picker_index(pick, round_number, participant_count, True)
            assert 0 <= index <= participant_count - 1


def test_every_participant_picks_once_per_round():
    for round_number in range(1, 5):
        assert sorted(round_order(round_number, 6)) == list(range(6))


def test_single_participant_always_picks():
    assert picker_index(1, 1, 1) == 0
    assert picker_index(1, 2, 1) == 0


def test_draft_order_is_one_based():
    assert draft_order_for_pick(1, 1, 4) == 1
    assert draft_order_for_pick(1, 2, 4) == 4


@pytest.mark.parametrize("pick, round_number, count", [
    (0, 1, 4),
    (5, 1, 4),
    (1, 0, 4),
    (1, 1, 0),
])
def test_invalid_arguments_rejected(pick, round_number, count):
    with pytest.raises(InvalidArgument):
        picker_index(pick, round_number, count)
