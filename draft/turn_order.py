"""
Snake draft turn order.

Snake drafts reverse direction each round:
Round 1: 1, 2, 3, 4
Round 2: 4, 3, 2, 1
Round 3: 1, 2, 3, 4

Indexes returned here are 0-based; a participant's draft order is index + 1.
"""

from typing import List

from draft.errors import InvalidArgument


def picker_index(pick_number: int, round_number: int, participant_count: int,
                 snake_enabled: bool = True) -> int:
    """Return the 0-based index of the participant who owns (round, pick)"""
    if participant_count < 1:
        raise InvalidArgument("Participant count must be at least 1")
    if round_number < 1:
        raise InvalidArgument("Round number must be at least 1")
    if pick_number < 1 or pick_number > participant_count:
        raise InvalidArgument("Pick number must be between 1 and participant count")

    if not snake_enabled or round_number % 2 == 1:
        # Odd rounds (or linear drafts) go 1->N
        return pick_number - 1
    # Even rounds go N->1
    return participant_count - pick_number


def draft_order_for_pick(pick_number: int, round_number: int, participant_count: int,
                         snake_enabled: bool = True) -> int:
    """1-based draft order of the participant on the clock"""
    return picker_index(pick_number, round_number, participant_count, snake_enabled) + 1


def round_order(round_number: int, participant_count: int, snake_enabled: bool = True) -> List[int]:
    """Picker indexes for every pick of a round, in pick order"""
    return [
        picker_index(pick, round_number, participant_count, snake_enabled)
        for pick in range(1, participant_count + 1)
    ]
