"""
Round/pick progression rules.

A draft position is (round, pick) with pick in 1..participant_count. The
position after the last pick of the last round is (total_rounds + 1, 1),
which is how completion is detected.
"""

import math
from typing import Mapping, NamedTuple, Optional

from config.settings import DRAFT_SETTINGS
from draft.errors import InvalidArgument


class PickPosition(NamedTuple):
    round: int
    pick: int


def total_rounds(participant_count: int, players_per_team: int) -> int:
    """Rounds needed for every participant to draft players_per_team players"""
    if participant_count <= 0 or players_per_team <= 0:
        raise InvalidArgument("Participant count and players per team must be positive")
    return math.ceil((participant_count * players_per_team) / participant_count)


def total_rounds_for_quotas(region_quotas: Optional[Mapping[str, int]]) -> int:
    """Sum of per-region caps, or the default round count when no quotas are set"""
    if not region_quotas:
        return DRAFT_SETTINGS['default_rounds']

    for region, cap in region_quotas.items():
        if isinstance(cap, bool) or not isinstance(cap, int) or cap < 0:
            raise InvalidArgument(f"Region cap for {region} must be a non-negative integer")

    rounds = sum(region_quotas.values())
    if rounds <= 0:
        raise InvalidArgument("Region quotas must allow at least one pick")
    return rounds


def next_position(current_round: int, current_pick: int, participant_count: int) -> PickPosition:
    """Position after (current_round, current_pick); wraps to the next round"""
    if participant_count <= 0:
        raise InvalidArgument("Participant count must be positive")

    next_pick = current_pick + 1
    next_round = current_round
    if next_pick > participant_count:
        next_round += 1
        next_pick = 1
    return PickPosition(next_round, next_pick)


def is_complete(current_round: int, total_rounds: int) -> bool:
    return current_round > total_rounds


def remaining_picks(current_round: int, current_pick: int, total_rounds: int,
                    participant_count: int) -> int:
    if is_complete(current_round, total_rounds):
        return 0
    remaining_in_round = participant_count - current_pick + 1
    remaining_full_rounds = total_rounds - current_round
    return remaining_in_round + remaining_full_rounds * participant_count


def total_picks(total_rounds: int, participant_count: int) -> int:
    return total_rounds * participant_count


def picks_made(current_round: int, current_pick: int, total_rounds: int,
               participant_count: int) -> int:
    return total_picks(total_rounds, participant_count) - remaining_picks(
        current_round, current_pick, total_rounds, participant_count
    )
