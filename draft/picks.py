"""
Pick validation and commit.

Validation checks run in a fixed order and stop at the first failure:
  1. the draft is open for picks
  2. the requester belongs to the draft
  3. it is the requester's turn
  4. the player has not been picked in this draft
  5. the player is in the pool
  6. region quota (only when the draft has quotas)

Nothing in this module touches storage. ``select`` returns a ``PickResult``
holding either the new pick plus the advanced draft snapshot, or the error
that rejected the pick; the engine persists the former.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple

from draft.errors import (
    DraftError,
    DraftNotActive,
    NotYourTurn,
    ParticipantNotFound,
    PlayerAlreadySelected,
    PlayerNotFound,
    RegionLimitExceeded,
)
from draft.models import Draft, DraftPick, Participant, Player
from draft.progression import is_complete, next_position
from draft.turn_order import picker_index


@dataclass(frozen=True)
class PickResult:
    pick: Optional[DraftPick] = None
    draft: Optional[Draft] = None
    error: Optional[DraftError] = None

    @classmethod
    def success(cls, pick: DraftPick, draft: Draft) -> 'PickResult':
        return cls(pick=pick, draft=draft)

    @classmethod
    def failure(cls, error: DraftError) -> 'PickResult':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def draft_complete(self) -> bool:
        """True once the last pick is in; the caller should finish the draft"""
        if not self.ok or self.draft is None:
            return False
        return is_complete(self.draft.current_round, self.draft.total_rounds)

    def unwrap(self) -> DraftPick:
        if self.error is not None:
            raise self.error
        return self.pick


def current_picker(draft: Draft, participants: Sequence[Participant]) -> Optional[Participant]:
    """Participant on the clock, or None once every round is done"""
    if is_complete(draft.current_round, draft.total_rounds):
        return None
    index = picker_index(draft.current_pick, draft.current_round,
                         draft.participant_count, draft.snake_enabled)
    for participant in participants:
        if participant.index == index:
            return participant
    return None


def region_picks_used(existing_picks: Sequence[DraftPick], participant_id: str,
                      region: Optional[str]) -> int:
    return sum(
        1 for pick in existing_picks
        if pick.participant_id == participant_id and pick.region == region
    )


def validate_selection(draft: Draft, participants: Sequence[Participant], requester_id: str,
                       player_id: str, existing_picks: Sequence[DraftPick],
                       player: Optional[Player] = None) -> Optional[DraftError]:
    """Return the first rule the pick breaks, or None when it is legal"""
    if not draft.status.allows_picks:
        return DraftNotActive(draft.status.value)
    if is_complete(draft.current_round, draft.total_rounds):
        # Every slot is filled; only finish is left
        return DraftNotActive('COMPLETE')

    by_id: Dict[str, Participant] = {p.participant_id: p for p in participants}
    requester = by_id.get(requester_id)
    if requester is None:
        return ParticipantNotFound(requester_id)

    expected = current_picker(draft, participants)
    if expected is None or expected.participant_id != requester.participant_id:
        expected_order = picker_index(draft.current_pick, draft.current_round,
                                      draft.participant_count, draft.snake_enabled) + 1
        expected_id = expected.participant_id if expected else f"draft order {expected_order}"
        return NotYourTurn(requester_id, expected_id, expected_order)

    for pick in existing_picks:
        if pick.player_id == player_id:
            return PlayerAlreadySelected(player_id, pick.participant_id)

    if player is None:
        return PlayerNotFound(player_id)

    if draft.has_region_quotas:
        cap = draft.region_quotas.get(player.region, 0)
        used = region_picks_used(existing_picks, requester_id, player.region)
        if used >= cap:
            return RegionLimitExceeded(player.region, cap, used)

    return None


def commit_selection(draft: Draft, participant: Participant, player_id: str, now: datetime,
                     region: Optional[str] = None, auto_pick: bool = False) -> Tuple[DraftPick, Draft]:
    """Build the pick for the current slot and the draft advanced past it"""
    time_taken = None
    if draft.turn_started_at is not None:
        time_taken = max(0, int((now - draft.turn_started_at).total_seconds()))

    pick = DraftPick(
        draft_id=draft.draft_id,
        round=draft.current_round,
        pick_number=draft.current_pick,
        participant_id=participant.participant_id,
        player_id=player_id,
        selected_at=now,
        region=region,
        time_taken_seconds=time_taken,
        auto_pick=auto_pick
    )

    position = next_position(draft.current_round, draft.current_pick, draft.participant_count)
    advanced = replace(
        draft,
        current_round=position.round,
        current_pick=position.pick,
        version=draft.version + 1,
        updated_at=now,
        turn_started_at=now
    )
    return pick, advanced


def select(draft: Draft, participants: Sequence[Participant], requester_id: str, player_id: str,
           existing_picks: Sequence[DraftPick], now: datetime, player: Optional[Player] = None,
           auto_pick: bool = False) -> PickResult:
    error = validate_selection(draft, participants, requester_id, player_id, existing_picks, player)
    if error is not None:
        return PickResult.failure(error)

    requester = next(p for p in participants if p.participant_id == requester_id)
    region = player.region if player is not None else None
    pick, advanced = commit_selection(draft, requester, player_id, now, region, auto_pick)
    return PickResult.success(pick, advanced)
