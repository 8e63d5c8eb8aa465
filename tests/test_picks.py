from datetime import datetime, timedelta

import pytest

from draft.errors import (
    DraftNotActive,
    NotYourTurn,
    ParticipantNotFound,
    PlayerAlreadySelected,
    PlayerNotFound,
    RegionLimitExceeded,
)
from draft.models import Draft, DraftPick, DraftStatus, Participant, Player
from draft.picks import current_picker, select, validate_selection

STARTED = datetime(2026, 3, 1, 20, 0, 0)
PARTICIPANTS = [Participant('p1', 1), Participant('p2', 2), Participant('p3', 3)]


def active_draft(**overrides):
    values = dict(
        draft_id='d1', game_id='g1', total_rounds=2, participant_count=3,
        status=DraftStatus.ACTIVE, turn_started_at=STARTED
    )
    values.update(overrides)
    return Draft(**values)


def made_pick(player_id, participant_id='p1', region=None, round_number=1, pick_number=1):
    return DraftPick('d1', round_number, pick_number, participant_id, player_id, STARTED, region=region)


def test_successful_pick_advances_cursor():
    now = STARTED + timedelta(seconds=42)
    result = select(active_draft(), PARTICIPANTS, 'p1', 'x1', [], now, player=Player('x1', 'X', 'EU'))

    assert result.ok
    assert result.pick.position == (1, 1)
    assert result.pick.participant_id == 'p1'
    assert result.pick.time_taken_seconds == 42
    assert result.draft.position == (1, 2)
    assert result.draft.turn_started_at == now
    assert result.draft.version == 1
    assert not result.draft_complete


def test_last_pick_signals_completion_without_finishing():
    draft = active_draft(current_round=2, current_pick=3)
    result = select(draft, PARTICIPANTS, 'p1', 'x9', [], STARTED, player=Player('x9', 'Nine', 'BR'))

    assert result.ok
    assert result.draft_complete
    assert result.draft.status is DraftStatus.ACTIVE
    assert result.draft.position == (3, 1)


@pytest.mark.parametrize("status", [DraftStatus.PENDING, DraftStatus.PAUSED, DraftStatus.FINISHED])
def test_pick_requires_active_draft(status):
    error = validate_selection(active_draft(status=status), PARTICIPANTS, 'p1', 'x1', [])
    assert isinstance(error, DraftNotActive)


def test_pick_after_last_slot_is_rejected():
    error = validate_selection(active_draft(current_round=3), PARTICIPANTS, 'p1', 'x1', [])
    assert isinstance(error, DraftNotActive)
    assert error.status == 'COMPLETE'


def test_unknown_participant():
    error = validate_selection(active_draft(), PARTICIPANTS, 'ghost', 'x1', [])
    assert isinstance(error, ParticipantNotFound)


def test_wrong_turn_names_expected_picker():
    # Round 2 reverses: pick 1 belongs to draft order 3
    draft = active_draft(current_round=2, current_pick=1)
    error = validate_selection(draft, PARTICIPANTS, 'p1', 'x1', [])
    assert isinstance(error, NotYourTurn)
    assert error.expected == 'p3'
    assert error.expected_draft_order == 3


def test_turn_checked_before_duplicate_player():
    error = validate_selection(active_draft(), PARTICIPANTS, 'p2', 'x1', [made_pick('x1')])
    assert isinstance(error, NotYourTurn)


def test_duplicate_player_rejected():
    draft = active_draft(current_pick=2)
    error = validate_selection(draft, PARTICIPANTS, 'p2', 'x1', [made_pick('x1')])
    assert isinstance(error, PlayerAlreadySelected)
    assert error.selected_by == 'p1'


def test_region_cap_is_per_participant():
    draft = active_draft(current_pick=2, region_quotas={'EU': 1, 'NAW': 1})
    picks = [made_pick('eu_a', 'p1', region='EU')]

    # p1 already has their EU player; p2 does not
    error = validate_selection(draft, PARTICIPANTS, 'p2', 'eu_b', picks, Player('eu_b', 'B', 'EU'))
    assert error is None


def test_region_cap_reached():
    draft = active_draft(current_round=2, current_pick=3, region_quotas={'EU': 1, 'NAW': 1})
    picks = [made_pick('eu_a', 'p1', region='EU')]

    error = validate_selection(draft, PARTICIPANTS, 'p1', 'eu_b', picks, Player('eu_b', 'B', 'EU'))
    assert isinstance(error, RegionLimitExceeded)
    assert error.region == 'EU'
    assert error.cap == 1
    assert error.used == 1


def test_region_without_quota_has_no_room():
    draft = active_draft(region_quotas={'EU': 2})
    error = validate_selection(draft, PARTICIPANTS, 'p1', 'br_a', [], Player('br_a', 'A', 'BR'))
    assert isinstance(error, RegionLimitExceeded)
    assert error.cap == 0


def test_player_missing_from_pool_rejected():
    error = validate_selection(active_draft(), PARTICIPANTS, 'p1', 'nobody', [], None)
    assert isinstance(error, PlayerNotFound)

    error = validate_selection(active_draft(region_quotas={'EU': 2}), PARTICIPANTS, 'p1', 'nobody', [], None)
    assert isinstance(error, PlayerNotFound)


def test_failed_result_unwrap_raises():
    result = select(active_draft(), PARTICIPANTS, 'p2', 'x1', [], STARTED)
    assert not result.ok
    assert not result.draft_complete
    with pytest.raises(NotYourTurn):
        result.unwrap()


def test_current_picker_none_when_complete():
    assert current_picker(active_draft(current_round=3), PARTICIPANTS) is None
    assert current_picker(active_draft(current_round=2), PARTICIPANTS).participant_id == 'p3'
