"""
Draft error taxonomy.

Every error here is locally recoverable: none of them is raised after a
write has happened, so storage is unchanged when one surfaces.
"""

from typing import Optional


class DraftError(Exception):
    """Base class for draft engine errors"""

    code = 'draft_error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgument(DraftError, ValueError):
    """Malformed input to a pure draft function"""

    code = 'invalid_argument'


class InvalidStateTransition(DraftError):
    code = 'invalid_state_transition'

    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action} a draft in status {status}")
        self.action = action
        self.status = status


class DraftIncomplete(DraftError):
    code = 'draft_incomplete'

    def __init__(self, remaining: int):
        super().__init__(f"Draft cannot be finished - {remaining} pick(s) remaining")
        self.remaining = remaining


class DraftNotActive(DraftError):
    code = 'draft_not_active'

    def __init__(self, status: str):
        super().__init__(f"Picks are not allowed while the draft is {status}")
        self.status = status


class NotYourTurn(DraftError):
    code = 'not_your_turn'

    def __init__(self, requested_by: str, expected: str, expected_draft_order: int):
        super().__init__(
            f"It's not {requested_by}'s turn - waiting on {expected} (draft order {expected_draft_order})"
        )
        self.requested_by = requested_by
        self.expected = expected
        self.expected_draft_order = expected_draft_order


class PlayerAlreadySelected(DraftError):
    code = 'player_already_selected'

    def __init__(self, player_id: str, selected_by: Optional[str] = None):
        suffix = f" by {selected_by}" if selected_by else ""
        super().__init__(f"Player {player_id} has already been selected{suffix}")
        self.player_id = player_id
        self.selected_by = selected_by


class RegionLimitExceeded(DraftError):
    code = 'region_limit_exceeded'

    def __init__(self, region: Optional[str], cap: int, used: int):
        super().__init__(f"Region {region or 'UNKNOWN'} limit reached ({used}/{cap})")
        self.region = region
        self.cap = cap
        self.used = used


class DraftNotFound(DraftError):
    code = 'draft_not_found'

    def __init__(self, draft_id: str):
        super().__init__(f"Draft not found: {draft_id}")
        self.draft_id = draft_id


class ParticipantNotFound(DraftError):
    code = 'participant_not_found'

    def __init__(self, participant_id: str):
        super().__init__(f"Participant {participant_id} is not part of this draft")
        self.participant_id = participant_id


class PlayerNotFound(DraftError):
    code = 'player_not_found'

    def __init__(self, player_id: str):
        super().__init__(f"Player not found: {player_id}")
        self.player_id = player_id


class UnauthorizedDraftAccess(DraftError):
    code = 'unauthorized'

    def __init__(self, user_id: str, action: str):
        super().__init__(f"Only the draft creator can {action} the draft (requested by {user_id})")
        self.user_id = user_id
        self.action = action


class NotEnoughParticipants(DraftError):
    code = 'not_enough_participants'

    def __init__(self, count: int, minimum: int):
        super().__init__(f"Not enough participants to start draft ({count}/{minimum})")
        self.count = count
        self.minimum = minimum


class StaleDraftError(DraftError):
    """A commit lost the race for its draft; re-read and re-validate"""

    code = 'stale_draft'

    def __init__(self, draft_id: str):
        super().__init__(f"Draft {draft_id} changed while the pick was being committed")
        self.draft_id = draft_id
