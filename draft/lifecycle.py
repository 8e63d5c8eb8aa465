"""Draft lifecycle state machine.

States: PENDING -> ACTIVE <-> PAUSED -> (ACTIVE) -> FINISHED
Any non-terminal state can also -> CANCELLED.

``check_transition`` only validates; ``apply_transition`` returns a new
snapshot with the status and lifecycle timestamps set. Neither touches the
snapshot it was given.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from draft.errors import DraftError, DraftIncomplete, InvalidStateTransition
from draft.models import Draft, DraftStatus
from draft.progression import is_complete, remaining_picks


class DraftAction(str, Enum):
    START = 'start'
    PAUSE = 'pause'
    RESUME = 'resume'
    FINISH = 'finish'
    CANCEL = 'cancel'


VALID_TRANSITIONS: Dict[DraftAction, Dict[DraftStatus, DraftStatus]] = {
    DraftAction.START: {DraftStatus.PENDING: DraftStatus.ACTIVE},
    DraftAction.PAUSE: {DraftStatus.ACTIVE: DraftStatus.PAUSED},
    DraftAction.RESUME: {DraftStatus.PAUSED: DraftStatus.ACTIVE},
    DraftAction.FINISH: {DraftStatus.ACTIVE: DraftStatus.FINISHED},
    DraftAction.CANCEL: {
        DraftStatus.PENDING: DraftStatus.CANCELLED,
        DraftStatus.ACTIVE: DraftStatus.CANCELLED,
        DraftStatus.PAUSED: DraftStatus.CANCELLED,
    },
}


@dataclass(frozen=True)
class TransitionResult:
    allowed: bool
    new_status: Optional[DraftStatus] = None
    error: Optional[DraftError] = None

    @classmethod
    def success(cls, new_status: DraftStatus) -> 'TransitionResult':
        return cls(True, new_status, None)

    @classmethod
    def failure(cls, error: DraftError) -> 'TransitionResult':
        return cls(False, None, error)


def can_transition(status: DraftStatus, action: DraftAction) -> bool:
    """Whether action is valid from status, ignoring the completion guard"""
    return status in VALID_TRANSITIONS[DraftAction(action)]


def check_transition(draft: Draft, action: DraftAction) -> TransitionResult:
    action = DraftAction(action)
    targets = VALID_TRANSITIONS[action]
    if draft.status not in targets:
        return TransitionResult.failure(InvalidStateTransition(action.value, draft.status.value))

    if action is DraftAction.FINISH and not is_complete(draft.current_round, draft.total_rounds):
        remaining = remaining_picks(
            draft.current_round, draft.current_pick, draft.total_rounds, draft.participant_count
        )
        return TransitionResult.failure(DraftIncomplete(remaining))

    return TransitionResult.success(targets[draft.status])


def apply_transition(draft: Draft, action: DraftAction, now: datetime) -> Draft:
    """Return the draft after action, or raise the guard's error"""
    action = DraftAction(action)
    result = check_transition(draft, action)
    if not result.allowed:
        raise result.error

    changes = {
        'status': result.new_status,
        'updated_at': now,
        'version': draft.version + 1,
    }
    if action is DraftAction.START:
        changes['started_at'] = now
        changes['turn_started_at'] = now
    elif action is DraftAction.PAUSE:
        changes['paused_at'] = now
    elif action is DraftAction.RESUME:
        changes['paused_at'] = None
        changes['turn_started_at'] = now
    elif action is DraftAction.FINISH:
        changes['finished_at'] = now
    elif action is DraftAction.CANCEL:
        changes['cancelled_at'] = now

    return replace(draft, **changes)
