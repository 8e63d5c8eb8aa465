import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from config.settings import DRAFT_SETTINGS, REGION_SETTINGS
from core.database import DatabaseManager
from core.player_pool import PlayerPool
from draft.errors import (
    DraftNotFound,
    InvalidArgument,
    NotEnoughParticipants,
    StaleDraftError,
    UnauthorizedDraftAccess,
)
from draft.lifecycle import DraftAction, apply_transition
from draft.locks import DRAFT_LOCKS, DraftLockRegistry
from draft.models import Draft, DraftPick, DraftStatus, Participant
from draft.picks import PickResult, current_picker, select
from draft.progression import (
    is_complete,
    picks_made,
    remaining_picks,
    total_rounds,
    total_rounds_for_quotas,
)
from draft.repository import DraftRepository
from utils.data_utils import normalize_region

logger = logging.getLogger(__name__)

ParticipantInput = Union[Participant, Mapping[str, Any], str]


class DraftEngine:
    """Runs drafts end to end: creation, lifecycle, picks and read-side queries.

    The only component that talks to storage. Every read-modify-write on a
    draft happens while holding that draft's lock, and is committed with a
    version check so writers in other processes are caught too.
    """

    def __init__(self, db_manager: DatabaseManager, player_pool: PlayerPool = None,
                 clock: Callable[[], datetime] = None, locks: DraftLockRegistry = None):
        self.db = db_manager
        self.repo = DraftRepository(db_manager)
        self.player_pool = player_pool if player_pool is not None else PlayerPool(db_manager)
        self.clock = clock if clock is not None else datetime.now
        self.locks = locks if locks is not None else DRAFT_LOCKS

    def _now(self) -> datetime:
        return self.clock()

    # Creation
    def create_draft(self, game_id: str, participants: Sequence[ParticipantInput],
                     region_quotas: Optional[Mapping[str, int]] = None, creator_id: str = None,
                     players_per_team: int = None, snake_enabled: bool = None) -> Draft:
        """Create a PENDING draft for a game"""
        ordered = self._prepare_participants(participants, creator_id)
        quotas = self._prepare_quotas(region_quotas)

        if quotas:
            rounds = total_rounds_for_quotas(quotas)
        elif players_per_team is not None:
            rounds = total_rounds(len(ordered), players_per_team)
        else:
            rounds = total_rounds_for_quotas(None)

        if self.find_draft_by_game(game_id) is not None:
            raise InvalidArgument(f"Game {game_id} already has a draft")

        now = self._now()
        draft = Draft(
            draft_id=str(uuid.uuid4()),
            game_id=str(game_id),
            creator_id=creator_id,
            total_rounds=rounds,
            participant_count=len(ordered),
            snake_enabled=DRAFT_SETTINGS['snake_enabled'] if snake_enabled is None else bool(snake_enabled),
            region_quotas=quotas,
            created_at=now,
            updated_at=now
        )
        self.repo.insert_draft(draft, ordered)

        logger.info(f"Created draft {draft.draft_id} for game {game_id}: "
                    f"{len(ordered)} participants, {rounds} rounds")
        return draft

    def _prepare_participants(self, participants: Sequence[ParticipantInput],
                              creator_id: str = None) -> List[Participant]:
        """Normalize inputs and fix draft order (explicit 1..n, or list order)"""
        if not participants:
            raise InvalidArgument("A draft needs at least one participant")

        normalized = []
        for item in participants:
            if isinstance(item, Participant):
                normalized.append(item)
            elif isinstance(item, Mapping):
                if item.get('participant_id') is None:
                    raise InvalidArgument(f"Participant is missing participant_id: {dict(item)}")
                normalized.append(Participant(
                    participant_id=str(item['participant_id']),
                    draft_order=item.get('draft_order'),
                    user_id=item.get('user_id'),
                    is_creator=bool(item.get('is_creator', False))
                ))
            else:
                normalized.append(Participant(participant_id=str(item)))

        ids = [p.participant_id for p in normalized]
        if len(set(ids)) != len(ids):
            raise InvalidArgument("Participant ids must be unique")

        orders = [p.draft_order for p in normalized]
        if all(order is None for order in orders):
            orders = list(range(1, len(normalized) + 1))
        elif any(order is None for order in orders):
            raise InvalidArgument("Either every participant has a draft order or none does")
        else:
            try:
                orders = [int(order) for order in orders]
            except (TypeError, ValueError):
                raise InvalidArgument(f"Draft orders must be integers, got {orders}")
            if sorted(orders) != list(range(1, len(normalized) + 1)):
                raise InvalidArgument("Draft orders must be unique and run from 1 to the participant count")

        normalized = [
            Participant(p.participant_id, order, p.user_id,
                        p.is_creator or (creator_id is not None and creator_id in (p.participant_id, p.user_id)))
            for p, order in zip(normalized, orders)
        ]

        return sorted(normalized, key=lambda p: p.draft_order)

    def _prepare_quotas(self, region_quotas: Optional[Mapping[str, int]]) -> Dict[str, int]:
        if not region_quotas:
            return {}

        quotas: Dict[str, int] = {}
        for region, cap in region_quotas.items():
            tag = normalize_region(region)
            if tag not in REGION_SETTINGS['valid_regions']:
                raise InvalidArgument(f"Invalid region tag: {region!r}")
            if tag in quotas:
                raise InvalidArgument(f"Region {tag} is listed more than once")
            quotas[tag] = cap
        total_rounds_for_quotas(quotas)
        return quotas

    # Lifecycle
    def start_draft(self, draft_id: str, user_id: str = None) -> Draft:
        return self._transition(draft_id, DraftAction.START, user_id)

    def pause_draft(self, draft_id: str, user_id: str = None) -> Draft:
        return self._transition(draft_id, DraftAction.PAUSE, user_id)

    def resume_draft(self, draft_id: str, user_id: str = None) -> Draft:
        return self._transition(draft_id, DraftAction.RESUME, user_id)

    def finish_draft(self, draft_id: str, user_id: str = None) -> Draft:
        return self._transition(draft_id, DraftAction.FINISH, user_id)

    def cancel_draft(self, draft_id: str, user_id: str = None) -> Draft:
        return self._transition(draft_id, DraftAction.CANCEL, user_id)

    def _transition(self, draft_id: str, action: DraftAction, user_id: str = None) -> Draft:
        self.get_draft(draft_id)  # unknown ids never get a lock entry
        attempts = DRAFT_SETTINGS['commit_retries']
        with self.locks.hold(draft_id):
            for attempt in range(1, attempts + 1):
                draft = self.get_draft(draft_id)
                self._check_manager(draft, user_id, action)

                if action is DraftAction.START and draft.status is DraftStatus.PENDING:
                    minimum = DRAFT_SETTINGS['min_participants']
                    if draft.participant_count < minimum:
                        raise NotEnoughParticipants(draft.participant_count, minimum)

                updated = apply_transition(draft, action, self._now())
                try:
                    self.repo.save_draft(updated, draft.version)
                except StaleDraftError:
                    logger.warning(f"Draft {draft_id} changed during {action.value} "
                                   f"(attempt {attempt}/{attempts}), re-reading")
                    continue

                logger.info(f"Draft {draft_id}: {draft.status.value} -> {updated.status.value} ({action.value})")
                return updated

        raise StaleDraftError(draft_id)

    def _check_manager(self, draft: Draft, user_id: Optional[str], action: DraftAction):
        """Only the creator may manage a draft that has one"""
        if user_id is None or draft.creator_id is None:
            return
        if str(user_id) != str(draft.creator_id):
            raise UnauthorizedDraftAccess(user_id, action.value)

    # Picks
    def select_player(self, draft_id: str, participant_id: str, player_id: str,
                      auto_pick: bool = False) -> PickResult:
        """Validate and commit one pick for the participant on the clock.

        Returns a PickResult instead of raising for rule violations.
        ``result.draft_complete`` tells the caller the last pick is in and
        ``finish_draft`` can be called; the draft is never finished here.
        """
        if self.repo.get_draft(draft_id) is None:
            return PickResult.failure(DraftNotFound(draft_id))

        player = self.player_pool.get_player(player_id)
        attempts = DRAFT_SETTINGS['commit_retries']

        with self.locks.hold(draft_id):
            for attempt in range(1, attempts + 1):
                draft = self.repo.get_draft(draft_id)
                participants = self.repo.get_participants(draft_id)
                picks = self.repo.get_picks(draft_id)
                result = select(draft, participants, participant_id, player_id, picks,
                                self._now(), player=player, auto_pick=auto_pick)
                if not result.ok:
                    logger.info(f"Rejected pick of {player_id} by {participant_id} "
                                f"in draft {draft_id}: {result.error.message}")
                    return result

                try:
                    self.repo.record_pick(result.pick, result.draft, draft.version)
                except StaleDraftError:
                    logger.warning(f"Lost commit race on draft {draft_id} "
                                   f"(attempt {attempt}/{attempts}), re-validating")
                    continue

                logger.info(f"Draft {draft_id} R{result.pick.round}P{result.pick.pick_number}: "
                            f"{participant_id} selected {player_id}"
                            f"{' (auto)' if auto_pick else ''}")
                if result.draft_complete:
                    logger.info(f"Draft {draft_id} has no picks remaining, ready to finish")
                return result

        return PickResult.failure(StaleDraftError(draft_id))

    # Queries
    def get_draft(self, draft_id: str) -> Draft:
        draft = self.repo.get_draft(draft_id)
        if draft is None:
            raise DraftNotFound(draft_id)
        return draft

    def find_draft_by_game(self, game_id: str) -> Optional[Draft]:
        return self.repo.find_draft_by_game(str(game_id))

    def list_drafts(self, status: Union[DraftStatus, str] = None) -> List[Draft]:
        if not status:
            return self.repo.list_drafts()
        try:
            status = DraftStatus(status)
        except ValueError:
            raise InvalidArgument(f"Unknown draft status: {status}")
        return self.repo.list_drafts(status.value)

    def get_draft_order(self, draft_id: str) -> List[Participant]:
        self.get_draft(draft_id)
        return self.repo.get_participants(draft_id)

    def current_picker(self, draft_id: str) -> Optional[Participant]:
        """Participant on the clock; None once every slot is filled"""
        draft = self.get_draft(draft_id)
        return current_picker(draft, self.repo.get_participants(draft_id))

    def is_complete(self, draft_id: str) -> bool:
        draft = self.get_draft(draft_id)
        return is_complete(draft.current_round, draft.total_rounds)

    def remaining_picks(self, draft_id: str) -> int:
        draft = self.get_draft(draft_id)
        return remaining_picks(draft.current_round, draft.current_pick,
                               draft.total_rounds, draft.participant_count)

    def is_user_turn(self, draft_id: str, user_id: str) -> bool:
        draft = self.get_draft(draft_id)
        if not draft.status.allows_picks:
            return False
        picker = current_picker(draft, self.repo.get_participants(draft_id))
        if picker is None:
            return False
        return str(user_id) in (picker.user_id, picker.participant_id)

    def get_pick_history(self, draft_id: str) -> List[DraftPick]:
        self.get_draft(draft_id)
        return self.repo.get_picks(draft_id)

    def get_team_roster(self, draft_id: str, participant_id: str) -> List[Dict]:
        self.get_draft(draft_id)
        return self.repo.get_team_roster(draft_id, participant_id)

    def get_available_players(self, draft_id: str, region: str = None, limit: int = None) -> List[Dict]:
        self.get_draft(draft_id)
        return self.repo.get_available_players(draft_id, normalize_region(region), limit)

    def get_draft_summary(self, draft_id: str) -> Dict:
        """Draft snapshot plus derived progress, for status displays"""
        draft = self.get_draft(draft_id)
        participants = self.repo.get_participants(draft_id)
        picker = current_picker(draft, participants)

        summary = draft.to_dict()
        summary.update({
            'participants': [p.to_dict() for p in participants],
            'current_picker': picker.to_dict() if picker else None,
            'is_complete': is_complete(draft.current_round, draft.total_rounds),
            'remaining_picks': remaining_picks(draft.current_round, draft.current_pick,
                                               draft.total_rounds, draft.participant_count),
            'picks_made': picks_made(draft.current_round, draft.current_pick,
                                     draft.total_rounds, draft.participant_count),
            'total_picks': draft.total_picks,
            'pick_timeout_seconds': DRAFT_SETTINGS['pick_timeout_seconds'] or None
        })
        return summary
