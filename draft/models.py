"""
Draft domain types.

Snapshots are immutable; the lifecycle and pick modules hand back new
``Draft`` values (``dataclasses.replace``) instead of mutating shared state.
Timestamps are stored as ISO-8601 strings in SQLite and parsed back here.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


def parse_dt(value: Any) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class DraftStatus(str, Enum):
    PENDING = 'PENDING'
    ACTIVE = 'ACTIVE'
    PAUSED = 'PAUSED'
    FINISHED = 'FINISHED'
    CANCELLED = 'CANCELLED'

    @classmethod
    def _missing_(cls, value):
        # IN_PROGRESS is the legacy name for ACTIVE
        if isinstance(value, str):
            normalized = value.strip().upper()
            if normalized == 'IN_PROGRESS':
                return cls.ACTIVE
            if normalized in cls.__members__:
                return cls[normalized]
        return None

    @property
    def allows_picks(self) -> bool:
        return self is DraftStatus.ACTIVE


@dataclass(frozen=True)
class Participant:
    """A game participant as seen by the draft: who they are and when they pick"""

    participant_id: str
    draft_order: Optional[int] = None
    user_id: Optional[str] = None
    is_creator: bool = False

    @property
    def index(self) -> int:
        """0-based picker index matching the turn-order calculator"""
        return int(self.draft_order) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'participant_id': self.participant_id,
            'user_id': self.user_id,
            'draft_order': self.draft_order,
            'is_creator': bool(self.is_creator)
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Participant':
        return cls(
            participant_id=str(row['participant_id']),
            draft_order=int(row['draft_order']) if row.get('draft_order') is not None else None,
            user_id=str(row['user_id']) if row.get('user_id') is not None else None,
            is_creator=bool(row.get('is_creator') or False)
        )


@dataclass(frozen=True)
class Player:
    player_id: str
    name: str = ''
    region: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Player':
        return cls(
            player_id=str(row['player_id']),
            name=str(row.get('name') or ''),
            region=row.get('region')
        )


@dataclass(frozen=True)
class DraftPick:
    """One filled draft slot. Append-only."""

    draft_id: str
    round: int
    pick_number: int
    participant_id: str
    player_id: str
    selected_at: datetime
    region: Optional[str] = None
    time_taken_seconds: Optional[int] = None
    auto_pick: bool = False

    @property
    def position(self) -> Tuple[int, int]:
        return (self.round, self.pick_number)

    def overall_number(self, participant_count: int) -> int:
        return (self.round - 1) * participant_count + self.pick_number

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'DraftPick':
        return cls(
            draft_id=str(row['draft_id']),
            round=int(row['round_number']),
            pick_number=int(row['pick_number']),
            participant_id=str(row['participant_id']),
            player_id=str(row['player_id']),
            selected_at=parse_dt(row['selected_at']),
            region=row.get('region'),
            time_taken_seconds=row.get('time_taken_seconds'),
            auto_pick=bool(row.get('auto_pick') or False)
        )


@dataclass(frozen=True)
class Draft:
    """Snapshot of a draft row: lifecycle status plus the current (round, pick) cursor"""

    draft_id: str
    game_id: str
    total_rounds: int
    participant_count: int
    status: DraftStatus = DraftStatus.PENDING
    current_round: int = 1
    current_pick: int = 1
    snake_enabled: bool = True
    region_quotas: Dict[str, int] = field(default_factory=dict)
    creator_id: Optional[str] = None
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    turn_started_at: Optional[datetime] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.current_round, self.current_pick)

    @property
    def has_region_quotas(self) -> bool:
        return bool(self.region_quotas)

    @property
    def total_picks(self) -> int:
        return self.total_rounds * self.participant_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'draft_id': self.draft_id,
            'game_id': self.game_id,
            'creator_id': self.creator_id,
            'status': self.status.value,
            'current_round': self.current_round,
            'current_pick': self.current_pick,
            'total_rounds': self.total_rounds,
            'participant_count': self.participant_count,
            'snake_enabled': bool(self.snake_enabled),
            'region_quotas': dict(self.region_quotas),
            'version': self.version,
            'created_at': format_dt(self.created_at),
            'updated_at': format_dt(self.updated_at),
            'started_at': format_dt(self.started_at),
            'paused_at': format_dt(self.paused_at),
            'finished_at': format_dt(self.finished_at),
            'cancelled_at': format_dt(self.cancelled_at),
            'turn_started_at': format_dt(self.turn_started_at)
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Draft':
        quotas = row.get('region_quotas') or '{}'
        if isinstance(quotas, str):
            quotas = json.loads(quotas)
        return cls(
            draft_id=str(row['draft_id']),
            game_id=str(row['game_id']),
            creator_id=row.get('creator_id'),
            status=DraftStatus(row['status']),
            current_round=int(row['current_round']),
            current_pick=int(row['current_pick']),
            total_rounds=int(row['total_rounds']),
            participant_count=int(row['participant_count']),
            snake_enabled=bool(row['snake_enabled']),
            region_quotas={str(k): int(v) for k, v in quotas.items()},
            version=int(row.get('version') or 0),
            created_at=parse_dt(row.get('created_at')),
            updated_at=parse_dt(row.get('updated_at')),
            started_at=parse_dt(row.get('started_at')),
            paused_at=parse_dt(row.get('paused_at')),
            finished_at=parse_dt(row.get('finished_at')),
            cancelled_at=parse_dt(row.get('cancelled_at')),
            turn_started_at=parse_dt(row.get('turn_started_at'))
        )
