"""
Pytest fixtures for the draft engine.

Provides:
- A throwaway SQLite database per test
- A player pool seeded across a few regions
- A deterministic clock that advances 30 seconds per reading
- A DraftEngine wired to all of the above with its own lock registry
"""

from datetime import datetime, timedelta

import pytest

from core.database import DatabaseManager
from core.player_pool import PlayerPool
from draft.engine import DraftEngine
from draft.locks import DraftLockRegistry


SEED_REGIONS = ['EU', 'NAW', 'BR', 'ASIA']
PLAYERS_PER_REGION = 12


class StepClock:
    """Returns start, start + step, start + 2*step, ... on successive calls"""

    def __init__(self, start: datetime, step: timedelta):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


def seed_players():
    players = []
    for region in SEED_REGIONS:
        for i in range(1, PLAYERS_PER_REGION + 1):
            players.append({
                'player_id': f"{region.lower()}_{i:02d}",
                'name': f"{region} Player {i}",
                'region': region
            })
    return players


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "draft_test.db")


@pytest.fixture
def db(db_path):
    return DatabaseManager(db_path)


@pytest.fixture
def player_pool(db):
    pool = PlayerPool(db)
    db.bulk_upsert_players(seed_players())
    return pool


@pytest.fixture
def clock():
    return StepClock(datetime(2026, 1, 10, 19, 0, 0), timedelta(seconds=30))


@pytest.fixture
def locks():
    return DraftLockRegistry()


@pytest.fixture
def engine(db, player_pool, clock, locks):
    return DraftEngine(db, player_pool, clock=clock, locks=locks)


@pytest.fixture
def four_way_draft(engine):
    """Started 4-participant draft, no quotas, created by user u1"""
    participants = [
        {'participant_id': f"p{i}", 'user_id': f"u{i}"} for i in range(1, 5)
    ]
    draft = engine.create_draft('game-1', participants, creator_id='u1')
    return engine.start_draft(draft.draft_id, 'u1')


@pytest.fixture
def quota_draft(engine):
    """Started 2-participant draft limited to EU:3, NAW:2"""
    draft = engine.create_draft('game-quota', ['alpha', 'bravo'], region_quotas={'EU': 3, 'NAW': 2})
    return engine.start_draft(draft.draft_id)
