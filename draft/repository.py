import json
import logging
import sqlite3
from typing import List, Dict, Optional, Sequence

from core.database import DatabaseManager
from draft.errors import InvalidArgument, StaleDraftError
from draft.models import Draft, DraftPick, Participant, format_dt

logger = logging.getLogger(__name__)


class DraftRepository:
    """SQLite storage for drafts, their participants and their picks.

    Drafts are addressed by id. Writes that change a draft carry the version
    the caller read; a mismatch means another writer got there first and is
    reported as StaleDraftError with nothing written.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    # Drafts
    def insert_draft(self, draft: Draft, participants: Sequence[Participant]):
        """Create a draft and its participant list in one transaction"""
        try:
            with self.db.transaction() as conn:
                conn.execute("""
                INSERT INTO drafts (draft_id, game_id, creator_id, status, current_round, current_pick,
                                    total_rounds, participant_count, snake_enabled, region_quotas,
                                    version, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    draft.draft_id, draft.game_id, draft.creator_id, draft.status.value,
                    draft.current_round, draft.current_pick, draft.total_rounds,
                    draft.participant_count, int(draft.snake_enabled),
                    json.dumps(draft.region_quotas, sort_keys=True), draft.version,
                    format_dt(draft.created_at), format_dt(draft.updated_at)
                ))
                conn.executemany("""
                INSERT INTO draft_participants (draft_id, participant_id, user_id, draft_order, is_creator)
                VALUES (?, ?, ?, ?, ?)
                """, [
                    (draft.draft_id, p.participant_id, p.user_id, p.draft_order, int(p.is_creator))
                    for p in participants
                ])
        except sqlite3.IntegrityError as e:
            raise InvalidArgument(f"Game {draft.game_id} already has a draft") from e

    def get_draft(self, draft_id: str) -> Optional[Draft]:
        result = self.db.execute_query("SELECT * FROM drafts WHERE draft_id = ?", (draft_id,))
        return Draft.from_row(result[0]) if result else None

    def find_draft_by_game(self, game_id: str) -> Optional[Draft]:
        result = self.db.execute_query("SELECT * FROM drafts WHERE game_id = ?", (game_id,))
        return Draft.from_row(result[0]) if result else None

    def list_drafts(self, status: str = None) -> List[Draft]:
        query = "SELECT * FROM drafts"
        params = ()
        if status:
            query += " WHERE status = ?"
            params = (status,)
        query += " ORDER BY created_at DESC"
        return [Draft.from_row(row) for row in self.db.execute_query(query, params)]

    def save_draft(self, draft: Draft, expected_version: int):
        """Persist a lifecycle change made on top of expected_version"""
        with self.db.transaction() as conn:
            self._update_draft(conn, draft, expected_version)

    def _update_draft(self, conn: sqlite3.Connection, draft: Draft, expected_version: int):
        cursor = conn.execute("""
        UPDATE drafts SET
            status = ?, current_round = ?, current_pick = ?, version = ?,
            updated_at = ?, started_at = ?, paused_at = ?, finished_at = ?,
            cancelled_at = ?, turn_started_at = ?
        WHERE draft_id = ? AND version = ?
        """, (
            draft.status.value, draft.current_round, draft.current_pick, draft.version,
            format_dt(draft.updated_at), format_dt(draft.started_at), format_dt(draft.paused_at),
            format_dt(draft.finished_at), format_dt(draft.cancelled_at),
            format_dt(draft.turn_started_at), draft.draft_id, expected_version
        ))
        if cursor.rowcount == 0:
            raise StaleDraftError(draft.draft_id)

    # Participants
    def get_participants(self, draft_id: str) -> List[Participant]:
        query = """
        SELECT * FROM draft_participants
        WHERE draft_id = ?
        ORDER BY draft_order
        """
        return [Participant.from_row(row) for row in self.db.execute_query(query, (draft_id,))]

    # Picks
    def record_pick(self, pick: DraftPick, draft: Draft, expected_version: int):
        """Insert the pick and move the draft cursor atomically.

        Either both land or neither does. Losing to a concurrent commit
        (version moved on, or the slot/player is already taken) raises
        StaleDraftError; any other database error propagates unchanged.
        """
        try:
            with self.db.transaction() as conn:
                self._update_draft(conn, draft, expected_version)
                conn.execute("""
                INSERT INTO draft_picks (draft_id, round_number, pick_number, participant_id, player_id,
                                         region, selected_at, time_taken_seconds, auto_pick)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    pick.draft_id, pick.round, pick.pick_number, pick.participant_id, pick.player_id,
                    pick.region, format_dt(pick.selected_at), pick.time_taken_seconds, int(pick.auto_pick)
                ))
        except sqlite3.IntegrityError as e:
            logger.warning(f"Pick insert for draft {pick.draft_id} hit a uniqueness constraint: {e}")
            raise StaleDraftError(pick.draft_id) from e

    def get_picks(self, draft_id: str) -> List[DraftPick]:
        """All picks for a draft in (round, pick) order"""
        query = """
        SELECT * FROM draft_picks
        WHERE draft_id = ?
        ORDER BY round_number, pick_number
        """
        return [DraftPick.from_row(row) for row in self.db.execute_query(query, (draft_id,))]

    def get_team_roster(self, draft_id: str, participant_id: str) -> List[Dict]:
        """Players drafted by one participant, in pick order"""
        query = """
        SELECT dp.round_number, dp.pick_number, dp.player_id, dp.region, dp.selected_at,
               dp.auto_pick, p.name
        FROM draft_picks dp
        LEFT JOIN players p ON dp.player_id = p.player_id
        WHERE dp.draft_id = ? AND dp.participant_id = ?
        ORDER BY dp.round_number, dp.pick_number
        """
        return self.db.execute_query(query, (draft_id, participant_id))

    def get_available_players(self, draft_id: str, region: str = None, limit: int = None) -> List[Dict]:
        """Players in the pool not yet picked in this draft"""
        query = """
        SELECT p.* FROM players p
        WHERE p.player_id NOT IN (
            SELECT player_id FROM draft_picks WHERE draft_id = ?
        )
        """
        params = [draft_id]

        if region:
            query += " AND p.region = ?"
            params.append(region)

        query += " ORDER BY p.region, p.name"

        if limit:
            query += " LIMIT ?"
            params.append(int(limit))

        return self.db.execute_query(query, tuple(params))
