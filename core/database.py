import sqlite3
import os
from typing import List, Dict, Optional
from contextlib import contextmanager

class DatabaseManager:
    def __init__(self, db_path: str = None, timeout: float = None):
        from config.settings import DATABASE_PATH, DRAFT_SETTINGS
        if db_path is None:
            db_path = DATABASE_PATH
        if timeout is None:
            timeout = DRAFT_SETTINGS['db_timeout_seconds']

        self.db_path = db_path
        self.timeout = timeout
        self._ensure_db_directory()
        self._initialize_database()

    def _ensure_db_directory(self):
        """Create database directory if it doesn't exist"""
        db_dir = os.path.dirname(self.db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir)

    def _initialize_database(self):
        """Initialize database with schema"""
        from config.settings import SCHEMA_PATH

        with open(SCHEMA_PATH, 'r') as f:
            schema_sql = f.read()

        with self.get_connection() as conn:
            conn.executescript(schema_sql)
            conn.commit()

    def _connect(self, **kwargs) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, **kwargs)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def get_connection(self):
        """Context manager for database connections"""
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self):
        """Write transaction holding the database write lock until commit.

        Commits when the block exits cleanly; any exception rolls back
        everything written through the connection and is re-raised as-is.
        """
        conn = self._connect(isolation_level=None)
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def execute_query(self, query: str, params: tuple = ()) -> List[Dict]:
        """Execute SELECT query and return results"""
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def execute_update(self, query: str, params: tuple = ()) -> int:
        """Execute INSERT/UPDATE/DELETE query and return affected rows"""
        with self.get_connection() as conn:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.rowcount

    def execute_many(self, query: str, params_list: List[tuple]) -> int:
        """Execute query with multiple parameter sets"""
        with self.get_connection() as conn:
            cursor = conn.executemany(query, params_list)
            conn.commit()
            return cursor.rowcount

    # Player methods
    def upsert_player(self, player_id: str, name: str, region: str = None):
        """Insert or update player"""
        query = """
        INSERT INTO players (player_id, name, region)
        VALUES (?, ?, ?)
        ON CONFLICT(player_id) DO UPDATE SET
            name = excluded.name,
            region = excluded.region
        """
        return self.execute_update(query, (player_id, name, region))

    def bulk_upsert_players(self, players: List[Dict]) -> int:
        """Insert or update many players in one statement batch"""
        query = """
        INSERT INTO players (player_id, name, region)
        VALUES (?, ?, ?)
        ON CONFLICT(player_id) DO UPDATE SET
            name = excluded.name,
            region = excluded.region
        """
        params_list = [(p['player_id'], p['name'], p.get('region')) for p in players]
        return self.execute_many(query, params_list)

    def get_player(self, player_id: str) -> Optional[Dict]:
        result = self.execute_query("SELECT * FROM players WHERE player_id = ?", (player_id,))
        return result[0] if result else None

    def get_players(self, region: str = None) -> List[Dict]:
        """Get players, optionally filtered by region"""
        if region:
            query = "SELECT * FROM players WHERE region = ? ORDER BY name"
            return self.execute_query(query, (region,))
        else:
            query = "SELECT * FROM players ORDER BY region, name"
            return self.execute_query(query)
