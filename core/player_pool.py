import json
import logging
from typing import List, Dict, Optional

import pandas as pd

from core.database import DatabaseManager
from draft.models import Player
from utils.data_utils import (
    generate_player_id,
    normalize_region,
    standardize_player_name,
    validate_player_record,
)

logger = logging.getLogger(__name__)


class PlayerPool:
    """Source of draftable players and their region tags"""

    def __init__(self, db_manager: DatabaseManager):
        self.db = db_manager

    def get_player(self, player_id: str) -> Optional[Player]:
        row = self.db.get_player(player_id)
        return Player.from_row(row) if row else None

    def get_players(self, region: str = None) -> List[Player]:
        return [Player.from_row(row) for row in self.db.get_players(normalize_region(region))]

    def add_player(self, player_id: str, name: str, region: str = None) -> Player:
        player = {
            'player_id': player_id,
            'name': standardize_player_name(name),
            'region': normalize_region(region)
        }
        if not validate_player_record(player):
            raise ValueError(f"Invalid player record: {player}")
        self.db.upsert_player(**player)
        return Player(**player)

    def import_from_file(self, file_path: str, file_format: str = 'csv') -> int:
        """Import players from a CSV or JSON file"""
        if file_format.lower() == 'csv':
            df = pd.read_csv(file_path)
        elif file_format.lower() == 'json':
            with open(file_path, 'r') as f:
                data = json.load(f)
            df = pd.DataFrame(data) if isinstance(data, list) else pd.json_normalize(data)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")

        return self._process_dataframe(df)

    def _process_dataframe(self, df: pd.DataFrame) -> int:
        """Validate rows and upsert them into the players table"""
        df = self._standardize_columns(df)

        if 'name' not in df.columns:
            raise ValueError("Missing required column: name")

        players = []
        skipped = 0
        for _, row in df.iterrows():
            name = standardize_player_name(row['name'])
            region = normalize_region(row.get('region'))
            player_id = row.get('player_id')
            if player_id is None or pd.isna(player_id) or not str(player_id).strip():
                player_id = generate_player_id(name, region)

            player = {'player_id': str(player_id).strip(), 'name': name, 'region': region}
            if validate_player_record(player):
                players.append(player)
            else:
                skipped += 1

        if skipped:
            logger.warning(f"Skipped {skipped} invalid player rows")

        count = self.db.bulk_upsert_players(players) if players else 0
        logger.info(f"Imported {len(players)} players into the pool")
        return count

    def _standardize_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Standardize column names to match expected format"""
        column_mapping = {
            'id': 'player_id',
            'playerid': 'player_id',
            'player': 'name',
            'player_name': 'name',
            'nickname': 'name',
            'region_tag': 'region',
            'reg': 'region'
        }
        df = df.rename(columns=lambda c: str(c).strip().lower().replace(' ', '_'))
        return df.rename(columns=column_mapping)

    def region_counts(self) -> Dict[str, int]:
        rows = self.db.execute_query(
            "SELECT COALESCE(region, 'UNKNOWN') AS region, COUNT(*) AS count FROM players GROUP BY region"
        )
        return {row['region']: row['count'] for row in rows}
