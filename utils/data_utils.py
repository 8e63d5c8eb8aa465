import re
from typing import Dict, Optional

from config.settings import REGION_SETTINGS

def standardize_player_name(name: str) -> str:
    """Standardize player name format"""
    if not name:
        return ""

    # Collapse internal whitespace; competitive nicknames keep their casing
    return re.sub(r'\s+', ' ', str(name).strip())

def normalize_region(region: Optional[str]) -> Optional[str]:
    """Map a region label onto its canonical upper-case tag"""
    if region is None:
        return None

    region = str(region).strip().upper()
    if not region or region == 'NAN':
        return None

    return REGION_SETTINGS['region_aliases'].get(region, region)

def generate_player_id(name: str, region: Optional[str] = None) -> str:
    """Derive a stable player id when the source doesn't provide one"""
    slug = re.sub(r'[^a-z0-9]+', '_', name.lower()).strip('_')
    return f"{slug}_{region.lower()}" if region else slug

def validate_player_record(player: Dict) -> bool:
    """Validate a player pool record before it reaches the database"""
    required_fields = ['player_id', 'name']

    for field in required_fields:
        if not player.get(field):
            return False

    region = player.get('region')
    if region is not None and region not in REGION_SETTINGS['valid_regions']:
        return False

    return True
