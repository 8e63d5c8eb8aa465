import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Database
DATABASE_PATH = os.getenv(
    'DRAFT_DATABASE_PATH',
    os.path.join(os.path.dirname(__file__), '..', 'data', 'draft_engine.db')
)
SCHEMA_PATH = os.path.join(os.path.dirname(__file__), 'database_schema.sql')

# Logging
LOG_LEVEL = os.getenv('DRAFT_LOG_LEVEL', 'INFO')
LOG_FILE = os.getenv('DRAFT_LOG_FILE')  # unset = console only
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# Draft Settings
DRAFT_SETTINGS = {
    'default_rounds': 10,       # Rounds when no region quotas are configured
    'snake_enabled': _env_flag('DRAFT_SNAKE_ENABLED', True),
    'min_participants': 2,
    'commit_retries': 3,        # Re-read/re-validate attempts after a lost commit race
    'pick_timeout_seconds': int(os.getenv('DRAFT_PICK_TIMEOUT_SECONDS', '0')),  # 0 = no timeout
    'db_timeout_seconds': 10.0
}

# Region Settings
REGION_SETTINGS = {
    'valid_regions': ['EU', 'NAW', 'NAC', 'BR', 'ASIA', 'OCE', 'ME', 'NA'],
    'region_aliases': {
        'EUROPE': 'EU',
        'NA-WEST': 'NAW',
        'NA-EAST': 'NAC',
        'BRAZIL': 'BR',
        'OCEANIA': 'OCE',
        'MIDDLE EAST': 'ME'
    }
}
