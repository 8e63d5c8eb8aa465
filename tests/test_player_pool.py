import json

import pytest

from core.player_pool import PlayerPool
from utils.data_utils import generate_player_id, normalize_region, validate_player_record


def test_import_csv(db, tmp_path):
    csv_file = tmp_path / "players.csv"
    csv_file.write_text(
        "Player ID,Player Name,Region\n"
        "kr_01,Alpha  One,EU\n"
        "kr_02,Bravo,na-west\n"
        "kr_03,Charlie,Atlantis\n"
    )
    pool = PlayerPool(db)

    # "Player ID" / "Player Name" headers map onto player_id / name
    count = pool.import_from_file(str(csv_file))

    assert count == 2
    assert pool.get_player('kr_01').name == 'Alpha One'
    assert pool.get_player('kr_02').region == 'NAW'
    assert pool.get_player('kr_03') is None


def test_import_generates_missing_ids(db, tmp_path):
    csv_file = tmp_path / "players.csv"
    csv_file.write_text("name,region\nBig Shot,BR\n")
    pool = PlayerPool(db)

    pool.import_from_file(str(csv_file))

    player = pool.get_player('big_shot_br')
    assert player is not None
    assert player.region == 'BR'


def test_import_json(db, tmp_path):
    json_file = tmp_path / "players.json"
    json_file.write_text(json.dumps([
        {'id': 'j1', 'nickname': 'Juno', 'region': 'OCE'},
        {'id': 'j2', 'nickname': 'Kilo', 'region': 'ASIA'},
    ]))
    pool = PlayerPool(db)

    assert pool.import_from_file(str(json_file), 'json') == 2
    assert [p.player_id for p in pool.get_players('OCE')] == ['j1']


def test_reimport_updates_existing(db, tmp_path):
    csv_file = tmp_path / "players.csv"
    csv_file.write_text("player_id,name,region\nx1,Old Name,EU\n")
    pool = PlayerPool(db)
    pool.import_from_file(str(csv_file))

    csv_file.write_text("player_id,name,region\nx1,New Name,NAC\n")
    pool.import_from_file(str(csv_file))

    assert pool.get_player('x1').name == 'New Name'
    assert pool.get_player('x1').region == 'NAC'
    assert len(pool.get_players()) == 1


def test_missing_name_column(db, tmp_path):
    csv_file = tmp_path / "players.csv"
    csv_file.write_text("player_id,region\nx1,EU\n")
    with pytest.raises(ValueError):
        PlayerPool(db).import_from_file(str(csv_file))


def test_unsupported_format(db, tmp_path):
    with pytest.raises(ValueError):
        PlayerPool(db).import_from_file(str(tmp_path / "players.xml"), 'xml')


def test_add_player(db):
    pool = PlayerPool(db)
    player = pool.add_player('solo', '  Solo   Queue ', 'europe')
    assert player.name == 'Solo Queue'
    assert player.region == 'EU'
    assert pool.get_player('solo') == player

    with pytest.raises(ValueError):
        pool.add_player('bad', 'Bad Region', 'MOON')


def test_region_counts(player_pool):
    assert player_pool.region_counts() == {'EU': 12, 'NAW': 12, 'BR': 12, 'ASIA': 12}


def test_region_helpers():
    assert normalize_region(' eu ') == 'EU'
    assert normalize_region('Brazil') == 'BR'
    assert normalize_region('') is None
    assert normalize_region(float('nan')) is None
    assert generate_player_id('Mr. Big', 'EU') == 'mr_big_eu'
    assert validate_player_record({'player_id': 'a', 'name': 'A', 'region': None})
    assert not validate_player_record({'player_id': 'a', 'name': '', 'region': 'EU'})
