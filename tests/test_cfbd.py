"""Tests for the game data source (fetch/load of postseason games)."""

import json

import pytest
import requests

from bowlpool import cfbd
from bowlpool.core import ConfigError, InputUnavailable


class TestFetchGameData:
    def test_writes_data_file(self, fake_session, secrets_env, data_dir, game_records):
        fake_session.respond('get', 200, game_records)
        assert cfbd.fetch_game_data(2024) == 0

        written = json.loads((data_dir / 'test_cfbd_games_2024.json').read_text())
        assert written == game_records

    def test_request_params_and_auth(self, fake_session, secrets_env, data_dir):
        fake_session.respond('get', 200, [])
        cfbd.fetch_game_data(2024)

        method, url, kwargs, headers = fake_session.calls[0]
        assert url == 'https://api.collegefootballdata.com/games'
        assert kwargs['params'] == {'year': 2024, 'seasonType': 'postseason'}
        assert headers['Authorization'] == 'Bearer test-api-key'

    def test_error_status(self, fake_session, secrets_env, data_dir):
        fake_session.respond('get', 401, {"message": "Unauthorized"})
        with pytest.raises(InputUnavailable):
            cfbd.fetch_game_data(2024)
        assert not (data_dir / 'test_cfbd_games_2024.json').exists()

    def test_transport_error(self, fake_session, secrets_env, data_dir):
        fake_session.responses['get'] = requests.ConnectionError("no route")
        with pytest.raises(InputUnavailable):
            cfbd.fetch_game_data(2024)

    def test_missing_api_key(self, fake_session, data_dir, monkeypatch):
        monkeypatch.delenv('CFBD_API_KEY', raising=False)
        with pytest.raises(ConfigError):
            cfbd.fetch_game_data(2024)


class TestLoadGameData:
    def test_missing_file(self, data_dir):
        with pytest.raises(InputUnavailable):
            cfbd.load_game_data(2024)

    def test_corrupt_file(self, data_dir):
        (data_dir / 'test_cfbd_games_2024.json').write_text("{not json")
        with pytest.raises(InputUnavailable):
            cfbd.load_game_data(2024)

    def test_unexpected_shape(self, data_dir):
        (data_dir / 'test_cfbd_games_2024.json').write_text('{"games": []}')
        with pytest.raises(InputUnavailable):
            cfbd.load_game_data(2024)


class TestOutcomesAndChampion:
    def test_get_outcomes(self, written_inputs):
        outcomes = cfbd.get_outcomes(2024)
        assert {o.winner for o in outcomes} == {"LSU", "Missouri", None}

    def test_get_outcomes_with_fetch(self, fake_session, secrets_env, data_dir, game_records):
        fake_session.respond('get', 200, game_records[:1])
        outcomes = cfbd.get_outcomes(2024, fetch=True)
        assert [o.category for o in outcomes] == ["Texas Bowl"]

    def test_get_champion(self, written_inputs):
        assert cfbd.get_champion(2024) == "Ohio State"

    def test_get_champion_override_needs_no_data(self, data_dir):
        assert cfbd.get_champion(2024, override="Texas") == "Texas"


class TestMain:
    def test_fetch_single_year(self, fake_session, secrets_env, data_dir, monkeypatch):
        fake_session.respond('get', 200, [])
        monkeypatch.setattr('sys.argv', ['cfbd', 'fetch_game_data', 'year=2023'])
        assert cfbd.main() == 0

        assert len(fake_session.calls) == 1
        assert fake_session.calls[0][2]['params'] == {'year': 2023, 'seasonType': 'postseason'}
        assert (data_dir / 'test_cfbd_games_2023.json').exists()

    def test_unknown_function(self, monkeypatch):
        monkeypatch.setattr('sys.argv', ['cfbd', 'fetch_all_seasons'])
        assert cfbd.main() == -1
