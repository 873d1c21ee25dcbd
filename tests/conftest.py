"""Pytest fixtures for pool scoring tests."""

import os

# config is loaded when `bowlpool` is first imported, so the test overlay must be
# in place before that
os.environ['BOWL_CONFIG_FILES'] = 'config.yml,test.yml'
os.environ.setdefault('BOWL_LOG_NAME', 'bowlpool_test')

import json

import pytest
import requests
from google.auth.credentials import AnonymousCredentials

from bowlpool import cfbd, sheets
from bowlpool.db_core import db
from bowlpool.game import GameOutcome
from bowlpool.prediction import Identity, UserPrediction
from bowlpool.pool_score import PoolScore, create_schema


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload
        self.text = json.dumps(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self.payload


class FakeSession:
    """Records requests made through `requests.Session` (and the sessions used),
    returning canned responses (keyed by HTTP method)."""

    def __init__(self):
        self.calls = []
        self.sessions = []
        self.responses = {}

    def respond(self, method, status_code=200, payload=None):
        self.responses[method] = FakeResponse(status_code, payload)

    def handler(self, method):
        def request(sess, url, **kwargs):
            self.calls.append((method, url, kwargs, dict(sess.headers)))
            self.sessions.append(sess)
            response = self.responses.get(method)
            if isinstance(response, Exception):
                raise response
            return response or FakeResponse(200, {})
        return request


@pytest.fixture
def fake_session(monkeypatch):
    """Replace HTTP methods on `requests.Session`."""
    fake = FakeSession()
    for method in ('get', 'post', 'put'):
        monkeypatch.setattr(requests.Session, method, fake.handler(method))
    return fake


@pytest.fixture
def sheets_credentials(monkeypatch):
    """Stand-in for the service account credentials (no key file needed)."""
    creds = AnonymousCredentials()
    monkeypatch.setattr(sheets, 'load_credentials', lambda: creds)
    return creds


@pytest.fixture
def secrets_env(monkeypatch, sheets_credentials):
    monkeypatch.setenv('CFBD_API_KEY', 'test-api-key')
    monkeypatch.setenv('SHEET_ID_POLL', 'poll-sheet')
    monkeypatch.setenv('SHEET_ID_SCORES', 'scores-sheet')


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Redirect data files to a temporary directory."""
    def data_file(file_name, dir=None):
        return str(tmp_path / file_name)

    monkeypatch.setattr(cfbd, 'DataFile', data_file)
    monkeypatch.setattr(sheets, 'DataFile', data_file)
    return tmp_path


@pytest.fixture
def test_db():
    """In-memory database with a fresh `PoolScore` table."""
    create_schema(force=True)
    yield db
    db.drop_tables([PoolScore])


@pytest.fixture
def sample_outcomes():
    """Outcomes with winners Ohio State and Notre Dame."""
    return {
        GameOutcome("Ohio State", "Texas", 34, 23, "Cotton Bowl"),
        GameOutcome("Notre Dame", "Penn State", 27, 24, "Orange Bowl"),
    }


@pytest.fixture
def alice():
    return UserPrediction(
        Identity("12/1/2024 10:00:00", "Alice", "Smith"),
        "Ohio State",
        ("Ohio State", "Penn State"),
    )


@pytest.fixture
def bob():
    return UserPrediction(
        Identity("12/1/2024 11:30:00", "Bob", "Lee"),
        "Texas",
        ("Texas", "Notre Dame"),
    )


@pytest.fixture
def game_records():
    """Raw postseason game records, as returned by the game data API."""
    return [
        {"homeTeam": "LSU", "awayTeam": "Baylor", "homePoints": 44, "awayPoints": 31,
         "notes": "Texas Bowl"},
        {"homeTeam": "Iowa", "awayTeam": "Missouri", "homePoints": 24, "awayPoints": 27,
         "notes": "Music City Bowl"},
        {"homeTeam": "Army", "awayTeam": "Navy", "homePoints": 20, "awayPoints": 20,
         "notes": "Tied Bowl"},
        {"homeTeam": "Duke", "awayTeam": "Ole Miss", "homePoints": None, "awayPoints": None,
         "notes": "Gator Bowl"},
        {"homeTeam": "Oregon", "awayTeam": "Ohio State", "homePoints": 21, "awayPoints": 41,
         "notes": "Rose Bowl Game Presented by Prudential - College Football Playoff Quarterfinal"},
        {"homeTeam": "Ohio State", "awayTeam": "Notre Dame", "homePoints": 34, "awayPoints": 23,
         "notes": "College Football Playoff National Championship"},
        {"homeTeam": "Utah State", "awayTeam": "Fresno State", "homePoints": 10, "awayPoints": 3,
         "notes": None},
    ]


@pytest.fixture
def poll_rows():
    """Raw poll sheet rows (header first); trailing empty cells are omitted, as
    with the sheets API."""
    return [
        ["Timestamp", "First Name", "Last Name", "National Champion",
         "Texas Bowl", "Music City Bowl", "Tied Bowl"],
        ["12/1/2024 10:00:00", "Alice", "Smith", "Ohio State", "LSU", "Missouri", "Army"],
        ["12/1/2024 11:30:00", "Bob", "Lee", "Texas", "Baylor", "Missouri"],
        ["12/2/2024 09:15:00", "", "Nobody", "Oregon", "LSU", "Iowa", "Navy"],
        ["12/2/2024 12:45:00", " Carol ", "Jones", "Notre Dame", "LSU", "Missouri", "Navy"],
    ]


@pytest.fixture
def written_inputs(data_dir, game_records, poll_rows):
    """Game and poll data files, as left by a previous fetch."""
    (data_dir / 'test_cfbd_games_2024.json').write_text(json.dumps(game_records))
    (data_dir / 'test_poll_answers.json').write_text(json.dumps(poll_rows))
    return data_dir
