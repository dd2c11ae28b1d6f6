import os
import sys
import pytest

# Ensure the backend root (containing the `liedetector` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from liedetector import create_app
from liedetector.services.sheets import SheetFetchError, SheetTables


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    RESPONSES_SHEET_KEY = 'test-sheet'
    REVELATION_POLICY = 'strict'
    VOTE_UTC_OFFSET_MINUTES = 0
    REVEAL_UTC_OFFSET_MINUTES = 330
    REVEAL_DEFAULT_TIME = '13:00'
    CORS_ORIGINS = ['http://localhost:3000']


class FakeSheetSource:
    """Stands in for SheetsClient; returns canned tables or fails."""

    def __init__(self, submissions=None, gamequeue=None, votes=None, error=None):
        self.tables = SheetTables(list(submissions or []), list(gamequeue or []), list(votes or []))
        self.error = error
        self.calls = 0

    def fetch_tables(self):
        self.calls += 1
        if self.error:
            raise SheetFetchError(self.error)
        return self.tables


def make_game(slack_id, name, lie_index='1', revealed='1', revealed_at='',
              statements=('I have a cat', 'I ran a marathon', 'I met the queen')):
    return {
        'Slack ID': slack_id,
        'Name': name,
        'Statement 1': statements[0],
        'Statement 2': statements[1],
        'Statement 3': statements[2],
        'Lie Index (start from 0)': lie_index,
        'Revealed?': revealed,
        'Revealed At': revealed_at,
    }


def make_vote(voter_id, voter_name, target_id, guess, timestamp):
    return {
        'Timestamp': timestamp,
        'Submitted By (ID)': voter_id,
        'Submitted By (Name)': voter_name,
        'Vote for who': target_id,
        'Which one do you think is the lie': guess,
    }


def make_submission(player_id, name):
    return {'Slack ID': player_id, 'Name': name}


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    application.extensions['sheet_source'] = FakeSheetSource()
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def set_tables(flask_app):
    def _set(**kwargs):
        source = FakeSheetSource(**kwargs)
        flask_app.extensions['sheet_source'] = source
        return source
    return _set
