import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Spreadsheet holding the Submissions, GameQueue and Votes tabs
    RESPONSES_SHEET_KEY = os.environ.get('RESPONSES_SHEET_KEY')
    # API keys can only read sheets shared as "anyone with the link can view";
    # private sheets need the service-account credentials of the old Node app
    GOOGLE_SHEETS_API_KEY = os.environ.get('GOOGLE_SHEETS_API_KEY')
    SHEETS_API_BASE_URL = os.environ.get('SHEETS_API_BASE_URL') or 'https://sheets.googleapis.com/v4/spreadsheets'
    SHEETS_TIMEOUT_SEC = int(os.environ.get('SHEETS_TIMEOUT_SEC', '10'))
    SUBMISSIONS_RANGE = os.environ.get('SUBMISSIONS_RANGE', 'Submissions!A:H')
    GAMEQUEUE_RANGE = os.environ.get('GAMEQUEUE_RANGE', 'GameQueue!A:I')
    VOTES_RANGE = os.environ.get('VOTES_RANGE', 'Votes!A:H')
    # strict: only revealed games score; lenient: unrevealed games score too
    REVELATION_POLICY = os.environ.get('REVELATION_POLICY', 'strict')
    # Fixed offsets (minutes east of UTC) of naive sheet timestamps
    VOTE_UTC_OFFSET_MINUTES = int(os.environ.get('VOTE_UTC_OFFSET_MINUTES', '0'))
    REVEAL_UTC_OFFSET_MINUTES = int(os.environ.get('REVEAL_UTC_OFFSET_MINUTES', '330'))
    # Time of day assumed when "Revealed At" is a bare date
    REVEAL_DEFAULT_TIME = os.environ.get('REVEAL_DEFAULT_TIME', '13:00')
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
