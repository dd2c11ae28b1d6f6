"""Google Sheets access for the three response tables.

Reads ranges through the Sheets v4 ``values.get`` endpoint and turns them
into header-keyed records. Any failure raises :class:`SheetFetchError`;
callers treat that as fatal for the whole leaderboard computation.
"""
import logging
from typing import Dict, List, NamedTuple
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://sheets.googleapis.com/v4/spreadsheets'


class SheetFetchError(RuntimeError):
    """The spreadsheet could not be read or returned something unusable."""


class SheetTables(NamedTuple):
    submissions: List[Dict[str, str]]
    gamequeue: List[Dict[str, str]]
    votes: List[Dict[str, str]]


def rows_to_records(rows) -> List[Dict[str, str]]:
    """First row is the header; short rows are padded with empty strings."""
    if not rows:
        return []
    headers = [str(h) for h in rows[0]]
    records = []
    for row in rows[1:]:
        record = {}
        for idx, header in enumerate(headers):
            value = row[idx] if idx < len(row) else ''
            record[header] = '' if value is None else str(value)
        records.append(record)
    return records


class SheetsClient:
    def __init__(self, sheet_key, api_key=None, timeout=10, base_url=None,
                 submissions_range='Submissions!A:H', gamequeue_range='GameQueue!A:I',
                 votes_range='Votes!A:H', session=None):
        self.sheet_key = sheet_key
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip('/')
        self.ranges = (submissions_range, gamequeue_range, votes_range)
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': 'LieDetector-Leaderboard/1.0'})

    @classmethod
    def from_config(cls, config) -> 'SheetsClient':
        return cls(
            sheet_key=config.get('RESPONSES_SHEET_KEY'),
            api_key=config.get('GOOGLE_SHEETS_API_KEY'),
            timeout=int(config.get('SHEETS_TIMEOUT_SEC', 10)),
            base_url=config.get('SHEETS_API_BASE_URL'),
            submissions_range=config.get('SUBMISSIONS_RANGE', 'Submissions!A:H'),
            gamequeue_range=config.get('GAMEQUEUE_RANGE', 'GameQueue!A:I'),
            votes_range=config.get('VOTES_RANGE', 'Votes!A:H'),
        )

    def get_records(self, range_name: str) -> List[Dict[str, str]]:
        if not self.sheet_key:
            raise SheetFetchError('RESPONSES_SHEET_KEY is not configured')

        url = f"{self.base_url}/{quote(self.sheet_key, safe='')}/values/{quote(range_name, safe='')}"
        params = {'key': self.api_key} if self.api_key else None
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else 'unknown'
            logger.error(f"[sheets] HTTP error {status} range={range_name}")
            raise SheetFetchError(f"HTTP {status} fetching {range_name}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[sheets] request failed range={range_name}: {e}")
            raise SheetFetchError(f"Request failed fetching {range_name}") from e
        except ValueError as e:
            raise SheetFetchError(f"Response for {range_name} is not JSON") from e

        if not isinstance(body, dict):
            raise SheetFetchError(f"Unexpected response shape for {range_name}")
        rows = body.get('values') or []
        if not isinstance(rows, list) or not all(isinstance(r, list) for r in rows):
            raise SheetFetchError(f"Malformed values for {range_name}")

        records = rows_to_records(rows)
        logger.info(f"[sheets] range={range_name} records={len(records)}")
        return records

    def fetch_tables(self) -> SheetTables:
        submissions_range, gamequeue_range, votes_range = self.ranges
        return SheetTables(
            submissions=self.get_records(submissions_range),
            gamequeue=self.get_records(gamequeue_range),
            votes=self.get_records(votes_range),
        )
