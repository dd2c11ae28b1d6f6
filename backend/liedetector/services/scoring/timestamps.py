"""Timestamp parsing for votes and reveal cutoffs.

Sheet cells hold naive local times. Vote timestamps are written by the form
backend in ``vote_offset`` (UTC by default). ``Revealed At`` is typed by the
game host in ``reveal_offset`` (IST, +05:30, by default). Both sides are
converted to aware UTC datetimes before any comparison.

A ``Revealed At`` with only a date is taken to mean ``default_time`` on that
day (13:00), not midnight, so votes cast earlier on reveal day still count.
"""
from datetime import datetime, time, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser

DEFAULT_VOTE_OFFSET = timedelta(0)
DEFAULT_REVEAL_OFFSET = timedelta(hours=5, minutes=30)
DEFAULT_REVEAL_TIME = time(13, 0)

# Year is only a fallback for time-only strings
_BASE_DATE = datetime(2000, 1, 1)


def parse_time_of_day(raw: str) -> time:
    """Parse "HH:MM" (or "HH:MM:SS") into a time."""
    parts = [int(p) for p in str(raw).strip().split(':')]
    if not 2 <= len(parts) <= 3:
        raise ValueError(f"Expected HH:MM, got {raw!r}")
    return time(*parts)


def parse_timestamp(raw: str, offset: timedelta = DEFAULT_VOTE_OFFSET,
                    default_time: time = time(0, 0)) -> Optional[datetime]:
    """Parse a sheet timestamp into an aware UTC datetime.

    Naive values are interpreted in ``offset``; values carrying their own
    zone keep it. Components the string does not mention come from
    ``default_time``. Returns None for empty or unparseable input.
    """
    text = str(raw or '').strip()
    if not text:
        return None
    default = datetime.combine(_BASE_DATE.date(), default_time)
    try:
        parsed = date_parser.parse(text, default=default)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone(offset))
    return parsed.astimezone(timezone.utc)


class CutoffRule:
    """How vote times and ``Revealed At`` values are normalised."""

    def __init__(self, vote_offset: timedelta = DEFAULT_VOTE_OFFSET,
                 reveal_offset: timedelta = DEFAULT_REVEAL_OFFSET,
                 default_time: time = DEFAULT_REVEAL_TIME):
        self.vote_offset = vote_offset
        self.reveal_offset = reveal_offset
        self.default_time = default_time

    @classmethod
    def from_config(cls, config) -> 'CutoffRule':
        return cls(
            vote_offset=timedelta(minutes=int(config.get('VOTE_UTC_OFFSET_MINUTES', 0))),
            reveal_offset=timedelta(minutes=int(config.get('REVEAL_UTC_OFFSET_MINUTES', 330))),
            default_time=parse_time_of_day(config.get('REVEAL_DEFAULT_TIME', '13:00')),
        )

    def vote_time(self, raw: str) -> Optional[datetime]:
        return parse_timestamp(raw, self.vote_offset)

    def cutoff_for(self, revealed_at: str) -> Optional[datetime]:
        """Cutoff for a game, or None when ``revealed_at`` is blank.

        Raises ValueError when the value is present but unparseable, so the
        caller can tell "no cutoff" apart from "bad cutoff".
        """
        if not str(revealed_at or '').strip():
            return None
        cutoff = parse_timestamp(revealed_at, self.reveal_offset, self.default_time)
        if cutoff is None:
            raise ValueError(f"Unparseable reveal time: {revealed_at!r}")
        return cutoff

    def __repr__(self):
        return (f"CutoffRule(vote_offset={self.vote_offset}, "
                f"reveal_offset={self.reveal_offset}, default_time={self.default_time})")
