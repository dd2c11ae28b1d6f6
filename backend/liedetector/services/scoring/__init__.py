"""Leaderboard domain services: vote validation and scoring.

This package contains pure domain logic over already-fetched sheet rows.
It must not import Flask; HTTP routes and CLI commands call into it and
own the transport concerns.
"""

from .engine import (
    build_payload,
    compute_leaderboard,
    filter_revealed_votes,
    game_statistics,
)
from .lookup import GameLookup, find_game
from .timestamps import CutoffRule

__all__ = [
    'CutoffRule',
    'GameLookup',
    'build_payload',
    'compute_leaderboard',
    'filter_revealed_votes',
    'find_game',
    'game_statistics',
]
