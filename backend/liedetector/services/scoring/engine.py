import logging
from typing import Dict, Iterable, List, Optional, Sequence

from liedetector.models import (
    GameQueueEntry,
    LeaderboardResult,
    RevelationPolicy,
    Row,
    Vote,
)
from .aggregator import aggregate
from .lookup import GameLookup
from .timestamps import CutoffRule
from .validator import select_counted_votes

_module_logger = logging.getLogger(__name__)


def filter_revealed_votes(votes: Iterable[Row], lookup: GameLookup) -> List[Row]:
    """Raw votes whose target has a revealed game, for display and auditing.

    Coarser than the counted votes: every vote on a revealed game is kept,
    including superseded and post-reveal ones.
    """
    return [row for row in votes if lookup.is_revealed(Vote.from_row(row).target_id)]


def compute_leaderboard(submissions: Sequence[Row], gamequeue: Sequence[Row], votes: Sequence[Row],
                        policy: RevelationPolicy = RevelationPolicy.STRICT,
                        cutoff_rule: Optional[CutoffRule] = None,
                        logger: Optional[logging.Logger] = None) -> LeaderboardResult:
    """Score votes and rank players.

    Pure over its inputs: rows are never mutated and nothing is cached
    between calls. Per-row problems are logged to ``logger`` and skipped.
    """
    logger = logger or _module_logger
    policy = RevelationPolicy.parse(policy)
    lookup = GameLookup(gamequeue)
    filtered = filter_revealed_votes(votes, lookup)

    if policy is RevelationPolicy.STRICT and not lookup.any_revealed():
        logger.info("[leaderboard] no revealed games, empty leaderboard")
        return LeaderboardResult(leaderboard=[], filtered_votes=filtered, counted_votes=[])

    counted = select_counted_votes(votes, lookup, policy, cutoff_rule or CutoffRule(), logger)
    leaderboard = aggregate(submissions, votes, counted, lookup, policy, logger)
    logger.info(
        f"[leaderboard] policy={policy.value} votes={len(votes)} counted={len(counted)} "
        f"players={len(leaderboard)}"
    )
    return LeaderboardResult(leaderboard=leaderboard, filtered_votes=filtered, counted_votes=counted)


def game_statistics(gamequeue: Iterable[Row]) -> dict:
    """Summary of the game queue: how many games exist and are revealed."""
    total = 0
    revealed = 0
    breakdown: Dict[str, dict] = {}
    for row in gamequeue:
        entry = GameQueueEntry.from_row(row)
        total += 1
        stats = breakdown.setdefault(entry.slack_id, {
            'name': entry.name,
            'totalGames': 0,
            'revealedGames': 0,
        })
        stats['totalGames'] += 1
        if entry.is_revealed:
            revealed += 1
            stats['revealedGames'] += 1
    return {
        'totalGames': total,
        'revealedGames': revealed,
        'pendingGames': total - revealed,
        'playerBreakdown': breakdown,
    }


def build_payload(result: LeaderboardResult, submissions: Sequence[Row], gamequeue: Sequence[Row]) -> dict:
    """JSON body served to the leaderboard page."""
    return {
        'leaderboard': [p.to_dict() for p in result.leaderboard],
        'raw': {
            'submissions': [dict(r) for r in submissions],
            'gamequeue': [dict(r) for r in gamequeue],
            'votes': [dict(r) for r in result.filtered_votes],
        },
    }
