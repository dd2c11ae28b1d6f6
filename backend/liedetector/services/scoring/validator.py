import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from liedetector.models import (
    GameQueueEntry,
    RevelationPolicy,
    Row,
    Vote,
)
from .lookup import GameLookup
from .timestamps import CutoffRule

_module_logger = logging.getLogger(__name__)


def group_votes(votes: Iterable[Row]) -> Dict[str, Dict[str, List[Row]]]:
    """Group raw vote rows as ``{target_id: {voter_id: [rows]}}``."""
    grouped: Dict[str, Dict[str, List[Row]]] = {}
    for row in votes:
        vote = Vote.from_row(row)
        grouped.setdefault(vote.target_id, {}).setdefault(vote.voter_id, []).append(row)
    return grouped


def latest_before(rows: List[Row], cutoff: Optional[datetime], rule: CutoffRule,
                  logger: logging.Logger = _module_logger) -> Optional[Row]:
    """Pick the latest vote cast strictly before ``cutoff``.

    With no cutoff the latest vote wins, and votes whose timestamp cannot
    be parsed rank after every readable one. Against a cutoff, unreadable
    timestamps never qualify.
    """
    timed = []
    untimed = []
    for row in rows:
        vote = Vote.from_row(row)
        when = rule.vote_time(vote.timestamp)
        if when is None:
            logger.warning(
                f"[bad-timestamp] voter={vote.voter_id} target={vote.target_id} "
                f"timestamp={vote.timestamp!r} cutoff={cutoff}"
            )
            untimed.append(row)
        else:
            timed.append((when, row))
    # list.sort is stable, so equal timestamps keep sheet order
    timed.sort(key=lambda pair: pair[0], reverse=True)

    if cutoff is None:
        ordered = [row for _, row in timed] + untimed
        return ordered[0] if ordered else None
    for when, row in timed:
        if when < cutoff:
            return row
    return None


def select_counted_votes(votes: Iterable[Row], lookup: GameLookup,
                         policy: RevelationPolicy = RevelationPolicy.STRICT,
                         rule: Optional[CutoffRule] = None,
                         logger: logging.Logger = _module_logger) -> List[Row]:
    """Reduce raw votes to at most one counted vote per (target, voter).

    STRICT drops every vote on an unrevealed game. LENIENT counts the
    latest vote on an unrevealed game unconditionally. Revealed games use
    the ``Revealed At`` cutoff under both policies.
    """
    rule = rule or CutoffRule()
    counted: List[Row] = []

    for target_id, by_voter in group_votes(votes).items():
        game = lookup.get(target_id)
        if game is None:
            logger.warning(f"[skip-target] reason=no-game target={target_id} voters={len(by_voter)}")
            continue
        entry = GameQueueEntry.from_row(game)

        if entry.is_revealed:
            try:
                cutoff = rule.cutoff_for(entry.revealed_at)
            except ValueError:
                logger.warning(
                    f"[skip-target] reason=bad-reveal-time target={target_id} "
                    f"revealed_at={entry.revealed_at!r}"
                )
                continue
        elif policy is RevelationPolicy.STRICT:
            continue
        else:
            cutoff = None

        logger.debug(f"[cutoff] target={target_id} revealed={entry.is_revealed} cutoff={cutoff}")

        for rows in by_voter.values():
            chosen = latest_before(rows, cutoff, rule, logger)
            if chosen is not None:
                counted.append(chosen)

    return counted
