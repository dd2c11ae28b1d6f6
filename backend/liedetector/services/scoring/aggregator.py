import logging
from typing import Dict, Iterable, List

from liedetector.models import (
    PlayerRecord,
    RevelationPolicy,
    Row,
    Submission,
    Vote,
    VoteDetail,
)
from .lookup import GameLookup, parse_statement_index, statement_text

_module_logger = logging.getLogger(__name__)


def init_players(submissions: Iterable[Row], votes: Iterable[Row], lookup: GameLookup,
                 policy: RevelationPolicy) -> Dict[str, PlayerRecord]:
    """Create an empty record for every player who should be ranked.

    STRICT ranks voters with at least one vote on a revealed game. LENIENT
    ranks every submitter and every voter. The first name seen for an id
    is kept.
    """
    players: Dict[str, PlayerRecord] = {}

    if policy is RevelationPolicy.LENIENT:
        for row in submissions:
            sub = Submission.from_row(row)
            if sub.player_id and sub.player_id not in players:
                players[sub.player_id] = PlayerRecord(id=sub.player_id, name=sub.player_name)

    for row in votes:
        vote = Vote.from_row(row)
        if vote.voter_id in players:
            continue
        if policy is RevelationPolicy.STRICT and not lookup.is_revealed(vote.target_id):
            continue
        players[vote.voter_id] = PlayerRecord(id=vote.voter_id, name=vote.voter_name)

    return players


def score_vote(player: PlayerRecord, row: Row, lookup: GameLookup,
               logger: logging.Logger = _module_logger) -> bool:
    """Fold one counted vote into ``player``. Returns False if it was skipped."""
    vote = Vote.from_row(row)

    guessed = parse_statement_index(vote.guess, one_based=True)
    if guessed is None:
        logger.warning(
            f"[skip-vote] reason=bad-guess voter={vote.voter_id} target={vote.target_id} "
            f"guess={vote.guess!r} timestamp={vote.timestamp!r}"
        )
        return False

    entry = lookup.entry(vote.target_id)
    if entry is None:
        logger.warning(f"[skip-vote] reason=no-game voter={vote.voter_id} target={vote.target_id}")
        return False

    lie = parse_statement_index(entry.lie_index)
    if lie is None:
        logger.warning(
            f"[skip-vote] reason=bad-lie-index target={vote.target_id} lie_index={entry.lie_index!r}"
        )
        return False

    player.record_guess(VoteDetail(
        target=entry.name,
        target_id=vote.target_id,
        guessed_index=guessed,
        guessed_statement=statement_text(entry, guessed),
        was_correct=guessed == lie,
        timestamp=vote.timestamp,
        revealed=entry.is_revealed,
    ))
    return True


def rank_players(players: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """Most correct guesses first, ties broken by accuracy."""
    return sorted(players, key=PlayerRecord.sort_key)


def aggregate(submissions: Iterable[Row], votes: Iterable[Row], counted_votes: Iterable[Row],
              lookup: GameLookup, policy: RevelationPolicy = RevelationPolicy.STRICT,
              logger: logging.Logger = _module_logger) -> List[PlayerRecord]:
    players = init_players(submissions, votes, lookup, policy)
    for row in counted_votes:
        voter_id = Vote.from_row(row).voter_id
        player = players.get(voter_id)
        if player is None:
            logger.warning(f"[skip-vote] reason=unknown-voter voter={voter_id}")
            continue
        score_vote(player, row, lookup, logger)
    return rank_players(players.values())

