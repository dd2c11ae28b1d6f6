from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Optional

# Column headers as they appear in the responses spreadsheet
SUBMISSION_ID = 'Slack ID'
SUBMISSION_NAME = 'Name'

GAME_ID = 'Slack ID'
GAME_NAME = 'Name'
GAME_STATEMENTS = ('Statement 1', 'Statement 2', 'Statement 3')
GAME_LIE_INDEX = 'Lie Index (start from 0)'
GAME_REVEALED = 'Revealed?'
GAME_REVEALED_AT = 'Revealed At'

VOTE_VOTER_ID = 'Submitted By (ID)'
VOTE_VOTER_NAME = 'Submitted By (Name)'
VOTE_TARGET_ID = 'Vote for who'
VOTE_GUESS = 'Which one do you think is the lie'
VOTE_TIMESTAMP = 'Timestamp'

Row = Mapping[str, str]

NO_ACTIVITY = 'No activity yet'


class RevelationPolicy(str, Enum):
    """Which games a vote may count against.

    STRICT only scores revealed games and applies the reveal cutoff.
    LENIENT also scores unrevealed games, without any cutoff.
    """
    STRICT = 'strict'
    LENIENT = 'lenient'

    @classmethod
    def parse(cls, value) -> 'RevelationPolicy':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or '').strip().lower())
        except ValueError:
            raise ValueError(f"Unknown revelation policy: {value!r}") from None


def field_value(row: Row, name: str) -> str:
    """Missing or null cells read as an empty string."""
    value = row.get(name)
    if value is None:
        return ''
    return str(value)


@dataclass(frozen=True)
class Submission:
    player_id: str
    player_name: str

    @classmethod
    def from_row(cls, row: Row) -> 'Submission':
        return cls(field_value(row, SUBMISSION_ID), field_value(row, SUBMISSION_NAME))


@dataclass(frozen=True)
class GameQueueEntry:
    slack_id: str
    name: str
    statements: tuple
    lie_index: str
    revealed: str
    revealed_at: str

    @classmethod
    def from_row(cls, row: Row) -> 'GameQueueEntry':
        return cls(
            slack_id=field_value(row, GAME_ID),
            name=field_value(row, GAME_NAME),
            statements=tuple(field_value(row, col) for col in GAME_STATEMENTS),
            lie_index=field_value(row, GAME_LIE_INDEX),
            revealed=field_value(row, GAME_REVEALED),
            revealed_at=field_value(row, GAME_REVEALED_AT),
        )

    @property
    def is_revealed(self) -> bool:
        return self.revealed.strip().lower() in ('1', 'true', 'yes')


@dataclass(frozen=True)
class Vote:
    voter_id: str
    voter_name: str
    target_id: str
    guess: str
    timestamp: str

    @classmethod
    def from_row(cls, row: Row) -> 'Vote':
        return cls(
            voter_id=field_value(row, VOTE_VOTER_ID),
            voter_name=field_value(row, VOTE_VOTER_NAME),
            target_id=field_value(row, VOTE_TARGET_ID),
            guess=field_value(row, VOTE_GUESS),
            timestamp=field_value(row, VOTE_TIMESTAMP),
        )


@dataclass
class VoteDetail:
    target: str
    target_id: str
    guessed_index: int
    guessed_statement: str
    was_correct: bool
    timestamp: str
    revealed: bool

    def to_dict(self):
        return {
            'target': self.target,
            'targetId': self.target_id,
            'guess': f"Statement {self.guessed_index + 1}",
            'guessedStatement': self.guessed_statement,
            'wasCorrect': self.was_correct,
            'timestamp': self.timestamp,
            'revealed': self.revealed,
        }


def rounded_accuracy(correct: int, total: int) -> int:
    """Percentage of correct guesses, rounded half up; 0 with no guesses."""
    if total <= 0:
        return 0
    # integer form of floor(correct / total * 100 + 0.5)
    return (correct * 200 + total) // (2 * total)


@dataclass
class PlayerRecord:
    id: str
    name: str
    total_guesses: int = 0
    correct_guesses: int = 0
    accuracy: int = 0
    recent_activity: str = NO_ACTIVITY
    details_breakdown: List[VoteDetail] = field(default_factory=list)

    def record_guess(self, detail: VoteDetail) -> None:
        self.total_guesses += 1
        if detail.was_correct:
            self.correct_guesses += 1
        self.accuracy = rounded_accuracy(self.correct_guesses, self.total_guesses)
        verb = 'correctly guessed' if detail.was_correct else 'incorrectly guessed'
        self.recent_activity = f"{verb} {detail.target}'s lie"
        self.details_breakdown.append(detail)

    def sort_key(self):
        return (-self.correct_guesses, -self.accuracy)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'totalGuesses': self.total_guesses,
            'correctGuesses': self.correct_guesses,
            'accuracy': self.accuracy,
            'recentActivity': self.recent_activity,
            'detailsBreakdown': [d.to_dict() for d in self.details_breakdown],
        }


@dataclass
class LeaderboardResult:
    leaderboard: List[PlayerRecord]
    filtered_votes: List[Row]
    counted_votes: Optional[List[Row]] = None

    def to_dict(self):
        return {
            'leaderboard': [p.to_dict() for p in self.leaderboard],
            'filteredVotes': list(self.filtered_votes),
        }
