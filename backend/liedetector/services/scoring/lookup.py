from typing import Dict, Iterable, Optional

from liedetector.models import (
    GAME_ID,
    GAME_STATEMENTS,
    GameQueueEntry,
    Row,
    field_value,
)

UNKNOWN_STATEMENT = 'Unknown statement'


def find_game(gamequeue: Iterable[Row], player_id: str) -> Optional[Row]:
    """Return the first queue row for ``player_id``, or None."""
    for game in gamequeue:
        if field_value(game, GAME_ID) == player_id:
            return game
    return None


class GameLookup:
    """Game queue indexed by player id.

    Ids are assumed unique; when they are not, the first row wins, same as
    :func:`find_game`.
    """

    def __init__(self, gamequeue: Iterable[Row]):
        self._rows: Dict[str, Row] = {}
        for game in gamequeue:
            self._rows.setdefault(field_value(game, GAME_ID), game)

    def get(self, player_id: str) -> Optional[Row]:
        return self._rows.get(player_id)

    def entry(self, player_id: str) -> Optional[GameQueueEntry]:
        game = self.get(player_id)
        return GameQueueEntry.from_row(game) if game is not None else None

    def is_revealed(self, player_id: str) -> bool:
        entry = self.entry(player_id)
        return bool(entry and entry.is_revealed)

    def any_revealed(self) -> bool:
        return any(GameQueueEntry.from_row(g).is_revealed for g in self._rows.values())


def parse_statement_index(raw: str, one_based: bool = False) -> Optional[int]:
    """Parse a statement index and check it is 0, 1 or 2.

    Returns None for non-numeric or out-of-range values. ``one_based``
    shifts sheet answers ("1".."3") down to list positions.
    """
    try:
        index = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if one_based:
        index -= 1
    if index < 0 or index > len(GAME_STATEMENTS) - 1:
        return None
    return index


def statement_text(entry: GameQueueEntry, index: int) -> str:
    if 0 <= index < len(entry.statements):
        return entry.statements[index]
    return UNKNOWN_STATEMENT
