from __future__ import annotations

from duels.api.models import I64_MAX, I64_MIN, NumberDuelState, PlayerEntry
from duels.core.errors import ErrorKind, GameError
from duels.core.log import clean_name


MAX_PLAYERS = 2


def normalize_word(word: str) -> str:
    """Trim surrounding whitespace and lower-case; used for every secret/guess comparison."""

    return word.strip().lower()


def words_match(guess: str, secret_normalized: str) -> bool:
    return normalize_word(guess) == secret_normalized


def clean_secret(secret: str) -> str:
    """Validate a secret word: the name rules, plus a single token."""

    trimmed = clean_name(secret)
    if any(ch.isspace() for ch in trimmed):
        raise GameError(
            ErrorKind.invalid_secret_format,
            "secret must be a single word without whitespace",
        )
    return trimmed


def check_number(number: int) -> int:
    """Numbers are 64-bit signed integers; bools are not numbers here."""

    if isinstance(number, bool) or not isinstance(number, int) or not I64_MIN <= number <= I64_MAX:
        raise GameError(
            ErrorKind.number_out_of_range,
            "number must be a 64-bit signed integer",
            number=repr(number),
        )
    return number


def find_player_index(state: NumberDuelState, player_id: str) -> int | None:
    for idx, p in enumerate(state.players):
        if p.id == player_id:
            return idx
    return None


def require_player(state: NumberDuelState, player_id: str) -> int:
    idx = find_player_index(state, player_id)
    if idx is None:
        raise GameError(ErrorKind.player_unknown, f"unknown player: {player_id}", player_id=player_id)
    return idx


def opponent_index(idx: int) -> int:
    # Exactly two seats: 0 <-> 1.
    return 1 - idx


def roster_ready(state: NumberDuelState) -> bool:
    return len(state.players) == MAX_PLAYERS and all(p.number is not None for p in state.players)


def register_player(state: NumberDuelState, player_id: str) -> tuple[int, bool]:
    """Return (index, is_new). Raises GameFull when a third player tries to join.

    Does not mutate; the caller appends the new entry once every check has passed.
    """

    idx = find_player_index(state, player_id)
    if idx is not None:
        return idx, False
    if len(state.players) >= MAX_PLAYERS:
        raise GameError(ErrorKind.game_full, "game already has two players", max_players=MAX_PLAYERS)
    return len(state.players), True


def new_entry(player_id: str) -> PlayerEntry:
    return PlayerEntry(id=player_id)
