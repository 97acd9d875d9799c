from __future__ import annotations

from duels.api.models import NumberDuelState, RoleName, SecretWordState
from duels.core.errors import ErrorKind, GameError
from duels.roles import AWAITING_ROLE, identity_for


def awaiting_role(*, state: SecretWordState) -> RoleName | None:
    return AWAITING_ROLE[state.stage]


def awaiting_player(*, state: SecretWordState) -> str | None:
    """Which identity must act next in the secret-word duel (None once completed)."""

    role = awaiting_role(state=state)
    if role is None:
        return None
    return identity_for(state, role)


def current_turn_player_id(*, state: NumberDuelState) -> str | None:
    idx = state.current_turn_index
    if idx is None:
        return None
    return state.players[idx].id


def assert_is_players_turn(*, state: NumberDuelState, player_id: str) -> None:
    expected = current_turn_player_id(state=state)
    if player_id != expected:
        raise GameError(
            ErrorKind.not_your_turn,
            f"Not your turn (expected player_id={expected})",
            expected=expected,
            player_id=player_id,
        )
