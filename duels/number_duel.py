"""Number-discovery duel.

Two players each submit a hidden number. Once both are in, they take turns
revealing the opponent's number, starting with whoever joined first. When both
have revealed, the higher number wins; equal numbers are a draw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from duels.api.models import (
    DiscoverResult,
    NumberDuelPhase,
    NumberDuelState,
    NumberDuelView,
    PlayerEntry,
    PlayerView,
)
from duels.core.errors import ErrorKind, GameError
from duels.core.events import EventSink, GameEvent, NullSink, flush
from duels.core.log import clean_name
from duels.fsm import NumberDuelFSM
from duels.players import check_number, new_entry, opponent_index, register_player, require_player, roster_ready
from duels.turn_processing.turns import assert_is_players_turn, current_turn_player_id

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NumberDuelSession:
    state: NumberDuelState = field(default_factory=NumberDuelState)
    sink: EventSink = field(default_factory=NullSink)


def init_session(*, sink: EventSink | None = None) -> NumberDuelSession:
    return NumberDuelSession(state=NumberDuelState(), sink=sink or NullSink())


def decide_winner(players: list[PlayerEntry]) -> str | None:
    """Strictly greater number wins; a tie (or a missing number) has no winner."""

    if len(players) != 2:
        return None
    first, second = players
    if first.number is None or second.number is None or first.number == second.number:
        return None
    return first.id if first.number > second.number else second.id


def _number_visible(state: NumberDuelState, idx: int) -> bool:
    if state.phase == NumberDuelPhase.finished:
        return True
    if len(state.players) < 2:
        return False
    return state.players[opponent_index(idx)].discovered


def view(*, session: NumberDuelSession) -> NumberDuelView:
    state = session.state
    return NumberDuelView(
        players=[
            PlayerView(
                id=p.id,
                number=p.number if _number_visible(state, idx) else None,
                discovered=p.discovered,
            )
            for idx, p in enumerate(state.players)
        ],
        phase=state.phase,
        current_turn=current_turn_player_id(state=state),
        winner=state.winner,
    )


def current_turn(*, session: NumberDuelSession) -> str | None:
    return current_turn_player_id(state=session.state)


def submit_number(*, session: NumberDuelSession, player_id: str, number: int) -> NumberDuelView:
    state = session.state
    if state.phase != NumberDuelPhase.setup:
        raise GameError(
            ErrorKind.invalid_phase,
            "numbers can only be submitted during setup",
            phase=state.phase.value,
        )

    player_id = clean_name(player_id)
    number = check_number(number)

    idx, is_new = register_player(state, player_id)
    if not is_new and state.players[idx].number is not None:
        raise GameError(
            ErrorKind.number_already_submitted,
            f"{player_id} already submitted a number",
            player_id=player_id,
        )

    events: list[GameEvent] = []
    if is_new:
        state.players.append(new_entry(player_id))
        events.append(GameEvent.now(type="PlayerRegistered", payload={"player_id": player_id}))
    state.players[idx].number = number
    events.append(GameEvent.now(type="NumberSubmitted", payload={"player_id": player_id}))
    logger.info("number submitted by %s", player_id)

    if roster_ready(state):
        fsm = NumberDuelFSM(state)
        fsm.send("numbers_locked")
        fsm.sync_phase_to_model()
        if state.current_turn_index is None:
            state.current_turn_index = 0
            first = state.players[0].id
            events.append(GameEvent.now(type="TurnChanged", payload={"player_id": first}))
            logger.info("number duel started; %s moves first", first)

    flush(sink=session.sink, events=events)
    return view(session=session)


def discover_number(*, session: NumberDuelSession, player_id: str) -> DiscoverResult:
    player_id = clean_name(player_id)
    state = session.state

    if state.phase == NumberDuelPhase.setup:
        raise GameError(ErrorKind.not_enough_players, "both players must submit a number first")
    if state.phase == NumberDuelPhase.finished:
        raise GameError(ErrorKind.game_finished, "game is finished", winner=state.winner)
    if not roster_ready(state):
        raise GameError(ErrorKind.not_enough_players, "both players must submit a number first")

    idx = require_player(state, player_id)
    assert_is_players_turn(state=state, player_id=player_id)

    target_idx = opponent_index(idx)
    caller = state.players[idx]
    target = state.players[target_idx]
    if caller.discovered:
        raise GameError(
            ErrorKind.already_discovered,
            f"{player_id} already discovered {target.id}",
            player_id=player_id,
            target_id=target.id,
        )

    value = target.number
    if value is None:
        raise GameError(ErrorKind.not_enough_players, f"{target.id} has not submitted a number")

    caller.discovered = True
    events = [
        GameEvent.now(
            type="NumberDiscovered",
            payload={"player_id": player_id, "target_id": target.id, "value": value},
        )
    ]

    if target.discovered:
        fsm = NumberDuelFSM(state)
        fsm.send("finish")
        fsm.sync_phase_to_model()
        state.current_turn_index = None
        state.winner = decide_winner(state.players)
        events.append(GameEvent.now(type="TurnChanged", payload={"player_id": None}))
        events.append(GameEvent.now(type="GameFinished", payload={"winner": state.winner}))
        logger.info("number duel finished; winner=%s", state.winner or "draw")
    else:
        state.current_turn_index = target_idx
        events.append(GameEvent.now(type="TurnChanged", payload={"player_id": target.id}))
        logger.info("%s discovered %s; turn passes", player_id, target.id)

    flush(sink=session.sink, events=events)
    return DiscoverResult(value=value, view=view(session=session))
