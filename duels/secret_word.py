"""Secret-word duel.

The admin picks a secret word; player one asks questions, player two answers
and may attach a guess. A correct guess completes the game until the admin
calls `create_game` again.

Every operation validates and authorizes before touching the state, and only
publishes its events once the mutation has been applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from duels.api.models import AnswerResult, GameInfo, RoleName, SecretWordState
from duels.config import get_settings
from duels.core.errors import ErrorKind, GameError
from duels.core.events import EventSink, GameEvent, NullSink, flush, message_added
from duels.core.log import LogEntry, clean_content, clean_name
from duels.fsm import SecretWordFSM
from duels.players import clean_secret, normalize_word, words_match
from duels.roles import can_view_secret
from duels.roles import role_for as _role_for
from duels.turn_processing.turns import awaiting_player, awaiting_role
from duels.turn_processing.validators import ValidationContext, pipeline_for_action

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SecretWordSession:
    state: SecretWordState = field(default_factory=SecretWordState)
    sink: EventSink = field(default_factory=NullSink)


def init_session(*, sink: EventSink | None = None) -> SecretWordSession:
    return SecretWordSession(state=SecretWordState(), sink=sink or NullSink())


def _authorize(*, state: SecretWordState, action: str, requester: str | None) -> None:
    pipeline_for_action(action).validate(ctx=ValidationContext(action=action, requester=requester), state=state)


def _stage_changed(state: SecretWordState) -> GameEvent:
    return GameEvent.now(type="StageChanged", payload={"stage": state.stage.value})


def game_info(*, session: SecretWordSession) -> GameInfo:
    state = session.state
    return GameInfo(
        admin=state.admin,
        player_one=state.player_one,
        player_two=state.player_two,
        stage=state.stage,
        secret_set=state.secret_normalized is not None,
        total_messages=len(state.log),
        max_messages=state.log.max_messages,
        awaiting_role=awaiting_role(state=state),
        awaiting_player=awaiting_player(state=state),
        last_question_id=state.last_question_id,
    )


def create_game(*, session: SecretWordSession, admin: str, player_one: str, player_two: str) -> GameInfo:
    admin = clean_name(admin)
    player_one = clean_name(player_one)
    player_two = clean_name(player_two)

    state = session.state
    if state.admin is not None and state.admin != admin:
        raise GameError(ErrorKind.admin_mismatch, "game is administered by someone else", admin=admin)

    fsm = SecretWordFSM(state)
    fsm.send("created")

    state.admin = admin
    state.player_one = player_one
    state.player_two = player_two
    state.secret_raw = None
    state.secret_normalized = None
    state.last_question_id = None
    state.log.reset()

    events = [
        GameEvent.now(
            type="GameCreated",
            payload={"admin": admin, "player_one": player_one, "player_two": player_two},
        )
    ]
    if fsm.sync_stage_to_model():
        events.append(_stage_changed(state))

    logger.info("secret-word game created admin=%s player_one=%s player_two=%s", admin, player_one, player_two)
    flush(sink=session.sink, events=events)
    return game_info(session=session)


def set_secret(*, session: SecretWordSession, requester: str, secret: str) -> GameInfo:
    requester = clean_name(requester)
    state = session.state
    _authorize(state=state, action="set_secret", requester=requester)
    secret = clean_secret(secret)

    fsm = SecretWordFSM(state)
    fsm.send("secret_set")

    state.secret_raw = secret
    state.secret_normalized = normalize_word(secret)
    state.last_question_id = None

    events = [GameEvent.now(type="SecretSet")]
    if fsm.sync_stage_to_model():
        events.append(_stage_changed(state))

    logger.info("secret set by admin=%s", requester)
    flush(sink=session.sink, events=events)
    return game_info(session=session)


def submit_question(*, session: SecretWordSession, player: str, content: str) -> LogEntry:
    player = clean_name(player)
    state = session.state
    _authorize(state=state, action="submit_question", requester=player)
    content = clean_content(content)

    fsm = SecretWordFSM(state)
    fsm.send("question_asked")

    entry = state.log.append(sender=player, role=RoleName.player_one.value, content=content)
    state.last_question_id = entry.id

    events = [message_added(entry)]
    if fsm.sync_stage_to_model():
        events.append(_stage_changed(state))

    logger.info("question #%d asked by %s", entry.id, player)
    flush(sink=session.sink, events=events)
    return entry.model_copy()


def submit_answer(
    *,
    session: SecretWordSession,
    player: str,
    content: str,
    guess: str | None = None,
) -> AnswerResult:
    player = clean_name(player)
    state = session.state
    _authorize(state=state, action="submit_answer", requester=player)
    content = clean_content(content)

    if guess is not None and not guess.strip():
        guess = None
    secret_normalized = state.secret_normalized or ""
    correct = guess is not None and words_match(guess, secret_normalized)

    fsm = SecretWordFSM(state)
    fsm.send("guessed" if correct else "answered")

    entry = state.log.append(sender=player, role=RoleName.player_two.value, content=content)
    state.last_question_id = None

    events = [message_added(entry)]
    if correct:
        events.append(GameEvent.now(type="SecretGuessed", payload={"guesser": player}))
    if fsm.sync_stage_to_model():
        events.append(_stage_changed(state))

    if correct:
        logger.info("secret guessed by %s; game completed", player)
    else:
        logger.info("answer #%d by %s (guess=%s)", entry.id, player, "wrong" if guess is not None else "none")
    flush(sink=session.sink, events=events)
    return AnswerResult(message=entry.model_copy(), guess_was_correct=correct)


def check_guess(*, session: SecretWordSession, guess: str) -> bool:
    secret_normalized = session.state.secret_normalized
    if secret_normalized is None:
        raise GameError(ErrorKind.secret_not_set, "secret has not been set")
    return words_match(guess, secret_normalized)


def get_secret(*, session: SecretWordSession, requester: str) -> str | None:
    """Raw secret for the admin or player two; None for everyone else.

    Unauthorized viewers get None rather than an error so the response does not
    reveal who is allowed to see the secret.
    """

    state = session.state
    try:
        requester = clean_name(requester)
    except GameError:
        return None
    if state.secret_raw is None or not can_view_secret(state, requester):
        logger.debug("secret withheld from %s", requester)
        return None
    return state.secret_raw


def debug_reveal_secret(*, session: SecretWordSession) -> str | None:
    if not get_settings().debug_reveal_secret:
        raise GameError(ErrorKind.unauthorized, "debug secret reveal is disabled")
    logger.warning("debug secret reveal used")
    return session.state.secret_raw


def clear_history(*, session: SecretWordSession, requester: str) -> None:
    requester = clean_name(requester)
    state = session.state
    _authorize(state=state, action="clear_history", requester=requester)

    if not state.log.clear():
        return
    logger.info("history cleared by admin=%s", requester)
    flush(sink=session.sink, events=[GameEvent.now(type="HistoryCleared")])


def set_max_messages(*, session: SecretWordSession, requester: str, max_messages: int) -> None:
    requester = clean_name(requester)
    state = session.state
    _authorize(state=state, action="set_max_messages", requester=requester)

    state.log.set_capacity(max_messages)
    logger.info("max messages set to %d by admin=%s", max_messages, requester)
    flush(
        sink=session.sink,
        events=[GameEvent.now(type="MaxMessagesUpdated", payload={"max_messages": max_messages})],
    )


def messages(*, session: SecretWordSession, offset: int | None = None, limit: int | None = None) -> list[LogEntry]:
    return session.state.log.page(offset=offset, limit=limit)


def message_by_id(*, session: SecretWordSession, message_id: int) -> LogEntry:
    entry = session.state.log.find(message_id)
    if entry is None:
        raise GameError(ErrorKind.message_not_found, f"message {message_id} not found", id=message_id)
    return entry


def role_for(*, session: SecretWordSession, identity: str) -> RoleName:
    return _role_for(session.state, identity)
