from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from duels import chat, number_duel, secret_word
from duels.api.models import (
    ChatMaxMessagesRequest,
    CheckGuessRequest,
    CreateGameRequest,
    DiscoverNumberRequest,
    EmptyRequest,
    MessageByIdRequest,
    MessagesRequest,
    RequesterRequest,
    SendMessageRequest,
    SetMaxMessagesRequest,
    SetSecretRequest,
    SubmitAnswerRequest,
    SubmitNumberRequest,
    SubmitQuestionRequest,
)
from duels.chat import ChatSession
from duels.core.errors import ErrorKind, GameError
from duels.number_duel import NumberDuelSession
from duels.secret_word import SecretWordSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Structured outcome of a dispatched action.

    - `ok`: whether the action was applied (or the read succeeded).
    - `data`: JSON-friendly result on success.
    - `error`: `GameError.to_payload()` on failure.
    """

    ok: bool
    data: Any = None
    error: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "data": self.data, "error": self.error}


Handler = tuple[type[BaseModel], Callable[[Any, Any], Any]]


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


SECRET_WORD_ACTIONS: dict[str, Handler] = {
    "create_game": (
        CreateGameRequest,
        lambda s, p: secret_word.create_game(session=s, admin=p.admin, player_one=p.player_one, player_two=p.player_two),
    ),
    "set_secret": (
        SetSecretRequest,
        lambda s, p: secret_word.set_secret(session=s, requester=p.requester, secret=p.secret),
    ),
    "submit_question": (
        SubmitQuestionRequest,
        lambda s, p: secret_word.submit_question(session=s, player=p.player, content=p.content),
    ),
    "submit_answer": (
        SubmitAnswerRequest,
        lambda s, p: secret_word.submit_answer(session=s, player=p.player, content=p.content, guess=p.guess),
    ),
    "check_guess": (CheckGuessRequest, lambda s, p: secret_word.check_guess(session=s, guess=p.guess)),
    "get_secret": (RequesterRequest, lambda s, p: secret_word.get_secret(session=s, requester=p.requester)),
    "debug_reveal_secret": (EmptyRequest, lambda s, p: secret_word.debug_reveal_secret(session=s)),
    "clear_history": (RequesterRequest, lambda s, p: secret_word.clear_history(session=s, requester=p.requester)),
    "set_max_messages": (
        SetMaxMessagesRequest,
        lambda s, p: secret_word.set_max_messages(session=s, requester=p.requester, max_messages=p.max_messages),
    ),
    "messages": (MessagesRequest, lambda s, p: secret_word.messages(session=s, offset=p.offset, limit=p.limit)),
    "message_by_id": (MessageByIdRequest, lambda s, p: secret_word.message_by_id(session=s, message_id=p.id)),
    "game_info": (EmptyRequest, lambda s, p: secret_word.game_info(session=s)),
    "role_for": (RequesterRequest, lambda s, p: secret_word.role_for(session=s, identity=p.requester).value),
}

NUMBER_DUEL_ACTIONS: dict[str, Handler] = {
    "submit_number": (
        SubmitNumberRequest,
        lambda s, p: number_duel.submit_number(session=s, player_id=p.player_id, number=p.number),
    ),
    "discover_number": (
        DiscoverNumberRequest,
        lambda s, p: number_duel.discover_number(session=s, player_id=p.player_id),
    ),
    "view": (EmptyRequest, lambda s, p: number_duel.view(session=s)),
}

CHAT_ACTIONS: dict[str, Handler] = {
    "send_message": (
        SendMessageRequest,
        lambda s, p: chat.send_message(session=s, sender=p.sender, role=p.role, content=p.content),
    ),
    "messages": (MessagesRequest, lambda s, p: chat.messages(session=s, offset=p.offset, limit=p.limit)),
    "message_by_id": (MessageByIdRequest, lambda s, p: chat.message_by_id(session=s, message_id=p.id)),
    "clear_history": (EmptyRequest, lambda s, p: chat.clear_history(session=s)),
    "set_max_messages": (
        ChatMaxMessagesRequest,
        lambda s, p: chat.set_max_messages(session=s, max_messages=p.max_messages),
    ),
    "info": (EmptyRequest, lambda s, p: chat.info(session=s)),
}


def _failure(*, game: str, action: str, error: GameError) -> ActionResult:
    logger.debug("%s.%s rejected: %s (%s)", game, action, error.kind.value, error.message)
    return ActionResult(ok=False, error=error.to_payload())


def _dispatch(
    *,
    game: str,
    handlers: Mapping[str, Handler],
    session: Any,
    action: str,
    payload: Mapping[str, Any] | None,
) -> ActionResult:
    handler = handlers.get(action)
    if handler is None:
        return _failure(
            game=game,
            action=action,
            error=GameError(
                ErrorKind.unknown_action,
                f"Unknown action: {action}",
                action=action,
                allowed=sorted(handlers),
            ),
        )

    request_model, apply = handler
    try:
        request = request_model.model_validate(dict(payload or {}))
    except ValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]
        return _failure(
            game=game,
            action=action,
            error=GameError(ErrorKind.invalid_payload, f"Invalid payload for '{action}'", errors=errors),
        )

    try:
        result = apply(session, request)
    except GameError as e:
        return _failure(game=game, action=action, error=e)

    return ActionResult(ok=True, data=_dump(result))


def dispatch_secret_word_action(
    *,
    session: SecretWordSession,
    action: str,
    payload: Mapping[str, Any] | None = None,
) -> ActionResult:
    """Entry point for hosts that route calls by name.

    Validates the payload with the matching request model, applies the action,
    and turns a GameError into a structured failure instead of raising.
    """

    return _dispatch(game="secret_word", handlers=SECRET_WORD_ACTIONS, session=session, action=action, payload=payload)


def dispatch_number_duel_action(
    *,
    session: NumberDuelSession,
    action: str,
    payload: Mapping[str, Any] | None = None,
) -> ActionResult:
    return _dispatch(game="number_duel", handlers=NUMBER_DUEL_ACTIONS, session=session, action=action, payload=payload)


def dispatch_chat_action(
    *,
    session: ChatSession,
    action: str,
    payload: Mapping[str, Any] | None = None,
) -> ActionResult:
    return _dispatch(game="chat", handlers=CHAT_ACTIONS, session=session, action=action, payload=payload)
