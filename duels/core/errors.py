from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    # validation
    empty_name = "EmptyName"
    name_too_long = "NameTooLong"
    empty_content = "EmptyContent"
    content_too_long = "ContentTooLong"
    invalid_secret_format = "InvalidSecretFormat"
    invalid_max_messages = "InvalidMaxMessages"
    number_out_of_range = "NumberOutOfRange"
    # authorization
    unauthorized = "Unauthorized"
    admin_mismatch = "AdminMismatch"
    # setup / state
    game_setup_incomplete = "GameSetupIncomplete"
    secret_not_set = "SecretNotSet"
    not_enough_players = "NotEnoughPlayers"
    game_full = "GameFull"
    number_already_submitted = "NumberAlreadySubmitted"
    # turn / phase
    invalid_turn = "InvalidTurn"
    invalid_phase = "InvalidPhase"
    not_your_turn = "NotYourTurn"
    already_discovered = "AlreadyDiscovered"
    game_finished = "GameFinished"
    # lookup
    message_not_found = "MessageNotFound"
    player_unknown = "PlayerUnknown"
    # request envelope (dispatcher only)
    invalid_payload = "InvalidPayload"
    unknown_action = "UnknownAction"


_GROUPS: dict[ErrorKind, str] = {
    ErrorKind.empty_name: "validation",
    ErrorKind.name_too_long: "validation",
    ErrorKind.empty_content: "validation",
    ErrorKind.content_too_long: "validation",
    ErrorKind.invalid_secret_format: "validation",
    ErrorKind.invalid_max_messages: "validation",
    ErrorKind.number_out_of_range: "validation",
    ErrorKind.unauthorized: "authorization",
    ErrorKind.admin_mismatch: "authorization",
    ErrorKind.game_setup_incomplete: "state",
    ErrorKind.secret_not_set: "state",
    ErrorKind.not_enough_players: "state",
    ErrorKind.game_full: "state",
    ErrorKind.number_already_submitted: "state",
    ErrorKind.invalid_turn: "turn",
    ErrorKind.invalid_phase: "turn",
    ErrorKind.not_your_turn: "turn",
    ErrorKind.already_discovered: "turn",
    ErrorKind.game_finished: "turn",
    ErrorKind.message_not_found: "lookup",
    ErrorKind.player_unknown: "lookup",
    ErrorKind.invalid_payload: "request",
    ErrorKind.unknown_action: "request",
}


class GameError(ValueError):
    """A rejected operation.

    Carries a machine-readable `kind` plus contextual `data` (offending byte
    length, expected player, ...) so callers can branch without parsing the
    message. Subclasses ValueError so plain `except ValueError` handlers keep
    working.
    """

    def __init__(self, kind: ErrorKind, message: str, **data: Any) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.data: dict[str, Any] = data

    @property
    def group(self) -> str:
        return _GROUPS[self.kind]

    def to_payload(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "data": dict(self.data)}

    def __repr__(self) -> str:
        return f"GameError(kind={self.kind.value!r}, message={self.message!r}, data={self.data!r})"
