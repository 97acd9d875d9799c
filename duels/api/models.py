from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from duels.core.log import LogEntry, MessageLog


I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


class SecretWordStage(StrEnum):
    not_started = "not_started"
    waiting_for_secret = "waiting_for_secret"
    waiting_for_question = "waiting_for_question"
    waiting_for_answer = "waiting_for_answer"
    completed = "completed"


class NumberDuelPhase(StrEnum):
    setup = "setup"
    in_progress = "in_progress"
    finished = "finished"


class RoleName(StrEnum):
    admin = "admin"
    player_one = "player_one"
    player_two = "player_two"
    observer = "observer"


class SecretWordState(BaseModel):
    admin: str | None = None
    player_one: str | None = None
    player_two: str | None = None

    # Both set or both None; `secret_normalized` is always the trimmed lower-case raw value.
    secret_raw: str | None = None
    secret_normalized: str | None = None

    stage: SecretWordStage = SecretWordStage.not_started

    # Id of the question player two still has to answer.
    last_question_id: int | None = None

    log: MessageLog = Field(default_factory=MessageLog)


class PlayerEntry(BaseModel):
    id: str
    number: int | None = None
    discovered: bool = False


class NumberDuelState(BaseModel):
    # Join order; at most two entries, never reordered or removed.
    players: list[PlayerEntry] = Field(default_factory=list)
    phase: NumberDuelPhase = NumberDuelPhase.setup
    current_turn_index: int | None = None
    winner: str | None = None


class ChatState(BaseModel):
    log: MessageLog = Field(default_factory=MessageLog)


# ---- read views -------------------------------------------------------------


class GameInfo(BaseModel):
    admin: str | None = None
    player_one: str | None = None
    player_two: str | None = None
    stage: SecretWordStage
    secret_set: bool
    total_messages: int
    max_messages: int
    awaiting_role: RoleName | None = None
    awaiting_player: str | None = None
    last_question_id: int | None = None


class AnswerResult(BaseModel):
    message: LogEntry
    guess_was_correct: bool


class PlayerView(BaseModel):
    id: str
    # Withheld (None) until the opponent discovers it or the game finishes.
    number: int | None = None
    discovered: bool


class NumberDuelView(BaseModel):
    players: list[PlayerView]
    phase: NumberDuelPhase
    current_turn: str | None = None
    winner: str | None = None


class DiscoverResult(BaseModel):
    value: int
    view: NumberDuelView


class ChatInfo(BaseModel):
    total_messages: int
    max_messages: int


# ---- action payloads --------------------------------------------------------


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateGameRequest(_Payload):
    admin: str
    player_one: str
    player_two: str


class SetSecretRequest(_Payload):
    requester: str
    secret: str


class SubmitQuestionRequest(_Payload):
    player: str
    content: str


class SubmitAnswerRequest(_Payload):
    player: str
    content: str
    guess: str | None = None


class CheckGuessRequest(_Payload):
    guess: str


class RequesterRequest(_Payload):
    requester: str


class EmptyRequest(_Payload):
    pass


class ChatMaxMessagesRequest(_Payload):
    # Range is enforced by the log so the error kind stays InvalidMaxMessages.
    max_messages: int


class SetMaxMessagesRequest(ChatMaxMessagesRequest):
    requester: str


class MessagesRequest(_Payload):
    offset: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)


class MessageByIdRequest(_Payload):
    id: int = Field(..., ge=0)


class SubmitNumberRequest(_Payload):
    player_id: str
    # Strict: no bools, floats or numeric strings.
    number: int = Field(..., strict=True, ge=I64_MIN, le=I64_MAX)


class DiscoverNumberRequest(_Payload):
    player_id: str


class SendMessageRequest(_Payload):
    sender: str
    role: str = ""
    content: str
