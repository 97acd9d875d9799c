from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal, Protocol

if TYPE_CHECKING:
    from duels.core.log import LogEntry

logger = logging.getLogger(__name__)

EventType = Literal[
    "MessageAdded",
    "HistoryCleared",
    "MaxMessagesUpdated",
    "GameCreated",
    "SecretSet",
    "SecretGuessed",
    "StageChanged",
    "PlayerRegistered",
    "NumberSubmitted",
    "NumberDiscovered",
    "TurnChanged",
    "GameFinished",
]


@dataclass(frozen=True, slots=True)
class GameEvent:
    type: EventType
    payload: dict[str, Any]
    ts: datetime

    @staticmethod
    def now(*, type: EventType, payload: dict[str, Any] | None = None) -> "GameEvent":
        return GameEvent(type=type, payload=payload or {}, ts=datetime.now(tz=UTC))


class EventSink(Protocol):
    """Where a session publishes its change notifications.

    Sinks are fire-and-forget: the core never reads its own events back.
    """

    def publish(self, events: Iterable[GameEvent]) -> None:
        ...


@dataclass(slots=True)
class EventBuffer:
    """In-memory sink; keeps everything published until drained."""

    events: list[GameEvent] = field(default_factory=list)

    def publish(self, events: Iterable[GameEvent]) -> None:
        self.events.extend(events)

    def drain(self) -> list[GameEvent]:
        out = list(self.events)
        self.events.clear()
        return out

    def types(self) -> list[str]:
        return [e.type for e in self.events]


@dataclass(frozen=True, slots=True)
class CallbackSink:
    """Calls `callback` once per event, in order."""

    callback: Callable[[GameEvent], None]

    def publish(self, events: Iterable[GameEvent]) -> None:
        for event in events:
            self.callback(event)


@dataclass(frozen=True, slots=True)
class NullSink:
    def publish(self, events: Iterable[GameEvent]) -> None:
        return None


def flush(*, sink: EventSink, events: list[GameEvent]) -> None:
    """Publish the events a successful call produced."""

    if not events:
        return
    logger.debug("publishing %d event(s): %s", len(events), ",".join(e.type for e in events))
    sink.publish(events)


def message_added(entry: "LogEntry") -> GameEvent:
    return GameEvent.now(
        type="MessageAdded",
        payload={
            "id": entry.id,
            "sender": entry.sender,
            "role": entry.role,
            "content": entry.content,
            "timestamp": entry.timestamp,
        },
    )
