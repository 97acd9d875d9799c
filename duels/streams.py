from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, cast

import redis

from duels.config import get_settings
from duels.core.events import GameEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EventStream:
    session_id: str

    @property
    def key(self) -> str:
        return f"events:{self.session_id}"


def event_fields(*, session_id: str, event: GameEvent) -> dict[str, str]:
    """Flatten an event into the string-only field map Redis Streams expects."""

    return {
        "type": event.type,
        "session_id": session_id,
        "payload": json.dumps(event.payload, ensure_ascii=False, sort_keys=True),
        "ts": event.ts.isoformat(),
    }


def publish_to_stream(
    *,
    r: redis.Redis,
    stream: EventStream,
    fields: Mapping[str, str],
    maxlen: int | None = None,
) -> str:
    """Append an entry to a session's event stream."""

    # redis-py stubs expect field/value unions; we only use string fields/values.
    stream_id = r.xadd(
        stream.key,
        {str(k): str(v) for k, v in fields.items()},
        maxlen=maxlen,
        approximate=maxlen is not None,
    )
    return cast(str, stream_id)


def read_stream(*, r: redis.Redis, stream: EventStream, count: int | None = None) -> list[dict[str, Any]]:
    """Debug helper: decode the entries of a session's event stream."""

    out: list[dict[str, Any]] = []
    for entry_id, fields in r.xrange(stream.key, count=count):
        out.append(
            {
                "id": entry_id,
                "type": fields.get("type"),
                "payload": json.loads(fields.get("payload") or "{}"),
                "ts": fields.get("ts"),
            }
        )
    return out


@dataclass(slots=True)
class RedisStreamSink:
    """Event sink publishing every event to `events:{session_id}`."""

    r: redis.Redis
    session_id: str
    maxlen: int | None = None

    def __post_init__(self) -> None:
        if self.maxlen is None:
            self.maxlen = get_settings().event_stream_maxlen

    @property
    def stream(self) -> EventStream:
        return EventStream(session_id=self.session_id)

    def publish(self, events: Iterable[GameEvent]) -> None:
        ids: list[str] = []
        for event in events:
            ids.append(
                publish_to_stream(
                    r=self.r,
                    stream=self.stream,
                    fields=event_fields(session_id=self.session_id, event=event),
                    maxlen=self.maxlen,
                )
            )
        logger.debug("xadd %s -> %s", self.stream.key, ",".join(ids))
