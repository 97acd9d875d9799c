"""Plain chat room over the bounded message log (no roles, no authorization)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from duels.api.models import ChatInfo, ChatState
from duels.core.events import EventSink, GameEvent, NullSink, flush, message_added
from duels.core.log import LogEntry, clean_content, clean_name

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ChatSession:
    state: ChatState = field(default_factory=ChatState)
    sink: EventSink = field(default_factory=NullSink)


def init_session(*, sink: EventSink | None = None) -> ChatSession:
    return ChatSession(state=ChatState(), sink=sink or NullSink())


def send_message(*, session: ChatSession, sender: str, role: str, content: str) -> LogEntry:
    sender = clean_name(sender)
    content = clean_content(content)

    entry = session.state.log.append(sender=sender, role=role, content=content)
    flush(sink=session.sink, events=[message_added(entry)])
    return entry.model_copy()


def messages(*, session: ChatSession, offset: int | None = None, limit: int | None = None) -> list[LogEntry]:
    return session.state.log.page(offset=offset, limit=limit)


def message_by_id(*, session: ChatSession, message_id: int) -> LogEntry | None:
    return session.state.log.find(message_id)


def clear_history(*, session: ChatSession) -> None:
    if not session.state.log.clear():
        return
    logger.info("chat history cleared")
    flush(sink=session.sink, events=[GameEvent.now(type="HistoryCleared")])


def set_max_messages(*, session: ChatSession, max_messages: int) -> None:
    session.state.log.set_capacity(max_messages)
    logger.info("chat max messages set to %d", max_messages)
    flush(
        sink=session.sink,
        events=[GameEvent.now(type="MaxMessagesUpdated", payload={"max_messages": max_messages})],
    )


def info(*, session: ChatSession) -> ChatInfo:
    log = session.state.log
    return ChatInfo(total_messages=len(log), max_messages=log.max_messages)
