from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from duels.core.errors import ErrorKind, GameError


DEFAULT_MAX_MESSAGES = 200
MAX_ALLOWED_MESSAGES = 1000
DEFAULT_PAGE_SIZE = 50
MAX_CONTENT_LENGTH = 16_384
MAX_SENDER_LENGTH = 128


def now_ms() -> int:
    return int(datetime.now(tz=UTC).timestamp() * 1000)


def _byte_len(value: str) -> int:
    return len(value.encode("utf-8"))


def clean_name(value: str) -> str:
    """Trim a display name / identity and enforce the name rules."""

    trimmed = value.strip()
    if not trimmed:
        raise GameError(ErrorKind.empty_name, "name must not be empty")
    length = _byte_len(trimmed)
    if length > MAX_SENDER_LENGTH:
        raise GameError(
            ErrorKind.name_too_long,
            f"name too long: {length} bytes",
            length=length,
            max_length=MAX_SENDER_LENGTH,
        )
    return trimmed


def clean_content(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise GameError(ErrorKind.empty_content, "message content must not be empty")
    length = _byte_len(trimmed)
    if length > MAX_CONTENT_LENGTH:
        raise GameError(
            ErrorKind.content_too_long,
            f"content too long: {length} bytes",
            length=length,
            max_length=MAX_CONTENT_LENGTH,
        )
    return trimmed


def check_max_messages(max_messages: int) -> int:
    if max_messages < 1 or max_messages > MAX_ALLOWED_MESSAGES:
        raise GameError(
            ErrorKind.invalid_max_messages,
            f"max messages must be between 1 and {MAX_ALLOWED_MESSAGES}",
            max_messages=max_messages,
        )
    return max_messages


class LogEntry(BaseModel):
    id: int
    sender: str
    role: str
    content: str
    # Milliseconds since the Unix epoch.
    timestamp: int


class MessageLog(BaseModel):
    """Ordered, capacity-bounded message log.

    Ids come from `next_id` and are never reused, even across `clear()`.
    Once `entries` grows past `max_messages`, the oldest overflow is dropped in
    one batch.
    """

    entries: list[LogEntry] = Field(default_factory=list)
    max_messages: int = Field(default=DEFAULT_MAX_MESSAGES, ge=1, le=MAX_ALLOWED_MESSAGES)
    next_id: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, *, sender: str, role: str, content: str, timestamp: int | None = None) -> LogEntry:
        # Callers pass already-cleaned sender/content.
        entry = LogEntry(
            id=self.next_id,
            sender=sender,
            role=role.strip(),
            content=content,
            timestamp=now_ms() if timestamp is None else timestamp,
        )
        self.next_id += 1
        self.entries.append(entry)
        self.enforce_capacity()
        return entry

    def page(self, *, offset: int | None = None, limit: int | None = None) -> list[LogEntry]:
        total = len(self.entries)
        start = min(max(offset if offset is not None else 0, 0), total)
        size = DEFAULT_PAGE_SIZE if limit is None else limit
        size = min(max(size, 1), self.max_messages)
        return [e.model_copy() for e in self.entries[start : start + size]]

    def find(self, message_id: int) -> LogEntry | None:
        entry = next((e for e in self.entries if e.id == message_id), None)
        return entry.model_copy() if entry is not None else None

    def clear(self) -> bool:
        """Drop all entries. Returns False when there was nothing to drop."""

        if not self.entries:
            return False
        self.entries.clear()
        return True

    def reset(self) -> None:
        self.entries.clear()
        self.next_id = 0

    def set_capacity(self, max_messages: int) -> None:
        self.max_messages = check_max_messages(max_messages)
        self.enforce_capacity()

    def enforce_capacity(self) -> int:
        overflow = len(self.entries) - self.max_messages
        if overflow <= 0:
            return 0
        del self.entries[:overflow]
        return overflow
