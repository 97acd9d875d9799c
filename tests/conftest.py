from __future__ import annotations

from collections.abc import Generator

import pytest

from duels import chat, number_duel, secret_word
from duels.chat import ChatSession
from duels.core.events import EventBuffer
from duels.number_duel import NumberDuelSession
from duels.secret_word import SecretWordSession


@pytest.fixture(autouse=True)
def _hermetic_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Never read the developer's `.env`; start every test from default settings.

    Tests that need a setting patch the environment and call
    `reset_settings_for_tests()` themselves.
    """

    from duels.config import reset_settings_for_tests

    monkeypatch.setenv("DUELS_SKIP_DOTENV", "1")
    for name in ("REDIS_URL", "DUELS_EVENT_STREAM_MAXLEN", "DUELS_DEBUG_REVEAL_SECRET", "DUELS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings_for_tests()
    yield
    reset_settings_for_tests()


@pytest.fixture()
def events() -> EventBuffer:
    return EventBuffer()


@pytest.fixture()
def sw_session(events: EventBuffer) -> SecretWordSession:
    return secret_word.init_session(sink=events)


@pytest.fixture()
def started_game(sw_session: SecretWordSession, events: EventBuffer) -> SecretWordSession:
    """Secret-word game with cast A / P1 / P2 and secret "banana"; event buffer drained."""

    secret_word.create_game(session=sw_session, admin="A", player_one="P1", player_two="P2")
    secret_word.set_secret(session=sw_session, requester="A", secret="banana")
    events.drain()
    return sw_session


@pytest.fixture()
def nd_session(events: EventBuffer) -> NumberDuelSession:
    return number_duel.init_session(sink=events)


@pytest.fixture()
def chat_session(events: EventBuffer) -> ChatSession:
    return chat.init_session(sink=events)


@pytest.fixture()
def fake_redis():
    import fakeredis

    return fakeredis.FakeRedis(decode_responses=True)
