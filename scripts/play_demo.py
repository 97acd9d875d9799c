"""Play one scripted secret-word duel and one number duel, printing every event.

Contract
- Drives both games through the name-based dispatcher, the same entry point a host would use.
- Events go to an in-memory buffer, or to Redis Streams with `--redis`
  (`events:<session id>` on `REDIS_URL`).

Usage:
    uv run python scripts/play_demo.py
    uv run python scripts/play_demo.py --redis
"""

from __future__ import annotations

import argparse
import json
from uuid import uuid4

from duels import number_duel, secret_word
from duels.actions import ActionResult, dispatch_number_duel_action, dispatch_secret_word_action
from duels.config import configure_logging
from duels.core.events import EventBuffer, EventSink
from duels.core.game_state_text import number_duel_to_paragraph, secret_word_to_paragraph, secret_word_transcript


def _sink(*, use_redis: bool, session_id: str) -> EventSink:
    if not use_redis:
        return EventBuffer()

    from duels.infra.redis_client import create_redis
    from duels.streams import RedisStreamSink

    return RedisStreamSink(r=create_redis(), session_id=session_id)


def _show(label: str, result: ActionResult) -> None:
    print(f"{label}: {json.dumps(result.as_dict(), sort_keys=True)}")


def _print_events(sink: EventSink) -> None:
    if isinstance(sink, EventBuffer):
        for event in sink.drain():
            print(f"  event {event.type} {json.dumps(event.payload, sort_keys=True)}")


def play_secret_word(*, use_redis: bool) -> None:
    session_id = f"secret-word-{uuid4()}"
    sink = _sink(use_redis=use_redis, session_id=session_id)
    session = secret_word.init_session(sink=sink)

    steps: list[tuple[str, dict[str, object]]] = [
        ("create_game", {"admin": "alice", "player_one": "bob", "player_two": "carol"}),
        ("set_secret", {"requester": "alice", "secret": "Banana"}),
        ("submit_question", {"player": "bob", "content": "Is it a fruit?"}),
        ("submit_answer", {"player": "carol", "content": "Yes.", "guess": "apple"}),
        ("submit_question", {"player": "bob", "content": "Is it yellow?"}),
        ("submit_answer", {"player": "carol", "content": "Yes, it is a banana.", "guess": " BANANA "}),
        ("submit_question", {"player": "bob", "content": "One more?"}),
    ]
    for action, payload in steps:
        _show(action, dispatch_secret_word_action(session=session, action=action, payload=payload))
        _print_events(sink)

    print(secret_word_to_paragraph(state=session.state, viewer="bob"))
    print(secret_word_transcript(state=session.state))


def play_number_duel(*, use_redis: bool) -> None:
    session_id = f"number-duel-{uuid4()}"
    sink = _sink(use_redis=use_redis, session_id=session_id)
    session = number_duel.init_session(sink=sink)

    steps: list[tuple[str, dict[str, object]]] = [
        ("submit_number", {"player_id": "dave", "number": 5}),
        ("submit_number", {"player_id": "erin", "number": 9}),
        ("discover_number", {"player_id": "erin"}),
        ("discover_number", {"player_id": "dave"}),
        ("discover_number", {"player_id": "erin"}),
    ]
    for action, payload in steps:
        _show(action, dispatch_number_duel_action(session=session, action=action, payload=payload))
        _print_events(sink)

    print(number_duel_to_paragraph(view=number_duel.view(session=session)))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--redis", action="store_true", help="publish events to Redis Streams")
    args = parser.parse_args()

    configure_logging()
    play_secret_word(use_redis=args.redis)
    play_number_duel(use_redis=args.redis)


if __name__ == "__main__":
    main()
