from __future__ import annotations

import pytest

from duels import secret_word
from duels.api.models import RoleName, SecretWordStage
from duels.core.errors import ErrorKind, GameError
from duels.core.events import EventBuffer
from duels.secret_word import SecretWordSession


def test_fresh_session_is_not_started(sw_session: SecretWordSession) -> None:
    info = secret_word.game_info(session=sw_session)
    assert info.stage == SecretWordStage.not_started
    assert info.secret_set is False
    assert info.awaiting_role == RoleName.admin
    assert info.awaiting_player is None


def test_full_stage_cycle(sw_session: SecretWordSession, events: EventBuffer) -> None:
    info = secret_word.create_game(session=sw_session, admin=" A ", player_one="P1", player_two="P2")
    assert info.stage == SecretWordStage.waiting_for_secret
    assert info.admin == "A"
    assert events.types() == ["GameCreated", "StageChanged"]
    events.drain()

    info = secret_word.set_secret(session=sw_session, requester="A", secret="Banana")
    assert info.stage == SecretWordStage.waiting_for_question
    assert info.secret_set is True
    assert info.awaiting_player == "P1"
    assert sw_session.state.secret_raw == "Banana"
    assert sw_session.state.secret_normalized == "banana"
    assert events.types() == ["SecretSet", "StageChanged"]
    events.drain()

    q = secret_word.submit_question(session=sw_session, player="P1", content="Is it a fruit?")
    assert q.role == "player_one"
    assert sw_session.state.stage == SecretWordStage.waiting_for_answer
    assert sw_session.state.last_question_id == q.id
    assert secret_word.game_info(session=sw_session).awaiting_player == "P2"
    assert events.types() == ["MessageAdded", "StageChanged"]
    events.drain()

    wrong = secret_word.submit_answer(session=sw_session, player="P2", content="Yes", guess="apple")
    assert wrong.guess_was_correct is False
    assert wrong.message.role == "player_two"
    assert sw_session.state.stage == SecretWordStage.waiting_for_question
    assert sw_session.state.last_question_id is None
    events.drain()

    secret_word.submit_question(session=sw_session, player="P1", content="Yellow?")
    events.drain()
    right = secret_word.submit_answer(session=sw_session, player="P2", content="Yes!", guess=" BANANA ")
    assert right.guess_was_correct is True
    assert sw_session.state.stage == SecretWordStage.completed
    assert events.types() == ["MessageAdded", "SecretGuessed", "StageChanged"]
    assert events.events[1].payload == {"guesser": "P2"}

    info = secret_word.game_info(session=sw_session)
    assert info.awaiting_role is None
    assert info.awaiting_player is None


def test_completed_stays_completed_until_create_game(started_game: SecretWordSession) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="q")
    secret_word.submit_answer(session=started_game, player="P2", content="a", guess="banana")

    with pytest.raises(GameError) as q:
        secret_word.submit_question(session=started_game, player="P1", content="again")
    assert q.value.kind == ErrorKind.invalid_turn
    assert q.value.message == "restart required"

    with pytest.raises(GameError) as s:
        secret_word.set_secret(session=started_game, requester="A", secret="cherry")
    assert s.value.kind == ErrorKind.invalid_turn
    assert started_game.state.stage == SecretWordStage.completed

    secret_word.create_game(session=started_game, admin="A", player_one="P1", player_two="P2")
    assert started_game.state.stage == SecretWordStage.waiting_for_secret


def test_answer_without_guess_returns_to_question(started_game: SecretWordSession, events: EventBuffer) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="q")
    events.drain()

    result = secret_word.submit_answer(session=started_game, player="P2", content="no", guess="   ")
    assert result.guess_was_correct is False
    assert started_game.state.stage == SecretWordStage.waiting_for_question
    assert events.types() == ["MessageAdded", "StageChanged"]


def test_question_while_waiting_for_answer_is_rejected(started_game: SecretWordSession, events: EventBuffer) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="first")
    events.drain()
    before = started_game.state.model_copy(deep=True)

    with pytest.raises(GameError) as e:
        secret_word.submit_question(session=started_game, player="P1", content="second")
    assert e.value.kind == ErrorKind.invalid_turn
    assert e.value.message == "answer required first"

    assert started_game.state == before
    assert events.events == []


def test_answer_before_question_is_invalid_turn(started_game: SecretWordSession) -> None:
    with pytest.raises(GameError) as e:
        secret_word.submit_answer(session=started_game, player="P2", content="eager")
    assert e.value.kind == ErrorKind.invalid_turn


def test_question_allowed_while_waiting_for_secret_if_secret_present(started_game: SecretWordSession) -> None:
    # Only reachable by restoring a state; the stage rule still allows it.
    started_game.state.stage = SecretWordStage.waiting_for_secret
    secret_word.submit_question(session=started_game, player="P1", content="q")
    assert started_game.state.stage == SecretWordStage.waiting_for_answer


def test_question_before_secret(sw_session: SecretWordSession) -> None:
    with pytest.raises(GameError) as e:
        secret_word.submit_question(session=sw_session, player="P1", content="q")
    assert e.value.kind == ErrorKind.secret_not_set

    secret_word.create_game(session=sw_session, admin="A", player_one="P1", player_two="P2")
    with pytest.raises(GameError) as e2:
        secret_word.submit_question(session=sw_session, player="P1", content="q")
    assert e2.value.kind == ErrorKind.secret_not_set


def test_create_game_resets_log_and_ids(started_game: SecretWordSession) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="q")
    secret_word.submit_answer(session=started_game, player="P2", content="a")
    assert len(started_game.state.log) == 2

    secret_word.set_max_messages(session=started_game, requester="A", max_messages=20)
    secret_word.create_game(session=started_game, admin="A", player_one="P3", player_two="P4")
    state = started_game.state
    assert len(state.log) == 0
    assert state.secret_raw is None and state.secret_normalized is None
    assert state.player_one == "P3"
    assert state.log.max_messages == 20

    secret_word.set_secret(session=started_game, requester="A", secret="kiwi")
    entry = secret_word.submit_question(session=started_game, player="P3", content="q")
    assert entry.id == 0


def test_set_secret_mid_round_resets_to_question(started_game: SecretWordSession) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="q")
    secret_word.set_secret(session=started_game, requester="A", secret="Cherry")
    assert started_game.state.stage == SecretWordStage.waiting_for_question
    assert started_game.state.last_question_id is None
    assert secret_word.check_guess(session=started_game, guess="cherry") is True


def test_secret_must_be_single_word(sw_session: SecretWordSession) -> None:
    secret_word.create_game(session=sw_session, admin="A", player_one="P1", player_two="P2")

    with pytest.raises(GameError) as e:
        secret_word.set_secret(session=sw_session, requester="A", secret="two words")
    assert e.value.kind == ErrorKind.invalid_secret_format

    with pytest.raises(GameError) as empty:
        secret_word.set_secret(session=sw_session, requester="A", secret="   ")
    assert empty.value.kind == ErrorKind.empty_name

    # Surrounding whitespace is fine.
    secret_word.set_secret(session=sw_session, requester="A", secret="  Mango\n")
    assert sw_session.state.secret_raw == "Mango"


@pytest.mark.parametrize("guess", ["Banana", " banana ", "BANANA"])
def test_check_guess_is_case_and_space_insensitive(started_game: SecretWordSession, guess: str) -> None:
    assert secret_word.check_guess(session=started_game, guess=guess) is True


def test_check_guess_is_pure(started_game: SecretWordSession, events: EventBuffer) -> None:
    before = started_game.state.model_copy(deep=True)
    assert secret_word.check_guess(session=started_game, guess="apple") is False
    assert started_game.state == before
    assert events.events == []


def test_check_guess_without_secret(sw_session: SecretWordSession) -> None:
    with pytest.raises(GameError) as e:
        secret_word.check_guess(session=sw_session, guess="x")
    assert e.value.kind == ErrorKind.secret_not_set


def test_messages_pagination_and_lookup(started_game: SecretWordSession) -> None:
    for i in range(3):
        secret_word.submit_question(session=started_game, player="P1", content=f"q{i}")
        secret_word.submit_answer(session=started_game, player="P2", content=f"a{i}")

    assert len(secret_word.messages(session=started_game)) == 6
    assert secret_word.messages(session=started_game, offset=1000, limit=10) == []
    page = secret_word.messages(session=started_game, offset=2, limit=2)
    assert [m.content for m in page] == ["q1", "a1"]

    assert secret_word.message_by_id(session=started_game, message_id=3).content == "a1"
    with pytest.raises(GameError) as e:
        secret_word.message_by_id(session=started_game, message_id=42)
    assert e.value.kind == ErrorKind.message_not_found
    assert e.value.data == {"id": 42}
