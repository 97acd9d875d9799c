from __future__ import annotations

from duels import number_duel, secret_word
from duels.core.game_state_text import (
    TranscriptOptions,
    number_duel_to_paragraph,
    secret_word_to_paragraph,
    secret_word_transcript,
)
from duels.number_duel import NumberDuelSession
from duels.secret_word import SecretWordSession


def test_paragraph_redacts_secret_per_viewer(started_game: SecretWordSession) -> None:
    state = started_game.state

    for viewer in ("A", "P2"):
        text = secret_word_to_paragraph(state=state, viewer=viewer)
        assert "'banana'" in text

    for viewer in ("P1", "stranger", None):
        text = secret_word_to_paragraph(state=state, viewer=viewer)
        assert "banana" not in text
        assert "Secret word: set (hidden)." in text

    text = secret_word_to_paragraph(state=state, viewer="P1")
    assert "Waiting for player one to ask a question." in text
    assert "Next to act: P1." in text
    assert "Messages: 0 of at most 200." in text


def test_paragraph_before_setup(sw_session: SecretWordSession) -> None:
    text = secret_word_to_paragraph(state=sw_session.state)
    assert "Admin: (unset)." in text
    assert "Secret word: not set." in text
    assert "Next to act" not in text


def test_transcript_lines(started_game: SecretWordSession) -> None:
    secret_word.submit_question(session=started_game, player="P1", content="Fruit?")
    secret_word.submit_answer(session=started_game, player="P2", content="Yes")
    secret_word.submit_question(session=started_game, player="P1", content="Yellow?")

    assert secret_word_transcript(state=started_game.state) == "\n".join(
        [
            "[0] Q P1: Fruit?",
            "[1] A P2: Yes",
            "[2] Q P1: Yellow?",
        ]
    )
    assert secret_word_transcript(state=started_game.state, options=TranscriptOptions(last_n=1)) == "[2] Q P1: Yellow?"
    assert secret_word_transcript(state=started_game.state, options=TranscriptOptions(last_n=0)) == ""


def test_number_duel_paragraph(nd_session: NumberDuelSession) -> None:
    assert number_duel_to_paragraph(view=number_duel.view(session=nd_session)) == (
        "No players have joined. Waiting for both numbers."
    )

    number_duel.submit_number(session=nd_session, player_id="A", number=5)
    number_duel.submit_number(session=nd_session, player_id="B", number=9)
    text = number_duel_to_paragraph(view=number_duel.view(session=nd_session))
    assert "A: number hidden" in text
    assert "Turn: A." in text

    number_duel.discover_number(session=nd_session, player_id="A")
    number_duel.discover_number(session=nd_session, player_id="B")
    text = number_duel_to_paragraph(view=number_duel.view(session=nd_session))
    assert "A: number 5, has revealed the opponent." in text
    assert text.endswith("Winner: B.")
