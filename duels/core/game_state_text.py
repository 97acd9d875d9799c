from __future__ import annotations

from dataclasses import dataclass

from duels.api.models import NumberDuelPhase, NumberDuelView, RoleName, SecretWordStage, SecretWordState
from duels.roles import can_view_secret
from duels.turn_processing.turns import awaiting_player


_STAGE_TEXT: dict[SecretWordStage, str] = {
    SecretWordStage.not_started: "The game has not been configured yet.",
    SecretWordStage.waiting_for_secret: "Waiting for the admin to choose the secret word.",
    SecretWordStage.waiting_for_question: "Waiting for player one to ask a question.",
    SecretWordStage.waiting_for_answer: "Waiting for player two to answer.",
    SecretWordStage.completed: "The secret word has been guessed; the game is over.",
}


@dataclass(frozen=True, slots=True)
class TranscriptOptions:
    # Most recent messages to include; None means the whole log.
    last_n: int | None = 20


def _label(identity: str | None) -> str:
    return identity or "(unset)"


def _can_see_secret(*, state: SecretWordState, viewer: str | None) -> bool:
    if viewer is None:
        return False
    return can_view_secret(state, viewer.strip())


def secret_word_to_paragraph(*, state: SecretWordState, viewer: str | None = None) -> str:
    """Deterministic single-paragraph summary with viewer-based redaction.

    The secret word is only spelled out for the admin and player two; every
    other viewer (including player one) just learns whether it is set.
    """

    sent: list[str] = []
    sent.append(
        f"Admin: {_label(state.admin)}. Player one (asks): {_label(state.player_one)}. "
        f"Player two (answers): {_label(state.player_two)}."
    )
    sent.append(_STAGE_TEXT[state.stage])

    next_up = awaiting_player(state=state)
    if next_up is not None:
        sent.append(f"Next to act: {next_up}.")

    if state.secret_raw is None:
        sent.append("Secret word: not set.")
    elif _can_see_secret(state=state, viewer=viewer):
        sent.append(f"Secret word (do not reveal): '{state.secret_raw}'.")
    else:
        sent.append("Secret word: set (hidden).")

    sent.append(f"Messages: {len(state.log)} of at most {state.log.max_messages}.")
    return " ".join(sent)


def secret_word_transcript(*, state: SecretWordState, options: TranscriptOptions | None = None) -> str:
    """One line per logged message, oldest first."""

    opts = options or TranscriptOptions()
    entries = state.log.entries
    if opts.last_n is not None:
        entries = entries[-opts.last_n :] if opts.last_n > 0 else []

    lines: list[str] = []
    for e in entries:
        who = "Q" if e.role == RoleName.player_one.value else "A" if e.role == RoleName.player_two.value else "-"
        lines.append(f"[{e.id}] {who} {e.sender}: {e.content}")
    return "\n".join(lines)


def number_duel_to_paragraph(*, view: NumberDuelView) -> str:
    """Summary of a number-duel view; hidden numbers stay hidden."""

    sent: list[str] = []
    if not view.players:
        sent.append("No players have joined.")
    for p in view.players:
        number = str(p.number) if p.number is not None else "hidden"
        revealed = "has revealed the opponent" if p.discovered else "has not revealed the opponent yet"
        sent.append(f"{p.id}: number {number}, {revealed}.")

    if view.phase == NumberDuelPhase.setup:
        sent.append("Waiting for both numbers.")
    elif view.phase == NumberDuelPhase.in_progress:
        sent.append(f"Turn: {view.current_turn}.")
    else:
        sent.append(f"Winner: {view.winner}." if view.winner is not None else "Result: draw.")

    return " ".join(sent)
