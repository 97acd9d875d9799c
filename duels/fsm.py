from __future__ import annotations

from statemachine import State, StateMachine

from duels.api.models import NumberDuelPhase, NumberDuelState, SecretWordStage, SecretWordState


class SecretWordFSM(StateMachine):
    """FSM wrapper around SecretWordState.

    Stages: not_started -> waiting_for_secret -> waiting_for_question <-> waiting_for_answer -> completed.
    `created` restarts the cycle from any stage. Operations check authorization
    and raise the domain error first; the FSM only guards the transition itself.
    """

    not_started = State(
        SecretWordStage.not_started.value,
        value=SecretWordStage.not_started.value,
        initial=True,
    )
    waiting_for_secret = State(
        SecretWordStage.waiting_for_secret.value,
        value=SecretWordStage.waiting_for_secret.value,
    )
    waiting_for_question = State(
        SecretWordStage.waiting_for_question.value,
        value=SecretWordStage.waiting_for_question.value,
    )
    waiting_for_answer = State(
        SecretWordStage.waiting_for_answer.value,
        value=SecretWordStage.waiting_for_answer.value,
    )
    completed = State(SecretWordStage.completed.value, value=SecretWordStage.completed.value)

    created = waiting_for_secret.from_(
        not_started,
        waiting_for_secret,
        waiting_for_question,
        waiting_for_answer,
        completed,
    )
    secret_set = waiting_for_question.from_(waiting_for_secret, waiting_for_question, waiting_for_answer)
    question_asked = waiting_for_answer.from_(waiting_for_question, waiting_for_secret)
    answered = waiting_for_answer.to(waiting_for_question)
    guessed = waiting_for_answer.to(completed)

    def __init__(self, game: SecretWordState):
        self.game = game
        super().__init__(start_value=game.stage.value)

    def sync_stage_to_model(self) -> bool:
        """Copy the FSM stage onto the model. Returns True if the stage changed."""

        stage = SecretWordStage(str(self.current_state.value))
        changed = stage != self.game.stage
        self.game.stage = stage
        return changed


class NumberDuelFSM(StateMachine):
    """Setup -> InProgress -> Finished; both steps one-way."""

    setup = State(NumberDuelPhase.setup.value, value=NumberDuelPhase.setup.value, initial=True)
    in_progress = State(NumberDuelPhase.in_progress.value, value=NumberDuelPhase.in_progress.value)
    finished = State(NumberDuelPhase.finished.value, value=NumberDuelPhase.finished.value, final=True)

    numbers_locked = setup.to(in_progress)
    finish = in_progress.to(finished)

    def __init__(self, game: NumberDuelState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = NumberDuelPhase(str(self.current_state.value))
