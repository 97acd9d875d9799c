from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from duels.api.models import RoleName, SecretWordStage, SecretWordState
from duels.core.errors import ErrorKind, GameError
from duels.roles import identity_for


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    action: str
    requester: str | None = None


class TurnValidator(ABC):
    """A small, composable validation unit for an incoming secret-word action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: SecretWordState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class SecretSetValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: SecretWordState) -> None:
        if state.secret_normalized is None:
            raise GameError(ErrorKind.secret_not_set, "secret has not been set")


@dataclass(frozen=True, slots=True)
class RoleValidator(TurnValidator):
    """The requester must hold `role`; a seat nobody holds yet means setup is incomplete."""

    role: RoleName

    def validate(self, *, ctx: ValidationContext, state: SecretWordState) -> None:
        expected = identity_for(state, self.role)
        if expected is None:
            raise GameError(
                ErrorKind.game_setup_incomplete,
                f"{self.role.value} has not been configured",
                role=self.role.value,
            )
        if ctx.requester != expected:
            raise GameError(
                ErrorKind.unauthorized,
                f"only the {self.role.value} may {ctx.action.replace('_', ' ')}",
                role=self.role.value,
                requester=ctx.requester,
            )


# Why a stage rejects an action, when it is not simply "wrong turn".
_STAGE_REASONS: dict[SecretWordStage, tuple[ErrorKind, str]] = {
    SecretWordStage.not_started: (ErrorKind.game_setup_incomplete, "game has not been created"),
    SecretWordStage.waiting_for_answer: (ErrorKind.invalid_turn, "answer required first"),
    SecretWordStage.completed: (ErrorKind.invalid_turn, "restart required"),
}


@dataclass(frozen=True, slots=True)
class StageValidator(TurnValidator):
    allowed_stages: frozenset[SecretWordStage]
    # Override the default reason for specific stages.
    reasons: dict[SecretWordStage, tuple[ErrorKind, str]] = field(default_factory=dict)

    def validate(self, *, ctx: ValidationContext, state: SecretWordState) -> None:
        if state.stage in self.allowed_stages:
            return
        kind, reason = self.reasons.get(state.stage) or _STAGE_REASONS.get(
            state.stage,
            (ErrorKind.invalid_turn, f"'{ctx.action}' not allowed now"),
        )
        raise GameError(
            kind,
            reason,
            action=ctx.action,
            stage=state.stage.value,
            allowed=sorted(s.value for s in self.allowed_stages),
        )


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: SecretWordState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


DEFAULT_ACTION_PIPELINES: dict[str, ValidatorPipeline] = {
    "set_secret": ValidatorPipeline(
        validators=(
            RoleValidator(role=RoleName.admin),
            StageValidator(
                allowed_stages=frozenset(
                    {
                        SecretWordStage.waiting_for_secret,
                        SecretWordStage.waiting_for_question,
                        SecretWordStage.waiting_for_answer,
                    }
                )
            ),
        )
    ),
    "submit_question": ValidatorPipeline(
        validators=(
            SecretSetValidator(),
            RoleValidator(role=RoleName.player_one),
            StageValidator(
                allowed_stages=frozenset({SecretWordStage.waiting_for_question, SecretWordStage.waiting_for_secret})
            ),
        )
    ),
    "submit_answer": ValidatorPipeline(
        validators=(
            SecretSetValidator(),
            RoleValidator(role=RoleName.player_two),
            StageValidator(
                allowed_stages=frozenset({SecretWordStage.waiting_for_answer}),
                reasons={
                    SecretWordStage.not_started: (ErrorKind.invalid_turn, "no question to answer"),
                    SecretWordStage.waiting_for_secret: (ErrorKind.invalid_turn, "no question to answer"),
                    SecretWordStage.waiting_for_question: (ErrorKind.invalid_turn, "question required first"),
                },
            ),
        )
    ),
    "clear_history": ValidatorPipeline(validators=(RoleValidator(role=RoleName.admin),)),
    "set_max_messages": ValidatorPipeline(validators=(RoleValidator(role=RoleName.admin),)),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_ACTION_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
