from __future__ import annotations

from duels.api.models import RoleName, SecretWordStage, SecretWordState


# Checked in this order, so an identity holding several seats reports the first.
SEATED_ROLES: tuple[RoleName, ...] = (RoleName.admin, RoleName.player_one, RoleName.player_two)

# Who must act next, derived purely from the stage.
AWAITING_ROLE: dict[SecretWordStage, RoleName | None] = {
    SecretWordStage.not_started: RoleName.admin,
    SecretWordStage.waiting_for_secret: RoleName.admin,
    SecretWordStage.waiting_for_question: RoleName.player_one,
    SecretWordStage.waiting_for_answer: RoleName.player_two,
    SecretWordStage.completed: None,
}

# Roles allowed to read the raw secret.
SECRET_VIEWERS: frozenset[RoleName] = frozenset({RoleName.admin, RoleName.player_two})


def identity_for(state: SecretWordState, role: RoleName | str) -> str | None:
    role_name = RoleName(role) if not isinstance(role, RoleName) else role
    if role_name == RoleName.observer:
        return None
    return getattr(state, role_name.value)


def roles_for(state: SecretWordState, identity: str) -> set[RoleName]:
    return {role for role in SEATED_ROLES if identity_for(state, role) == identity}


def role_for(state: SecretWordState, identity: str) -> RoleName:
    held = roles_for(state, identity.strip())
    return next((role for role in SEATED_ROLES if role in held), RoleName.observer)


def can_view_secret(state: SecretWordState, identity: str) -> bool:
    return bool(roles_for(state, identity) & SECRET_VIEWERS)
