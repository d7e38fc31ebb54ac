# app/core/route_guard.py
"""
Role-gated access decisions for storefront views.

`evaluate` is pure: the decision depends only on whether there is an
authenticated identity and on the latest (role, is_approved) snapshot of
its profile. The FastAPI dependencies in app.core.auth map each state to
an HTTP response; GET /access/{view} returns the decision itself so the
client knows which fallback view to render.
"""
import uuid
from enum import Enum
from typing import Iterable, Literal

from pydantic import BaseModel, computed_field

Role = Literal["consumer", "vendor", "admin"]
ALL_ROLES: tuple[Role, ...] = ("consumer", "vendor", "admin")


class GuardState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    PENDING_PROFILE = "pending_profile"
    WRONG_ROLE = "wrong_role"
    UNAPPROVED = "unapproved"
    AUTHORIZED = "authorized"


FALLBACK_VIEWS: dict[GuardState, str | None] = {
    GuardState.UNAUTHENTICATED: "sign-in",
    GuardState.PENDING_PROFILE: "loading",
    GuardState.WRONG_ROLE: "access-denied",
    GuardState.UNAPPROVED: "pending-approval",
    GuardState.AUTHORIZED: None,
}

# Protected storefront views and the roles allowed to see them
VIEW_ROLES: dict[str, tuple[Role, ...]] = {
    "cart": ALL_ROLES,
    "orders": ALL_ROLES,
    "profile": ALL_ROLES,
    "consumer-dashboard": ("consumer",),
    "vendor-dashboard": ("vendor",),
    "admin": ("admin",),
}


class GuardDecision(BaseModel):
    state: GuardState
    required_roles: list[Role]
    fallback_view: str | None = None

    @computed_field
    @property
    def allowed(self) -> bool:
        return self.state is GuardState.AUTHORIZED


def evaluate(
    user_id: uuid.UUID | None,
    profile,
    required_roles: Iterable[Role],
) -> GuardDecision:
    """
    Decide whether a view requiring `required_roles` may render.

    `profile` is anything with `role` and `is_approved` attributes, or
    None while it has not resolved yet.

    Order of checks:
      1. no identity              -> UNAUTHENTICATED
      2. profile not resolved     -> PENDING_PROFILE
      3. role not allowed         -> WRONG_ROLE
      4. vendor-only view, unapproved -> UNAPPROVED
      5. otherwise                -> AUTHORIZED
    """
    roles = list(required_roles)

    if user_id is None:
        state = GuardState.UNAUTHENTICATED
    elif profile is None:
        state = GuardState.PENDING_PROFILE
    elif profile.role not in roles:
        state = GuardState.WRONG_ROLE
    elif set(roles) == {"vendor"} and not profile.is_approved:
        state = GuardState.UNAPPROVED
    else:
        state = GuardState.AUTHORIZED

    return GuardDecision(
        state=state,
        required_roles=roles,
        fallback_view=FALLBACK_VIEWS[state],
    )


def evaluate_view(user_id: uuid.UUID | None, profile, view: str) -> GuardDecision:
    """
    Evaluate a named view from VIEW_ROLES.

    Raises:
        KeyError: unknown view name.
    """
    return evaluate(user_id, profile, VIEW_ROLES[view])
