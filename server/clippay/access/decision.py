"""Onboarding gate: maps account state and a request path to an access outcome.

Everything here is pure. The caller loads the records, hands them over as
plain data, and carries out any effects listed on the returned ``Decision``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from ..models.account import BrandRecord, CreatorRecord, Profile
from .paths import (
    BRAND_PAYMENTS_STEP,
    BRAND_PROFILE_STEP,
    CREATOR_PROFILE_STEP,
    CREATOR_TIKTOK_STEP,
    DASHBOARD_PATH,
    SIGNIN_PATH,
    is_auth_page,
    is_payment_required,
    is_protected,
    normalize_path,
)


class UserType(str, Enum):
    CREATOR = "creator"
    BRAND = "brand"


class Effect(str, Enum):
    CREATE_CREATOR = "create_creator"
    COMPLETE_ONBOARDING = "complete_onboarding"


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Redirect:
    path: str


Outcome = Union[Allow, Redirect]
Account = Union[CreatorRecord, BrandRecord]

ALLOW = Allow()


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    effects: tuple[Effect, ...] = ()

    @property
    def allowed(self) -> bool:
        return isinstance(self.outcome, Allow)

    @property
    def redirect_to(self) -> Optional[str]:
        if isinstance(self.outcome, Redirect):
            return self.outcome.path
        return None


def _coerce_user_type(value: str) -> Optional[UserType]:
    try:
        return UserType(value)
    except ValueError:
        return None


def _finish(path: str, outcome: Outcome, effects: tuple[Effect, ...] = ()) -> Decision:
    # Never bounce a request to the page it is already on.
    if isinstance(outcome, Redirect) and outcome.path == path:
        outcome = ALLOW
    return Decision(outcome=outcome, effects=effects)


def _decide_creator(path: str, profile: Profile, creator: Optional[CreatorRecord]) -> Decision:
    effects: tuple[Effect, ...] = ()
    if creator is None:
        effects = (Effect.CREATE_CREATOR,)
        creator = CreatorRecord(user_id=profile.user_id, tiktok_connected=False)

    if not creator.tiktok_connected:
        if path == CREATOR_PROFILE_STEP:
            return _finish(path, ALLOW, effects)
        return _finish(path, Redirect(CREATOR_TIKTOK_STEP), effects)

    if not profile.has_organization:
        return _finish(path, Redirect(CREATOR_PROFILE_STEP), effects)

    if not profile.onboarding_completed:
        return _finish(path, ALLOW, effects + (Effect.COMPLETE_ONBOARDING,))

    return _finish(path, ALLOW, effects)


def _decide_brand(path: str, profile: Profile, brand: Optional[BrandRecord]) -> Decision:
    if not profile.has_organization:
        return _finish(path, Redirect(BRAND_PROFILE_STEP))

    payment_verified = brand is not None and brand.payment_verified
    if is_payment_required(path) and not payment_verified:
        return _finish(path, Redirect(BRAND_PAYMENTS_STEP))

    return _finish(path, ALLOW)


def decide(
    path: str,
    user_id: Optional[UUID],
    profile: Optional[Profile],
    account: Optional[Account] = None,
) -> Decision:
    """
    Decide what a request may do.

    ``account`` is the creator record for creators and the brand record for
    brands; ``None`` means it does not exist (or could not be read).
    """
    path = normalize_path(path)

    if not is_protected(path):
        return Decision(outcome=ALLOW)

    if is_auth_page(path):
        # Signed-in users skip the auth pages; everyone else may use them.
        # An unknown account type would be sent back here from the dashboard.
        if (
            user_id is not None
            and profile is not None
            and _coerce_user_type(profile.user_type) is not None
        ):
            return _finish(path, Redirect(DASHBOARD_PATH))
        return Decision(outcome=ALLOW)

    if user_id is None or profile is None:
        return _finish(path, Redirect(SIGNIN_PATH))

    user_type = _coerce_user_type(profile.user_type)

    if user_type is UserType.CREATOR:
        creator = account if isinstance(account, CreatorRecord) else None
        return _decide_creator(path, profile, creator)

    if user_type is UserType.BRAND:
        brand = account if isinstance(account, BrandRecord) else None
        return _decide_brand(path, profile, brand)

    return _finish(path, Redirect(SIGNIN_PATH))
