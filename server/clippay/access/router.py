"""Access router: loads account state, asks ``decide`` and applies its effects."""
import logging
from typing import Optional
from uuid import UUID

from ..models.account import Profile
from .decision import ALLOW, Account, Decision, Effect, UserType, decide
from .paths import is_auth_page, is_protected, normalize_path
from .store import AccountStore

logger = logging.getLogger(__name__)


class AccessRouter:
    """
    Per-request onboarding gate.

    Reads are best effort: a failed read counts as a missing record, so the
    user lands on the earliest step that still applies. Writes happen after
    the decision is made and never change it. ``evaluate`` does not raise.
    """

    def __init__(self, store: AccountStore):
        self.store = store

    async def _load_profile(self, user_id: UUID) -> Optional[Profile]:
        try:
            return await self.store.get_profile(user_id)
        except Exception as e:
            logger.warning("[Access] Profile read failed for %s: %s", user_id, e)
            return None

    async def _load_account(self, profile: Profile) -> Optional[Account]:
        try:
            if profile.user_type == UserType.CREATOR.value:
                return await self.store.get_creator(profile.user_id)
            if profile.user_type == UserType.BRAND.value:
                return await self.store.get_brand(profile.user_id)
        except Exception as e:
            logger.warning(
                "[Access] %s record read failed for %s: %s",
                profile.user_type, profile.user_id, e,
            )
        return None

    async def _apply(self, user_id: UUID, effect: Effect) -> None:
        try:
            if effect is Effect.CREATE_CREATOR:
                await self.store.upsert_creator(user_id, tiktok_connected=False)
                logger.info("[Access] Created creator record for %s", user_id)
            elif effect is Effect.COMPLETE_ONBOARDING:
                await self.store.update_profile(user_id, onboarding_completed=True)
                logger.info("[Access] Marked onboarding completed for %s", user_id)
        except Exception:
            logger.exception("[Access] Failed to apply %s for %s", effect.value, user_id)

    async def evaluate(self, path: str, user_id: Optional[UUID]) -> Decision:
        path = normalize_path(path)

        if not is_protected(path):
            return Decision(outcome=ALLOW)

        if user_id is None:
            return decide(path, None, None)

        profile = await self._load_profile(user_id)

        account = None
        if profile is not None and not is_auth_page(path):
            account = await self._load_account(profile)

        decision = decide(path, user_id, profile, account)

        for effect in decision.effects:
            await self._apply(user_id, effect)

        if decision.redirect_to:
            logger.debug("[Access] %s -> %s (user %s)", path, decision.redirect_to, user_id)
        return decision
