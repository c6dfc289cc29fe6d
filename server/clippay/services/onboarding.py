"""Onboarding actions for brands and creators.

Each action takes an open asyncpg connection and raises ``OnboardingError``
when the request breaks an onboarding rule. Completion is never recorded for
a profile without an organization name.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

import asyncpg

from ..access.store import ensure_creator, fetch_brand, fetch_profile, set_onboarding_completed
from ..models.account import CampaignPermission, Profile
from .auth import hash_password

logger = logging.getLogger(__name__)


class OnboardingError(ValueError):
    """Raised when an onboarding step cannot be applied."""


def _clean_name(organization_name: Optional[str]) -> str:
    name = (organization_name or "").strip()
    if not name:
        raise OnboardingError("Organization name is required")
    return name


async def _require_profile(conn, user_id: UUID, user_type: str) -> Profile:
    profile = await fetch_profile(conn, user_id)
    if profile is None:
        raise OnboardingError("Profile not found")
    if profile.user_type != user_type:
        raise OnboardingError(f"Profile is not a {user_type} account")
    return profile


async def create_account(
    conn,
    email: str,
    password: str,
    user_type: str,
    full_name: Optional[str] = None,
):
    """Create the user and its profile. Returns the new user row."""
    existing = await conn.fetchval("SELECT id FROM users WHERE email = $1", email)
    if existing:
        raise OnboardingError("Email already registered")

    password_hash = hash_password(password)
    try:
        async with conn.transaction():
            user = await conn.fetchrow(
                """
                INSERT INTO users (email, password_hash)
                VALUES ($1, $2)
                RETURNING id, email, is_active, created_at, last_login
                """,
                email, password_hash
            )
            await conn.execute(
                """
                INSERT INTO profiles (user_id, user_type, full_name, onboarding_completed)
                VALUES ($1, $2, $3, false)
                """,
                user["id"], user_type, full_name
            )
    except asyncpg.UniqueViolationError:
        # Lost a race with a concurrent signup for the same email.
        raise OnboardingError("Email already registered")

    logger.info("[Onboarding] Created %s account %s", user_type, user["id"])
    return user


# ===========================================
# Brand steps
# ===========================================

async def update_brand_profile(conn, user_id: UUID, organization_name: str) -> None:
    name = _clean_name(organization_name)
    await _require_profile(conn, user_id, "brand")
    await conn.execute(
        "UPDATE profiles SET organization_name = $2, updated_at = NOW() WHERE user_id = $1",
        user_id, name
    )


async def complete_onboarding_with_payment(
    conn,
    user_id: UUID,
    setup_intent_id: str,
    stripe_customer_id: Optional[str] = None,
) -> None:
    """Record a confirmed payment method and finish brand onboarding."""
    if not (setup_intent_id or "").strip():
        raise OnboardingError("setup_intent_id is required")

    profile = await _require_profile(conn, user_id, "brand")
    if not profile.has_organization:
        raise OnboardingError("Organization name must be set before payment setup")

    async with conn.transaction():
        await conn.execute(
            """
            INSERT INTO brands (user_id, setup_intent_id, stripe_customer_id, payment_verified)
            VALUES ($1, $2, $3, true)
            ON CONFLICT (user_id) DO UPDATE
            SET setup_intent_id = EXCLUDED.setup_intent_id,
                stripe_customer_id = COALESCE(EXCLUDED.stripe_customer_id, brands.stripe_customer_id),
                payment_verified = true,
                updated_at = NOW()
            """,
            user_id, setup_intent_id, stripe_customer_id
        )
        await set_onboarding_completed(conn, user_id)

    logger.info("[Onboarding] Brand %s completed payment setup", user_id)


async def skip_payment_setup(conn, user_id: UUID) -> None:
    """Finish brand onboarding without a payment method."""
    profile = await _require_profile(conn, user_id, "brand")
    if not profile.has_organization:
        raise OnboardingError("Organization name must be set before skipping payment setup")

    async with conn.transaction():
        # A brand that already verified payment keeps it.
        await conn.execute(
            """
            INSERT INTO brands (user_id, payment_verified)
            VALUES ($1, false)
            ON CONFLICT (user_id) DO NOTHING
            """,
            user_id
        )
        await set_onboarding_completed(conn, user_id)


async def can_create_campaign(conn, user_id: UUID) -> CampaignPermission:
    try:
        brand = await fetch_brand(conn, user_id)
    except Exception as e:
        logger.warning("[Onboarding] Brand lookup failed for %s: %s", user_id, e)
        return CampaignPermission(allowed=False, reason="error")

    if brand is None or not brand.stripe_customer_id or not brand.payment_verified:
        return CampaignPermission(allowed=False, reason="payment_required")
    return CampaignPermission(allowed=True)


# ===========================================
# Creator steps
# ===========================================

async def record_tiktok_connection(conn, user_id: UUID, open_id: Optional[str] = None) -> None:
    """Mark the creator's TikTok account as connected."""
    await _require_profile(conn, user_id, "creator")
    await ensure_creator(conn, user_id, tiktok_connected=True)
    if open_id:
        await conn.execute(
            "UPDATE creators SET tiktok_open_id = $2, updated_at = NOW() WHERE user_id = $1",
            user_id, open_id
        )
    logger.info("[Onboarding] TikTok connected for creator %s", user_id)


async def update_creator_profile(
    conn,
    user_id: UUID,
    organization_name: str,
    referral_code: Optional[str] = None,
) -> None:
    name = _clean_name(organization_name)
    await _require_profile(conn, user_id, "creator")

    referrer_id = None
    code = (referral_code or "").strip()
    if code:
        referrer_id = await conn.fetchval(
            "SELECT profile_id FROM referrals WHERE code = $1",
            code
        )
        if referrer_id is None:
            raise OnboardingError("Invalid referral code")

    async with conn.transaction():
        await conn.execute(
            """
            UPDATE profiles
            SET organization_name = $2,
                referred_by = COALESCE($3, referred_by),
                onboarding_completed = true,
                updated_at = NOW()
            WHERE user_id = $1
            """,
            user_id, name, referrer_id
        )
        await ensure_creator(conn, user_id)
