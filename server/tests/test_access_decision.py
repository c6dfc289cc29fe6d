from uuid import uuid4

import pytest

from clippay.access.decision import ALLOW, Effect, Redirect, decide
from clippay.models.account import BrandRecord, CreatorRecord, Profile

PROTECTED_PATHS = (
    "/dashboard",
    "/payouts",
    "/campaigns/new",
    "/api/payouts",
    "/onboarding/brand/profile",
    "/onboarding/creator/tiktok",
)
PAYMENT_PATHS = ("/payouts", "/campaigns/new", "/api/payouts")


def _profile(user_id, user_type, organization_name=None, onboarding_completed=False):
    return Profile(
        user_id=user_id,
        user_type=user_type,
        organization_name=organization_name,
        onboarding_completed=onboarding_completed,
    )


@pytest.mark.parametrize("path", PROTECTED_PATHS)
def test_no_session_redirects_to_signin(path):
    decision = decide(path, None, None)
    assert decision.outcome == Redirect("/signin")
    assert decision.effects == ()


@pytest.mark.parametrize("path", PROTECTED_PATHS)
def test_session_without_profile_redirects_to_signin(path):
    decision = decide(path, uuid4(), None)
    assert decision.outcome == Redirect("/signin")


def test_public_path_is_allowed_without_session():
    assert decide("/campaigns/123", None, None).outcome == ALLOW
    assert decide("/", None, None).outcome == ALLOW


def test_signed_in_user_on_auth_pages_goes_to_dashboard():
    user_id = uuid4()
    profile = _profile(user_id, "brand", "Acme", True)
    assert decide("/signin", user_id, profile).outcome == Redirect("/dashboard")
    assert decide("/signup", user_id, profile).outcome == Redirect("/dashboard")


def test_auth_pages_stay_open_without_a_usable_session():
    assert decide("/signin", None, None).outcome == ALLOW
    assert decide("/signup", None, None).outcome == ALLOW
    # A session whose profile is gone must be able to sign in again.
    assert decide("/signin", uuid4(), None).outcome == ALLOW


# ===========================================
# Creators
# ===========================================

@pytest.mark.parametrize("path", ("/dashboard", "/payouts", "/campaigns/new", "/onboarding/brand/profile"))
def test_unconnected_creator_is_sent_to_tiktok(path):
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=False)
    decision = decide(path, user_id, _profile(user_id, "creator"), creator)
    assert decision.outcome == Redirect("/onboarding/creator/tiktok")
    assert decision.effects == ()


def test_unconnected_creator_may_use_profile_and_tiktok_steps():
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=False)
    profile = _profile(user_id, "creator")
    assert decide("/onboarding/creator/profile", user_id, profile, creator).outcome == ALLOW
    assert decide("/onboarding/creator/tiktok", user_id, profile, creator).outcome == ALLOW


def test_missing_creator_record_is_created_and_treated_as_unconnected():
    user_id = uuid4()
    decision = decide("/dashboard", user_id, _profile(user_id, "creator"), None)
    assert decision.outcome == Redirect("/onboarding/creator/tiktok")
    assert decision.effects == (Effect.CREATE_CREATOR,)


@pytest.mark.parametrize("path", ("/dashboard", "/payouts", "/onboarding/creator/tiktok"))
def test_connected_creator_without_organization_goes_to_profile(path):
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=True)
    decision = decide(path, user_id, _profile(user_id, "creator"), creator)
    assert decision.outcome == Redirect("/onboarding/creator/profile")


def test_blank_organization_name_counts_as_missing():
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=True)
    decision = decide("/dashboard", user_id, _profile(user_id, "creator", "   "), creator)
    assert decision.outcome == Redirect("/onboarding/creator/profile")


def test_creator_mid_completion_is_allowed_and_marked_complete():
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=True)
    profile = _profile(user_id, "creator", "Clips Inc", onboarding_completed=False)

    first = decide("/dashboard", user_id, profile, creator)
    second = decide("/dashboard", user_id, profile, creator)

    assert first.outcome == ALLOW
    assert first.effects == (Effect.COMPLETE_ONBOARDING,)
    assert second == first


def test_fully_onboarded_creator_is_allowed_everywhere():
    user_id = uuid4()
    creator = CreatorRecord(user_id=user_id, tiktok_connected=True)
    profile = _profile(user_id, "creator", "Clips Inc", onboarding_completed=True)
    for path in PROTECTED_PATHS:
        decision = decide(path, user_id, profile, creator)
        assert decision.outcome == ALLOW, path
        assert decision.effects == ()


# ===========================================
# Brands
# ===========================================

@pytest.mark.parametrize("path", ("/dashboard", "/payouts", "/onboarding/brand/payments"))
def test_brand_without_organization_goes_to_profile(path):
    user_id = uuid4()
    decision = decide(path, user_id, _profile(user_id, "brand"), None)
    assert decision.outcome == Redirect("/onboarding/brand/profile")


def test_brand_without_organization_may_use_profile_step():
    user_id = uuid4()
    decision = decide("/onboarding/brand/profile", user_id, _profile(user_id, "brand"), None)
    assert decision.outcome == ALLOW


@pytest.mark.parametrize("path", PAYMENT_PATHS)
def test_unverified_brand_is_sent_to_payments_for_payment_routes(path):
    user_id = uuid4()
    brand = BrandRecord(user_id=user_id, stripe_customer_id="cus_1", payment_verified=False)
    decision = decide(path, user_id, _profile(user_id, "brand", "Acme"), brand)
    assert decision.outcome == Redirect("/onboarding/brand/payments")


def test_unverified_brand_may_use_dashboard():
    user_id = uuid4()
    brand = BrandRecord(user_id=user_id, payment_verified=False)
    decision = decide("/dashboard", user_id, _profile(user_id, "brand", "Acme"), brand)
    assert decision.outcome == ALLOW
    assert decision.effects == ()


def test_missing_brand_record_counts_as_unverified():
    user_id = uuid4()
    profile = _profile(user_id, "brand", "Acme", onboarding_completed=True)
    decision = decide("/payouts", user_id, profile, None)
    assert decision.outcome == Redirect("/onboarding/brand/payments")


@pytest.mark.parametrize("path", PAYMENT_PATHS + ("/payouts/history",))
def test_verified_brand_reaches_payment_routes(path):
    user_id = uuid4()
    brand = BrandRecord(user_id=user_id, stripe_customer_id="cus_1", payment_verified=True)
    decision = decide(path, user_id, _profile(user_id, "brand", "Acme", True), brand)
    assert decision.outcome == ALLOW


def test_creator_record_is_ignored_for_brand_profiles():
    user_id = uuid4()
    wrong_record = CreatorRecord(user_id=user_id, tiktok_connected=True)
    decision = decide("/payouts", user_id, _profile(user_id, "brand", "Acme"), wrong_record)
    assert decision.outcome == Redirect("/onboarding/brand/payments")


# ===========================================
# Unknown account types
# ===========================================

def test_unknown_user_type_fails_safe_to_signin():
    user_id = uuid4()
    decision = decide("/dashboard", user_id, _profile(user_id, "admin", "Ops", True))
    assert decision.outcome == Redirect("/signin")
    assert decision.effects == ()


def test_redirect_never_targets_the_requested_path():
    user_id = uuid4()
    profiles = (
        _profile(user_id, "creator"),
        _profile(user_id, "creator", "Clips"),
        _profile(user_id, "brand"),
        _profile(user_id, "brand", "Acme"),
        _profile(user_id, "other"),
    )
    accounts = (
        None,
        CreatorRecord(user_id=user_id, tiktok_connected=False),
        CreatorRecord(user_id=user_id, tiktok_connected=True),
        BrandRecord(user_id=user_id, payment_verified=False),
    )
    paths = PROTECTED_PATHS + (
        "/onboarding/creator/profile",
        "/onboarding/brand/payments",
        "/signin",
    )
    for profile in profiles:
        for account in accounts:
            for path in paths:
                decision = decide(path, user_id, profile, account)
                assert decision.redirect_to != path


def test_unknown_user_type_is_not_bounced_off_signin():
    user_id = uuid4()
    profile = _profile(user_id, "admin", "Ops", True)

    assert decide("/dashboard", user_id, profile).outcome == Redirect("/signin")
    assert decide("/signin", user_id, profile).outcome == ALLOW
    assert decide("/signup", user_id, profile).outcome == ALLOW


def test_following_redirects_always_settles_on_an_allowed_page():
    user_id = uuid4()
    profiles = (
        _profile(user_id, "creator"),
        _profile(user_id, "creator", "Clips"),
        _profile(user_id, "brand"),
        _profile(user_id, "brand", "Acme", True),
        _profile(user_id, "admin", "Ops", True),
    )
    accounts = (
        None,
        CreatorRecord(user_id=user_id, tiktok_connected=False),
        CreatorRecord(user_id=user_id, tiktok_connected=True),
        BrandRecord(user_id=user_id, payment_verified=False),
    )
    for profile in profiles:
        for account in accounts:
            for start in PROTECTED_PATHS + ("/signin", "/signup"):
                path, seen = start, []
                decision = decide(path, user_id, profile, account)
                while not decision.allowed:
                    assert path not in seen, f"redirect loop through {seen + [path]}"
                    seen.append(path)
                    path = decision.redirect_to
                    decision = decide(path, user_id, profile, account)
