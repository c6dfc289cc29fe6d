import asyncio
from uuid import uuid4

from clippay.access.decision import ALLOW, Redirect
from clippay.access.router import AccessRouter
from clippay.models.account import BrandRecord, CreatorRecord, Profile


class _FakeStore:
    def __init__(self, profile=None, creator=None, brand=None):
        self.profile = profile
        self.creator = creator
        self.brand = brand
        self.reads: list[str] = []
        self.writes: list[tuple] = []
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()

    def _read(self, name, value):
        self.reads.append(name)
        if name in self.fail_reads:
            raise ConnectionError(f"{name} read failed")
        return value

    async def get_profile(self, user_id):
        return self._read("profile", self.profile)

    async def get_creator(self, user_id):
        return self._read("creator", self.creator)

    async def get_brand(self, user_id):
        return self._read("brand", self.brand)

    async def upsert_creator(self, user_id, *, tiktok_connected=False):
        self.writes.append(("upsert_creator", user_id, tiktok_connected))
        if "upsert_creator" in self.fail_writes:
            raise ConnectionError("upsert failed")
        # ON CONFLICT DO NOTHING
        if self.creator is None:
            self.creator = CreatorRecord(user_id=user_id, tiktok_connected=tiktok_connected)

    async def update_profile(self, user_id, *, onboarding_completed):
        self.writes.append(("update_profile", user_id, onboarding_completed))
        if "update_profile" in self.fail_writes:
            raise ConnectionError("update failed")
        self.profile = self.profile.model_copy(update={"onboarding_completed": onboarding_completed})


def _profile(user_id, user_type, organization_name=None, onboarding_completed=False):
    return Profile(
        user_id=user_id,
        user_type=user_type,
        organization_name=organization_name,
        onboarding_completed=onboarding_completed,
    )


def test_public_path_skips_the_store():
    store = _FakeStore()
    decision = asyncio.run(AccessRouter(store).evaluate("/campaigns/abc", uuid4()))
    assert decision.outcome == ALLOW
    assert store.reads == []


def test_no_session_redirects_without_reading():
    store = _FakeStore()
    decision = asyncio.run(AccessRouter(store).evaluate("/dashboard", None))
    assert decision.outcome == Redirect("/signin")
    assert store.reads == []


def test_new_creator_gets_a_creator_record_and_goes_to_tiktok():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "creator"))

    decision = asyncio.run(AccessRouter(store).evaluate("/dashboard", user_id))

    assert decision.outcome == Redirect("/onboarding/creator/tiktok")
    assert store.writes == [("upsert_creator", user_id, False)]
    assert store.creator == CreatorRecord(user_id=user_id, tiktok_connected=False)


def test_creator_record_is_not_recreated_on_the_next_request():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "creator"))
    router = AccessRouter(store)

    asyncio.run(router.evaluate("/dashboard", user_id))
    asyncio.run(router.evaluate("/dashboard", user_id))

    assert store.writes == [("upsert_creator", user_id, False)]


def test_completion_flag_is_written_once_and_outcome_is_stable():
    user_id = uuid4()
    store = _FakeStore(
        profile=_profile(user_id, "creator", "Clips Inc"),
        creator=CreatorRecord(user_id=user_id, tiktok_connected=True),
    )
    router = AccessRouter(store)

    first = asyncio.run(router.evaluate("/dashboard", user_id))
    second = asyncio.run(router.evaluate("/dashboard", user_id))

    assert first.outcome == ALLOW
    assert second.outcome == ALLOW
    assert store.writes == [("update_profile", user_id, True)]
    assert store.profile.onboarding_completed is True


def test_failed_completion_write_keeps_decision_and_retries_next_time():
    user_id = uuid4()
    store = _FakeStore(
        profile=_profile(user_id, "creator", "Clips Inc"),
        creator=CreatorRecord(user_id=user_id, tiktok_connected=True),
    )
    store.fail_writes.add("update_profile")
    router = AccessRouter(store)

    first = asyncio.run(router.evaluate("/dashboard", user_id))
    second = asyncio.run(router.evaluate("/dashboard", user_id))

    assert first.outcome == ALLOW
    assert second.outcome == ALLOW
    assert [w[0] for w in store.writes] == ["update_profile", "update_profile"]


def test_failed_creator_upsert_still_redirects_to_tiktok():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "creator"))
    store.fail_writes.add("upsert_creator")

    decision = asyncio.run(AccessRouter(store).evaluate("/payouts", user_id))

    assert decision.outcome == Redirect("/onboarding/creator/tiktok")


def test_profile_read_failure_redirects_to_signin():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "brand", "Acme", True))
    store.fail_reads.add("profile")

    decision = asyncio.run(AccessRouter(store).evaluate("/dashboard", user_id))

    assert decision.outcome == Redirect("/signin")


def test_brand_read_failure_is_treated_as_unverified():
    user_id = uuid4()
    store = _FakeStore(
        profile=_profile(user_id, "brand", "Acme", True),
        brand=BrandRecord(user_id=user_id, stripe_customer_id="cus_1", payment_verified=True),
    )
    store.fail_reads.add("brand")

    router = AccessRouter(store)
    assert asyncio.run(router.evaluate("/payouts", user_id)).outcome == Redirect("/onboarding/brand/payments")
    assert asyncio.run(router.evaluate("/dashboard", user_id)).outcome == ALLOW


def test_brand_reads_brand_record_only():
    user_id = uuid4()
    store = _FakeStore(
        profile=_profile(user_id, "brand", "Acme", True),
        brand=BrandRecord(user_id=user_id, stripe_customer_id="cus_1", payment_verified=True),
    )

    decision = asyncio.run(AccessRouter(store).evaluate("/campaigns/new", user_id))

    assert decision.outcome == ALLOW
    assert store.reads == ["profile", "brand"]
    assert store.writes == []


def test_brand_without_brand_record_is_sent_to_payments():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "brand", "Acme", True))

    decision = asyncio.run(AccessRouter(store).evaluate("/payouts", user_id))

    assert decision.outcome == Redirect("/onboarding/brand/payments")
    assert store.writes == []


def test_signed_in_user_on_signin_goes_to_dashboard_without_account_read():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "creator"))

    decision = asyncio.run(AccessRouter(store).evaluate("/signin", user_id))

    assert decision.outcome == Redirect("/dashboard")
    assert store.reads == ["profile"]
    assert store.writes == []


def test_unknown_user_type_reads_no_account_record():
    user_id = uuid4()
    store = _FakeStore(profile=_profile(user_id, "admin", "Ops", True))

    decision = asyncio.run(AccessRouter(store).evaluate("/dashboard", user_id))

    assert decision.outcome == Redirect("/signin")
    assert store.reads == ["profile"]
