"""Route classification for the access router."""

import re

SIGNIN_PATH = "/signin"
SIGNUP_PATH = "/signup"
DASHBOARD_PATH = "/dashboard"

CREATOR_TIKTOK_STEP = "/onboarding/creator/tiktok"
CREATOR_PROFILE_STEP = "/onboarding/creator/profile"
BRAND_PROFILE_STEP = "/onboarding/brand/profile"
BRAND_PAYMENTS_STEP = "/onboarding/brand/payments"

AUTH_PAGES: tuple[str, ...] = (SIGNIN_PATH, SIGNUP_PATH)

PAYMENT_REQUIRED_PREFIXES: tuple[str, ...] = (
    "/payouts",
    "/campaigns/new",
    "/api/payouts",
)

PROTECTED_PREFIXES: tuple[str, ...] = (
    DASHBOARD_PATH,
    "/onboarding",
) + PAYMENT_REQUIRED_PREFIXES + AUTH_PAGES

REDIRECT_TARGETS: tuple[str, ...] = (
    SIGNIN_PATH,
    CREATOR_TIKTOK_STEP,
    CREATOR_PROFILE_STEP,
    BRAND_PROFILE_STEP,
    BRAND_PAYMENTS_STEP,
    DASHBOARD_PATH,
)

_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Strip query/fragment, collapse repeated slashes and drop a trailing slash."""
    # Not urlsplit: a leading "//" would be read as a network location.
    path = (path or "").split("?", 1)[0].split("#", 1)[0]
    path = _REPEATED_SLASHES.sub("/", "/" + path)
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def matches_prefix(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def _matches_any(path: str, prefixes: tuple[str, ...]) -> bool:
    normalized = normalize_path(path)
    return any(matches_prefix(normalized, prefix) for prefix in prefixes)


def is_protected(path: str) -> bool:
    return _matches_any(path, PROTECTED_PREFIXES)


def is_payment_required(path: str) -> bool:
    return _matches_any(path, PAYMENT_REQUIRED_PREFIXES)


def is_auth_page(path: str) -> bool:
    return _matches_any(path, AUTH_PAGES)


def is_api_path(path: str) -> bool:
    return matches_prefix(normalize_path(path), "/api")
