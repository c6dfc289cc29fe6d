"""Onboarding and access control."""

from .decision import ALLOW, Allow, Decision, Effect, Redirect, UserType, decide
from .middleware import AccessControlMiddleware
from .router import AccessRouter
from .store import AccountStore, PostgresAccountStore

__all__ = [
    "ALLOW",
    "Allow",
    "Decision",
    "Effect",
    "Redirect",
    "UserType",
    "decide",
    "AccessControlMiddleware",
    "AccessRouter",
    "AccountStore",
    "PostgresAccountStore",
]
