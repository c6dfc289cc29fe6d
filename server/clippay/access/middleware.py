"""
Onboarding access middleware.

Runs the access router in front of every protected path:
1. Resolve the session from the bearer header or the session cookie
2. Evaluate the onboarding gate for the requested path
3. Pass the request through, or redirect it to sign-in / the next step

Browser paths get a 307 redirect. Paths under /api/ get a JSON body with
``redirect_to`` instead (401 for sign-in, 403 for an onboarding step).
"""
from __future__ import annotations

import logging

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from ..services.auth import resolve_session
from .paths import SIGNIN_PATH, is_api_path, is_protected
from .router import AccessRouter

logger = logging.getLogger(__name__)


class AccessControlMiddleware(BaseHTTPMiddleware):
    """Gate protected paths on session and onboarding state."""

    def __init__(self, app: ASGIApp, access_router: AccessRouter):
        super().__init__(app)
        self.access_router = access_router

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        # Public pages never touch the account store
        if not is_protected(path):
            return await call_next(request)

        user_id = resolve_session(request)
        decision = await self.access_router.evaluate(path, user_id)

        if decision.allowed:
            return await call_next(request)

        return self._redirect_response(path, decision.redirect_to)

    def _redirect_response(self, path: str, target: str) -> Response:
        if is_api_path(path):
            if target == SIGNIN_PATH:
                return JSONResponse(
                    {"error": "unauthorized", "redirect_to": target},
                    status_code=status.HTTP_401_UNAUTHORIZED,
                )
            return JSONResponse(
                {"error": "onboarding_incomplete", "redirect_to": target},
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return RedirectResponse(url=target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
