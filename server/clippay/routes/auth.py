import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..access.paths import DASHBOARD_PATH, SIGNIN_PATH
from ..access.router import AccessRouter
from ..config import get_settings
from ..database import get_connection
from ..dependencies import get_access_router, get_current_user
from ..models.auth import (
    CurrentUser,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from ..services.auth import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password_async,
)
from ..services.onboarding import OnboardingError, create_account

logger = logging.getLogger(__name__)

router = APIRouter()


async def landing_path(access_router: AccessRouter, user_id: UUID) -> str:
    """Where a freshly signed-in user should go: the dashboard or their next step."""
    decision = await access_router.evaluate(DASHBOARD_PATH, user_id)
    return decision.redirect_to or DASHBOARD_PATH


def _set_session_cookie(response: Response, access_token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        access_token,
        max_age=settings.jwt_access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


async def _issue_tokens(
    response: Response,
    access_router: AccessRouter,
    user,
    user_type: str,
) -> TokenResponse:
    settings = get_settings()
    access_token = create_access_token(user["id"], user["email"], user_type)
    refresh_token = create_refresh_token(user["id"], user["email"], user_type)
    _set_session_cookie(response, access_token)

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        redirect_to=await landing_path(access_router, user["id"]),
        user=UserResponse(
            id=user["id"],
            email=user["email"],
            user_type=user_type,
            is_active=user["is_active"],
            created_at=user["created_at"],
            last_login=user["last_login"],
        ),
    )


@router.post("/signup", response_model=TokenResponse)
async def signup(
    request: SignupRequest,
    response: Response,
    access_router: AccessRouter = Depends(get_access_router),
):
    """Create a creator or brand account and open a session."""
    async with get_connection() as conn:
        try:
            user = await create_account(
                conn,
                email=request.email,
                password=request.password,
                user_type=request.user_type,
                full_name=request.full_name,
            )
        except OnboardingError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return await _issue_tokens(response, access_router, user, request.user_type)


@router.post("/signin", response_model=TokenResponse)
async def signin(
    request: SigninRequest,
    response: Response,
    access_router: AccessRouter = Depends(get_access_router),
):
    """Authenticate user, set the session cookie and return the landing path."""
    async with get_connection() as conn:
        user = await conn.fetchrow(
            """SELECT u.id, u.email, u.password_hash, u.is_active, u.created_at, u.last_login,
                      p.user_type
               FROM users u
               LEFT JOIN profiles p ON p.user_id = u.id
               WHERE u.email = $1""",
            request.email
        )

        if not user or not await verify_password_async(request.password, user["password_hash"]):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not user["is_active"]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled"
            )

        if not user["user_type"]:
            # Signup never finished; there is nothing to sign in to.
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Account setup is incomplete"
            )

        await conn.execute(
            "UPDATE users SET last_login = NOW() WHERE id = $1",
            user["id"]
        )

    logger.info("[Auth] %s signed in", user["id"])
    return await _issue_tokens(response, access_router, user, user["user_type"])


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    response: Response,
    access_router: AccessRouter = Depends(get_access_router),
):
    """Refresh access token using refresh token."""
    payload = decode_token(request.refresh_token)

    if payload is None or payload.type != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    async with get_connection() as conn:
        user = await conn.fetchrow(
            """SELECT u.id, u.email, u.is_active, u.created_at, u.last_login, p.user_type
               FROM users u
               LEFT JOIN profiles p ON p.user_id = u.id
               WHERE u.id = $1""",
            UUID(payload.sub)
        )

        if not user or not user["is_active"] or not user["user_type"]:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found or inactive"
            )

    return await _issue_tokens(response, access_router, user, user["user_type"])


@router.post("/signout")
async def signout(response: Response):
    """Clear the session cookie."""
    response.delete_cookie(get_settings().session_cookie_name, path="/")
    return {"success": True, "redirect_to": SIGNIN_PATH}


@router.get("/me", response_model=CurrentUser)
async def me(current_user: CurrentUser = Depends(get_current_user)):
    return current_user
