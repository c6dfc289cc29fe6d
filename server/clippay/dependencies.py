"""Core authentication and authorization dependencies."""
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status

from .database import get_connection


async def get_current_user(request: Request):
    """Dependency to get the current authenticated user."""
    from .services.auth import decode_token, extract_token
    from .models.auth import CurrentUser

    token = extract_token(request)
    payload = decode_token(token) if token else None

    if payload is None or payload.type != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = UUID(payload.sub)

    async with get_connection() as conn:
        user_row = await conn.fetchrow(
            """SELECT u.id, u.email, u.is_active, p.user_type
               FROM users u
               LEFT JOIN profiles p ON p.user_id = u.id
               WHERE u.id = $1""",
            user_id
        )

        if not user_row or not user_row["is_active"] or not user_row["user_type"]:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found or inactive"
            )

        return CurrentUser(
            id=user_row["id"],
            email=user_row["email"],
            user_type=user_row["user_type"],
        )


def require_user_types(*user_types):
    """Dependency factory for account-type access control."""
    async def type_checker(current_user=Depends(get_current_user)):
        if current_user.user_type not in user_types:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required account types: {', '.join(user_types)}"
            )
        return current_user
    return type_checker


require_creator = require_user_types("creator")
require_brand = require_user_types("brand")


def get_access_router(request: Request):
    """The access router the app was built with."""
    return request.app.state.access_router
