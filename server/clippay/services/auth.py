import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import bcrypt
from jose import jwt, JWTError
from starlette.requests import HTTPConnection

from ..config import get_settings
from ..models.auth import TokenPayload, UserType


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    # Truncate to 72 bytes if needed (bcrypt limit)
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    salt = bcrypt.gensalt(rounds=10)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash (blocking; use verify_password_async in async routes)."""
    password_bytes = plain_password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hashed_bytes)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """Non-blocking bcrypt verify, run in a worker thread."""
    return await asyncio.to_thread(verify_password, plain_password, hashed_password)


def _encode(user_id: UUID, email: str, user_type: UserType, expire: datetime, token_type: str) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "email": email,
        "user_type": user_type,
        "exp": expire,
        "type": token_type,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    user_id: UUID,
    email: str,
    user_type: UserType,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token."""
    settings = get_settings()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    return _encode(user_id, email, user_type, expire, "access")


def create_refresh_token(user_id: UUID, email: str, user_type: UserType) -> str:
    """Create a JWT refresh token."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(days=settings.jwt_refresh_token_expire_days)
    return _encode(user_id, email, user_type, expire, "refresh")


def decode_token(token: str) -> Optional[TokenPayload]:
    """Decode and validate a JWT token."""
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            user_type=payload["user_type"],
            exp=payload["exp"],
            type=payload.get("type", "access"),
        )
    except (JWTError, KeyError, TypeError, ValueError):
        return None


def extract_token(conn: HTTPConnection) -> Optional[str]:
    """Pull the bearer token, falling back to the session cookie."""
    auth_header = conn.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return conn.cookies.get(get_settings().session_cookie_name) or None


def resolve_session(conn: HTTPConnection) -> Optional[UUID]:
    """
    Return the authenticated user id for a request, or None.

    Only access tokens open a session; refresh tokens are rejected here.
    """
    token = extract_token(conn)
    if not token:
        return None

    payload = decode_token(token)
    if payload is None or payload.type != "access":
        return None

    try:
        return UUID(payload.sub)
    except ValueError:
        return None
