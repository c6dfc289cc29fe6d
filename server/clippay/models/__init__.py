from .auth import (
    CurrentUser,
    RefreshTokenRequest,
    SigninRequest,
    SignupRequest,
    TokenPayload,
    TokenResponse,
    UserResponse,
    UserType,
)
from .account import BrandRecord, CampaignPermission, CreatorRecord, Profile

__all__ = [
    "CurrentUser",
    "RefreshTokenRequest",
    "SigninRequest",
    "SignupRequest",
    "TokenPayload",
    "TokenResponse",
    "UserResponse",
    "UserType",
    "BrandRecord",
    "CampaignPermission",
    "CreatorRecord",
    "Profile",
]
