from fastapi import APIRouter, Depends, HTTPException, status

from ..access.paths import DASHBOARD_PATH
from ..access.router import AccessRouter
from ..access.store import fetch_brand, fetch_creator, fetch_profile
from ..database import get_connection
from ..dependencies import get_access_router, get_current_user
from ..models.auth import CurrentUser
from ..models.onboarding import DashboardResponse, OnboardingStatusResponse
from ..services.onboarding import can_create_campaign

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(current_user: CurrentUser = Depends(get_current_user)):
    """Account summary for the dashboard shell."""
    async with get_connection() as conn:
        profile = await fetch_profile(conn, current_user.id)
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

        result = DashboardResponse(
            user_type=profile.user_type,
            organization_name=profile.organization_name,
            onboarding_completed=profile.onboarding_completed,
        )

        if profile.user_type == "creator":
            creator = await fetch_creator(conn, current_user.id)
            result.tiktok_connected = bool(creator and creator.tiktok_connected)
        elif profile.user_type == "brand":
            brand = await fetch_brand(conn, current_user.id)
            result.payment_verified = bool(brand and brand.payment_verified)
            result.can_create_campaign = (await can_create_campaign(conn, current_user.id)).allowed

    return result


@router.get("/api/onboarding/status", response_model=OnboardingStatusResponse)
async def onboarding_status(
    current_user: CurrentUser = Depends(get_current_user),
    access_router: AccessRouter = Depends(get_access_router),
):
    """Which onboarding step, if any, stands between the user and the dashboard."""
    decision = await access_router.evaluate(DASHBOARD_PATH, current_user.id)

    async with get_connection() as conn:
        profile = await fetch_profile(conn, current_user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    return OnboardingStatusResponse(
        user_type=profile.user_type,
        organization_name=profile.organization_name,
        onboarding_completed=profile.onboarding_completed,
        next_step=decision.redirect_to,
    )
