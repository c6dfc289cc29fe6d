"""Onboarding step submissions for brands and creators."""

from fastapi import APIRouter, Depends, HTTPException, status

from ..access.paths import BRAND_PAYMENTS_STEP
from ..access.router import AccessRouter
from ..database import get_connection
from ..dependencies import get_access_router, require_brand, require_creator
from ..models.auth import CurrentUser
from ..models.onboarding import (
    CreatorProfileRequest,
    OnboardingStepResponse,
    OrganizationRequest,
    PaymentSetupRequest,
    TikTokConnectionRequest,
)
from ..services import onboarding as onboarding_service
from ..services.onboarding import OnboardingError
from .auth import landing_path

router = APIRouter()


def _bad_request(error: OnboardingError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


# ===========================================
# Brand
# ===========================================

@router.post("/brand/profile", response_model=OnboardingStepResponse)
async def submit_brand_profile(
    request: OrganizationRequest,
    current_user: CurrentUser = Depends(require_brand),
):
    async with get_connection() as conn:
        try:
            await onboarding_service.update_brand_profile(
                conn, current_user.id, request.organization_name
            )
        except OnboardingError as e:
            raise _bad_request(e)

    # Payment setup is the next screen even though the gate does not force it.
    return OnboardingStepResponse(redirect_to=BRAND_PAYMENTS_STEP)


@router.post("/brand/payments", response_model=OnboardingStepResponse)
async def submit_brand_payment(
    request: PaymentSetupRequest,
    current_user: CurrentUser = Depends(require_brand),
    access_router: AccessRouter = Depends(get_access_router),
):
    async with get_connection() as conn:
        try:
            await onboarding_service.complete_onboarding_with_payment(
                conn,
                current_user.id,
                setup_intent_id=request.setup_intent_id,
                stripe_customer_id=request.stripe_customer_id,
            )
        except OnboardingError as e:
            raise _bad_request(e)

    return OnboardingStepResponse(redirect_to=await landing_path(access_router, current_user.id))


@router.post("/brand/payments/skip", response_model=OnboardingStepResponse)
async def skip_brand_payment(
    current_user: CurrentUser = Depends(require_brand),
    access_router: AccessRouter = Depends(get_access_router),
):
    async with get_connection() as conn:
        try:
            await onboarding_service.skip_payment_setup(conn, current_user.id)
        except OnboardingError as e:
            raise _bad_request(e)

    return OnboardingStepResponse(redirect_to=await landing_path(access_router, current_user.id))


# ===========================================
# Creator
# ===========================================

@router.post("/creator/tiktok", response_model=OnboardingStepResponse)
async def connect_tiktok(
    request: TikTokConnectionRequest,
    current_user: CurrentUser = Depends(require_creator),
    access_router: AccessRouter = Depends(get_access_router),
):
    """Called once the TikTok OAuth exchange has succeeded for this creator."""
    async with get_connection() as conn:
        try:
            await onboarding_service.record_tiktok_connection(
                conn, current_user.id, open_id=request.open_id
            )
        except OnboardingError as e:
            raise _bad_request(e)

    return OnboardingStepResponse(redirect_to=await landing_path(access_router, current_user.id))


@router.post("/creator/profile", response_model=OnboardingStepResponse)
async def submit_creator_profile(
    request: CreatorProfileRequest,
    current_user: CurrentUser = Depends(require_creator),
    access_router: AccessRouter = Depends(get_access_router),
):
    async with get_connection() as conn:
        try:
            await onboarding_service.update_creator_profile(
                conn,
                current_user.id,
                request.organization_name,
                referral_code=request.referral_code,
            )
        except OnboardingError as e:
            raise _bad_request(e)

    return OnboardingStepResponse(redirect_to=await landing_path(access_router, current_user.id))
