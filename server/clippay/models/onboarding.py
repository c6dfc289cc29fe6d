from typing import Optional
from pydantic import BaseModel


class OrganizationRequest(BaseModel):
    organization_name: str


class CreatorProfileRequest(BaseModel):
    organization_name: str
    referral_code: Optional[str] = None


class PaymentSetupRequest(BaseModel):
    setup_intent_id: str
    stripe_customer_id: Optional[str] = None


class TikTokConnectionRequest(BaseModel):
    open_id: Optional[str] = None


class OnboardingStepResponse(BaseModel):
    success: bool = True
    redirect_to: str


class OnboardingStatusResponse(BaseModel):
    user_type: str
    organization_name: Optional[str]
    onboarding_completed: bool
    next_step: Optional[str] = None


class DashboardResponse(BaseModel):
    user_type: str
    organization_name: Optional[str]
    onboarding_completed: bool
    tiktok_connected: Optional[bool] = None
    payment_verified: Optional[bool] = None
    can_create_campaign: Optional[bool] = None
