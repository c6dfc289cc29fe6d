"""Account records read by the access router and the onboarding actions."""
from typing import Any, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel


class Profile(BaseModel):
    user_id: UUID
    # Left as a plain string: rows written outside this service may carry
    # a type the router does not know, and those must fail safe to sign-in.
    user_type: str
    organization_name: Optional[str] = None
    onboarding_completed: bool = False

    @property
    def has_organization(self) -> bool:
        return bool(self.organization_name and self.organization_name.strip())

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Profile":
        return cls(
            user_id=row["user_id"],
            user_type=row["user_type"],
            organization_name=row["organization_name"],
            onboarding_completed=bool(row["onboarding_completed"]),
        )


class CreatorRecord(BaseModel):
    user_id: UUID
    tiktok_connected: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CreatorRecord":
        return cls(user_id=row["user_id"], tiktok_connected=bool(row["tiktok_connected"]))


class BrandRecord(BaseModel):
    user_id: UUID
    stripe_customer_id: Optional[str] = None
    payment_verified: bool = False

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BrandRecord":
        return cls(
            user_id=row["user_id"],
            stripe_customer_id=row["stripe_customer_id"],
            payment_verified=bool(row["payment_verified"]),
        )


class CampaignPermission(BaseModel):
    allowed: bool
    reason: Optional[str] = None
