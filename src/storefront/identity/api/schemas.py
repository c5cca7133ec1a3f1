"""Pydantic request/response schemas for sign-in, accounts and customers."""

from datetime import datetime

from pydantic import Field

from storefront.ordering.api.schemas import OrderResponse
from storefront.web.envelope import ApiModel


class ProviderSessionRequest(ApiModel):
    """A verified identity posted by the identity-provider integration."""

    email: str = Field(min_length=3, max_length=254)
    name: str | None = Field(default=None, max_length=255)
    image: str | None = Field(default=None, max_length=500)


class AdminLoginRequest(ApiModel):
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=255)


class UpdateProfileRequest(ApiModel):
    email: str | None = Field(default=None, max_length=254)
    current_password: str | None = Field(default=None, max_length=255)
    new_password: str | None = Field(default=None, max_length=255)


class UserResponse(ApiModel):
    id: str
    name: str
    email: str
    image: str | None = None
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, user) -> "UserResponse":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            image=user.image,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class SessionResponse(ApiModel):
    token: str
    user: UserResponse


class CustomerSummaryResponse(UserResponse):
    orders_count: int = 0
    last_order_date: datetime | None = None


class CustomerPageResponse(ApiModel):
    users: list[CustomerSummaryResponse]
    total: int
    page: int
    limit: int


class CustomerDetailResponse(UserResponse):
    orders: list[OrderResponse] = []
