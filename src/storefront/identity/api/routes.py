"""FastAPI endpoints for sessions, the signed-in account and the customer back office."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.api.schemas import (
    AdminLoginRequest,
    CustomerDetailResponse,
    CustomerPageResponse,
    CustomerSummaryResponse,
    ProviderSessionRequest,
    SessionResponse,
    UpdateProfileRequest,
    UserResponse,
)
from storefront.identity.security import issue_session_token
from storefront.identity.user.authentication import SignInWithProvider, UpdateAdminProfile, authenticate_admin
from storefront.identity.user.user import Role, User
from storefront.ordering.api.schemas import OrderResponse
from storefront.ordering.order.order import Order
from storefront.web.envelope import Envelope
from storefront.web.security import AdminUser, CurrentUser, require_identity_provider

auth_router = APIRouter(prefix="/auth", tags=["auth"])
admin_user_router = APIRouter(prefix="/admin", tags=["admin"])

CUSTOMER_DETAIL_ORDERS = 50


def _load_user(user_id) -> User:
    user = current_domain.repository_for(User).find(user_id)
    if user is None:
        raise ObjectNotFoundError("User not found")
    return user


# --- Sessions ---


@auth_router.post(
    "/session",
    response_model=Envelope[SessionResponse],
    dependencies=[Depends(require_identity_provider)],
)
async def provider_session(body: ProviderSessionRequest):
    """Exchange a provider-verified identity for a session token.

    These sessions always carry the CUSTOMER role; admins sign in with credentials.
    """
    user_id = current_domain.process(
        SignInWithProvider(email=body.email, name=body.name, image=body.image),
        asynchronous=False,
    )
    user = _load_user(user_id)
    token = issue_session_token(user.id, Role.CUSTOMER.value)
    return Envelope(data=SessionResponse(token=token, user=UserResponse.from_domain(user)))


@auth_router.post("/admin/login", response_model=Envelope[SessionResponse])
async def admin_login(body: AdminLoginRequest):
    user = authenticate_admin(body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = issue_session_token(user.id, Role.ADMIN.value)
    return Envelope(data=SessionResponse(token=token, user=UserResponse.from_domain(user)))


@auth_router.get("/me", response_model=Envelope[UserResponse])
async def me(principal: CurrentUser):
    return Envelope(data=UserResponse.from_domain(_load_user(principal.user_id)))


# --- Back office ---


@admin_user_router.get("/users", response_model=Envelope[CustomerPageResponse])
async def admin_list_customers(
    admin: AdminUser,
    q: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=50)] = 20,
):
    customers, total = current_domain.repository_for(User).customers_page(q=q, page=page, limit=limit)

    orders = current_domain.repository_for(Order)
    rows = []
    for user in customers:
        orders_count, last_order_date = orders.summary_for_user(user.id)
        rows.append(
            CustomerSummaryResponse(
                **UserResponse.from_domain(user).model_dump(),
                orders_count=orders_count,
                last_order_date=last_order_date,
            )
        )
    return Envelope(data=CustomerPageResponse(users=rows, total=total, page=page, limit=limit))


@admin_user_router.get("/users/{user_id}", response_model=Envelope[CustomerDetailResponse])
async def admin_get_customer(user_id: str, admin: AdminUser):
    user = _load_user(user_id)
    orders = current_domain.repository_for(Order).for_user(user.id, limit=CUSTOMER_DETAIL_ORDERS)
    return Envelope(
        data=CustomerDetailResponse(
            **UserResponse.from_domain(user).model_dump(),
            orders=[OrderResponse.from_domain(o) for o in orders],
        )
    )


@admin_user_router.patch("/profile", response_model=Envelope[UserResponse])
async def admin_update_profile(body: UpdateProfileRequest, admin: AdminUser):
    command = UpdateAdminProfile(
        user_id=admin.user_id,
        current_password=body.current_password,
        new_email=body.email,
        new_password=body.new_password,
    )
    current_domain.process(command, asynchronous=False)
    return Envelope(data=UserResponse.from_domain(_load_user(admin.user_id)))
