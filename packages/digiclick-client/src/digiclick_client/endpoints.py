"""Typed helpers for the DigiClick backend endpoints."""

from pydantic import ValidationError

from digiclick_client.client import ResilientFetchClient
from digiclick_client.messages import get_error_message
from digiclick_client.schemas.requests import (
    ContactForm,
    DemoRequest,
    LoginRequest,
    NewsletterSubscription,
    SignupRequest,
)
from digiclick_client.schemas.result import ApiFailure, ApiResult


def bearer(token: str) -> dict[str, str]:
    """Return an Authorization header dict for a Bearer token."""
    return {"Authorization": f"Bearer {token}"}


def _invalid(exc: ValidationError) -> ApiFailure:
    """Client-side input rejection, shaped like the backend's 400 response."""
    messages = [err["msg"].removeprefix("Value error, ") for err in exc.errors()]
    return ApiFailure(error=get_error_message(messages), status=400)


class DigiClickApi:
    """Thin, typed surface over a shared ResilientFetchClient."""

    def __init__(self, client: ResilientFetchClient) -> None:
        self.client = client

    # Public forms

    async def submit_contact_form(self, form: ContactForm) -> ApiResult:
        return await self.client.post("/api/contact", json=form.model_dump(exclude_none=True))

    async def schedule_demo(self, demo: DemoRequest) -> ApiResult:
        return await self.client.post(
            "/api/demo",
            json=demo.model_dump(mode="json", exclude_none=True, by_alias=True),
        )

    async def subscribe_newsletter(self, subscription: NewsletterSubscription) -> ApiResult:
        return await self.client.post(
            "/api/newsletter/subscribe",
            json=subscription.model_dump(exclude_none=True),
        )

    # Read-only content

    async def get_services(self) -> ApiResult:
        return await self.client.get("/api/services", cache=True)

    async def get_portfolio(self) -> ApiResult:
        return await self.client.get("/api/portfolio", cache=True)

    async def get_health_status(self) -> ApiResult:
        # Health checks must see the live backend and never be throttled locally
        return await self.client.get("/api/health", skip_rate_limit=True)

    # Authentication

    async def login(self, email: str, password: str) -> ApiResult:
        try:
            body = LoginRequest(email=email, password=password)
        except ValidationError as exc:
            return _invalid(exc)
        return await self.client.post("/api/auth/login", json=body.model_dump())

    async def register(self, name: str, email: str, password: str) -> ApiResult:
        try:
            body = SignupRequest(name=name, email=email, password=password)
        except ValidationError as exc:
            return _invalid(exc)
        return await self.client.post("/api/auth/signup", json=body.model_dump())

    # Authenticated

    async def get_user_demos(self, token: str) -> ApiResult:
        return await self.client.get("/api/user/demos", headers=bearer(token))

    async def get_admin_contacts(self, token: str) -> ApiResult:
        return await self.client.get("/api/admin/contacts", headers=bearer(token))

    async def get_admin_demos(self, token: str) -> ApiResult:
        return await self.client.get("/api/admin/demos", headers=bearer(token))
