"""Request bodies for the DigiClick backend endpoints."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from digiclick_client.validation import (
    validate_email,
    validate_message,
    validate_name,
    validate_password,
)

DemoTimeSlot = Literal[
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "12:00", "12:30", "13:00", "13:30", "14:00", "14:30",
    "15:00", "15:30", "16:00", "16:30", "17:00", "17:30",
]

DemoService = Literal[
    "AI Web Design",
    "Automation Solutions",
    "AI Consulting",
    "Custom Development",
    "Integration Services",
    "Other",
]


class _EmailBody(BaseModel):
    email: str = Field(max_length=254)

    model_config = {"extra": "forbid"}

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not validate_email(v):
            raise ValueError("Please provide a valid email")
        return v


class ContactForm(_EmailBody):
    """Body for POST /api/contact."""

    name: str = Field(max_length=100)
    service: str
    message: str = Field(max_length=2000)
    phone: str | None = Field(default=None, max_length=30)
    company: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not validate_name(v):
            raise ValueError("Name must be at least 2 characters")
        return v.strip()

    @field_validator("message")
    @classmethod
    def check_message(cls, v: str) -> str:
        if not validate_message(v):
            raise ValueError("Message must be at least 10 characters")
        return v.strip()


class DemoRequest(_EmailBody):
    """Body for POST /api/demo.

    The backend splits ``preferredTime`` on ":" and rejects bodies without a
    future ``preferredDate``, a slot from ``DEMO_TIME_SLOTS``, at least one
    ``serviceInterest`` and a ``decisionMaker`` answer.
    """

    name: str = Field(max_length=100)
    preferred_date: date = Field(serialization_alias="preferredDate")
    preferred_time: DemoTimeSlot = Field(serialization_alias="preferredTime")
    timezone: str = Field(default="UTC", min_length=1)
    service_interest: list[DemoService] = Field(min_length=1, serialization_alias="serviceInterest")
    current_challenges: str = Field(
        min_length=10, max_length=1000, serialization_alias="currentChallenges"
    )
    decision_maker: Literal["yes", "no", "partial"] = Field(serialization_alias="decisionMaker")
    duration: Literal[30, 45, 60] = 30
    meeting_type: Literal["video-call", "phone-call", "in-person"] = Field(
        default="video-call", serialization_alias="meetingType"
    )
    company: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=30)
    job_title: str | None = Field(default=None, max_length=100, serialization_alias="jobTitle")
    goals: str | None = Field(default=None, max_length=1000)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not validate_name(v):
            raise ValueError("Name must be at least 2 characters")
        return v.strip()

    @field_validator("preferred_date")
    @classmethod
    def check_future(cls, v: date) -> date:
        if v <= date.today():
            raise ValueError("Preferred date must be in the future")
        return v

    @field_validator("current_challenges")
    @classmethod
    def strip_challenges(cls, v: str) -> str:
        return v.strip()


class NewsletterSubscription(_EmailBody):
    """Body for POST /api/newsletter/subscribe."""

    name: str | None = Field(default=None, max_length=100)
    interests: list[str] = Field(default_factory=list)


class LoginRequest(_EmailBody):
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not validate_password(v):
            raise ValueError("Password must be at least 6 characters")
        return v


class SignupRequest(LoginRequest):
    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        if not validate_name(v):
            raise ValueError("Name must be at least 2 characters")
        return v.strip()
