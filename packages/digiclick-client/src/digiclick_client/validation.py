"""Form field checks shared by the request schemas and calling code."""

import re

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def validate_email(email: str | None) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_password(password: str | None) -> bool:
    return bool(password) and len(password) >= 6


def validate_name(name: str | None) -> bool:
    return bool(name) and len(name.strip()) >= 2


def validate_message(message: str | None) -> bool:
    return bool(message) and len(message.strip()) >= 10
