"""Form validation shared by the create and edit modals."""

from __future__ import annotations

import re

from .models import Draft

NAME_MIN_LENGTH = 3
USERNAME_MIN_LENGTH = 3

NAME_ERROR = "Name is required and should be at least 3 characters"
EMAIL_ERROR = "A valid email is required"
USERNAME_ERROR = "Username is required and should be at least 3 characters"

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def is_valid_email(value: str) -> bool:
    return bool(value) and _EMAIL_PATTERN.search(value) is not None


def validate_form(draft: Draft) -> str:
    """Return the first failing rule's message, or ``""`` when the draft is valid.

    Rules are checked in a fixed order: name, email, then username.
    """

    if not draft.name or len(draft.name) < NAME_MIN_LENGTH:
        return NAME_ERROR
    if not is_valid_email(draft.email):
        return EMAIL_ERROR
    if not draft.username or len(draft.username) < USERNAME_MIN_LENGTH:
        return USERNAME_ERROR
    return ""


__all__ = [
    "EMAIL_ERROR",
    "NAME_ERROR",
    "USERNAME_ERROR",
    "is_valid_email",
    "validate_form",
]
