"""Domain models for user records served by the remote users API."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, TypeVar, Union


class PayloadError(ValueError):
    """Raised when a remote payload does not describe a user record."""


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError as exc:
        raise PayloadError(f"User payload is missing the '{key}' field") from exc


def _text(data: Mapping[str, Any], key: str) -> str:
    value = _require(data, key)
    return "" if value is None else str(value)


def _identifier(data: Mapping[str, Any]) -> int:
    try:
        return int(_require(data, "id"))
    except (TypeError, ValueError) as exc:
        raise PayloadError("User payload has a non-integer 'id'") from exc


def _mapping(payload: object) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise PayloadError("User payload must be a JSON object")
    return payload


@dataclass(frozen=True)
class UserDraft:
    """An unsaved user composed in the create modal."""

    name: str = ""
    username: str = ""
    email: str = ""

    def to_payload(self) -> Dict[str, object]:
        return {"name": self.name, "username": self.username, "email": self.email}


@dataclass(frozen=True)
class UserSummary:
    """List projection of a user, also used as the edit draft."""

    id: int
    name: str
    username: str
    email: str

    @staticmethod
    def from_dict(payload: object) -> "UserSummary":
        data = _mapping(payload)
        return UserSummary(
            id=_identifier(data),
            name=_text(data, "name"),
            username=_text(data, "username"),
            email=_text(data, "email"),
        )

    def to_payload(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
        }


@dataclass(frozen=True)
class Address:
    street: str
    city: str


@dataclass(frozen=True)
class UserDetail:
    """Detail projection of a user including the embedded address."""

    id: int
    name: str
    email: str
    phone: str
    address: Address

    @staticmethod
    def from_dict(payload: object) -> "UserDetail":
        data = _mapping(payload)
        address = _mapping(_require(data, "address"))
        return UserDetail(
            id=_identifier(data),
            name=_text(data, "name"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            address=Address(street=_text(address, "street"), city=_text(address, "city")),
        )


class DraftField(str, Enum):
    """Editable fields shared by the create and edit forms."""

    NAME = "name"
    USERNAME = "username"
    EMAIL = "email"


Draft = Union[UserDraft, UserSummary]
DraftT = TypeVar("DraftT", UserDraft, UserSummary)


@dataclass(frozen=True)
class FieldUpdate:
    """A single tagged edit to one draft field."""

    field: DraftField
    value: str

    @staticmethod
    def from_form(name: str, value: str) -> "FieldUpdate":
        try:
            field = DraftField(name)
        except ValueError as exc:
            raise ValueError(f"Unknown user field '{name}'") from exc
        return FieldUpdate(field=field, value=value)

    def apply(self, draft: DraftT) -> DraftT:
        if self.field is DraftField.NAME:
            return replace(draft, name=self.value)
        if self.field is DraftField.USERNAME:
            return replace(draft, username=self.value)
        return replace(draft, email=self.value)


__all__ = [
    "Address",
    "Draft",
    "DraftField",
    "FieldUpdate",
    "PayloadError",
    "UserDetail",
    "UserDraft",
    "UserSummary",
]
