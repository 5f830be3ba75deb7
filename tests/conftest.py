from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional, Set

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from useradmin.client import UsersAPIClient


API_BASE_URL = "https://users.example.com"


def summary_payload(user_id: int, name: str, username: str, email: str) -> Dict[str, object]:
    return {"id": user_id, "name": name, "username": username, "email": email}


def detail_payload(user_id: int, name: str = "Ann Lee") -> Dict[str, object]:
    return {
        "id": user_id,
        "name": name,
        "username": "ignored-by-detail",
        "email": "ann@x.com",
        "phone": "555-0100",
        "address": {"street": "Kulas Light", "city": "Gwenborough", "zipcode": "92998"},
    }


class FakeUsersAPI:
    """In-memory stand-in for the remote ``/users`` API."""

    def __init__(self, users: Optional[List[Dict[str, object]]] = None, *, next_id: int = 11) -> None:
        self.users: List[Dict[str, object]] = [dict(user) for user in users or []]
        self.details: Dict[int, Dict[str, object]] = {}
        self.next_id = next_id
        self.failing: Set[str] = set()
        self.offline = False
        self.requests: List[str] = []
        self.bodies: List[object] = []

    def fail(self, method: str, path: str) -> None:
        self.failing.add(f"{method} {path}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        key = f"{request.method} {request.url.path}"
        self.requests.append(key)
        body = json.loads(request.content) if request.content else None
        self.bodies.append(body)

        if self.offline:
            raise httpx.ConnectError("network unreachable", request=request)
        if key in self.failing:
            return httpx.Response(500, json={"error": "Internal failure"})

        parts = [part for part in request.url.path.split("/") if part]
        if parts == ["users"]:
            if request.method == "GET":
                return httpx.Response(200, json=self.users)
            if request.method == "POST":
                created = {"id": self.next_id, **body}
                self.next_id += 1
                self.users.append(created)
                return httpx.Response(201, json=created)

        if len(parts) == 2 and parts[0] == "users":
            try:
                user_id = int(parts[1])
            except ValueError:
                return httpx.Response(404, json={})
            if request.method == "GET":
                detail = self.details.get(user_id)
                if detail is None:
                    return httpx.Response(404, json={})
                return httpx.Response(200, json=detail)
            if request.method == "PUT":
                return httpx.Response(200, json=body)
            if request.method == "DELETE":
                self.users = [user for user in self.users if user["id"] != user_id]
                return httpx.Response(200, json={})

        return httpx.Response(405, json={"message": "Method not allowed"})

    def client(self) -> UsersAPIClient:
        return UsersAPIClient(API_BASE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_api() -> FakeUsersAPI:
    return FakeUsersAPI(
        [
            summary_payload(1, "Ann Lee", "ann1", "ann@x.com"),
            summary_payload(2, "Bob Stone", "bobs", "bob@x.com"),
            summary_payload(3, "Cara Diaz", "carad", "cara@x.com"),
        ]
    )
