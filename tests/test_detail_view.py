import asyncio

import httpx
import pytest

from conftest import API_BASE_URL, detail_payload
from useradmin.client import UsersAPIClient
from useradmin.views import UserDetailView


@pytest.mark.anyio
async def test_load_stores_record(fake_api):
    fake_api.details[1] = detail_payload(1)
    view = UserDetailView(fake_api.client())

    user = await view.load("1")

    assert user is view.user
    assert view.user.name == "Ann Lee"
    assert view.user_id == "1"


@pytest.mark.anyio
async def test_failed_fetch_leaves_record_empty(fake_api):
    fake_api.fail("GET", "/users/42")
    view = UserDetailView(fake_api.client())

    assert await view.load("42") is None
    assert view.user is None


@pytest.mark.anyio
async def test_identifier_change_resets_previous_record(fake_api):
    fake_api.details[1] = detail_payload(1)
    view = UserDetailView(fake_api.client())
    await view.load("1")

    fake_api.offline = True
    await view.load("2")

    assert view.user is None
    assert view.user_id == "2"


@pytest.mark.anyio
async def test_newer_identifier_cancels_in_flight_fetch():
    first_started = asyncio.Event()
    release_first = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/users/1":
            first_started.set()
            await release_first.wait()
            return httpx.Response(200, json=detail_payload(1, name="Stale"))
        return httpx.Response(200, json=detail_payload(2, name="Fresh"))

    client = UsersAPIClient(API_BASE_URL, transport=httpx.MockTransport(handler))
    view = UserDetailView(client)

    first = asyncio.create_task(view.load("1"))
    await first_started.wait()
    assert view.fetch_pending is True

    second = await view.load("2")
    release_first.set()

    assert await first is None
    assert second.name == "Fresh"
    assert view.user.name == "Fresh"
    assert view.fetch_pending is False
    await client.aclose()
