import uuid

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from leaderboard.client.user_management import MESSAGE_TIMEOUT, UserManagement


@pytest_asyncio.fixture
async def manager(app, clock):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        hook = UserManagement(client=client, clock=clock)
        await hook.initialize()
        yield hook


def mock_manager(handler, clock):
    client = AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test")
    return UserManagement(client=client, clock=clock)


@pytest.mark.asyncio
async def test_initialize_loads_empty_lists(manager):
    assert manager.users == []
    assert manager.leaderboard == []
    assert manager.loading is False
    assert manager.message == ""


@pytest.mark.asyncio
async def test_add_user_refreshes_lists(manager):
    assert await manager.add_user("Alice") is True
    assert manager.message == "Welcome Alice! User created successfully!"
    assert [u["name"] for u in manager.users] == ["Alice"]
    assert [row["name"] for row in manager.leaderboard] == ["Alice"]
    assert manager.loading is False


@pytest.mark.asyncio
async def test_add_user_blank_name_skips_request(clock):
    def handler(request):
        raise AssertionError("no request expected")

    hook = mock_manager(handler, clock)
    assert await hook.add_user("   ") is False
    assert hook.message == "Please enter a valid name"


@pytest.mark.asyncio
async def test_add_user_duplicate_surfaces_server_error(manager):
    await manager.add_user("Alice")
    assert await manager.add_user("Alice") is False
    assert manager.message == "A user with this name already exists"
    assert manager.loading is False
    assert len(manager.users) == 1


@pytest.mark.asyncio
async def test_claim_points(manager):
    await manager.add_user("Alice")
    user_id = manager.users[0]["_id"]

    assert await manager.claim_points(user_id) is True
    assert manager.message.startswith("🎉 Points claimed successfully! Points awarded: ")
    awarded = int(manager.message.rsplit(" ", 1)[-1])
    assert manager.users[0]["totalPoints"] == awarded
    assert manager.leaderboard[0]["totalPoints"] == awarded
    assert manager.loading is False
    assert manager.claiming_user_id is None


@pytest.mark.asyncio
async def test_claim_points_errors(manager):
    assert await manager.claim_points("bad-id") is False
    assert manager.message == "Invalid user ID format"

    assert await manager.claim_points(str(uuid.uuid4())) is False
    assert manager.message == "User not found"


@pytest.mark.asyncio
async def test_claim_points_falls_back_to_generic_message(clock):
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    hook = mock_manager(handler, clock)
    assert await hook.claim_points("abc") is False
    assert hook.message == "Failed to claim points"
    assert hook.loading is False


@pytest.mark.asyncio
async def test_non_json_success_bodies_use_fallback_messages(clock):
    def handler(request):
        return httpx.Response(200, text="<html>maintenance</html>")

    hook = mock_manager(handler, clock)
    assert await hook.add_user("Alice") is False
    assert hook.message == "Failed to add user"
    assert hook.loading is False

    assert await hook.claim_points("abc") is False
    assert hook.message == "Failed to claim points"
    assert hook.claiming_user_id is None

    await hook.fetch_users()
    assert hook.message == "Failed to load users. Please try again."
    assert hook.loading is False

    await hook.fetch_leaderboard()
    assert hook.message == "Failed to load leaderboard. Please try again."


@pytest.mark.asyncio
async def test_json_array_body_is_rejected(clock):
    hook = mock_manager(lambda request: httpx.Response(200, json=["not", "an", "object"]), clock)
    await hook.fetch_users()
    assert hook.users == []
    assert hook.message == "Failed to load users. Please try again."


@pytest.mark.asyncio
async def test_claiming_flag_is_set_while_request_in_flight(clock):
    seen = {}

    def handler(request):
        if request.method == "POST":
            seen["claiming"] = hook.is_user_claiming("u1")
            seen["other"] = hook.is_user_claiming("u2")
            return httpx.Response(200, json={"message": "Points claimed successfully!", "pointsAwarded": 3})
        if request.url.path == "/api/users":
            return httpx.Response(200, json={"users": []})
        return httpx.Response(200, json={"leaderboard": []})

    hook = mock_manager(handler, clock)
    assert await hook.claim_points("u1") is True
    assert seen == {"claiming": True, "other": False}
    assert hook.is_user_claiming("u1") is False


@pytest.mark.asyncio
async def test_fetch_failures_set_messages(clock):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    hook = mock_manager(handler, clock)
    await hook.fetch_users()
    assert hook.message == "Failed to load users. Please try again."
    assert hook.loading is False

    await hook.fetch_leaderboard()
    assert hook.message == "Failed to load leaderboard. Please try again."


@pytest.mark.asyncio
async def test_message_clears_after_timeout(clock):
    hook = mock_manager(lambda request: httpx.Response(200, json={}), clock)
    hook.message = "hello"
    clock.advance(MESSAGE_TIMEOUT - 0.1)
    assert hook.message == "hello"
    clock.advance(0.2)
    assert hook.message == ""


@pytest.mark.asyncio
async def test_replacing_message_restarts_timer(clock):
    hook = mock_manager(lambda request: httpx.Response(200, json={}), clock)
    hook.message = "first"
    clock.advance(4)
    hook.message = "second"
    clock.advance(4)
    assert hook.message == "second"
    clock.advance(1)
    assert hook.message == ""


@pytest.mark.asyncio
async def test_clear_message(clock):
    hook = mock_manager(lambda request: httpx.Response(200, json={}), clock)
    hook.message = "hello"
    hook.clear_message()
    assert hook.message == ""


@pytest.mark.asyncio
async def test_pagination_thirteen_users(clock):
    hook = mock_manager(lambda request: httpx.Response(200, json={}), clock)
    hook.users = [{"_id": str(i), "name": f"user{i}", "totalPoints": i} for i in range(13)]

    page = hook.pagination
    assert len(page.current_users) == 6
    assert page.total_pages == 3
    assert page.has_prev_page is False
    assert page.has_next_page is True

    hook.go_to_page(0)
    assert hook.current_page == 1
    hook.go_to_page(4)
    assert hook.current_page == 1

    hook.go_to_page(3)
    page = hook.pagination
    assert [u["name"] for u in page.current_users] == ["user12"]
    assert page.has_next_page is False
    assert page.has_prev_page is True

    hook.next_page()
    assert hook.current_page == 3
    hook.prev_page()
    hook.prev_page()
    hook.prev_page()
    assert hook.current_page == 1


@pytest.mark.asyncio
async def test_statistics(manager):
    await manager.add_user("Alice")
    await manager.add_user("Bob")
    await manager.claim_points(manager.users[0]["_id"])

    stats = manager.statistics
    top = manager.leaderboard[0]["totalPoints"]
    assert stats.total_users == 2
    assert stats.highest_score == top
    assert stats.average_score == int(top / 2 + 0.5)


@pytest.mark.asyncio
async def test_alice_end_to_end(manager):
    await manager.add_user("Alice")
    await manager.claim_points(manager.users[0]["_id"])
    awarded = int(manager.message.rsplit(" ", 1)[-1])

    top = manager.leaderboard[0]
    assert top["name"] == "Alice"
    assert top["rank"] == 1
    assert top["totalPoints"] == awarded
