"""
Client-side state for the leaderboard UI.

``UserManagement`` wraps the HTTP API with the state a front end renders:
the user list, the ranked leaderboard, a busy flag, a transient status
message and the current page of the user grid.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from .api import API_BASE_URL
from .pagination import USERS_PER_PAGE, Page, Statistics, compute_statistics, is_valid_page, paginate, total_pages

logger = logging.getLogger(__name__)

MESSAGE_TIMEOUT = 5.0


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    """Decode a response body that must be a JSON object.

    Raises:
        ValueError: If the body is not JSON or not an object
    """
    body = response.json()
    if not isinstance(body, dict):
        raise ValueError(f"Expected a JSON object, got {type(body).__name__}")
    return body


def _error_text(error: Exception, fallback: str) -> str:
    """Server-provided ``error`` text for a failed call, else ``fallback``."""
    if not isinstance(error, httpx.HTTPStatusError):
        return fallback
    try:
        body = error.response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


class UserManagement:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        users_per_page: int = USERS_PER_PAGE,
        message_timeout: float = MESSAGE_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url)
        self._owns_client = client is None
        self.users_per_page = users_per_page
        self.message_timeout = message_timeout
        self._clock = clock

        self.users: List[Dict[str, Any]] = []
        self.leaderboard: List[Dict[str, Any]] = []
        self.loading = False
        self.current_page = 1
        self.claiming_user_id: Optional[str] = None
        self._message = ""
        self._message_set_at = 0.0

    async def __aenter__(self) -> "UserManagement":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # Status message

    @property
    def message(self) -> str:
        if self._message and self._clock() - self._message_set_at >= self.message_timeout:
            self._message = ""
        return self._message

    @message.setter
    def message(self, text: str) -> None:
        self._message = text
        self._message_set_at = self._clock()

    def clear_message(self) -> None:
        self._message = ""

    # Data loading

    async def fetch_users(self) -> None:
        self.loading = True
        try:
            response = await self._client.get("/api/users")
            response.raise_for_status()
            self.users = _json_object(response).get("users") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching users: %s", e)
            self.message = "Failed to load users. Please try again."
        finally:
            self.loading = False

    async def fetch_leaderboard(self) -> None:
        try:
            response = await self._client.get("/api/leaderboard")
            response.raise_for_status()
            self.leaderboard = _json_object(response).get("leaderboard") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching leaderboard: %s", e)
            self.message = "Failed to load leaderboard. Please try again."

    async def refresh_data(self) -> None:
        await asyncio.gather(self.fetch_users(), self.fetch_leaderboard())

    async def initialize(self) -> None:
        await self.refresh_data()

    # Actions

    async def add_user(self, user_name: str) -> bool:
        """Register ``user_name``; returns whether the server accepted it."""
        if not user_name or not user_name.strip():
            self.message = "Please enter a valid name"
            return False

        self.loading = True
        try:
            response = await self._client.post("/api/users", json={"name": user_name.strip()})
            response.raise_for_status()
            body = _json_object(response)
            self.message = f"Welcome {user_name}! {body.get('message', '')}"
            await self.refresh_data()
            return True
        except (httpx.HTTPError, ValueError) as e:
            self.message = _error_text(e, "Failed to add user")
            return False
        finally:
            self.loading = False

    async def claim_points(self, user_id: str) -> bool:
        """Claim random points for ``user_id``; returns whether it succeeded."""
        self.loading = True
        self.claiming_user_id = user_id
        try:
            response = await self._client.post(f"/api/users/{user_id}/claim")
            response.raise_for_status()
            data = _json_object(response)
            self.message = f"🎉 {data.get('message', '')} Points awarded: {data.get('pointsAwarded')}"
            await self.refresh_data()
            return True
        except (httpx.HTTPError, ValueError) as e:
            self.message = _error_text(e, "Failed to claim points")
            return False
        finally:
            self.loading = False
            self.claiming_user_id = None

    def is_user_claiming(self, user_id: str) -> bool:
        return self.loading and self.claiming_user_id == user_id

    # Pagination

    @property
    def pagination(self) -> Page:
        return paginate(self.users, self.current_page, self.users_per_page)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.users), self.users_per_page)

    def next_page(self) -> None:
        if self.current_page < self.total_pages:
            self.current_page += 1

    def prev_page(self) -> None:
        if self.current_page > 1:
            self.current_page -= 1

    def go_to_page(self, page: int) -> None:
        if is_valid_page(page, self.total_pages):
            self.current_page = page

    @property
    def statistics(self) -> Statistics:
        return compute_statistics(self.users, self.leaderboard)
