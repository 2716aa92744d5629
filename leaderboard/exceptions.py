"""
Domain exceptions for the leaderboard service.

Services raise these for rule violations; the routers translate them into
HTTP status codes (400 / 404 / 409). Anything that is not a
``LeaderboardError`` is treated as an internal failure.
"""

from typing import Optional


class LeaderboardError(Exception):
    """Base exception for all leaderboard domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(LeaderboardError):
    """Malformed or missing input, rejected before touching the store."""


class InvalidIdentifierError(ValidationError):
    """A player identifier that is not in the store's identifier format."""

    def __init__(self, value: Optional[str] = None):
        super().__init__("Invalid user ID format")
        self.value = value


class DuplicateNameError(LeaderboardError):
    """A player with the same name already exists."""

    def __init__(self, name: str):
        super().__init__("A user with this name already exists")
        self.name = name


class NotFoundError(LeaderboardError):
    """Referenced record is absent."""


class PlayerNotFoundError(NotFoundError):
    def __init__(self, player_id: str):
        super().__init__("User not found")
        self.player_id = player_id
