from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

NAME_REQUIRED_MESSAGE = "Name is required and must be a non-empty string"


class WireModel(BaseModel):
    """Base for payloads exchanged with the front end (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateUserRequest(BaseModel):
    name: str

    @model_validator(mode="before")
    @classmethod
    def check_name(cls, data: Any) -> Any:
        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name.strip():
            raise PydanticCustomError("invalid_name", NAME_REQUIRED_MESSAGE)
        return {**data, "name": name.strip()}


class PlayerSummary(WireModel):
    id: str = Field(alias="_id")
    name: str
    total_points: int


class PlayerOut(PlayerSummary):
    created_at: datetime


class RankedPlayer(PlayerOut):
    rank: int


class ClaimEventOut(WireModel):
    id: int = Field(alias="_id")
    user_id: str
    name: str
    points_claimed: int
    timestamp: datetime


class ClaimOutcome(WireModel):
    points_awarded: int
    user: PlayerSummary


class ClaimHistory(WireModel):
    user: PlayerSummary
    claim_history: List[ClaimEventOut]


class CreateUserResponse(WireModel):
    message: str
    user: PlayerOut


class UserListResponse(WireModel):
    message: str
    count: int
    users: List[PlayerOut]


class ClaimResponse(ClaimOutcome):
    message: str


class LeaderboardResponse(WireModel):
    message: str
    total_users: int
    leaderboard: List[RankedPlayer]


class ClaimHistoryResponse(ClaimHistory):
    message: str
    total_claims: int


class ErrorResponse(BaseModel):
    error: str


class LeaderboardStatistics(BaseModel):
    total_players: int
    total_claims: int
    highest_score: int
    top_player: str = ""
    lowest_score: int
    average_score: int
    recent_claims: List[ClaimEventOut] = []
