import logging

from fastapi import APIRouter, Depends, HTTPException, status

from leaderboard.config import Settings
from leaderboard.dependencies import get_ranking_service, get_settings, internal_error
from leaderboard.exceptions import (
    DuplicateNameError,
    InvalidIdentifierError,
    PlayerNotFoundError,
    ValidationError,
)
from leaderboard.schemas import (
    ClaimHistoryResponse,
    ClaimResponse,
    CreateUserRequest,
    CreateUserResponse,
    ErrorResponse,
    UserListResponse,
)
from leaderboard.services.ranking_service import RankingService, normalize_player_id

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)


def _validated_user_id(user_id: str) -> str:
    try:
        return normalize_player_id(user_id)
    except InvalidIdentifierError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post(
    "",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def add_user(
    request: CreateUserRequest,
    service: RankingService = Depends(get_ranking_service),
    settings: Settings = Depends(get_settings),
):
    """
    Add a new user to the competition.

    - **name**: Display name, unique after trimming
    """
    try:
        player = await service.create_player(request.name)
    except DuplicateNameError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error("Error adding user: %s", e, exc_info=True)
        raise internal_error("Failed to create user", e, settings)
    return CreateUserResponse(message="User created successfully!", user=player)


@router.get("", response_model=UserListResponse)
async def get_all_users(
    service: RankingService = Depends(get_ranking_service),
    settings: Settings = Depends(get_settings),
):
    """Get all users in registration order."""
    try:
        players = await service.list_players()
    except Exception as e:
        logger.error("Error fetching users: %s", e, exc_info=True)
        raise internal_error("Failed to fetch users", e, settings)
    return UserListResponse(
        message="Users retrieved successfully!",
        count=len(players),
        users=players,
    )


@router.post("/{user_id}/claim", response_model=ClaimResponse)
async def claim_points(
    user_id: str,
    service: RankingService = Depends(get_ranking_service),
    settings: Settings = Depends(get_settings),
):
    """
    Claim 1-10 random points for a user.

    - **user_id**: The user's ID
    """
    user_id = _validated_user_id(user_id)
    try:
        outcome = await service.award_points(user_id)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error("Error claiming points: %s", e, exc_info=True)
        raise internal_error("Failed to claim points", e, settings)
    return ClaimResponse(
        message="Points claimed successfully!",
        points_awarded=outcome.points_awarded,
        user=outcome.user,
    )


@router.get("/{user_id}/history", response_model=ClaimHistoryResponse)
async def get_user_claim_history(
    user_id: str,
    service: RankingService = Depends(get_ranking_service),
    settings: Settings = Depends(get_settings),
):
    """Get a user's claim history, newest first."""
    user_id = _validated_user_id(user_id)
    try:
        history = await service.get_claim_history(user_id)
    except PlayerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error("Error fetching claim history: %s", e, exc_info=True)
        raise internal_error("Failed to fetch claim history", e, settings)
    return ClaimHistoryResponse(
        message="Claim history retrieved successfully!",
        user=history.user,
        total_claims=len(history.claim_history),
        claim_history=history.claim_history,
    )
