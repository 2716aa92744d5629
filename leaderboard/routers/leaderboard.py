import logging

from fastapi import APIRouter, Depends

from leaderboard.config import Settings
from leaderboard.dependencies import get_ranking_service, get_settings, internal_error
from leaderboard.schemas import LeaderboardResponse
from leaderboard.services.ranking_service import RankingService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/leaderboard",
    tags=["leaderboard"],
)


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    service: RankingService = Depends(get_ranking_service),
    settings: Settings = Depends(get_settings),
):
    """
    Get all users ranked by total points.

    Ranks are 1-based positions; tied users get consecutive ranks.
    """
    try:
        ranked = await service.get_leaderboard()
    except Exception as e:
        logger.error("Error fetching leaderboard: %s", e, exc_info=True)
        raise internal_error("Failed to fetch leaderboard", e, settings)
    return LeaderboardResponse(
        message="Leaderboard retrieved successfully!",
        total_users=len(ranked),
        leaderboard=ranked,
    )
