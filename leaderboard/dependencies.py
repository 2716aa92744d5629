from fastapi import HTTPException, Request

from leaderboard.config import Settings
from leaderboard.services.ranking_service import RankingService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_ranking_service(request: Request) -> RankingService:
    return request.app.state.ranking_service


def internal_error(error: str, exc: Exception, settings: Settings) -> HTTPException:
    """Build the 500 response for an unexpected failure.

    The exception text is only exposed outside production.
    """
    message = "Internal server error" if settings.is_production else str(exc)
    return HTTPException(status_code=500, detail={"error": error, "message": message})
