import os

from dotenv import load_dotenv

load_dotenv()

DEVELOPMENT_API_URL = "http://localhost:5000"
PRODUCTION_API_URL = "https://user-ranking-app.vercel.app"


def get_api_base_url() -> str:
    """Base URL of the leaderboard API for the current environment.

    ``LEADERBOARD_API_URL`` wins when set; otherwise production clients talk
    to the deployed backend and development clients to the local server.
    """
    configured = os.getenv("LEADERBOARD_API_URL")
    if configured:
        return configured
    if os.getenv("ENV", "development").lower() == "production":
        return PRODUCTION_API_URL
    return DEVELOPMENT_API_URL


API_BASE_URL = get_api_base_url()
