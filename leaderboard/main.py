import logging
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from leaderboard.config import Settings
from leaderboard.db.database import Database
from leaderboard.routers import leaderboard as leaderboard_router
from leaderboard.routers import users as users_router
from leaderboard.services.ranking_service import RankingService

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    database: Database = app.state.database
    await database.connect()
    logger.info("Leaderboard API ready (env: %s)", app.state.settings.environment)
    yield
    await database.disconnect()


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "missing" and tuple(first.get("loc", ())) == ("body",):
        return "Request body is required"
    return first.get("msg", "Invalid request")


def _is_routing_error(exc: StarletteHTTPException) -> bool:
    # Raised by the router itself when no route or method matches
    return exc.status_code in (404, 405) and exc.detail == HTTPStatus(exc.status_code).phrase


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if _is_routing_error(exc):
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        settings: Settings = request.app.state.settings
        return JSONResponse(
            status_code=500,
            content={
                "error": "Something went wrong!",
                "message": "Internal server error" if settings.is_production else str(exc),
            },
        )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API application.

    Args:
        settings: Runtime settings; read from the environment when omitted
        database: Persistence handle; built from ``settings.database_url`` when omitted
    """
    settings = settings or Settings.from_env()
    database = database or Database(settings.database_url, echo=settings.sql_echo)

    app = FastAPI(
        title="User Ranking Leaderboard API",
        description="Register players, claim points and view the leaderboard",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.ranking_service = RankingService(database)

    # Add middleware
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Healthcheck endpoint
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/")
    async def read_root():
        return {"message": "Welcome to the User Ranking Leaderboard API"}

    app.include_router(users_router.router)
    app.include_router(leaderboard_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "leaderboard.main:app",
        host="0.0.0.0",
        port=app.state.settings.port,
        reload=False,
    )
