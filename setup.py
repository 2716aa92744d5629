from setuptools import setup, find_packages

setup(
    name="user-ranking-leaderboard",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "pydantic-core",
        "sqlalchemy[asyncio]>=2.0",
        "aiosqlite",
        "alembic",
        "python-dotenv",
        "httpx",
    ],
    extras_require={
        "postgres": ["asyncpg"],
        "test": ["pytest", "pytest-asyncio"],
    },
    entry_points={
        "console_scripts": [
            "leaderboard-db=leaderboard.scripts.db_manager:main",
        ],
    },
    python_requires=">=3.8",
)
