"""
Database maintenance commands.

    leaderboard-db seed     Create the demo players (skips existing names)
    leaderboard-db clear    Delete all players and claims
    leaderboard-db reset    Clear, then seed with fresh claims
    leaderboard-db stats    Print aggregate statistics
    leaderboard-db show     Print the leaderboard as a table
"""

import argparse
import asyncio
import logging
import random
import sys
from typing import List, Optional, Sequence

from sqlalchemy import delete

from leaderboard.config import Settings
from leaderboard.db.database import Database
from leaderboard.db.models import ClaimEvent, Player
from leaderboard.exceptions import DuplicateNameError
from leaderboard.schemas import LeaderboardStatistics, RankedPlayer
from leaderboard.services.ranking_service import RankingService

logger = logging.getLogger(__name__)

DEMO_NAMES = [
    "Arjun Sharma",
    "Priya Patel",
    "Rahul Gupta",
    "Sneha Singh",
    "Vikram Kumar",
    "Ananya Reddy",
    "Rohan Verma",
    "Kavya Iyer",
    "Aditya Joshi",
    "Meera Nair",
]


async def seed(service: RankingService, names: Sequence[str] = DEMO_NAMES, max_claims: int = 0) -> List[str]:
    """Create players for ``names`` and give each up to ``max_claims`` claims.

    Points only ever come from real claims, so every seeded total matches
    its claim history.
    """
    created = []
    for name in names:
        try:
            player = await service.create_player(name)
        except DuplicateNameError:
            logger.warning("User %r already exists, skipping", name)
            continue
        for _ in range(random.randint(0, max_claims) if max_claims else 0):
            await service.award_points(player.id)
        created.append(player.id)
    logger.info("Seeded %d users", len(created))
    return created


async def clear(database: Database) -> None:
    async with database.session() as session:
        async with session.begin():
            await session.execute(delete(ClaimEvent))
            await session.execute(delete(Player))
    logger.info("Database cleared")


def format_leaderboard(entries: Sequence[RankedPlayer]) -> str:
    if not entries:
        return "No users found in the database."
    lines = [
        "Rank | Name              | Points | Created At",
        "-----|-------------------|--------|------------------",
    ]
    for entry in entries:
        lines.append(
            f"{entry.rank:>4} | {entry.name:<17} | {entry.total_points:>6} | "
            f"{entry.created_at:%Y-%m-%d}"
        )
    return "\n".join(lines)


def format_statistics(stats: LeaderboardStatistics) -> str:
    lines = [
        "Database Statistics:",
        f"Total Users: {stats.total_players}",
        f"Total Claims: {stats.total_claims}",
        f"Top Player: {stats.top_player or 'N/A'} ({stats.highest_score} points)",
        f"Lowest Score: {stats.lowest_score} points",
        f"Average Score: {stats.average_score}",
        "",
        "Recent Claims:",
    ]
    lines.extend(f"  {c.name} claimed {c.points_claimed} points" for c in stats.recent_claims)
    return "\n".join(lines)


async def run(command: str, database: Database, max_claims: int = 8) -> str:
    await database.connect()
    try:
        service = RankingService(database)
        if command == "seed":
            created = await seed(service)
            return f"Successfully seeded {len(created)} users!"
        if command == "clear":
            await clear(database)
            return "Database cleared successfully!"
        if command == "reset":
            await clear(database)
            created = await seed(service, max_claims=max_claims)
            return f"Database reset completed! ({len(created)} users)"
        if command == "stats":
            return format_statistics(await service.get_statistics())
        if command == "show":
            return format_leaderboard(await service.get_leaderboard())
        raise ValueError(f"Unknown command: {command}")
    finally:
        await database.disconnect()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="leaderboard-db", description="Leaderboard database maintenance")
    parser.add_argument("command", choices=["seed", "clear", "reset", "stats", "show"])
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument(
        "--max-claims",
        type=int,
        default=8,
        help="Upper bound of random claims per user on reset (default: 8)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    database = Database(args.database_url or settings.database_url, echo=settings.sql_echo)
    try:
        output = asyncio.run(run(args.command, database, max_claims=args.max_claims))
    except Exception as e:
        logger.error("Command %s failed: %s", args.command, e, exc_info=True)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
