import pytest

from leaderboard.db.database import Database
from leaderboard.scripts.db_manager import DEMO_NAMES, build_parser, run
from leaderboard.services.ranking_service import RankingService


@pytest.mark.asyncio
async def test_seed_show_stats_clear(database_url):
    output = await run("seed", Database(database_url))
    assert output == f"Successfully seeded {len(DEMO_NAMES)} users!"

    # Existing names are skipped on a second seed
    output = await run("seed", Database(database_url))
    assert output == "Successfully seeded 0 users!"

    table = await run("show", Database(database_url))
    assert table.splitlines()[0].startswith("Rank | Name")
    for name in DEMO_NAMES:
        assert name in table

    stats = await run("stats", Database(database_url))
    assert f"Total Users: {len(DEMO_NAMES)}" in stats
    assert "Total Claims: 0" in stats

    assert await run("clear", Database(database_url)) == "Database cleared successfully!"
    assert await run("show", Database(database_url)) == "No users found in the database."


@pytest.mark.asyncio
async def test_reset_keeps_totals_consistent_with_claims(database_url):
    await run("reset", Database(database_url), max_claims=3)

    database = Database(database_url)
    await database.connect()
    try:
        service = RankingService(database)
        for entry in await service.get_leaderboard():
            history = await service.get_claim_history(entry.id)
            assert entry.total_points == sum(c.points_claimed for c in history.claim_history)
    finally:
        await database.disconnect()


def test_parser_rejects_unknown_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["explode"])
