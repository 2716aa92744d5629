"""
Ranking service: players, point claims and the leaderboard.

The service is stateless apart from the injected ``Database`` handle; every
operation opens its own session. Domain failures are raised as
``leaderboard.exceptions`` errors for the HTTP layer to translate.
"""

import logging
import random
import uuid
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from leaderboard.db.database import Database
from leaderboard.db.models import ClaimEvent, Player
from leaderboard.exceptions import (
    DuplicateNameError,
    InvalidIdentifierError,
    PlayerNotFoundError,
    ValidationError,
)
from leaderboard.ranking import assign_ranks, average_score
from leaderboard.schemas import (
    NAME_REQUIRED_MESSAGE,
    ClaimEventOut,
    ClaimHistory,
    ClaimOutcome,
    LeaderboardStatistics,
    PlayerOut,
    PlayerSummary,
    RankedPlayer,
)

logger = logging.getLogger(__name__)

MIN_POINTS = 1
MAX_POINTS = 10
RECENT_CLAIMS_LIMIT = 5


def normalize_player_id(value) -> str:
    """Return the canonical form of a player identifier.

    Raises:
        InvalidIdentifierError: If ``value`` is not a UUID
    """
    if not isinstance(value, str):
        raise InvalidIdentifierError(value)
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise InvalidIdentifierError(value)


def _summary(player: Player) -> PlayerSummary:
    return PlayerSummary(id=player.id, name=player.name, total_points=player.total_points)


def _player_out(player: Player) -> PlayerOut:
    return PlayerOut(
        id=player.id,
        name=player.name,
        total_points=player.total_points,
        created_at=player.created_at,
    )


def _claim_out(event: ClaimEvent, name: str) -> ClaimEventOut:
    return ClaimEventOut(
        id=event.id,
        user_id=event.player_id,
        name=name,
        points_claimed=event.points_claimed,
        timestamp=event.timestamp,
    )


class RankingService:
    def __init__(self, database: Database, rng: Optional[random.Random] = None):
        self.database = database
        self._rng = rng or random.Random()

    async def create_player(self, name: str) -> PlayerOut:
        """Register a new player with zero points.

        Args:
            name: Display name; surrounding whitespace is ignored

        Returns:
            PlayerOut: The stored player

        Raises:
            ValidationError: If the name is empty
            DuplicateNameError: If the name is already taken
        """
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(NAME_REQUIRED_MESSAGE)
        name = name.strip()

        async with self.database.session() as session:
            player = Player(name=name, total_points=0)
            session.add(player)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.info("Rejected duplicate player name %r", name)
                raise DuplicateNameError(name)

            logger.info("Created player %s (%s)", player.id, name)
            return _player_out(player)

    async def list_players(self) -> List[PlayerOut]:
        async with self.database.session() as session:
            result = await session.execute(
                select(Player).order_by(Player.created_at, Player.id)
            )
            players = result.scalars().all()
        logger.debug("Listed %d players", len(players))
        return [_player_out(p) for p in players]

    async def award_points(self, player_id: str) -> ClaimOutcome:
        """Award a random 1-10 points to a player and record the claim.

        The increment is applied in the store (``total_points + n``) so
        concurrent claims on the same player never lose points, and it shares
        one transaction with the claim record.

        Raises:
            InvalidIdentifierError: If ``player_id`` is malformed
            PlayerNotFoundError: If no such player exists
        """
        player_id = normalize_player_id(player_id)

        async with self.database.session() as session:
            async with session.begin():
                player = await session.get(Player, player_id)
                if player is None:
                    raise PlayerNotFoundError(player_id)

                points = self._rng.randint(MIN_POINTS, MAX_POINTS)
                await session.execute(
                    update(Player)
                    .where(Player.id == player_id)
                    .values(total_points=Player.total_points + points)
                    .execution_options(synchronize_session=False)
                )
                session.add(ClaimEvent(player_id=player_id, points_claimed=points))
                await session.flush()
                await session.refresh(player)

            logger.info(
                "Player %s claimed %d points (total %d)",
                player_id,
                points,
                player.total_points,
            )
            return ClaimOutcome(points_awarded=points, user=_summary(player))

    async def get_leaderboard(self) -> List[RankedPlayer]:
        async with self.database.session() as session:
            result = await session.execute(
                select(Player).order_by(
                    Player.total_points.desc(), Player.created_at, Player.id
                )
            )
            players = result.scalars().all()

        return [
            RankedPlayer(
                rank=rank,
                id=p.id,
                name=p.name,
                total_points=p.total_points,
                created_at=p.created_at,
            )
            for rank, p in assign_ranks(players)
        ]

    async def get_claim_history(self, player_id: str) -> ClaimHistory:
        """Get a player's claims, newest first.

        Raises:
            InvalidIdentifierError: If ``player_id`` is malformed
            PlayerNotFoundError: If no such player exists
        """
        player_id = normalize_player_id(player_id)

        async with self.database.session() as session:
            player = await session.get(Player, player_id)
            if player is None:
                raise PlayerNotFoundError(player_id)

            result = await session.execute(
                select(ClaimEvent)
                .where(ClaimEvent.player_id == player_id)
                .order_by(ClaimEvent.timestamp.desc(), ClaimEvent.id.desc())
            )
            events = result.scalars().all()

        logger.debug("Loaded %d claims for player %s", len(events), player_id)
        return ClaimHistory(
            user=_summary(player),
            claim_history=[_claim_out(e, player.name) for e in events],
        )

    async def get_statistics(self) -> LeaderboardStatistics:
        """Aggregate figures over all players and claims."""
        leaderboard = await self.get_leaderboard()

        async with self.database.session() as session:
            total_claims = await session.scalar(select(func.count(ClaimEvent.id)))
            result = await session.execute(
                select(ClaimEvent, Player.name)
                .join(Player, ClaimEvent.player_id == Player.id)
                .order_by(ClaimEvent.timestamp.desc(), ClaimEvent.id.desc())
                .limit(RECENT_CLAIMS_LIMIT)
            )
            recent = [_claim_out(event, name) for event, name in result.all()]

        totals = [p.total_points for p in leaderboard]
        return LeaderboardStatistics(
            total_players=len(leaderboard),
            total_claims=total_claims or 0,
            highest_score=totals[0] if totals else 0,
            top_player=leaderboard[0].name if leaderboard else "",
            lowest_score=totals[-1] if totals else 0,
            average_score=average_score(totals),
            recent_claims=recent,
        )
