import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from .database import Base


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamp on every backend.

    SQLite drops the offset on storage, so values are normalized to UTC on
    the way in and naive values are marked as UTC on the way out.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_player_id() -> str:
    return str(uuid.uuid4())


class Player(Base):
    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=new_player_id)
    name = Column(String, nullable=False, unique=True, index=True)
    total_points = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False, default=_utcnow)

    # Relationship
    claims = relationship("ClaimEvent", back_populates="player")


class ClaimEvent(Base):
    __tablename__ = "claim_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False, index=True)
    points_claimed = Column(Integer, nullable=False)  # 1-10
    timestamp = Column(UTCDateTime, nullable=False, default=_utcnow)

    # Relationship
    player = relationship("Player", back_populates="claims")
