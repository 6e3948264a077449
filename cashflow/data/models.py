"""
SQLAlchemy models for saved games.

One row per save slot; the snapshot document is stored whole as JSON.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


def utc_now() -> datetime:
    """Generate timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


class SavedGame(Base):
    """A persisted game snapshot."""

    __tablename__ = "saved_games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slot: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    state: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, comment="Serialized GameSnapshot")

    # Denormalized for listing without parsing the document
    game_phase: Mapped[str] = mapped_column(String(16), nullable=False, default="rat_race")
    turn_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )

    def __repr__(self) -> str:
        return f"<SavedGame(slot={self.slot!r}, phase={self.game_phase}, turn={self.turn_number})>"
